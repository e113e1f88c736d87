"""
Per-profile store of user-supplied items, keyed by item id.

Loaded lazily (once) from a local key-value store and written back in full
as a single JSON array after every batch. Records are never garbage-collected;
only an explicit clear removes them.
"""
import json
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from tierlist.core.errors import StorageCorrupt, StorageUnavailable
from tierlist.core.logging_config import LoggingConfig
from tierlist.models.item import Item
from tierlist.services.storage import KeyValueStore

logger = LoggingConfig.get_logger(__name__)

DEFAULT_CUSTOM_ITEMS_KEY = "customItems"


class StoredCustomItem(BaseModel):
    """Persisted record; serialized with the compact browser keys i/c/d"""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="i", min_length=1)
    content: str = Field(default="", alias="c")
    image_data: str = Field(default="", alias="d")

    @classmethod
    def from_item(cls, item: Item) -> "StoredCustomItem":
        return cls(id=item.id, content=item.content, image_data=item.image_url or "")


_RECORDS_ADAPTER = TypeAdapter(List[StoredCustomItem])


class CustomItemStore:
    """
    Custom-item map backed by a key-value store.

    When `enabled` is false (server context) every operation is a no-op and
    lookups always miss.
    """

    def __init__(
        self,
        kv_store: Optional[KeyValueStore],
        key: str = DEFAULT_CUSTOM_ITEMS_KEY,
        enabled: bool = True,
    ) -> None:
        self.kv_store = kv_store
        self.key = key
        self.enabled = enabled and kv_store is not None
        self._items: Dict[str, StoredCustomItem] = {}
        self._loaded = False

    def _disable(self, error: StorageUnavailable) -> None:
        logger.warning(
            "Local storage unavailable, custom items disabled for this session",
            extra={"error": error.to_dict()},
        )
        self.enabled = False
        self._items = {}

    def _parse(self, raw: str) -> List[StoredCustomItem]:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageCorrupt("Stored custom items are not valid JSON", {"error": str(e)}) from e
        if not isinstance(data, list):
            raise StorageCorrupt("Stored custom items are not a JSON array", {"type": type(data).__name__})

        records = []
        for index, entry in enumerate(data):
            try:
                records.append(StoredCustomItem.model_validate(entry))
            except ValidationError as e:
                logger.warning(
                    "Dropping invalid custom item record",
                    extra={"index": index, "errors": e.error_count()},
                )
        return records

    def _ensure_loaded(self) -> None:
        if self._loaded or not self.enabled:
            return
        self._loaded = True

        try:
            raw = self.kv_store.get_item(self.key)
        except StorageUnavailable as e:
            self._disable(e)
            return
        except StorageCorrupt as e:
            logger.error("Failed to read stored custom items", extra={"error": e.to_dict()})
            return

        if not raw:
            return

        try:
            records = self._parse(raw)
        except StorageCorrupt as e:
            logger.error("Failed to parse stored custom items", extra={"error": e.to_dict()})
            return

        for record in records:
            self._items[record.id] = record
        logger.debug(f"Loaded {len(self._items)} custom items", extra={"key": self.key})

    def _persist(self) -> None:
        payload = _RECORDS_ADAPTER.dump_json(list(self._items.values()), by_alias=True).decode("utf-8")
        try:
            self.kv_store.set_item(self.key, payload)
        except StorageUnavailable as e:
            self._disable(e)

    def get(self, item_id: str) -> Optional[StoredCustomItem]:
        self._ensure_loaded()
        return self._items.get(item_id)

    def upsert_many(self, items: Iterable[Item]) -> int:
        """Insert or replace records by id, then persist the whole map. Returns records written."""
        if not self.enabled:
            return 0
        self._ensure_loaded()

        count = 0
        for item in items:
            self._items[item.id] = StoredCustomItem.from_item(item)
            count += 1

        if count and self.enabled:
            self._persist()
        return count

    def clear(self) -> None:
        """Forget every custom item (explicit user action)"""
        if not self.enabled:
            return
        self._items = {}
        self._loaded = True
        try:
            self.kv_store.remove_item(self.key)
        except (StorageUnavailable, StorageCorrupt) as e:
            logger.warning("Failed to clear stored custom items", extra={"error": e.to_dict()})

    def records(self) -> List[StoredCustomItem]:
        self._ensure_loaded()
        return list(self._items.values())

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        self._ensure_loaded()
        return item_id in self._items
