"""
Item identity resolution across the catalog, the custom-item store and a
placeholder fallback.

Strategies are tried in a fixed order and the first hit wins, so catalog
entries always shadow custom items that share their id.
"""
from typing import Iterable, List, Optional, Protocol, Sequence
from urllib.parse import urljoin

from tierlist.core.errors import UnknownPackageError
from tierlist.core.logging_config import LoggingConfig
from tierlist.models.catalog import ItemSet
from tierlist.models.item import Item, ItemSource
from tierlist.services.catalog import CatalogLookup, catalog_item_id
from tierlist.services.custom_item_store import CustomItemStore

logger = LoggingConfig.get_logger(__name__)

DEFAULT_PLACEHOLDER_IMAGE = "/placeholder-image.jpg"


def absolute_url(path: str, base_url: str) -> str:
    """Resolve `path` against `base_url`; without a base the path is returned unchanged"""
    if not base_url:
        return path
    return urljoin(base_url, path)


class ResolverStrategy(Protocol):
    name: str

    def lookup(self, item_id: str, fallback_content: str) -> Optional[Item]:
        ...


class CatalogStrategy:
    """Authoritative, immutable catalog entries"""

    name = "catalog"

    def __init__(self, lookup: CatalogLookup) -> None:
        self._lookup = lookup

    def lookup(self, item_id: str, fallback_content: str) -> Optional[Item]:
        item = self._lookup.get(item_id)
        return item.model_copy() if item is not None else None


class CustomItemStrategy:
    """Items the user created in this browser profile / client session"""

    name = "custom"

    def __init__(self, store: CustomItemStore) -> None:
        self.store = store

    def lookup(self, item_id: str, fallback_content: str) -> Optional[Item]:
        record = self.store.get(item_id)
        if record is None:
            return None
        # The caller's content wins over the stored label: tokens carry the
        # label the board was shared with.
        return Item(
            id=record.id,
            content=fallback_content,
            image_url=record.image_data,
            source=ItemSource.CUSTOM,
        )


class PlaceholderStrategy:
    """Always succeeds with a well-known placeholder image"""

    name = "placeholder"

    def __init__(self, base_url: str = "", placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE) -> None:
        self.image_url = absolute_url(placeholder_image, base_url)

    def lookup(self, item_id: str, fallback_content: str) -> Optional[Item]:
        return Item(
            id=item_id,
            content=fallback_content,
            image_url=self.image_url,
            source=ItemSource.PLACEHOLDER,
        )


class ItemResolver:
    """
    Resolve item ids to full Item records.

    Args:
        catalog: Precomputed catalog lookup
        custom_store: Custom-item store; only consulted when `has_persistent_store` is set
        has_persistent_store: True for client sessions with local storage access
        base_url: Origin used to make the placeholder image absolute
        placeholder_image: Path of the placeholder image
    """

    def __init__(
        self,
        catalog: CatalogLookup,
        custom_store: Optional[CustomItemStore] = None,
        has_persistent_store: bool = False,
        base_url: str = "",
        placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE,
    ) -> None:
        self.catalog = catalog
        self.has_persistent_store = has_persistent_store and custom_store is not None
        self.custom_store = custom_store if self.has_persistent_store else None
        self.placeholder = PlaceholderStrategy(base_url, placeholder_image)

        strategies: List[ResolverStrategy] = [CatalogStrategy(catalog)]
        if self.custom_store is not None:
            strategies.append(CustomItemStrategy(self.custom_store))
        strategies.append(self.placeholder)
        self.strategies: Sequence[ResolverStrategy] = tuple(strategies)

    def resolve(self, item_id: str, fallback_content: str) -> Item:
        for strategy in self.strategies:
            item = strategy.lookup(item_id, fallback_content)
            if item is not None:
                if strategy is self.placeholder:
                    logger.debug(f"Item {item_id} unresolved, using placeholder")
                return item
        return self.placeholder_item(item_id, fallback_content)

    def placeholder_item(self, item_id: str, content: str) -> Item:
        return self.placeholder.lookup(item_id, content)

    def add_custom_items(self, items: Iterable[Item]) -> int:
        """
        Upsert items into the custom-item store and persist it.

        No-op without a persistent store. A custom item sharing a catalog id is
        stored but stays shadowed by the catalog entry.
        """
        if self.custom_store is None:
            return 0
        written = self.custom_store.upsert_many(items)
        logger.info(f"Stored {written} custom items", extra={"total": len(self.custom_store)})
        return written

    def clear_custom_items(self) -> None:
        if self.custom_store is not None:
            self.custom_store.clear()

    def resolve_item_set(self, item_set: ItemSet, known_packages: Optional[Iterable[str]] = None) -> List[Item]:
        """Resolve every image of an initial item set (catalog item or placeholder)"""
        if known_packages is not None and item_set.package_name not in set(known_packages):
            raise UnknownPackageError(item_set.package_name)
        items = []
        for filename in item_set.images:
            item_id = catalog_item_id(item_set.package_name, filename)
            catalog_item = self.catalog.get(item_id)
            if catalog_item is not None:
                items.append(catalog_item.model_copy())
            else:
                items.append(self.placeholder_item(item_id, filename))
        return items
