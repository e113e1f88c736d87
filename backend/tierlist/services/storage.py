"""
Local key-value stores backing the custom-item store.

A browser keeps custom items in localStorage; Python client sessions use a
JSON file with the same key/value semantics. Server sessions have none.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from tierlist.core.errors import StorageCorrupt, StorageUnavailable
from tierlist.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Process-local store, mostly useful for tests and ephemeral sessions"""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """
    Key-value store persisted as a single JSON object on disk.

    Every write rewrites the whole file (atomically via a temp file + rename).
    Last write wins: two sessions sharing a file can clobber each other.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path).expanduser()

    def _read_all(self) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageUnavailable(
                f"Cannot read key-value store {self.path}: {e}",
                {"path": str(self.path)},
            ) from e

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageCorrupt(
                f"Key-value store {self.path} is not valid JSON",
                {"path": str(self.path), "error": str(e)},
            ) from e
        if not isinstance(data, dict):
            raise StorageCorrupt(
                f"Key-value store {self.path} does not hold a JSON object",
                {"path": str(self.path)},
            )
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=str(self.path.parent), prefix=".kv-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as e:
            raise StorageUnavailable(
                f"Cannot write key-value store {self.path}: {e}",
                {"path": str(self.path)},
            ) from e

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except StorageCorrupt as e:
            logger.warning(
                "Overwriting corrupt key-value store",
                extra={"path": str(self.path), "error": e.message},
            )
            data = {}
        data[key] = value
        self._write_all(data)
        logger.debug(f"Stored key {key} in {self.path}", extra={"bytes": len(value)})

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
