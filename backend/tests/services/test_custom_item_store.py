"""
Tests for the custom-item store and the key-value stores behind it
"""
import json
import logging

import pytest
from conftest import make_item

from tierlist.core.errors import StorageCorrupt, StorageUnavailable
from tierlist.services.custom_item_store import CustomItemStore, StoredCustomItem
from tierlist.services.storage import InMemoryKeyValueStore, JsonFileKeyValueStore


class FailingStore:
    """Storage that refuses every operation (disabled browser storage)"""

    def get_item(self, key):
        raise StorageUnavailable("storage disabled")

    def set_item(self, key, value):
        raise StorageUnavailable("storage disabled")

    def remove_item(self, key):
        raise StorageUnavailable("storage disabled")


class CountingStore(InMemoryKeyValueStore):
    def __init__(self, initial=None):
        super().__init__(initial)
        self.reads = 0

    def get_item(self, key):
        self.reads += 1
        return super().get_item(key)


def test_loads_lazily_and_once():
    kv = CountingStore({"customItems": json.dumps([{"i": "a", "c": "A", "d": "img"}])})
    store = CustomItemStore(kv)

    assert kv.reads == 0
    assert store.get("a").content == "A"
    assert store.get("b") is None
    assert kv.reads == 1


def test_absent_data_is_empty_store():
    assert len(CustomItemStore(InMemoryKeyValueStore())) == 0


def test_corrupt_json_is_discarded():
    store = CustomItemStore(InMemoryKeyValueStore({"customItems": "{not json"}))

    assert len(store) == 0
    store.upsert_many([make_item("a")])
    assert "a" in store


def test_non_list_payload_is_discarded():
    store = CustomItemStore(InMemoryKeyValueStore({"customItems": '{"i": "a"}'}))

    assert len(store) == 0


def test_invalid_records_are_dropped_individually():
    payload = json.dumps([{"i": "a", "c": "A", "d": ""}, {"c": "no id"}, "junk", {"id": "b", "content": "B"}])
    store = CustomItemStore(InMemoryKeyValueStore({"customItems": payload}))

    assert sorted(record.id for record in store.records()) == ["a", "b"]


def test_unavailable_storage_disables_store():
    store = CustomItemStore(FailingStore())

    assert store.get("a") is None
    assert store.upsert_many([make_item("a")]) == 0
    assert store.enabled is False


def test_corrupt_payload_is_logged_and_store_keeps_working(caplog):
    caplog.set_level(logging.ERROR, logger="tierlist.services.custom_item_store")
    store = CustomItemStore(InMemoryKeyValueStore({"customItems": "{not json"}))

    assert store.get("a") is None
    record = next(r for r in caplog.records if r.name == "tierlist.services.custom_item_store")
    assert record.error["category"] == "storage_corrupt"


def test_unavailable_storage_is_logged(caplog):
    caplog.set_level(logging.WARNING, logger="tierlist.services.custom_item_store")
    CustomItemStore(FailingStore()).clear()
    assert CustomItemStore(FailingStore()).get("a") is None

    categories = [r.error["category"] for r in caplog.records if hasattr(r, "error")]
    assert categories == ["storage_unavailable", "storage_unavailable"]


def test_disabled_store_ignores_writes():
    kv = InMemoryKeyValueStore()
    store = CustomItemStore(kv, enabled=False)

    assert store.upsert_many([make_item("a")]) == 0
    assert kv.get_item("customItems") is None


def test_clear_removes_persisted_records():
    kv = InMemoryKeyValueStore()
    store = CustomItemStore(kv)
    store.upsert_many([make_item("a")])

    store.clear()

    assert len(store) == 0
    assert kv.get_item("customItems") is None


def test_custom_key():
    kv = InMemoryKeyValueStore()
    CustomItemStore(kv, key="other").upsert_many([make_item("a")])

    assert kv.get_item("customItems") is None
    assert kv.get_item("other") is not None


def test_stored_record_accepts_long_names():
    record = StoredCustomItem.model_validate({"id": "a", "content": "A", "image_data": "img"})

    assert record.model_dump(by_alias=True) == {"i": "a", "c": "A", "d": "img"}


class TestJsonFileKeyValueStore:
    def test_round_trip_through_file(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        JsonFileKeyValueStore(path).set_item("customItems", "[]")

        assert JsonFileKeyValueStore(path).get_item("customItems") == "[]"
        assert json.loads(path.read_text(encoding="utf-8")) == {"customItems": "[]"}

    def test_missing_file_reads_as_empty(self, tmp_path):
        assert JsonFileKeyValueStore(tmp_path / "absent.json").get_item("customItems") is None

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{{{", encoding="utf-8")

        with pytest.raises(StorageCorrupt):
            JsonFileKeyValueStore(path).get_item("customItems")

    def test_write_replaces_corrupt_file(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2]", encoding="utf-8")
        kv = JsonFileKeyValueStore(path)

        kv.set_item("customItems", "[]")

        assert kv.get_item("customItems") == "[]"

    def test_directory_path_is_unavailable(self, tmp_path):
        with pytest.raises(StorageUnavailable):
            JsonFileKeyValueStore(tmp_path).get_item("customItems")

    def test_custom_store_survives_corrupt_file(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("not json", encoding="utf-8")
        store = CustomItemStore(JsonFileKeyValueStore(path))

        assert len(store) == 0
        store.upsert_many([make_item("a", "A", "img")])
        assert json.loads(json.loads(path.read_text(encoding="utf-8"))["customItems"]) == [
            {"i": "a", "c": "A", "d": "img"}
        ]
