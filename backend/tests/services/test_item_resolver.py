"""
Tests for item resolution precedence and custom item persistence
"""
import json

import pytest
from conftest import BASE_URL, make_item

from tierlist.core.errors import UnknownPackageError
from tierlist.models.catalog import ItemSet
from tierlist.models.item import ItemSource
from tierlist.services.custom_item_store import CustomItemStore
from tierlist.services.item_resolver import ItemResolver, absolute_url
from tierlist.services.storage import InMemoryKeyValueStore


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def client_resolver(catalog, store):
    return ItemResolver(
        catalog,
        custom_store=CustomItemStore(store),
        has_persistent_store=True,
        base_url=BASE_URL,
    )


def test_catalog_wins_over_custom_store(client_resolver):
    client_resolver.add_custom_items([make_item("fruits-apple.webp", "Fake apple", "data:image/png;base64,QUJD")])

    item = client_resolver.resolve("fruits-apple.webp", "Fake apple")

    assert item.source == ItemSource.CATALOG
    assert item.content == "Apple"
    assert item.image_url == "/images/fruits/apple.webp"


def test_custom_item_uses_stored_image_and_given_content(client_resolver):
    client_resolver.add_custom_items([make_item("c-1", "Stored label", "data:image/png;base64,QUJD")])

    item = client_resolver.resolve("c-1", "Label from token")

    assert item.source == ItemSource.CUSTOM
    assert item.content == "Label from token"
    assert item.image_url == "data:image/png;base64,QUJD"


def test_unknown_id_falls_back_to_placeholder(client_resolver):
    item = client_resolver.resolve("nobody-knows", "Mystery")

    assert item.id == "nobody-knows"
    assert item.content == "Mystery"
    assert item.source == ItemSource.PLACEHOLDER
    assert item.image_url == f"{BASE_URL}/placeholder-image.jpg"


def test_server_resolver_never_reads_custom_store(catalog, store):
    CustomItemStore(store).upsert_many([make_item("c-1", "Custom", "data:image/png;base64,QUJD")])
    resolver = ItemResolver(catalog, custom_store=CustomItemStore(store), has_persistent_store=False)

    item = resolver.resolve("c-1", "Custom")

    assert item.source == ItemSource.PLACEHOLDER
    assert [strategy.name for strategy in resolver.strategies] == ["catalog", "placeholder"]


def test_add_custom_items_is_noop_without_store(catalog):
    resolver = ItemResolver(catalog, has_persistent_store=True)

    assert resolver.add_custom_items([make_item("c-1")]) == 0
    assert resolver.resolve("c-1", "c-1").source == ItemSource.PLACEHOLDER


def test_add_custom_items_persists_whole_store(client_resolver, store):
    client_resolver.add_custom_items([make_item("c-1", "One", "img-1")])
    client_resolver.add_custom_items([make_item("c-2", "Two", "img-2"), make_item("c-1", "Uno", "img-1b")])

    records = json.loads(store.get_item("customItems"))

    assert records == [
        {"i": "c-1", "c": "Uno", "d": "img-1b"},
        {"i": "c-2", "c": "Two", "d": "img-2"},
    ]


def test_strategy_order(client_resolver):
    assert [strategy.name for strategy in client_resolver.strategies] == ["catalog", "custom", "placeholder"]


def test_resolve_item_set(client_resolver):
    items = client_resolver.resolve_item_set(ItemSet(package_name="fruits", images=["kiwi.jpg", "durian.png"]))

    assert [item.id for item in items] == ["fruits-kiwi.jpg", "fruits-durian.png"]
    assert items[0].content == "kiwi"
    assert items[0].source == ItemSource.CATALOG
    assert items[1].content == "durian.png"
    assert items[1].source == ItemSource.PLACEHOLDER


def test_resolve_item_set_rejects_unknown_package(client_resolver):
    with pytest.raises(UnknownPackageError):
        client_resolver.resolve_item_set(ItemSet(package_name="cars", images=[]), known_packages=["fruits"])


@pytest.mark.parametrize(
    "path,base,expected",
    [
        ("/placeholder-image.jpg", "", "/placeholder-image.jpg"),
        ("/placeholder-image.jpg", "https://a.example", "https://a.example/placeholder-image.jpg"),
        ("img.png", "https://a.example/sub/", "https://a.example/sub/img.png"),
    ],
)
def test_absolute_url(path, base, expected):
    assert absolute_url(path, base) == expected
