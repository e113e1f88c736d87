from tierlist.models.catalog import CatalogConfig
from tierlist.models.item import ItemSource
from tierlist.services.catalog import build_catalog_lookup, load_catalog, strip_extension


def test_lookup_ids_content_and_images():
    config = CatalogConfig.model_validate({
        "packages": {
            "games": {"images": [{"filename": "zelda.webp", "label": "The Legend of Zelda"}, {"filename": "doom.png"}]},
        }
    })

    lookup = build_catalog_lookup(config)

    assert set(lookup) == {"games-zelda.webp", "games-doom.png"}
    assert lookup["games-zelda.webp"].content == "The Legend of Zelda"
    assert lookup["games-doom.png"].content == "doom"
    assert lookup["games-doom.png"].image_url == "/images/games/doom.png"
    assert lookup["games-doom.png"].source == ItemSource.CATALOG


def test_strip_extension():
    assert strip_extension("dragon-fruit.webp") == "dragon-fruit"
    assert strip_extension("archive.tar.gz") == "archive"
    assert strip_extension("README") == "README"


def test_packaged_catalog_loads(catalog_config):
    assert "fruits" in catalog_config.packages


def test_load_catalog_from_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text('{"packages": {"p": {"images": [{"filename": "x.png"}]}}}', encoding="utf-8")

    assert list(build_catalog_lookup(load_catalog(path))) == ["p-x.png"]
