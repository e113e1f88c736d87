"""
Bundled catalog loading and the id -> Item lookup built from it
"""
from pathlib import Path
from typing import Dict, Union

from tierlist.core.logging_config import LoggingConfig
from tierlist.models.catalog import CatalogConfig
from tierlist.models.item import Item, ItemSource

logger = LoggingConfig.get_logger(__name__)

CatalogLookup = Dict[str, Item]


def catalog_item_id(package_name: str, filename: str) -> str:
    return f"{package_name}-{filename}"


def catalog_image_path(package_name: str, filename: str) -> str:
    return f"/images/{package_name}/{filename}"


def strip_extension(filename: str) -> str:
    """Everything before the first dot: 'dragon-fruit.webp' -> 'dragon-fruit'"""
    return filename.split(".")[0]


def load_catalog(path: Union[str, Path]) -> CatalogConfig:
    """Read and validate the catalog document"""
    path = Path(path)
    config = CatalogConfig.model_validate_json(path.read_text(encoding="utf-8"))
    logger.info(
        f"Loaded catalog from {path}",
        extra={"packages": len(config.packages)},
    )
    return config


def build_catalog_lookup(config: CatalogConfig) -> CatalogLookup:
    """Precompute every catalog item keyed by its id"""
    lookup: CatalogLookup = {}
    for package_name, package in config.packages.items():
        for image in package.images:
            item_id = catalog_item_id(package_name, image.filename)
            lookup[item_id] = Item(
                id=item_id,
                content=image.label or strip_extension(image.filename),
                image_url=catalog_image_path(package_name, image.filename),
                source=ItemSource.CATALOG,
            )
    logger.debug(f"Built catalog lookup with {len(lookup)} items")
    return lookup
