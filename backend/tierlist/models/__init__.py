"""
Tier list data model
"""
from tierlist.models.catalog import CatalogConfig, CatalogImage, CatalogPackage, ItemSet
from tierlist.models.item import Item, ItemSource
from tierlist.models.template import (DEFAULT_TEMPLATE_NAME, TIER_TEMPLATES,
                                      TemplateTier, TierTemplate, get_template)
from tierlist.models.tier import SINK_TIER_ID, Board, LabelPosition, Tier, TierKind

__all__ = [
    "Board",
    "CatalogConfig",
    "CatalogImage",
    "CatalogPackage",
    "DEFAULT_TEMPLATE_NAME",
    "Item",
    "ItemSet",
    "ItemSource",
    "LabelPosition",
    "SINK_TIER_ID",
    "TIER_TEMPLATES",
    "TemplateTier",
    "Tier",
    "TierKind",
    "TierTemplate",
    "get_template",
]
