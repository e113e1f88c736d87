"""
Item model
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ItemSource(str, Enum):
    """Where a resolved item came from"""
    CATALOG = "catalog"
    CUSTOM = "custom"
    PLACEHOLDER = "placeholder"
    USER = "user"  # Supplied directly by the caller, not resolved yet


class Item(BaseModel):
    """A rankable item. `id` is unique across the whole board."""
    id: str = Field(..., min_length=1, description="Stable identity, '<catalog>-<filename>' for catalog items")
    content: str = Field(..., description="Human-readable label")
    image_url: Optional[str] = Field(default=None, description="Absolute URL, relative path or data URI")
    source: ItemSource = Field(default=ItemSource.USER)
