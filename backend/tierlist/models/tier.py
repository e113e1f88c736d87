"""
Tier model
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from tierlist.models.item import Item

SINK_TIER_ID = "uncategorized"


class LabelPosition(str, Enum):
    TOP = "top"
    LEFT = "left"
    RIGHT = "right"


class TierKind(str, Enum):
    """Standard rows come from templates; the sink receives items with no destination"""
    STANDARD = "standard"
    SINK = "sink"


class Tier(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    items: List[Item] = Field(default_factory=list, description="Display order within the row")
    label_position: Optional[LabelPosition] = None
    placeholder: Optional[str] = None
    kind: TierKind = TierKind.STANDARD

    @property
    def is_sink(self) -> bool:
        return self.kind == TierKind.SINK

    @classmethod
    def sink(
        cls,
        items: Optional[List[Item]] = None,
        label_position: Optional[LabelPosition] = None,
        tier_id: str = SINK_TIER_ID,
    ) -> "Tier":
        """Create an unnamed sink tier"""
        return cls(
            id=tier_id,
            name="",
            items=list(items or []),
            label_position=label_position,
            kind=TierKind.SINK,
        )


# Ordered top (highest rank) to bottom
Board = List[Tier]
