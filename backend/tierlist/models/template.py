"""
Tier template presets
"""
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from tierlist.core.errors import UnknownTemplateError
from tierlist.models.tier import SINK_TIER_ID, Board, LabelPosition, Tier, TierKind


class TemplateTier(BaseModel):
    """Skeleton of a tier: no items"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    placeholder: Optional[str] = None
    label_position: LabelPosition = LabelPosition.LEFT
    kind: TierKind = TierKind.STANDARD


class TierTemplate(BaseModel):
    """Named, immutable preset of tier skeletons"""
    model_config = ConfigDict(frozen=True)

    name: str
    tiers: Tuple[TemplateTier, ...]

    @property
    def tier_ids(self) -> List[str]:
        return [tier.id for tier in self.tiers]

    def instantiate(self, label_position: Optional[LabelPosition] = None) -> Board:
        """Fresh empty tiers, optionally overriding every label position"""
        return [
            Tier(
                id=skeleton.id,
                name=skeleton.name,
                items=[],
                label_position=label_position or skeleton.label_position,
                placeholder=skeleton.placeholder,
                kind=skeleton.kind,
            )
            for skeleton in self.tiers
        ]


def _rows(*names: str) -> Tuple[TemplateTier, ...]:
    return tuple(
        TemplateTier(id=f"tier-{name.lower()}", name=name, placeholder=name)
        for name in names
    )


TIER_TEMPLATES: Dict[str, TierTemplate] = {
    "3rows": TierTemplate(name="3rows", tiers=_rows("S", "A", "B")),
    "5rows": TierTemplate(name="5rows", tiers=_rows("S", "A", "B", "C", "F")),
    "7rows": TierTemplate(name="7rows", tiers=_rows("SS", "S", "A", "B", "C", "D", "F")),
}

DEFAULT_TEMPLATE_NAME = "5rows"


def get_template(name: str) -> TierTemplate:
    template = TIER_TEMPLATES.get(name)
    if template is None:
        raise UnknownTemplateError(name)
    return template


def sink_template_tier() -> TemplateTier:
    """Skeleton for templates that ship their own sink row"""
    return TemplateTier(id=SINK_TIER_ID, name="", kind=TierKind.SINK)
