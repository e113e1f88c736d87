"""
API routes for tier template presets
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from tierlist.api.deps import get_app_settings
from tierlist.core.config import Settings
from tierlist.models.template import TIER_TEMPLATES
from tierlist.models.tier import LabelPosition

router = APIRouter(prefix="/api/templates", tags=["templates"])


class TemplateTierResponse(BaseModel):
    id: str
    name: str
    placeholder: Optional[str] = None
    label_position: LabelPosition


class TemplateResponse(BaseModel):
    name: str
    default: bool
    tiers: List[TemplateTierResponse]


@router.get("/", response_model=List[TemplateResponse])
async def list_templates(settings: Settings = Depends(get_app_settings)):
    """List the tier template presets"""
    return [
        TemplateResponse(
            name=template.name,
            default=template.name == settings.default_template,
            tiers=[
                TemplateTierResponse(
                    id=tier.id,
                    name=tier.name,
                    placeholder=tier.placeholder,
                    label_position=tier.label_position,
                )
                for tier in template.tiers
            ],
        )
        for template in TIER_TEMPLATES.values()
    ]
