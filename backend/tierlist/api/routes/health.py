"""
Health check endpoints
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from tierlist import __version__
from tierlist.api.deps import get_app_settings, get_catalog_lookup
from tierlist.core.config import Settings
from tierlist.services.catalog import CatalogLookup

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    settings: Settings = Depends(get_app_settings),
    catalog: CatalogLookup = Depends(get_catalog_lookup),
):
    """
    Basic health check endpoint

    Returns:
        dict: Health status
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.app_name,
        "version": __version__,
        "catalog_items": len(catalog),
    }
