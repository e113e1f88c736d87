"""
Request-scoped dependencies
"""
from fastapi import Request

from tierlist.core.config import Settings, get_settings
from tierlist.models.catalog import CatalogConfig
from tierlist.services.catalog import CatalogLookup


def get_app_settings() -> Settings:
    return get_settings()


def get_catalog_config(request: Request) -> CatalogConfig:
    return request.app.state.catalog_config


def get_catalog_lookup(request: Request) -> CatalogLookup:
    return request.app.state.catalog_lookup
