"""
Bundled catalog document models (imageset.config.json)
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class CatalogImage(BaseModel):
    filename: str = Field(..., min_length=1)
    label: Optional[str] = None


class CatalogPackage(BaseModel):
    title: Optional[str] = None
    images: List[CatalogImage] = Field(default_factory=list)


class CatalogConfig(BaseModel):
    packages: Dict[str, CatalogPackage] = Field(default_factory=dict)


class ItemSet(BaseModel):
    """Initial set of catalog images to pre-populate a board with"""
    package_name: str
    images: List[str] = Field(default_factory=list, description="Image filenames within the package")
