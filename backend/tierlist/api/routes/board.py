"""
API routes for board state.

The server keeps no board state: every request carries the board as a token
(and, for undo, the checkpoint as a second token) and every response returns
the updated tokens. Server sessions never read custom items, so items that
are neither in the catalog nor in the request resolve to placeholders.
"""
from typing import List, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from tierlist.api.deps import get_app_settings, get_catalog_config, get_catalog_lookup
from tierlist.core.config import Settings
from tierlist.core.errors import UnknownPackageError, UnknownTemplateError
from tierlist.models.catalog import CatalogConfig, ItemSet
from tierlist.models.item import Item, ItemSource
from tierlist.models.tier import LabelPosition, Tier
from tierlist.services.catalog import CatalogLookup
from tierlist.services.og_image import OgImageNormalizer
from tierlist.services.tier_state_engine import TierStateEngine

router = APIRouter(prefix="/api", tags=["board"])


class StateRequest(BaseModel):
    """Board token plus the session settings that do not travel in it"""
    state: Optional[str] = Field(default=None, description="Encoded board token")
    undo_state: Optional[str] = Field(default=None, description="Encoded undo checkpoint")
    label_position: LabelPosition = LabelPosition.LEFT


class TemplateChangeRequest(StateRequest):
    template: str = Field(..., description="Template preset name, e.g. '7rows'")


class NewItem(BaseModel):
    id: Optional[str] = Field(default=None, description="Assigned when omitted")
    content: str = Field(..., min_length=1)
    image_url: Optional[str] = None


class AddItemsRequest(StateRequest):
    items: List[NewItem] = Field(default_factory=list)


class RemoveItemsRequest(StateRequest):
    ids: List[str] = Field(default_factory=list)


class BoardResponse(BaseModel):
    tiers: List[Tier]
    state: str
    query: str
    undo_state: Optional[str] = None
    label_position: LabelPosition


class OgTierResponse(BaseModel):
    id: str
    name: str
    gradient: str
    items: List[Item]


class OgBoardResponse(BaseModel):
    tiers: List[OgTierResponse]


def _engine(settings: Settings, catalog: CatalogLookup, label_position: LabelPosition) -> TierStateEngine:
    return TierStateEngine.from_settings(settings, catalog, label_position=label_position)


def _load(engine: TierStateEngine, request: StateRequest) -> TierStateEngine:
    engine.initial_board(request.state)
    if request.undo_state:
        engine.load_checkpoint(request.undo_state)
    return engine


def _response(engine: TierStateEngine, settings: Settings) -> BoardResponse:
    return BoardResponse(
        tiers=engine.board,
        state=engine.state_token(),
        query=engine.state_query(settings.state_query_param),
        undo_state=engine.checkpoint_token(),
        label_position=engine.label_position,
    )


@router.get("/board", response_model=BoardResponse)
async def get_board(
    state: Optional[str] = Query(default=None, description="Encoded board token"),
    package: Optional[str] = Query(default=None, description="Catalog package to pre-populate"),
    images: Optional[List[str]] = Query(default=None, description="Image filenames (all when omitted)"),
    label_position: LabelPosition = LabelPosition.LEFT,
    settings: Settings = Depends(get_app_settings),
    catalog: CatalogLookup = Depends(get_catalog_lookup),
    catalog_config: CatalogConfig = Depends(get_catalog_config),
):
    """Decode a shared board, or build the default board (optionally with a catalog package)"""
    engine = _engine(settings, catalog, label_position)
    item_set = None
    if package:
        catalog_package = catalog_config.packages.get(package)
        if catalog_package is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=UnknownPackageError(package).message)
        filenames = images if images else [image.filename for image in catalog_package.images]
        item_set = ItemSet(package_name=package, images=filenames)
    engine.initial_board(state, item_set)
    return _response(engine, settings)


@router.post("/board/template", response_model=BoardResponse)
async def change_template(
    request: TemplateChangeRequest,
    settings: Settings = Depends(get_app_settings),
    catalog: CatalogLookup = Depends(get_catalog_lookup),
):
    engine = _load(_engine(settings, catalog, request.label_position), request)
    try:
        engine.change_template(request.template)
    except UnknownTemplateError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return _response(engine, settings)


@router.post("/board/label-position", response_model=BoardResponse)
async def change_label_position(
    request: StateRequest,
    settings: Settings = Depends(get_app_settings),
    catalog: CatalogLookup = Depends(get_catalog_lookup),
):
    engine = _load(_engine(settings, catalog, request.label_position), request)
    engine.set_label_position(request.label_position)
    return _response(engine, settings)


@router.post("/board/items", response_model=BoardResponse)
async def add_items(
    request: AddItemsRequest,
    settings: Settings = Depends(get_app_settings),
    catalog: CatalogLookup = Depends(get_catalog_lookup),
):
    """Append new items to the last tier; duplicates by id or content are dropped"""
    engine = _load(_engine(settings, catalog, request.label_position), request)
    items = [
        Item(
            id=new_item.id or str(uuid4()),
            content=new_item.content,
            image_url=new_item.image_url,
            source=ItemSource.USER,
        )
        for new_item in request.items
    ]
    engine.create_items(items)
    return _response(engine, settings)


@router.post("/board/items/remove", response_model=BoardResponse)
async def remove_items(
    request: RemoveItemsRequest,
    settings: Settings = Depends(get_app_settings),
    catalog: CatalogLookup = Depends(get_catalog_lookup),
):
    engine = _load(_engine(settings, catalog, request.label_position), request)
    engine.remove_items(request.ids)
    return _response(engine, settings)


@router.post("/board/reset", response_model=BoardResponse)
async def reset_items(
    request: StateRequest,
    settings: Settings = Depends(get_app_settings),
    catalog: CatalogLookup = Depends(get_catalog_lookup),
):
    """Move every item, sorted by content, into the uncategorized tier"""
    engine = _load(_engine(settings, catalog, request.label_position), request)
    engine.reset_items()
    return _response(engine, settings)


@router.post("/board/delete-all", response_model=BoardResponse)
async def delete_all_items(
    request: StateRequest,
    settings: Settings = Depends(get_app_settings),
    catalog: CatalogLookup = Depends(get_catalog_lookup),
):
    engine = _load(_engine(settings, catalog, request.label_position), request)
    engine.delete_all_items()
    return _response(engine, settings)


@router.post("/board/undo", response_model=BoardResponse)
async def undo(
    request: StateRequest,
    settings: Settings = Depends(get_app_settings),
    catalog: CatalogLookup = Depends(get_catalog_lookup),
):
    """Restore the board carried in `undo_state`; the checkpoint is returned unchanged"""
    engine = _load(_engine(settings, catalog, request.label_position), request)
    engine.undo()
    return _response(engine, settings)


@router.get("/og-image")
async def og_image(
    url: str = Query(..., description="Image URL to make preview-safe"),
    settings: Settings = Depends(get_app_settings),
):
    return {"url": OgImageNormalizer(settings.base_url).normalize(url)}


@router.get("/og-board", response_model=OgBoardResponse)
async def og_board(
    state: Optional[str] = Query(default=None, description="Encoded board token"),
    settings: Settings = Depends(get_app_settings),
    catalog: CatalogLookup = Depends(get_catalog_lookup),
):
    """Board prepared for the share-preview renderer"""
    engine = _engine(settings, catalog, LabelPosition.LEFT)
    engine.initial_board(state)
    board = engine.og_safe_board()
    return OgBoardResponse(
        tiers=[
            OgTierResponse(
                id=tier.id,
                name=tier.name,
                gradient=engine.og.tier_gradient(index, len(board)),
                items=tier.items,
            )
            for index, tier in enumerate(board)
        ]
    )
