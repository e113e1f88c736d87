"""
Pytest configuration and fixtures
"""
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Settings are cached on first use: pin test values before anything imports them
os.environ.setdefault("TIERLIST_BASE_URL", "https://tiers.example.com")
os.environ.setdefault("TIERLIST_LOG_FILE_ENABLED", "false")
os.environ.setdefault("TIERLIST_LOG_FORMAT", "text")
os.environ.setdefault("TIERLIST_DEFAULT_TEMPLATE", "5rows")

from tierlist.core.config import DEFAULT_CATALOG_PATH
from tierlist.models.item import Item
from tierlist.models.tier import Board, Tier
from tierlist.services.catalog import build_catalog_lookup, load_catalog
from tierlist.services.storage import InMemoryKeyValueStore
from tierlist.services.tier_state_engine import TierStateEngine

BASE_URL = "https://tiers.example.com"


def make_item(item_id: str, content: Optional[str] = None, image_url: Optional[str] = None) -> Item:
    return Item(id=item_id, content=content if content is not None else item_id, image_url=image_url)


def make_board(*tiers: Tuple[str, List[Item]]) -> Board:
    """make_board(("tier-s", [item, ...]), ("tier-a", [])) -> Board"""
    return [Tier(id=tier_id, name=tier_id.replace("tier-", "").upper(), items=list(items)) for tier_id, items in tiers]


def item_ids(tier: Tier) -> List[str]:
    return [item.id for item in tier.items]


@pytest.fixture(scope="session")
def catalog_config():
    return load_catalog(DEFAULT_CATALOG_PATH)


@pytest.fixture
def catalog(catalog_config):
    return build_catalog_lookup(catalog_config)


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def engine(catalog, kv_store) -> TierStateEngine:
    """Client session with local storage"""
    return TierStateEngine(catalog, kv_store=kv_store, has_persistent_store=True, base_url=BASE_URL)


@pytest.fixture
def server_engine(catalog) -> TierStateEngine:
    """Server session: no local storage"""
    return TierStateEngine(catalog, has_persistent_store=False, base_url=BASE_URL)
