"""
Per-session owner of the board: wires the item resolver, state codec and tier
reconciler together and keeps the current board, label position and undo
checkpoint.
"""
from typing import Iterable, Optional
from urllib.parse import urlencode

from tierlist.core.config import Settings
from tierlist.core.logging_config import LoggingConfig
from tierlist.models.catalog import ItemSet
from tierlist.models.item import Item
from tierlist.models.template import DEFAULT_TEMPLATE_NAME, TierTemplate, get_template
from tierlist.models.tier import Board, LabelPosition
from tierlist.services.catalog import CatalogLookup
from tierlist.services.custom_item_store import DEFAULT_CUSTOM_ITEMS_KEY, CustomItemStore
from tierlist.services.item_resolver import DEFAULT_PLACEHOLDER_IMAGE, ItemResolver
from tierlist.services.og_image import OgImageNormalizer
from tierlist.services.state_codec import StateCodec, encode_board
from tierlist.services.storage import KeyValueStore
from tierlist.services.tier_reconciler import TierReconciler

logger = LoggingConfig.get_logger(__name__)


class TierStateEngine:
    """
    Tier state for one session.

    Args:
        catalog: Catalog lookup built once at startup
        kv_store: Local key-value store holding custom items (client sessions)
        has_persistent_store: Whether custom items may be read and written
        base_url: Origin for absolute image URLs
        default_template: Template used when no state can be loaded
    """

    def __init__(
        self,
        catalog: CatalogLookup,
        kv_store: Optional[KeyValueStore] = None,
        has_persistent_store: bool = False,
        base_url: str = "",
        placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE,
        default_template: str = DEFAULT_TEMPLATE_NAME,
        custom_items_key: str = DEFAULT_CUSTOM_ITEMS_KEY,
        label_position: LabelPosition = LabelPosition.LEFT,
        checkpoint: Optional[Board] = None,
    ) -> None:
        self.catalog = catalog
        self.has_persistent_store = has_persistent_store and kv_store is not None
        custom_store = CustomItemStore(kv_store, key=custom_items_key, enabled=self.has_persistent_store)
        self.resolver = ItemResolver(
            catalog,
            custom_store=custom_store,
            has_persistent_store=self.has_persistent_store,
            base_url=base_url,
            placeholder_image=placeholder_image,
        )
        self.codec = StateCodec(self.resolver)
        self.reconciler = TierReconciler(checkpoint)
        self.og = OgImageNormalizer(base_url)
        self.default_template: TierTemplate = get_template(default_template)
        self.label_position = label_position
        self.board: Board = self.default_template.instantiate(label_position)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        catalog: CatalogLookup,
        kv_store: Optional[KeyValueStore] = None,
        **kwargs,
    ) -> "TierStateEngine":
        return cls(
            catalog,
            kv_store=kv_store,
            has_persistent_store=kv_store is not None,
            base_url=settings.base_url,
            placeholder_image=settings.placeholder_image,
            default_template=settings.default_template,
            custom_items_key=settings.custom_items_key,
            **kwargs,
        )

    @property
    def checkpoint(self) -> Optional[Board]:
        return self.reconciler.checkpoint

    def _set_board(self, board: Board) -> Board:
        self.board = board if board else self.default_template.instantiate(self.label_position)
        return self.board

    # -----------------------
    # Loading and serialization
    # -----------------------

    def default_board(self, item_set: Optional[ItemSet] = None) -> Board:
        items = self.resolver.resolve_item_set(item_set) if item_set is not None else []
        return self.reconciler.initial_board(self.default_template, items, self.label_position)

    def initial_board(self, state: Optional[str] = None, item_set: Optional[ItemSet] = None) -> Board:
        """Board from a shared token when it decodes, else the default template (with the item set)"""
        if state:
            decoded = self.codec.decode(state)
            if decoded is not None:
                return self._set_board(self.reconciler.set_label_position(decoded, self.label_position))
            logger.info("Falling back to default board after undecodable state")
        return self._set_board(self.default_board(item_set))

    def load_state(self, token: str) -> bool:
        """Replace the board with a decoded token; keeps the current board on failure"""
        decoded = self.codec.decode(token)
        if decoded is None:
            return False
        self._set_board(self.reconciler.set_label_position(decoded, self.label_position))
        return True

    def state_token(self) -> str:
        return encode_board(self.board)

    def state_query(self, param: str = "state") -> str:
        """Query string for a navigation replace of the current URL"""
        return urlencode({param: self.state_token()})

    def load_checkpoint(self, token: str) -> bool:
        """Restore the undo slot from a token (stateless callers carry it alongside the board)"""
        decoded = self.codec.decode(token)
        if decoded is None:
            return False
        self.reconciler.checkpoint = self.reconciler.set_label_position(decoded, self.label_position)
        return True

    def checkpoint_token(self) -> Optional[str]:
        return encode_board(self.checkpoint) if self.checkpoint is not None else None

    # -----------------------
    # User actions
    # -----------------------

    def update_board(self, board: Board) -> Board:
        """Accept a board rearranged by the UI (drag and drop)"""
        return self._set_board(self.reconciler.deduplicate(board))

    def change_template(self, template_name: str) -> Board:
        template = get_template(template_name)
        return self._set_board(self.reconciler.reconcile(self.board, template, self.label_position))

    def set_label_position(self, label_position: LabelPosition) -> Board:
        self.label_position = label_position
        return self._set_board(self.reconciler.set_label_position(self.board, label_position))

    def create_items(self, items: Iterable[Item]) -> Board:
        """Remember new custom items locally, then add them to the last tier"""
        items = list(items)
        self.resolver.add_custom_items(items)
        return self._set_board(self.reconciler.add_items(self.board, items))

    def remove_items(self, ids: Iterable[str]) -> Board:
        return self._set_board(self.reconciler.remove_items(self.board, ids))

    def reset_items(self) -> Board:
        return self._set_board(self.reconciler.reset_items(self.board, self.label_position))

    def delete_all_items(self) -> Board:
        return self._set_board(self.reconciler.delete_all_items(self.board))

    def undo(self) -> Board:
        restored = self.reconciler.undo()
        if restored is None:
            return self.board
        return self._set_board(restored)

    def clear_custom_items(self) -> None:
        self.resolver.clear_custom_items()

    def og_safe_board(self) -> Board:
        return self.og.og_safe_board(self.board)
