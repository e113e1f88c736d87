"""
Tier reconciliation: keeps a board consistent when its row schema changes,
when items are added or removed, and across reset / delete-all with a
single-slot undo.

Boards passed in are never mutated; every operation returns a new board.
"""
from typing import Dict, Iterable, List, Optional, Set, Tuple

from tierlist.core.logging_config import LoggingConfig
from tierlist.models.item import Item
from tierlist.models.template import TierTemplate
from tierlist.models.tier import SINK_TIER_ID, Board, LabelPosition, Tier

logger = LoggingConfig.get_logger(__name__)


def snapshot_board(board: Board) -> Board:
    """Deep copy, so later edits cannot leak into a checkpoint"""
    return [tier.model_copy(deep=True) for tier in board]


def _find_sink(board: Board) -> Optional[Tier]:
    return next((tier for tier in board if tier.is_sink), None)


def _unique_sink_id(board: Board) -> str:
    taken = {tier.id for tier in board}
    if SINK_TIER_ID not in taken:
        return SINK_TIER_ID
    suffix = 1
    while f"{SINK_TIER_ID}-{suffix}" in taken:
        suffix += 1
    return f"{SINK_TIER_ID}-{suffix}"


class TierReconciler:
    """
    Redistributes items over tiers.

    `checkpoint` is the single undo slot: the board as it was right before the
    most recent reset or delete-all. It is replaced, never stacked.
    """

    def __init__(self, checkpoint: Optional[Board] = None) -> None:
        self.checkpoint: Optional[Board] = snapshot_board(checkpoint) if checkpoint is not None else None

    # -----------------------
    # Schema changes
    # -----------------------

    def reconcile(
        self,
        board: Board,
        template: TierTemplate,
        label_position: Optional[LabelPosition] = None,
    ) -> Board:
        """
        Move every item onto the tiers of `template`.

        Items keep their tier when the template has a tier with the same id,
        otherwise they land in the template's sink tier, or in a sink tier
        appended on the fly (at most one per pass).
        """
        origins: Dict[str, Tuple[Item, str]] = {}
        for tier in board:
            for item in tier.items:
                origins[item.id] = (item, tier.id)

        new_tiers = template.instantiate(label_position)
        by_id = {tier.id: tier for tier in new_tiers}
        sink = _find_sink(new_tiers)
        orphaned = 0

        for item, origin_tier_id in origins.values():
            target = by_id.get(origin_tier_id)
            if target is None:
                target = sink
            if target is None:
                sink = Tier.sink(label_position=label_position, tier_id=_unique_sink_id(new_tiers))
                new_tiers.append(sink)
                target = sink
            if target is sink:
                orphaned += 1
            target.items.append(item)

        logger.info(
            f"Reconciled board onto template {template.name}",
            extra={"items": len(origins), "orphaned": orphaned, "tiers": len(new_tiers)},
        )
        return new_tiers

    def set_label_position(self, board: Board, label_position: LabelPosition) -> Board:
        return [tier.model_copy(update={"label_position": label_position}) for tier in board]

    def initial_board(
        self,
        template: TierTemplate,
        items: Iterable[Item] = (),
        label_position: Optional[LabelPosition] = None,
    ) -> Board:
        """Empty template with `items` placed in its last tier"""
        board = template.instantiate(label_position)
        return self.add_items(board, items)

    # -----------------------
    # Item changes
    # -----------------------

    def add_items(self, board: Board, new_items: Iterable[Item]) -> Board:
        """
        Append items to the last tier.

        An item is dropped when its id or its content already appears anywhere
        on the board (or earlier in the same batch).
        """
        seen_ids: Set[str] = set()
        seen_contents: Set[str] = set()
        for tier in board:
            for item in tier.items:
                seen_ids.add(item.id)
                seen_contents.add(item.content)

        accepted: List[Item] = []
        dropped = 0
        for item in new_items:
            if item.id in seen_ids or item.content in seen_contents:
                dropped += 1
                continue
            seen_ids.add(item.id)
            seen_contents.add(item.content)
            accepted.append(item)

        if dropped:
            logger.debug(f"Dropped {dropped} duplicate items")
        if not accepted:
            return list(board)

        if not board:
            return [Tier.sink(items=accepted)]

        last = board[-1]
        return list(board[:-1]) + [last.model_copy(update={"items": list(last.items) + accepted})]

    def remove_items(self, board: Board, ids: Iterable[str]) -> Board:
        """Filter ids out of every tier; untouched tiers are returned as-is"""
        removed = set(ids)
        result: Board = []
        for tier in board:
            if any(item.id in removed for item in tier.items):
                tier = tier.model_copy(update={"items": [item for item in tier.items if item.id not in removed]})
            result.append(tier)
        return result

    def deduplicate(self, board: Board) -> Board:
        """Keep only the first occurrence of every item id"""
        seen: Set[str] = set()
        result: Board = []
        for tier in board:
            items = []
            for item in tier.items:
                if item.id in seen:
                    logger.warning("Dropping duplicate item", extra={"item_id": item.id, "tier_id": tier.id})
                    continue
                seen.add(item.id)
                items.append(item)
            result.append(tier if len(items) == len(tier.items) else tier.model_copy(update={"items": items}))
        return result

    # -----------------------
    # Destructive operations
    # -----------------------

    def reset_items(self, board: Board, label_position: Optional[LabelPosition] = None) -> Board:
        """Move every item, sorted by content, into the trailing sink tier"""
        self.checkpoint = snapshot_board(board)

        all_items = sorted((item for tier in board for item in tier.items), key=lambda item: item.content)
        reset = [tier.model_copy(update={"items": []}) for tier in board]

        if reset and reset[-1].is_sink:
            reset[-1] = reset[-1].model_copy(update={"items": all_items})
        else:
            if label_position is None and reset:
                label_position = reset[-1].label_position
            reset.append(Tier.sink(items=all_items, label_position=label_position, tier_id=_unique_sink_id(reset)))

        logger.info("Reset items to uncategorized", extra={"items": len(all_items)})
        return reset

    def delete_all_items(self, board: Board) -> Board:
        self.checkpoint = snapshot_board(board)
        logger.info("Deleted all items", extra={"items": sum(len(tier.items) for tier in board)})
        return [tier.model_copy(update={"items": []}) for tier in board]

    def undo(self) -> Optional[Board]:
        """Board before the last reset/delete; the slot is kept, so undo can repeat"""
        if self.checkpoint is None:
            logger.debug("Nothing to undo")
            return None
        return snapshot_board(self.checkpoint)
