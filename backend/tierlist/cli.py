"""CLI for working with board tokens as a local client session."""
import argparse
import sys
from pathlib import Path
from typing import List
from uuid import uuid4

from pydantic import TypeAdapter, ValidationError

from tierlist.core.config import get_settings
from tierlist.core.errors import DecodeFailure, UnknownTemplateError
from tierlist.core.logging_config import LoggingConfig
from tierlist.models.item import Item, ItemSource
from tierlist.models.tier import Board, LabelPosition, Tier
from tierlist.services.catalog import build_catalog_lookup, load_catalog
from tierlist.services.og_image import normalize_og_image_url
from tierlist.services.storage import JsonFileKeyValueStore
from tierlist.services.tier_state_engine import TierStateEngine

_BOARD_ADAPTER = TypeAdapter(List[Tier])


def _engine(args) -> TierStateEngine:
    settings = get_settings()
    catalog_path = Path(args.catalog) if args.catalog else settings.resolved_catalog_path
    catalog = build_catalog_lookup(load_catalog(catalog_path))
    kv_store = None
    if not args.no_store:
        kv_store = JsonFileKeyValueStore(args.store or settings.resolved_custom_items_path)
    return TierStateEngine.from_settings(
        settings,
        catalog,
        kv_store=kv_store,
        label_position=LabelPosition(args.label_position),
    )


def _load(engine: TierStateEngine, token: str) -> bool:
    try:
        board = engine.codec.decode_or_raise(token)
    except DecodeFailure as e:
        print(f"Cannot decode state: {e.message}", file=sys.stderr)
        return False
    engine.update_board(engine.reconciler.set_label_position(board, engine.label_position))
    return True


def _print_board(board: Board) -> None:
    print(_BOARD_ADAPTER.dump_json(board, indent=2).decode("utf-8"))


def _print_tokens(engine: TierStateEngine) -> None:
    print(engine.state_token())
    undo_token = engine.checkpoint_token()
    if undo_token:
        print(f"undo: {undo_token}", file=sys.stderr)


def cmd_decode(args):
    """Print the board held by a token as JSON."""
    engine = _engine(args)
    if not _load(engine, args.token):
        return 1
    _print_board(engine.board)
    return 0


def cmd_encode(args):
    """Encode a board JSON document (file or '-' for stdin) into a token."""
    raw = sys.stdin.read() if args.file == "-" else Path(args.file).read_text(encoding="utf-8")
    try:
        board = _BOARD_ADAPTER.validate_json(raw)
    except ValidationError as e:
        print(f"Invalid board document: {e.error_count()} errors", file=sys.stderr)
        return 2
    engine = _engine(args)
    engine.update_board(board)
    print(engine.state_token())
    return 0


def cmd_template(args):
    """Move a board onto another template preset."""
    engine = _engine(args)
    if not _load(engine, args.token):
        return 1
    try:
        engine.change_template(args.name)
    except UnknownTemplateError as e:
        print(e.message, file=sys.stderr)
        return 2
    _print_tokens(engine)
    return 0


def cmd_reset(args):
    """Move every item into the uncategorized tier."""
    engine = _engine(args)
    if not _load(engine, args.token):
        return 1
    engine.reset_items()
    _print_tokens(engine)
    return 0


def cmd_add(args):
    """Create custom items (remembered in the local store) and add them to the board."""
    engine = _engine(args)
    if args.token and not _load(engine, args.token):
        return 1
    items = []
    for content in args.content:
        items.append(
            Item(
                id=str(uuid4()),
                content=content,
                image_url=args.image or None,
                source=ItemSource.CUSTOM,
            )
        )
    engine.create_items(items)
    _print_tokens(engine)
    return 0


def cmd_custom_clear(args):
    """Forget every custom item in the local store."""
    engine = _engine(args)
    engine.clear_custom_items()
    print("Custom items cleared")
    return 0


def cmd_og(args):
    """Print a share-preview safe image URL."""
    settings = get_settings()
    print(normalize_og_image_url(args.url, args.base_url if args.base_url is not None else settings.base_url))
    return 0


def build_parser():
    p = argparse.ArgumentParser(prog="tierlist")
    p.add_argument("--store", help="Custom items JSON file (client key-value store)")
    p.add_argument("--no-store", action="store_true", help="Run without a local store, like a server session")
    p.add_argument("--catalog", help="Catalog JSON to use instead of the configured one")
    p.add_argument(
        "--label-position",
        choices=[position.value for position in LabelPosition],
        default=LabelPosition.LEFT.value,
    )
    sub = p.add_subparsers(dest="cmd")
    s = sub.add_parser("decode", help="Decode a state token")
    s.add_argument("token")
    s.set_defaults(func=cmd_decode)
    s = sub.add_parser("encode", help="Encode a board JSON document")
    s.add_argument("file", help="Path to board JSON, or '-' for stdin")
    s.set_defaults(func=cmd_encode)
    s = sub.add_parser("template", help="Change the template of a board")
    s.add_argument("token")
    s.add_argument("name", help="Template preset, e.g. 3rows, 5rows, 7rows")
    s.set_defaults(func=cmd_template)
    s = sub.add_parser("reset", help="Reset all items to uncategorized")
    s.add_argument("token")
    s.set_defaults(func=cmd_reset)
    s = sub.add_parser("add", help="Add custom items to a board")
    s.add_argument("content", nargs="+", help="Item labels")
    s.add_argument("--token", help="Board to add to (default board when omitted)")
    s.add_argument("--image", help="Image URL or data URI for the new items")
    s.set_defaults(func=cmd_add)
    s = sub.add_parser("custom-clear", help="Forget all custom items")
    s.set_defaults(func=cmd_custom_clear)
    s = sub.add_parser("og", help="Normalize an image URL for share previews")
    s.add_argument("url")
    s.add_argument("--base-url", help="Origin to resolve relative URLs against")
    s.set_defaults(func=cmd_og)
    return p


def main(argv=None):
    # stdout carries the command result only
    LoggingConfig.set_console_stream(sys.stderr)
    p = build_parser()
    args = p.parse_args(argv)
    if not hasattr(args, "func"):
        p.print_help()
        return 2
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
