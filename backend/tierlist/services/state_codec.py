"""
Board <-> URL token codec.

Only tier ids, names and (item id, content) pairs travel in the token; image
URLs and label positions are re-derived on decode. The JSON text is
compressed with LZ-String's URI-component alphabet, so tokens are
interchangeable with the browser implementation of the same format.
"""
from typing import List, Optional, Set

from lzstring import LZString
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from tierlist.core.errors import DecodeFailure
from tierlist.core.logging_config import LoggingConfig
from tierlist.models.tier import SINK_TIER_ID, Board, Tier, TierKind
from tierlist.services.item_resolver import ItemResolver

logger = LoggingConfig.get_logger(__name__)

_lz = LZString()


class SimplifiedItem(BaseModel):
    i: str = Field(..., min_length=1)  # id
    c: str  # content


class SimplifiedTier(BaseModel):
    i: str = Field(..., min_length=1)  # id
    n: str  # name
    t: List[SimplifiedItem]  # items


_TIERS_ADAPTER = TypeAdapter(List[SimplifiedTier])


def _to_utf16_units(text: str) -> str:
    """Split astral characters into surrogate pairs, as JavaScript strings store them"""
    if text.isascii():
        return text
    data = text.encode("utf-16-le", "surrogatepass")
    return "".join(
        chr(int.from_bytes(data[pos:pos + 2], "little"))
        for pos in range(0, len(data), 2)
    )


def _from_utf16_units(text: str) -> str:
    if text.isascii():
        return text
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le")


def simplify_board(board: Board) -> List[SimplifiedTier]:
    return [
        SimplifiedTier(
            i=tier.id,
            n=tier.name,
            t=[SimplifiedItem(i=item.id, c=item.content) for item in tier.items],
        )
        for tier in board
    ]


def encode_board(board: Board) -> str:
    """Serialize a board into a URL-component-safe token"""
    json_text = _TIERS_ADAPTER.dump_json(simplify_board(board)).decode("utf-8")
    return _lz.compressToEncodedURIComponent(_to_utf16_units(json_text))


class StateCodec:
    """Decode tokens into full boards, resolving every item through the resolver"""

    def __init__(self, resolver: ItemResolver) -> None:
        self.resolver = resolver

    encode = staticmethod(encode_board)

    def _decompress(self, token: str) -> str:
        if not token or not token.strip():
            raise DecodeFailure("Empty state token")
        try:
            text = _lz.decompressFromEncodedURIComponent(token.strip())
        except Exception as e:
            # The decompressor fails with assorted lookup/index errors on foreign input
            raise DecodeFailure(
                "State token cannot be decompressed",
                {"error_type": type(e).__name__},
            ) from e
        if not text:
            raise DecodeFailure("Failed to decompress state")
        try:
            return _from_utf16_units(text)
        except UnicodeError as e:
            raise DecodeFailure("Decompressed state is not valid text") from e

    def decode_or_raise(self, token: str) -> Board:
        """Decode a token, raising DecodeFailure with the reason on any problem"""
        json_text = self._decompress(token)
        try:
            simplified = _TIERS_ADAPTER.validate_json(json_text)
        except ValidationError as e:
            raise DecodeFailure(
                "Decoded state does not match the board shape",
                {"errors": e.error_count()},
            ) from e
        if not simplified:
            raise DecodeFailure("Decoded state holds no tiers")

        board: Board = []
        seen: Set[str] = set()
        for simplified_tier in simplified:
            items = []
            for simplified_item in simplified_tier.t:
                if simplified_item.i in seen:
                    logger.warning(
                        "Dropping duplicate item from decoded state",
                        extra={"item_id": simplified_item.i, "tier_id": simplified_tier.i},
                    )
                    continue
                seen.add(simplified_item.i)
                items.append(self.resolver.resolve(simplified_item.i, simplified_item.c))
            board.append(
                Tier(
                    id=simplified_tier.i,
                    name=simplified_tier.n,
                    items=items,
                    kind=TierKind.SINK if simplified_tier.i == SINK_TIER_ID else TierKind.STANDARD,
                )
            )
        return board

    def decode(self, token: str) -> Optional[Board]:
        """Decode a token; None means "no state available", never an error"""
        try:
            return self.decode_or_raise(token)
        except DecodeFailure as e:
            logger.error("Failed to decode tier state from URL", extra={"error": e.to_dict()})
            return None
