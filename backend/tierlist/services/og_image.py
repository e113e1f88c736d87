"""
Share-preview (Open Graph) helpers: renderer-safe absolute image URLs and
row gradients for the preview image.
"""
from typing import List
from urllib.parse import urljoin, urlparse

from tierlist.models.item import Item
from tierlist.models.tier import Board

OG_TIER_GRADIENTS: List[str] = [
    "linear-gradient(to right, #d21203, #c40a01)",
    "linear-gradient(to right, #ee1e1e, #f84a44)",
    "linear-gradient(to right, #dca414, #dc991d)",
    "linear-gradient(to right, #c98b17, #e8910f)",
    "linear-gradient(to right, #7ad21f, #1aea1d)",
    "linear-gradient(to right, #72b231, #0cd30e)",
    "linear-gradient(to right, #4d7e15, #01b004)",
]
OG_LAST_TIER_GRADIENT = "linear-gradient(to right, #f0f0f0, #f0f0f0)"


def normalize_og_image_url(url: str, base_url: str = "") -> str:
    """
    Rewrite a trailing .webp to .png (preview renderers cannot rasterize it)
    and resolve relative URLs against `base_url`. No network access.
    """
    if url.lower().endswith(".webp"):
        url = url[:-len(".webp")] + ".png"

    if not urlparse(url).scheme and base_url:
        url = urljoin(base_url, url)

    return url


class OgImageNormalizer:
    def __init__(self, base_url: str = "") -> None:
        self.base_url = base_url

    def normalize(self, url: str) -> str:
        return normalize_og_image_url(url, self.base_url)

    def og_safe_item(self, item: Item) -> Item:
        return item.model_copy(update={"image_url": self.normalize(item.image_url or "")})

    def og_safe_board(self, board: Board) -> Board:
        return [
            tier.model_copy(update={"items": [self.og_safe_item(item) for item in tier.items]})
            for tier in board
        ]

    @staticmethod
    def tier_gradient(index: int, tier_count: int) -> str:
        """Background for row `index`; the bottom row is always neutral"""
        if index == tier_count - 1:
            return OG_LAST_TIER_GRADIENT
        return OG_TIER_GRADIENTS[index % len(OG_TIER_GRADIENTS)]
