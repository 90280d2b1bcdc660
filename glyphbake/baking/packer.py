"""Shelf packing of glyph rectangles into a fixed-size atlas."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Protocol

from glyphbake import log
from glyphbake.errors import PackingOverflow


class _Sized(Protocol):
    codepoint: int

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...


@dataclass(frozen=True)
class PackedRect:
    """Atlas placement of one glyph, inclusive-exclusive on both axes."""

    codepoint: int
    x: int
    y: int
    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def overlaps(self, other: "PackedRect", padding: int = 0) -> bool:
        """True if the rectangles, grown by padding on the right and bottom, intersect."""
        if self.is_empty or other.is_empty:
            return False
        return (
            self.x < other.x + other.width + padding
            and other.x < self.x + self.width + padding
            and self.y < other.y + other.height + padding
            and other.y < self.y + self.height + padding
        )


class ShelfPacker:
    """
    Row ("shelf") packer.

    Rectangles are placed left to right in the given order. When a rectangle
    does not fit into what remains of the current row, a new shelf starts
    below the tallest rectangle of the current one. The packer starts at
    (padding, padding) and keeps padding texels after every rectangle, so
    each glyph has free texels on all sides.

    Zero-area rectangles consume no space and are reported at (0, 0).
    """

    def __init__(self, padding: int = 1):
        if padding < 0:
            raise ValueError(f"padding must be >= 0, got {padding}")
        self.padding = padding

    def pack(self, items: Iterable[_Sized], atlas_width: int, atlas_height: int) -> List[PackedRect]:
        """
        Place every item.

        Raises:
            PackingOverflow: an item does not fit below the last shelf.
        """
        items = list(items)
        pad = self.padding
        placed: List[PackedRect] = []

        cursor_x = pad
        cursor_y = pad
        shelf_height = 0

        for item in items:
            w, h = item.width, item.height
            if w == 0 or h == 0:
                placed.append(PackedRect(item.codepoint, 0, 0, 0, 0))
                continue

            if w + 2 * pad > atlas_width:
                self._overflow(placed, items, atlas_width, atlas_height)

            if cursor_x + w + pad > atlas_width:
                cursor_x = pad
                cursor_y += shelf_height + pad
                shelf_height = 0

            if cursor_y + h + pad > atlas_height:
                self._overflow(placed, items, atlas_width, atlas_height)

            placed.append(PackedRect(item.codepoint, cursor_x, cursor_y, w, h))
            cursor_x += w + pad
            shelf_height = max(shelf_height, h)

        return placed

    def _overflow(self, placed, items, atlas_width, atlas_height):
        log.debug(
            f"[Packer] overflow in {atlas_width}x{atlas_height} after {len(placed)}/{len(items)} glyphs"
        )
        raise PackingOverflow(len(placed), len(items), (atlas_width, atlas_height))


__all__ = ["PackedRect", "ShelfPacker"]
