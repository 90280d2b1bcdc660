"""Text layout: string + origin into positioned glyph tiles."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Tuple, Union

from glyphbake import log
from glyphbake.descriptor import FontDescriptor

if TYPE_CHECKING:
    from glyphbake.visualization.text.bitmap_font import BitmapFont


@dataclass(frozen=True)
class Tile:
    """
    One glyph instance in pixel space (y down).

    (x, y, width, height) is the screen rectangle, (src_x, src_y) the top-left
    corner of the same-sized atlas rectangle.
    """

    codepoint: int
    x: float
    y: float
    width: int
    height: int
    src_x: int
    src_y: int


def _bounds(tiles) -> Tuple[float, float]:
    left = top = float("inf")
    right = bottom = float("-inf")
    for tile in tiles:
        left = min(left, tile.x)
        top = min(top, tile.y)
        right = max(right, tile.x + tile.width)
        bottom = max(bottom, tile.y + tile.height)
    if left == float("inf"):
        return (0, 0)
    return (right - left, bottom - top)


@dataclass
class TextRun:
    """Text laid out at an origin, and the tiles it produced."""

    text: str
    x: float
    y: float
    tiles: List[Tile] = field(default_factory=list)

    @property
    def size(self) -> Tuple[float, float]:
        """(width, height) of the bounding box of the run's tiles."""
        return _bounds(self.tiles)


class TextLayout:
    """
    Lazy tile sequence for a string.

    Iterating walks the text again each time; the same inputs always give the
    same tiles. Newlines return the pen to origin_x one line_height lower.
    Codepoints missing from the font produce no tile and advance the pen by
    the font's space advance (or 0 without a space glyph).
    """

    def __init__(self, font: Union["BitmapFont", FontDescriptor], text: str, origin_x: float = 0.0, origin_y: float = 0.0):
        self.descriptor: FontDescriptor = getattr(font, "descriptor", font)
        self.text = text
        self.origin_x = origin_x
        self.origin_y = origin_y

    def __iter__(self) -> Iterator[Tile]:
        descriptor = self.descriptor
        pen_x = self.origin_x
        pen_y = self.origin_y

        for ch in self.text:
            if ch == "\n":
                pen_x = self.origin_x
                pen_y += descriptor.line_height
                continue
            if ch == "\r":
                continue

            codepoint = ord(ch)
            glyph = descriptor.lookup(codepoint)
            if glyph is None:
                log.debug(f"[Font] U+{codepoint:04X} not in {descriptor.face}, substituting space advance")
                pen_x += descriptor.space_advance
                continue

            if not glyph.is_empty:
                yield Tile(
                    codepoint=codepoint,
                    x=pen_x + glyph.xoffset,
                    y=pen_y + glyph.yoffset,
                    width=glyph.width,
                    height=glyph.height,
                    src_x=glyph.x,
                    src_y=glyph.y,
                )
            pen_x += glyph.xadvance

    def tiles(self) -> List[Tile]:
        return list(self)

    @property
    def size(self) -> Tuple[float, float]:
        return _bounds(self)


def layout(font: Union["BitmapFont", FontDescriptor], text: str, origin_x: float = 0.0, origin_y: float = 0.0) -> TextLayout:
    """Lay out text with its top-left line origin at (origin_x, origin_y)."""
    return TextLayout(font, text, origin_x, origin_y)


def measure_text(font: Union["BitmapFont", FontDescriptor], text: str) -> Tuple[float, float]:
    """Bounding box (width, height) of text's tiles, without touching any batch."""
    return TextLayout(font, text).size


__all__ = ["Tile", "TextRun", "TextLayout", "layout", "measure_text"]
