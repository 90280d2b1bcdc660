"""FontDescriptor - baked font metadata in the BMFont layout."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional


@dataclass(frozen=True)
class GlyphMetrics:
    """
    Placement and metrics of one glyph.

    Attributes:
        x, y: Top-left corner of the glyph image in the atlas.
        width, height: Size of the glyph image (0x0 for glyphs without ink).
        xoffset: Horizontal offset from the pen position to the image's left edge.
        yoffset: Vertical offset from the top of the line to the image's top edge.
        xadvance: Horizontal pen advance after drawing the glyph.
    """

    x: int
    y: int
    width: int
    height: int
    xoffset: int
    yoffset: int
    xadvance: int

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0


@dataclass(frozen=True)
class FontDescriptor:
    """
    Durable record of one bake.

    Built once per bake and never mutated; a re-bake produces a new descriptor.
    ``glyphs`` maps codepoint to metrics and keeps insertion order (ascending
    codepoint for baked fonts).
    """

    face: str
    size: float
    atlas_width: int
    atlas_height: int
    line_height: int
    base: int
    glyphs: Dict[int, GlyphMetrics] = field(default_factory=dict)
    page_file: str = ""
    padding: int = 0

    def lookup(self, codepoint: int) -> Optional[GlyphMetrics]:
        """Return metrics for codepoint or None if it was not baked."""
        return self.glyphs.get(codepoint)

    def __contains__(self, codepoint: int) -> bool:
        return codepoint in self.glyphs

    def __iter__(self) -> Iterator[int]:
        return iter(self.glyphs)

    def __len__(self) -> int:
        return len(self.glyphs)

    @property
    def space_advance(self) -> int:
        """Advance of the space character, 0 if the font has none."""
        space = self.glyphs.get(ord(" "))
        return space.xadvance if space is not None else 0


__all__ = ["GlyphMetrics", "FontDescriptor"]
