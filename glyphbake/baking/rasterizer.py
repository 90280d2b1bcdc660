"""Glyph rasterization through Pillow's FreeType binding."""

from __future__ import annotations

import io
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import numpy as np
from fontTools.ttLib import TTFont
from PIL import Image, ImageDraw, ImageFont

from glyphbake import log
from glyphbake.errors import FontLoadError, GlyphNotFound


# Pillow fonts kept per face; each one holds its own copy of the font bytes
MAX_CACHED_SIZES = 4


@dataclass
class GlyphBitmap:
    """
    Tightly cropped coverage of one glyph.

    Attributes:
        codepoint: Unicode codepoint.
        coverage: uint8 array of shape (height, width), values 0 or 255.
        xoffset: Pen-relative offset of the left edge.
        yoffset: Offset of the top edge from the top of the line.
        xadvance: Horizontal pen advance.
    """

    codepoint: int
    coverage: np.ndarray
    xoffset: int
    yoffset: int
    xadvance: int

    @property
    def width(self) -> int:
        return self.coverage.shape[1]

    @property
    def height(self) -> int:
        return self.coverage.shape[0]

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    @classmethod
    def empty(cls, codepoint: int, xadvance: int) -> "GlyphBitmap":
        return cls(
            codepoint=codepoint,
            coverage=np.zeros((0, 0), dtype=np.uint8),
            xoffset=0,
            yoffset=0,
            xadvance=xadvance,
        )


@dataclass
class FontFace:
    """
    Loaded font file.

    Keeps the raw bytes so Pillow fonts can be created for any pixel size
    without touching the file again.
    """

    path: str
    data: bytes
    cmap: Dict[int, str]
    family: str = ""
    style: str = ""
    _sizes: "OrderedDict[float, ImageFont.FreeTypeFont]" = field(default_factory=OrderedDict, repr=False)

    @classmethod
    def load(cls, path: str | Path) -> "FontFace":
        """
        Read and parse a TrueType/OpenType file.

        Raises:
            FontLoadError: File is unreadable or not a font.
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise FontLoadError(f"Cannot read font file {path}: {exc}") from exc
        return cls.from_bytes(data, str(path))

    @classmethod
    def from_bytes(cls, data: bytes, path: str = "<memory>") -> "FontFace":
        try:
            tt = TTFont(io.BytesIO(data), fontNumber=0, lazy=True)
            cmap = dict(tt.getBestCmap() or {})
        except Exception as exc:
            raise FontLoadError(f"Not a parseable font: {path}: {exc}") from exc

        face = cls(path=path, data=data, cmap=cmap)
        # Probe FreeType once so broken outlines fail here rather than mid-bake.
        font = face.at_size(16)
        face.family, face.style = font.getname()
        face.family = face.family or Path(path).stem
        face.style = face.style or ""
        return face

    @property
    def name(self) -> str:
        if self.style and self.style.lower() != "regular":
            return f"{self.family} {self.style}"
        return self.family

    def has_glyph(self, codepoint: int) -> bool:
        return codepoint in self.cmap

    def at_size(self, pixel_size: float) -> ImageFont.FreeTypeFont:
        """Pillow font for pixel_size (em square in pixels). The most recently used sizes stay cached."""
        font = self._sizes.get(pixel_size)
        if font is not None:
            self._sizes.move_to_end(pixel_size)
            return font
        try:
            font = ImageFont.truetype(io.BytesIO(self.data), pixel_size)
        except OSError as exc:
            raise FontLoadError(f"FreeType cannot open {self.path}: {exc}") from exc
        self._sizes[pixel_size] = font
        while len(self._sizes) > MAX_CACHED_SIZES:
            self._sizes.popitem(last=False)
        return font

    def metrics(self, pixel_size: float) -> tuple[int, int]:
        """(ascent, descent) in pixels, both positive."""
        return self.at_size(pixel_size).getmetrics()


class GlyphRasterizer:
    """
    Renders single codepoints into binary coverage bitmaps.

    No oversampling and no antialiasing: FreeType renders in mono mode and the
    result is thresholded, so pixel fonts stay crisp at their native size.
    """

    def __init__(self, threshold: int = 128):
        self.threshold = threshold

    def rasterize(self, face: FontFace, codepoint: int, pixel_size: float) -> GlyphBitmap:
        """
        Rasterize codepoint at pixel_size.

        Returns an empty bitmap (with a valid advance) for whitespace and
        glyphs without ink.

        Raises:
            GlyphNotFound: face has no glyph mapped to codepoint.
        """
        if not face.has_glyph(codepoint):
            raise GlyphNotFound(codepoint)

        font = face.at_size(pixel_size)
        ch = chr(codepoint)
        xadvance = int(round(font.getlength(ch)))

        if ch.isspace():
            return GlyphBitmap.empty(codepoint, xadvance)

        left, top, right, bottom = font.getbbox(ch, mode="1", anchor="ls")
        width = right - left
        height = bottom - top
        if width <= 0 or height <= 0:
            return GlyphBitmap.empty(codepoint, xadvance)

        image = Image.new("L", (width, height), 0)
        draw = ImageDraw.Draw(image)
        draw.fontmode = "1"
        draw.text((-left, -top), ch, fill=255, font=font, anchor="ls")

        coverage = np.array(image, dtype=np.uint8)
        coverage = np.where(coverage >= self.threshold, 255, 0).astype(np.uint8)

        rows = np.flatnonzero(coverage.any(axis=1))
        cols = np.flatnonzero(coverage.any(axis=0))
        if rows.size == 0:
            log.debug(f"[Baker] U+{codepoint:04X} has no ink at {pixel_size}px")
            return GlyphBitmap.empty(codepoint, xadvance)

        r0, r1 = int(rows[0]), int(rows[-1]) + 1
        c0, c1 = int(cols[0]), int(cols[-1]) + 1
        coverage = np.ascontiguousarray(coverage[r0:r1, c0:c1])

        ascent, _ = face.metrics(pixel_size)
        return GlyphBitmap(
            codepoint=codepoint,
            coverage=coverage,
            xoffset=left + c0,
            yoffset=ascent + top + r0,
            xadvance=xadvance,
        )


__all__ = ["GlyphBitmap", "FontFace", "GlyphRasterizer"]
