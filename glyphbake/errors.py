"""Error kinds raised by the baking pipeline, descriptor codecs and resource loading."""

from __future__ import annotations

from typing import Tuple


class GlyphBakeError(Exception):
    """Base class for all glyphbake errors."""


class FontLoadError(GlyphBakeError):
    """Raised when font bytes cannot be read or parsed as a font face."""


class GlyphNotFound(GlyphBakeError):
    """Raised when a face has no outline for a codepoint."""

    def __init__(self, codepoint: int):
        super().__init__(f"No glyph for codepoint U+{codepoint:04X}")
        self.codepoint = codepoint


class PackingOverflow(GlyphBakeError):
    """
    Raised when glyphs do not fit into the requested atlas.

    Attributes:
        placed: Number of glyphs placed before the overflow.
        total: Number of glyphs that were requested to be placed.
        atlas_size: (width, height) of the atlas that overflowed.
    """

    def __init__(self, placed: int, total: int, atlas_size: Tuple[int, int]):
        width, height = atlas_size
        super().__init__(
            f"Atlas {width}x{height} overflowed after placing {placed} of {total} glyphs"
        )
        self.placed = placed
        self.total = total
        self.atlas_size = atlas_size


class MalformedDescriptor(GlyphBakeError):
    """Raised when a font descriptor is missing required fields or is not parseable."""


class ResourceLoadError(GlyphBakeError):
    """Raised when a file or texture collaborator fails to read or write."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path


__all__ = [
    "GlyphBakeError",
    "FontLoadError",
    "GlyphNotFound",
    "PackingOverflow",
    "MalformedDescriptor",
    "ResourceLoadError",
]
