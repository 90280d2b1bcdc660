"""Font baking: rasterization, shelf packing and atlas assembly."""

from glyphbake.baking.atlas import AtlasBitmap
from glyphbake.baking.rasterizer import FontFace, GlyphBitmap, GlyphRasterizer
from glyphbake.baking.packer import PackedRect, ShelfPacker
from glyphbake.baking.pipeline import BakeResult, FontBaker, bake_font

__all__ = [
    "AtlasBitmap",
    "FontFace",
    "GlyphBitmap",
    "GlyphRasterizer",
    "PackedRect",
    "ShelfPacker",
    "BakeResult",
    "FontBaker",
    "bake_font",
]
