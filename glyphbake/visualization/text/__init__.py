"""Runtime bitmap text: fonts, layout and batched tiles."""

from glyphbake.visualization.text.layout import Tile, TextRun, TextLayout, layout, measure_text
from glyphbake.visualization.text.tile_batch import TileBatchBuffer
from glyphbake.visualization.text.bitmap_font import BitmapFont, upload_atlas
from glyphbake.visualization.text.shaders import TEXT_VERTEX_SHADER, TEXT_FRAGMENT_SHADER, pixel_projection

__all__ = [
    "Tile",
    "TextRun",
    "TextLayout",
    "layout",
    "measure_text",
    "TileBatchBuffer",
    "BitmapFont",
    "upload_atlas",
    "TEXT_VERTEX_SHADER",
    "TEXT_FRAGMENT_SHADER",
    "pixel_projection",
]
