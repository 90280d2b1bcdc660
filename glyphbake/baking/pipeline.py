"""
FontBaker - rasterize a codepoint range, pack it, and assemble atlas + descriptor.

Usage:
    result = FontBaker().bake(BakeRequest("font.ttf", font_size=20))

    # Persist
    result.save("out", "myfont")

    # Or hand over in memory
    texture = graphics.create_texture(*result.atlas.get_upload_data(), channels=4)
    font = BitmapFont(texture, shader, result.descriptor)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from glyphbake import log
from glyphbake.baking.atlas import AtlasBitmap
from glyphbake.baking.packer import ShelfPacker
from glyphbake.baking.rasterizer import FontFace, GlyphBitmap, GlyphRasterizer
from glyphbake.descriptor import FontDescriptor, GlyphMetrics
from glyphbake.errors import GlyphNotFound
from glyphbake.settings import BakeRequest


@dataclass
class BakeResult:
    """Outcome of one bake. Can be saved and/or used in memory any number of times."""

    descriptor: FontDescriptor
    atlas: AtlasBitmap
    request: BakeRequest
    skipped: List[int] = field(default_factory=list)

    @property
    def output_name(self) -> str:
        return Path(self.descriptor.page_file).stem

    def save(self, directory: str | Path = ".", output_name: Optional[str] = None, fmt: str = "json") -> Tuple[Path, Path]:
        """
        Write <output_name>.json (or .fnt) and <output_name>.tga into directory.

        Returns:
            (descriptor_path, atlas_path)
        """
        from glyphbake.resources import ResourceLoader

        name = output_name or self.output_name
        return ResourceLoader(directory).save_font(name, self.descriptor, self.atlas, fmt)


class FontBaker:
    """Bakes a font face into an AtlasBitmap and a FontDescriptor."""

    def __init__(self, rasterizer: Optional[GlyphRasterizer] = None):
        self.rasterizer = rasterizer or GlyphRasterizer()

    def bake(self, request: BakeRequest, output_name: str = "", face: Optional[FontFace] = None) -> BakeResult:
        """
        Run the whole bake.

        Args:
            request: Bake parameters.
            output_name: Base name of persisted files; defaults to the font file stem.
            face: Already loaded face for request.font_path (skips reading the file).

        Raises:
            ValueError: Request is invalid.
            FontLoadError: Font file is unreadable or not a font.
            PackingOverflow: Glyphs do not fit into the requested atlas.
        """
        request.validate()
        if face is None:
            face = FontFace.load(request.font_path)
        output_name = output_name or Path(request.font_path).stem

        bitmaps, skipped = self._rasterize_range(face, request)

        packer = ShelfPacker(request.padding)
        rects = packer.pack(bitmaps, request.atlas_width, request.atlas_height)

        atlas = AtlasBitmap.empty(request.atlas_width, request.atlas_height)
        glyphs = {}
        for bitmap, rect in zip(bitmaps, rects):
            atlas.blit(bitmap.coverage, rect.x, rect.y)
            glyphs[bitmap.codepoint] = GlyphMetrics(
                x=rect.x,
                y=rect.y,
                width=rect.width,
                height=rect.height,
                xoffset=bitmap.xoffset,
                yoffset=bitmap.yoffset,
                xadvance=bitmap.xadvance,
            )

        ascent, descent = face.metrics(request.font_size)
        descriptor = FontDescriptor(
            face=face.name,
            size=float(request.font_size),
            atlas_width=request.atlas_width,
            atlas_height=request.atlas_height,
            line_height=ascent + descent,
            base=ascent,
            glyphs=glyphs,
            page_file=f"{Path(output_name).name}.tga",
            padding=request.padding,
        )

        log.info(
            f"[Baker] {descriptor.face} {request.font_size}px: {len(glyphs)} glyphs "
            f"in {request.atlas_width}x{request.atlas_height}, {len(skipped)} skipped"
        )
        return BakeResult(descriptor=descriptor, atlas=atlas, request=request, skipped=skipped)

    def _rasterize_range(self, face: FontFace, request: BakeRequest) -> Tuple[List[GlyphBitmap], List[int]]:
        bitmaps: List[GlyphBitmap] = []
        skipped: List[int] = []
        for codepoint in request.codepoints():
            try:
                bitmaps.append(self.rasterizer.rasterize(face, codepoint, request.font_size))
            except GlyphNotFound:
                skipped.append(codepoint)
        if skipped:
            log.debug(f"[Baker] no glyph for {len(skipped)} codepoints, first U+{skipped[0]:04X}")
        return bitmaps, skipped


def bake_font(
    font_path: str,
    output_name: str = "",
    font_size: float = 32.0,
    atlas_width: int = 512,
    atlas_height: int = 512,
    first_char: int = 32,
    num_chars: int = 96,
    padding: int = 1,
) -> BakeResult:
    """Bake with explicit parameters; see FontBaker.bake."""
    request = BakeRequest(
        font_path=str(font_path),
        font_size=font_size,
        atlas_width=atlas_width,
        atlas_height=atlas_height,
        first_char=first_char,
        num_chars=num_chars,
        padding=padding,
    )
    return FontBaker().bake(request, output_name)


__all__ = ["BakeResult", "FontBaker", "bake_font"]
