"""BitmapFont - baked font bound to GPU resources, with its tile batch."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from glyphbake import log
from glyphbake.baking.atlas import AtlasBitmap
from glyphbake.descriptor import FontDescriptor, GlyphMetrics
from glyphbake.visualization.platform.backends.base import (
    GPUTextureHandle,
    GraphicsBackend,
    ShaderHandle,
    TileBufferHandle,
)
from glyphbake.visualization.text.layout import TextLayout, TextRun
from glyphbake.visualization.text.tile_batch import TileBatchBuffer


class BitmapFont:
    """
    Runtime font.

    Owns the atlas texture and the tile batch (released by delete()); the
    shader is borrowed and shared between fonts. Changes to the batch set
    ``needs_buffer_update``; flush() re-uploads the vertex data once per change.
    """

    def __init__(
        self,
        texture: GPUTextureHandle,
        shader: ShaderHandle,
        descriptor: FontDescriptor,
        color: Tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0),
    ):
        self._texture: Optional[GPUTextureHandle] = texture
        self._shader = shader
        self._descriptor = descriptor
        self.color = color
        self.needs_buffer_update = False
        self._batch = TileBatchBuffer(on_change=self.mark_dirty)
        self._buffer: Optional[TileBufferHandle] = None

    @classmethod
    def from_atlas(
        cls,
        graphics: GraphicsBackend,
        shader: ShaderHandle,
        descriptor: FontDescriptor,
        atlas: AtlasBitmap,
        color: Tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0),
    ) -> "BitmapFont":
        """Upload atlas as a texture and bind it with descriptor."""
        return cls(upload_atlas(graphics, atlas), shader, descriptor, color)

    @property
    def descriptor(self) -> FontDescriptor:
        return self._descriptor

    @property
    def texture(self) -> Optional[GPUTextureHandle]:
        return self._texture

    @property
    def shader(self) -> ShaderHandle:
        return self._shader

    @property
    def batch(self) -> TileBatchBuffer:
        return self._batch

    @property
    def line_height(self) -> int:
        return self._descriptor.line_height

    def lookup(self, codepoint: int) -> Optional[GlyphMetrics]:
        """Glyph metrics, or None when the codepoint was not baked."""
        return self._descriptor.lookup(codepoint)

    def tile_count(self) -> int:
        return len(self._batch)

    def mark_dirty(self) -> None:
        self.needs_buffer_update = True

    # --- Text ---

    def add_text(self, text: str, x: float = 0.0, y: float = 0.0) -> TextRun:
        """Lay out text at (x, y) and append its tiles to the batch."""
        tiles = list(TextLayout(self._descriptor, text, x, y))
        self._batch.append(tiles)
        return TextRun(text=text, x=x, y=y, tiles=tiles)

    def rebuild(self, runs: Iterable[TextRun]) -> List[TextRun]:
        """Clear the batch and lay out runs again against the current descriptor.

        The runs' tiles are replaced in place, so callers keep their TextRun objects.
        """
        self._batch.clear()
        runs = list(runs)
        for run in runs:
            run.tiles = list(TextLayout(self._descriptor, run.text, run.x, run.y))
            self._batch.append(run.tiles)
        return runs

    def replace(self, texture: GPUTextureHandle, descriptor: FontDescriptor) -> None:
        """
        Swap in a re-baked atlas and descriptor.

        Destructive: the old texture is released and all tiles are dropped,
        since they reference the old atlas. Callers replay their runs with rebuild().
        """
        if self._texture is not None and self._texture is not texture:
            self._texture.delete()
        self._texture = texture
        self._descriptor = descriptor
        self._batch.clear()

    # --- GPU ---

    def flush(self, graphics: GraphicsBackend) -> bool:
        """
        Upload the batch if it changed since the last flush.

        Returns:
            True if data was uploaded.
        """
        if not self.needs_buffer_update:
            return False
        if self._buffer is None:
            self._buffer = graphics.create_tile_buffer()
        vertices, indices = self._batch.build(self._descriptor.atlas_width, self._descriptor.atlas_height)
        self._buffer.upload(vertices, indices)
        self.needs_buffer_update = False
        return True

    def draw(self, graphics: GraphicsBackend, projection) -> None:
        """Flush if needed and draw all tiles with the given projection matrix."""
        self.flush(graphics)
        if self._buffer is None or self._texture is None or len(self._batch) == 0:
            return

        graphics.set_blend(True)
        graphics.set_blend_func("src_alpha", "one_minus_src_alpha")

        self._shader.use()
        self._shader.set_uniform_matrix4("u_projection", projection)
        self._shader.set_uniform_vec4("u_color", self.color)
        self._texture.bind(0)
        self._shader.set_uniform_int("u_texture", 0)
        self._buffer.draw()
        self._shader.stop()

    def delete(self) -> None:
        """Release owned GPU resources. The shader is not touched."""
        if self._texture is not None:
            self._texture.delete()
            self._texture = None
        if self._buffer is not None:
            self._buffer.delete()
            self._buffer = None
        self._batch.clear()
        log.debug(f"[Font] released {self._descriptor.face}")


def upload_atlas(graphics: GraphicsBackend, atlas: AtlasBitmap) -> GPUTextureHandle:
    """Upload atlas as an RGBA texture (coverage in every channel)."""
    data, size = atlas.get_upload_data(channels=4)
    return graphics.create_texture(data, size, channels=4, mipmap=False, clamp=True)


__all__ = ["BitmapFont", "upload_atlas"]
