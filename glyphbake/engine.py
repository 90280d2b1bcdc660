"""
FontEngine - host-facing operations over the bake pipeline and the displayed font.

Usage:
    context = EngineContext(callback=print)
    engine = FontEngine(graphics, context)

    engine.import_font("MyFont.ttf", 20)
    run = engine.add_text("Hello", 10, 10)
    engine.rebake_font(24, 512, 512, 32, 96)   # runs are replayed on the new atlas
    engine.export_font("out/myfont")
    engine.render(800, 600)

A failed import, re-bake, export or load (including an invalid request) is
reported through the EngineContext, raised to the caller, and leaves the
displayed font and its text untouched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional

from glyphbake import log
from glyphbake.baking import BakeResult, FontBaker, FontFace
from glyphbake.errors import GlyphBakeError
from glyphbake.resources import ResourceLoader
from glyphbake.settings import BakeRequest, BakerSettings
from glyphbake.visualization.platform.backends.base import GraphicsBackend, ShaderHandle
from glyphbake.visualization.text import (
    TEXT_FRAGMENT_SHADER,
    TEXT_VERTEX_SHADER,
    BitmapFont,
    TextRun,
    pixel_projection,
    upload_atlas,
)


class EngineContext:
    """
    Host notification handle.

    Passed to exactly one FontEngine; the engine reports finished and failed
    operations through it.
    """

    def __init__(self, callback: Optional[Callable[[str], None]] = None):
        self.callback = callback
        self._engine: Optional["FontEngine"] = None

    @property
    def engine(self) -> Optional["FontEngine"]:
        return self._engine

    def attach(self, engine: "FontEngine") -> None:
        if self._engine is not None and self._engine is not engine:
            raise RuntimeError("EngineContext is already attached to another engine")
        self._engine = engine

    def detach(self) -> None:
        self._engine = None

    def notify(self, message: str) -> None:
        log.info(f"[Engine] {message}")
        if self.callback is not None:
            self.callback(message)


class FontEngine:
    """Owns the displayed BitmapFont slot, the recorded text runs and the last bake."""

    def __init__(
        self,
        graphics: GraphicsBackend,
        context: Optional[EngineContext] = None,
        settings: Optional[BakerSettings] = None,
        resources: Optional[ResourceLoader] = None,
        baker: Optional[FontBaker] = None,
    ):
        self._graphics = graphics
        self._context = context or EngineContext()
        self._context.attach(self)
        self._settings = settings or BakerSettings()
        self._resources = resources or ResourceLoader(self._settings.output_dir)
        self._baker = baker or FontBaker()

        self._shader: Optional[ShaderHandle] = None
        self._face: Optional[FontFace] = None
        self._last_result: Optional[BakeResult] = None
        self._display: Optional[BitmapFont] = None
        self._runs: List[TextRun] = []
        self._running = True

    # --- State ---

    @property
    def context(self) -> EngineContext:
        return self._context

    @property
    def font(self) -> Optional[BitmapFont]:
        """Displayed font, None until something was baked or loaded."""
        return self._display

    @property
    def last_result(self) -> Optional[BakeResult]:
        return self._last_result

    @property
    def runs(self) -> List[TextRun]:
        return list(self._runs)

    @property
    def is_running(self) -> bool:
        return self._running

    # --- Host operations ---

    def import_font(self, font_path: str, font_size: Optional[float] = None) -> BitmapFont:
        """Load a face and bake it with the default atlas parameters."""
        defaults = self._settings.request
        request = BakeRequest(
            font_path=str(font_path),
            font_size=font_size if font_size is not None else defaults.font_size,
            atlas_width=defaults.atlas_width,
            atlas_height=defaults.atlas_height,
            first_char=defaults.first_char,
            num_chars=defaults.num_chars,
            padding=defaults.padding,
        )
        self._run("import", request.validate)
        face = self._run("import", lambda: FontFace.load(request.font_path))
        result = self._run("import", lambda: self._baker.bake(request, face=face))
        self._face = face
        return self._show(result)

    def rebake_font(
        self,
        font_size: float,
        atlas_width: int,
        atlas_height: int,
        first_char: int,
        num_chars: int,
    ) -> BitmapFont:
        """Re-bake the imported face in memory and swap it into the displayed font."""
        if self._face is None:
            raise RuntimeError("No font imported")
        previous = self._last_result.request if self._last_result is not None else self._settings.request
        request = BakeRequest(
            font_path=self._face.path,
            font_size=font_size,
            atlas_width=atlas_width,
            atlas_height=atlas_height,
            first_char=first_char,
            num_chars=num_chars,
            padding=previous.padding,
        )
        self._run("rebake", request.validate)
        result = self._run("rebake", lambda: self._baker.bake(request, face=self._face))
        return self._show(result)

    def export_font(self, output_path: str | Path, fmt: str = "json"):
        """
        Write the last bake to <output_path>.json (or .fnt) and <output_path>.tga.

        Returns:
            (descriptor_path, atlas_path)
        """
        if self._last_result is None:
            raise RuntimeError("Nothing baked to export")
        result = self._last_result
        paths = self._run(
            "export",
            lambda: self._resources.save_font(str(output_path), result.descriptor, result.atlas, fmt),
        )
        self._context.notify(f"exported {paths[0]}")
        return paths

    def load_font(self, output_name: str) -> BitmapFont:
        """Load a previously exported font and display it."""
        descriptor, atlas = self._run("load", lambda: self._resources.load_font(output_name))
        request = BakeRequest(
            font_path="",
            font_size=descriptor.size,
            atlas_width=descriptor.atlas_width,
            atlas_height=descriptor.atlas_height,
            first_char=min(descriptor.glyphs, default=0),
            num_chars=(max(descriptor.glyphs) - min(descriptor.glyphs) + 1) if len(descriptor) else 0,
            padding=descriptor.padding,
        )
        return self._show(BakeResult(descriptor=descriptor, atlas=atlas, request=request))

    # --- Text ---

    def add_text(self, text: str, x: float = 0.0, y: float = 0.0) -> TextRun:
        """Record a text run; its tiles are added to the displayed font if there is one."""
        if self._display is not None:
            run = self._display.add_text(text, x, y)
        else:
            run = TextRun(text=text, x=x, y=y)
        self._runs.append(run)
        return run

    def remove_text(self, run: TextRun) -> None:
        """Drop a run and rebuild the batch from the remaining runs."""
        remaining = [r for r in self._runs if r is not run]
        if len(remaining) == len(self._runs):
            raise ValueError("Text run does not belong to this engine")
        self._runs = remaining
        if self._display is not None:
            self._display.rebuild(self._runs)

    def clear_text(self) -> None:
        self._runs = []
        if self._display is not None:
            self._display.batch.clear()

    # --- Frame ---

    def render(self, viewport_w: int, viewport_h: int) -> None:
        if self._display is None or viewport_w <= 0 or viewport_h <= 0:
            return
        self._graphics.set_viewport(0, 0, viewport_w, viewport_h)
        self._display.draw(self._graphics, pixel_projection(viewport_w, viewport_h))

    def shutdown(self) -> None:
        if not self._running:
            return
        if self._display is not None:
            self._display.delete()
            self._display = None
        if self._shader is not None:
            self._shader.delete()
            self._shader = None
        self._running = False
        self._context.detach()

    # --- Internals ---

    def _run(self, operation: str, action):
        try:
            return action()
        except (GlyphBakeError, ValueError) as e:
            log.warn(e, f"[Engine] {operation} failed")
            self._context.notify(f"{operation} failed: {e}")
            raise

    def _ensure_shader(self) -> ShaderHandle:
        if self._shader is None:
            self._shader = self._graphics.create_shader(TEXT_VERTEX_SHADER, TEXT_FRAGMENT_SHADER)
        return self._shader

    def _show(self, result: BakeResult) -> BitmapFont:
        """Put a bake result on screen, reusing the display slot if it is populated."""
        texture = upload_atlas(self._graphics, result.atlas)
        if self._display is None:
            self._display = BitmapFont(texture, self._ensure_shader(), result.descriptor)
        else:
            self._display.replace(texture, result.descriptor)
        self._display.rebuild(self._runs)
        self._last_result = result
        self._context.notify(
            f"displaying {result.descriptor.face} {result.descriptor.size:g}px "
            f"({len(result.descriptor)} glyphs)"
        )
        return self._display


__all__ = ["EngineContext", "FontEngine"]
