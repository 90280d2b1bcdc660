#!/usr/bin/env python3
"""
Interactive font preview.

Keys:
    Up / Down   re-bake one pixel larger / smaller
    E           export current bake next to the settings output dir
    R           reload the last export
    Esc         quit
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from glyphbake import log
from glyphbake.engine import EngineContext, FontEngine
from glyphbake.errors import GlyphBakeError
from glyphbake.settings import BakerSettings
from glyphbake.visualization.platform.backends.base import Action, Key


class PreviewApp:
    """Hosts a FontEngine in a window and re-bakes on key presses."""

    def __init__(self, window_backend, graphics, settings: BakerSettings, font_path: str, font_size: float):
        self._window_backend = window_backend
        self._settings = settings
        width, height = settings.preview_window
        self._window = window_backend.create_window(width, height, "glyphbake")
        self._window.set_key_callback(self._on_key)
        self._status = ""

        self._engine = FontEngine(graphics, EngineContext(callback=self._on_message), settings)
        self._graphics = graphics
        self._font_size = font_size
        self._output_name = "preview"
        self._busy = False

        self._engine.import_font(font_path, font_size)
        self._engine.add_text(settings.preview_text, 16, 16)
        self._update_title()

    def _on_message(self, message: str) -> None:
        self._status = message

    def _update_title(self) -> None:
        font = self._engine.font
        if font is not None:
            self._window.set_title(f"glyphbake - {font.descriptor.face} {self._font_size:g}px - {self._status}")

    def _rebake(self, size: float) -> None:
        request = self._engine.last_result.request
        try:
            self._engine.rebake_font(
                size, request.atlas_width, request.atlas_height, request.first_char, request.num_chars
            )
        except (GlyphBakeError, ValueError) as e:
            log.warn(f"[Preview] keeping {self._font_size:g}px: {e}")
            return
        self._font_size = size
        self._update_title()

    def _on_key(self, _window, key: Key, _scancode, action: Action, _mods) -> None:
        # Key repeat would queue bakes faster than they are displayed
        if action != Action.PRESS or self._busy:
            return
        self._busy = True
        try:
            if key == Key.ESCAPE:
                self._window.set_should_close(True)
            elif key == Key.UP:
                self._rebake(self._font_size + 1)
            elif key == Key.DOWN and self._font_size > 1:
                self._rebake(self._font_size - 1)
            elif key == Key.E:
                self._engine.export_font(self._output_name)
            elif key == Key.R:
                self._engine.load_font(self._output_name)
                self._update_title()
        except GlyphBakeError as e:
            log.warn(f"[Preview] {e}")
        finally:
            self._busy = False

    def run(self) -> None:
        self._graphics.ensure_ready()
        while not self._window.should_close():
            width, height = self._window.framebuffer_size()
            self._graphics.set_viewport(0, 0, width, height)
            self._graphics.clear_color((0.1, 0.1, 0.12, 1.0))
            self._engine.render(width, height)
            self._window.swap_buffers()
            self._window_backend.poll_events()

        self._engine.shutdown()
        self._window.close()
        self._window_backend.terminate()


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="glyphbake-preview", description="Preview a baked font")
    p.add_argument("font", help="TrueType/OpenType font file")
    p.add_argument("--size", type=float, default=None, help="pixel size")
    p.add_argument("--settings", default=None, help="settings JSON with defaults")
    p.add_argument("-v", "--verbose", action="store_true")
    args = p.parse_args(argv)
    log.configure("DEBUG" if args.verbose else "INFO")

    from glyphbake.visualization.platform.backends.glfw import GLFWWindowBackend
    from glyphbake.visualization.platform.backends.opengl import OpenGLGraphicsBackend

    settings = BakerSettings.load(args.settings)
    size = args.size if args.size is not None else settings.request.font_size

    window_backend = GLFWWindowBackend()
    try:
        app = PreviewApp(window_backend, OpenGLGraphicsBackend(), settings, args.font, size)
    except (GlyphBakeError, ValueError) as e:
        log.error(f"[Preview] {type(e).__name__}: {e}")
        window_backend.terminate()
        return 1
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
