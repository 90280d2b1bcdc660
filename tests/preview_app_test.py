import pytest

from glyphbake.apps.preview import PreviewApp
from glyphbake.settings import BakeRequest, BakerSettings
from glyphbake.visualization.platform.backends.base import Action, BackendWindow, Key, WindowBackend


class FakeWindow(BackendWindow):
    def __init__(self):
        self.key_callback = None
        self.title = ""
        self.closing = False
        self.frames = 0

    def close(self):
        pass

    def should_close(self):
        return self.closing or self.frames >= 2

    def make_current(self):
        pass

    def swap_buffers(self):
        self.frames += 1

    def framebuffer_size(self):
        return (320, 200)

    def set_should_close(self, flag):
        self.closing = flag

    def set_key_callback(self, callback):
        self.key_callback = callback

    def set_title(self, title):
        self.title = title

    def press(self, key, action=Action.PRESS):
        self.key_callback(self, key, 0, action, 0)


class FakeWindowBackend(WindowBackend):
    def __init__(self):
        self.window = FakeWindow()
        self.terminated = False

    def create_window(self, width, height, title, share=None):
        return self.window

    def poll_events(self):
        pass

    def terminate(self):
        self.terminated = True


@pytest.fixture
def app_parts(graphics, font_path, tmp_path):
    backend = FakeWindowBackend()
    settings = BakerSettings(request=BakeRequest(font_size=16), output_dir=str(tmp_path), preview_text="Hi You")
    app = PreviewApp(backend, graphics, settings, font_path, 16)
    return app, backend, tmp_path


def test_starts_with_preview_text(app_parts):
    app, backend, _ = app_parts
    assert app._engine.font.tile_count() == 5
    assert "Test Blocks 16px" in backend.window.title


def test_up_and_down_rebake(app_parts):
    app, backend, _ = app_parts
    backend.window.press(Key.UP)
    assert app._engine.font.descriptor.size == 17
    backend.window.press(Key.DOWN)
    backend.window.press(Key.DOWN)
    assert app._engine.font.descriptor.size == 15


def test_repeat_is_ignored(app_parts):
    app, backend, _ = app_parts
    backend.window.press(Key.UP, Action.REPEAT)
    assert app._engine.font.descriptor.size == 16


def test_export_and_reload(app_parts):
    app, backend, tmp_path = app_parts
    backend.window.press(Key.E)
    assert (tmp_path / "preview.json").is_file()

    backend.window.press(Key.R)
    assert app._engine.font.descriptor.page_file == "preview.tga"


def test_reload_without_export_keeps_font(app_parts):
    app, backend, _ = app_parts
    descriptor = app._engine.font.descriptor
    backend.window.press(Key.R)
    assert app._engine.font.descriptor is descriptor


def test_run_renders_until_close(app_parts, graphics):
    app, backend, _ = app_parts
    app.run()

    assert backend.window.frames == 2
    assert backend.terminated
    assert not app._engine.is_running
    assert graphics.viewport == (0, 0, 320, 200)


def test_unbound_key_does_nothing(app_parts):
    app, backend, tmp_path = app_parts
    descriptor = app._engine.font.descriptor
    backend.window.press(Key.UNKNOWN)

    assert app._engine.font.descriptor is descriptor
    assert not backend.window.closing
    assert not (tmp_path / "preview.json").exists()


def test_keys_match_glfw_codes():
    assert {k.name: int(k) for k in Key} == {
        "UNKNOWN": -1, "E": 69, "R": 82, "ESCAPE": 256, "DOWN": 264, "UP": 265,
    }
