import dataclasses

import numpy as np
import pytest

from glyphbake.engine import EngineContext, FontEngine
from glyphbake.errors import FontLoadError, PackingOverflow, ResourceLoadError
from glyphbake.settings import BakeRequest, BakerSettings


@pytest.fixture
def messages():
    return []


@pytest.fixture
def engine(graphics, messages, tmp_path):
    settings = BakerSettings(request=BakeRequest(font_size=20), output_dir=str(tmp_path))
    return FontEngine(graphics, EngineContext(callback=messages.append), settings)


def test_import_then_add_text(engine, font_path, messages):
    font = engine.import_font(font_path)
    run = engine.add_text("Hi", 10, 10)

    assert engine.font is font
    assert font.descriptor.size == 20
    assert font.tile_count() == 2
    assert len(run.tiles) == 2
    assert any("displaying Test Blocks 20px" in m for m in messages)


def test_text_added_before_import_is_laid_out_on_import(engine, font_path):
    run = engine.add_text("You", 0, 0)
    assert run.tiles == []

    engine.import_font(font_path)
    assert len(run.tiles) == 3
    assert engine.font.tile_count() == 3


def test_rebake_replays_runs(engine, graphics, font_path):
    engine.import_font(font_path)
    run = engine.add_text("Hi\nYou", 8, 8)
    small_height = run.tiles[0].height
    first_texture = engine.font.texture
    font = engine.font

    engine.rebake_font(40, 512, 512, 32, 96)

    assert engine.font is font
    assert first_texture.deleted
    assert engine.font.descriptor.size == 40
    assert len(run.tiles) == 5
    assert run.tiles[0].height > small_height
    assert engine.font.tile_count() == 5
    assert len(graphics.shaders) == 1


def test_failed_rebake_keeps_displayed_font(engine, font_path, messages):
    engine.import_font(font_path)
    engine.add_text("Hi")
    descriptor = engine.font.descriptor
    texture = engine.font.texture

    with pytest.raises(PackingOverflow):
        engine.rebake_font(20, 8, 8, 32, 96)

    assert engine.font.descriptor is descriptor
    assert engine.font.texture is texture
    assert not texture.deleted
    assert engine.font.tile_count() == 2
    assert messages[-1].startswith("rebake failed")


def test_invalid_rebake_parameters(engine, font_path, messages):
    engine.import_font(font_path)
    descriptor = engine.font.descriptor

    with pytest.raises(ValueError):
        engine.rebake_font(0, 512, 512, 32, 96)

    assert messages[-1].startswith("rebake failed")
    assert engine.font.descriptor is descriptor


def test_invalid_import_request_notifies(graphics, messages, tmp_path, font_path):
    settings = BakerSettings(request=BakeRequest(atlas_width=0), output_dir=str(tmp_path))
    engine = FontEngine(graphics, EngineContext(callback=messages.append), settings)

    with pytest.raises(ValueError):
        engine.import_font(font_path)

    assert len(messages) == 1
    assert messages[0].startswith("import failed")
    assert engine.font is None


def test_unwritable_text_export_notifies(engine, font_path, messages):
    engine.import_font(font_path)
    result = engine.last_result
    result.descriptor = dataclasses.replace(result.descriptor, face='Say "hi"')

    with pytest.raises(ValueError):
        engine.export_font("quoted", fmt="fnt")
    assert messages[-1].startswith("export failed")


def test_rebake_before_import(engine):
    with pytest.raises(RuntimeError):
        engine.rebake_font(20, 512, 512, 32, 96)


def test_import_missing_font(engine, tmp_path, messages):
    with pytest.raises(FontLoadError):
        engine.import_font(str(tmp_path / "missing.ttf"))
    assert engine.font is None
    assert messages[-1].startswith("import failed")


def test_export_then_load(engine, font_path, tmp_path):
    engine.import_font(font_path)
    baked = engine.last_result

    descriptor_path, atlas_path = engine.export_font("exported")
    assert descriptor_path == tmp_path / "exported.json"
    assert atlas_path == tmp_path / "exported.tga"

    font = engine.load_font("exported")
    assert font.descriptor.glyphs == baked.descriptor.glyphs
    assert font.descriptor.page_file == "exported.tga"
    assert np.array_equal(engine.last_result.atlas.data, baked.atlas.data)
    assert engine.last_result.request.first_char == 32


def test_export_fnt(engine, font_path, tmp_path):
    engine.import_font(font_path)
    descriptor_path, _ = engine.export_font("exported", fmt="fnt")

    assert descriptor_path.suffix == ".fnt"
    assert engine.load_font("exported").descriptor.glyphs == engine.last_result.descriptor.glyphs


def test_export_before_bake(engine):
    with pytest.raises(RuntimeError):
        engine.export_font("nothing")


def test_load_missing_export(engine, messages):
    with pytest.raises(ResourceLoadError):
        engine.load_font("never_written")
    assert engine.font is None
    assert messages[-1].startswith("load failed")


def test_remove_text(engine, font_path):
    engine.import_font(font_path)
    first = engine.add_text("Hi", 0, 0)
    second = engine.add_text("You", 0, 40)

    engine.remove_text(first)

    assert engine.runs == [second]
    assert engine.font.tile_count() == 3
    with pytest.raises(ValueError):
        engine.remove_text(first)


def test_clear_text(engine, font_path):
    engine.import_font(font_path)
    engine.add_text("Hi")
    engine.clear_text()

    assert engine.runs == []
    assert engine.font.tile_count() == 0


def test_render_draws_batch(engine, graphics, font_path):
    engine.import_font(font_path)
    engine.add_text("Hi")
    engine.render(640, 480)

    assert graphics.viewport == (0, 0, 640, 480)
    assert graphics.buffers[0].draws == 1


def test_render_without_font_is_noop(engine, graphics):
    engine.render(640, 480)
    assert graphics.viewport is None


def test_shutdown_releases_everything(engine, graphics, font_path):
    engine.import_font(font_path)
    engine.add_text("Hi")
    engine.render(100, 100)
    texture = engine.font.texture

    engine.shutdown()

    assert not engine.is_running
    assert engine.font is None
    assert texture.deleted
    assert graphics.shaders[0].deleted
    assert engine.context.engine is None
    engine.shutdown()


def test_context_serves_one_engine(graphics):
    context = EngineContext()
    engine = FontEngine(graphics, context)

    assert context.engine is engine
    with pytest.raises(RuntimeError):
        FontEngine(graphics, context)

    engine.shutdown()
    assert FontEngine(graphics, context).context is context
