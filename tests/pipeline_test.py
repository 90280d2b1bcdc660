import numpy as np
import pytest

from glyphbake.baking import FontBaker, FontFace, GlyphRasterizer, bake_font
from glyphbake.errors import FontLoadError, PackingOverflow
from glyphbake.settings import BakeRequest
from glyphbake.visualization.text import layout


BAKED = [ord(c) for c in " AHYiou"]


def test_bake_printable_ascii(font_path):
    result = FontBaker().bake(BakeRequest(font_path, font_size=20, first_char=32, num_chars=96))
    d = result.descriptor

    assert sorted(d.glyphs) == BAKED
    assert len(result.skipped) == 96 - len(BAKED)
    assert (d.atlas_width, d.atlas_height) == (512, 512)
    assert d.face == "Test Blocks"
    assert d.size == 20.0
    assert d.page_file == "blocks.tga"
    assert d.line_height > 0 and 0 < d.base <= d.line_height
    assert d.lookup(ord("H")).xadvance == 12
    assert d.lookup(ord(" ")).is_empty


def test_hi_produces_two_tiles(font_path):
    result = bake_font(font_path, font_size=20)
    assert len(layout(result.descriptor, "Hi").tiles()) == 2


def test_bake_is_deterministic(font_path):
    request = BakeRequest(font_path, font_size=17)
    a = FontBaker().bake(request)
    b = FontBaker().bake(request)

    assert a.descriptor == b.descriptor
    assert np.array_equal(a.atlas.data, b.atlas.data)


def test_empty_range(font_path):
    result = FontBaker().bake(BakeRequest(font_path, num_chars=0))
    assert len(result.descriptor) == 0
    assert not result.atlas.data.any()


def test_tiny_atlas_overflows(font_path):
    with pytest.raises(PackingOverflow) as info:
        FontBaker().bake(BakeRequest(font_path, font_size=20, atlas_width=16, atlas_height=16))
    assert info.value.placed < info.value.total
    assert info.value.atlas_size == (16, 16)


def test_missing_font_file(tmp_path):
    with pytest.raises(FontLoadError):
        FontBaker().bake(BakeRequest(str(tmp_path / "missing.ttf")))


def test_invalid_request(font_path):
    with pytest.raises(ValueError):
        FontBaker().bake(BakeRequest(font_path, font_size=0))


def test_atlas_holds_glyph_coverage_and_nothing_else(font_path):
    request = BakeRequest(font_path, font_size=20, padding=2)
    result = FontBaker().bake(request)
    face = FontFace.load(font_path)
    rasterizer = GlyphRasterizer()

    ink = 0
    for codepoint, g in result.descriptor.glyphs.items():
        expected = rasterizer.rasterize(face, codepoint, 20).coverage
        region = result.atlas.data[g.y:g.y + g.height, g.x:g.x + g.width]
        assert np.array_equal(region, expected.reshape(g.height, g.width))
        ink += int(np.count_nonzero(expected))

    assert int(np.count_nonzero(result.atlas.data)) == ink


def test_glyph_rects_respect_padding(font_path):
    result = FontBaker().bake(BakeRequest(font_path, font_size=24, padding=3))
    for g in result.descriptor.glyphs.values():
        if g.is_empty:
            continue
        assert g.x >= 3 and g.y >= 3
        assert g.x + g.width + 3 <= 512


def test_save_writes_descriptor_and_atlas(font_path, tmp_path):
    result = bake_font(font_path, font_size=20)
    descriptor_path, atlas_path = result.save(tmp_path, "ui_font")

    assert descriptor_path.name == "ui_font.json"
    assert atlas_path.name == "ui_font.tga"
    assert descriptor_path.is_file() and atlas_path.is_file()
