import numpy as np

from glyphbake.descriptor import FontDescriptor, GlyphMetrics
from glyphbake.visualization.text import TextLayout, TileBatchBuffer, layout, measure_text


def make_descriptor(with_space=True):
    glyphs = {
        ord("H"): GlyphMetrics(x=1, y=1, width=8, height=10, xoffset=1, yoffset=3, xadvance=10),
        ord("i"): GlyphMetrics(x=11, y=1, width=2, height=10, xoffset=1, yoffset=3, xadvance=4),
        ord("Y"): GlyphMetrics(x=15, y=1, width=8, height=10, xoffset=1, yoffset=3, xadvance=10),
        ord("o"): GlyphMetrics(x=25, y=1, width=6, height=7, xoffset=1, yoffset=6, xadvance=8),
        ord("u"): GlyphMetrics(x=33, y=1, width=6, height=7, xoffset=1, yoffset=6, xadvance=8),
    }
    if with_space:
        glyphs[ord(" ")] = GlyphMetrics(x=0, y=0, width=0, height=0, xoffset=0, yoffset=0, xadvance=5)
    return FontDescriptor(
        face="Layout",
        size=16.0,
        atlas_width=64,
        atlas_height=32,
        line_height=16,
        base=13,
        glyphs=glyphs,
    )


def test_single_line_positions():
    tiles = layout(make_descriptor(), "Hi", 100, 50).tiles()

    assert [t.codepoint for t in tiles] == [ord("H"), ord("i")]
    h, i = tiles
    assert (h.x, h.y) == (101, 53)
    assert (i.x, i.y) == (100 + 10 + 1, 53)
    assert (h.src_x, h.src_y, h.width, h.height) == (1, 1, 8, 10)


def test_newline_returns_to_origin():
    tiles = layout(make_descriptor(), "Hi\nYou", 10, 20).tiles()

    assert len(tiles) == 5
    h, y = tiles[0], tiles[2]
    assert y.codepoint == ord("Y")
    assert y.x == h.x
    assert y.y == h.y + 16


def test_space_advances_without_tile():
    tiles = layout(make_descriptor(), "H H").tiles()

    assert len(tiles) == 2
    assert tiles[1].x - tiles[0].x == 10 + 5


def test_missing_glyph_uses_space_advance():
    tiles = layout(make_descriptor(), "H?H").tiles()

    assert len(tiles) == 2
    assert tiles[1].x - tiles[0].x == 10 + 5


def test_missing_glyph_without_space_glyph_advances_nothing():
    tiles = layout(make_descriptor(with_space=False), "H?H").tiles()
    assert tiles[1].x - tiles[0].x == 10


def test_carriage_return_ignored():
    a = layout(make_descriptor(), "Hi\r\nYou").tiles()
    b = layout(make_descriptor(), "Hi\nYou").tiles()
    assert a == b


def test_layout_is_restartable():
    text_layout = TextLayout(make_descriptor(), "You Hi", 3, 4)
    assert list(text_layout) == list(text_layout)


def test_empty_text():
    text_layout = layout(make_descriptor(), "")
    assert text_layout.tiles() == []
    assert text_layout.size == (0, 0)


def test_measure_text():
    d = make_descriptor()
    # H spans x 1..9, i spans 11..13; both span y 3..13
    assert measure_text(d, "Hi") == (12, 10)
    # u ends at 18 + 1 + 6, second line bottoms out at 16 + 13
    assert measure_text(d, "Hi\nYou") == (24, 26)


def test_batch_build_vertices_and_indices():
    d = make_descriptor()
    batch = TileBatchBuffer()
    batch.append(layout(d, "Hi", 10, 20))
    vertices, indices = batch.build(d.atlas_width, d.atlas_height)

    assert vertices.shape == (8, 4) and vertices.dtype == np.float32
    assert indices.dtype == np.uint32
    assert list(indices) == [0, 1, 2, 2, 1, 3, 4, 5, 6, 6, 5, 7]

    # H: screen (11, 23)-(19, 33), atlas (1, 1)-(9, 11)
    np.testing.assert_allclose(vertices[0], [11, 23, 1 / 64, 1 / 32])
    np.testing.assert_allclose(vertices[3], [19, 33, 9 / 64, 11 / 32])


def test_batch_append_reports_slices_and_changes():
    changes = []
    batch = TileBatchBuffer(on_change=lambda: changes.append(len(batch)))
    d = make_descriptor()

    assert batch.append(layout(d, "Hi")) == (0, 2)
    assert batch.append(layout(d, "You")) == (2, 5)
    batch.clear()

    assert len(batch) == 0
    assert changes == [2, 5, 0]


def test_empty_batch_builds_empty_arrays():
    vertices, indices = TileBatchBuffer().build(64, 64)
    assert vertices.shape == (0, 4)
    assert indices.shape == (0,)
