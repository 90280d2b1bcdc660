import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from glyphbake.visualization.platform.backends.base import (
    GPUTextureHandle,
    GraphicsBackend,
    ShaderHandle,
    TileBufferHandle,
)


UNITS_PER_EM = 1000

# name -> (codepoint, advance, rectangles in font units)
BLOCK_GLYPHS = {
    ".notdef": (None, 500, [(50, 0, 450, 700)]),
    "space": (0x20, 250, []),
    "A": (0x41, 600, [(100, 0, 200, 700), (400, 0, 500, 700), (200, 600, 400, 700), (200, 300, 400, 400)]),
    "H": (0x48, 600, [(100, 0, 200, 700), (400, 0, 500, 700), (200, 300, 400, 400)]),
    "Y": (0x59, 600, [(250, 0, 350, 400), (100, 400, 200, 700), (400, 400, 500, 700)]),
    "i": (0x69, 300, [(100, 0, 200, 500), (100, 600, 200, 700)]),
    "o": (0x6F, 500, [(100, 0, 400, 100), (100, 400, 400, 500), (100, 100, 200, 400), (300, 100, 400, 400)]),
    "u": (0x75, 500, [(100, 0, 400, 100), (100, 100, 200, 500), (300, 100, 400, 500)]),
}


def _rect_glyph(rects):
    pen = TTGlyphPen(None)
    for x0, y0, x1, y1 in rects:
        pen.moveTo((x0, y0))
        pen.lineTo((x0, y1))
        pen.lineTo((x1, y1))
        pen.lineTo((x1, y0))
        pen.closePath()
    return pen.glyph()


def build_block_font(path, family="Test Blocks"):
    """Write a small TrueType font whose glyphs are unions of rectangles."""
    order = list(BLOCK_GLYPHS)
    fb = FontBuilder(UNITS_PER_EM, isTTF=True)
    fb.setupGlyphOrder(order)
    fb.setupCharacterMap({cp: name for name, (cp, _, _) in BLOCK_GLYPHS.items() if cp is not None})
    fb.setupGlyf({name: _rect_glyph(rects) for name, (_, _, rects) in BLOCK_GLYPHS.items()})

    fb.setupHorizontalMetrics({
        name: (advance, min((r[0] for r in rects), default=0))
        for name, (_, advance, rects) in BLOCK_GLYPHS.items()
    })
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": family, "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    fb.save(str(path))
    return path


@pytest.fixture(scope="session")
def font_path(tmp_path_factory):
    return str(build_block_font(tmp_path_factory.mktemp("fonts") / "blocks.ttf"))


# --- Recording graphics backend ---


class RecordingTexture(GPUTextureHandle):
    def __init__(self, data, size, channels):
        self.data = data
        self.size = size
        self.channels = channels
        self.bound_units = []
        self.deleted = False

    def bind(self, unit: int = 0):
        self.bound_units.append(unit)

    def delete(self):
        self.deleted = True


class RecordingShader(ShaderHandle):
    def __init__(self, vertex_source, fragment_source):
        self.vertex_source = vertex_source
        self.fragment_source = fragment_source
        self.uniforms = {}
        self.in_use = False
        self.deleted = False

    def use(self):
        self.in_use = True

    def stop(self):
        self.in_use = False

    def delete(self):
        self.deleted = True

    def set_uniform_matrix4(self, name, matrix):
        self.uniforms[name] = matrix

    def set_uniform_vec4(self, name, vector):
        self.uniforms[name] = tuple(vector)

    def set_uniform_int(self, name, value):
        self.uniforms[name] = value


class RecordingTileBuffer(TileBufferHandle):
    def __init__(self):
        self.uploads = []
        self.draws = 0
        self.deleted = False

    def upload(self, vertices, indices):
        self.uploads.append((vertices.copy(), indices.copy()))

    def draw(self):
        self.draws += 1

    def delete(self):
        self.deleted = True


class RecordingGraphics(GraphicsBackend):
    def __init__(self):
        self.textures = []
        self.shaders = []
        self.buffers = []
        self.viewport = None
        self.blend = False

    def ensure_ready(self):
        pass

    def set_viewport(self, x, y, w, h):
        self.viewport = (x, y, w, h)

    def clear_color(self, color):
        pass

    def set_blend(self, enabled):
        self.blend = enabled

    def set_blend_func(self, src, dst):
        pass

    def create_shader(self, vertex_source, fragment_source):
        shader = RecordingShader(vertex_source, fragment_source)
        self.shaders.append(shader)
        return shader

    def create_texture(self, image_data, size, channels=4, mipmap=True, clamp=False):
        texture = RecordingTexture(image_data, size, channels)
        self.textures.append(texture)
        return texture

    def create_tile_buffer(self):
        buffer = RecordingTileBuffer()
        self.buffers.append(buffer)
        return buffer


@pytest.fixture
def graphics():
    return RecordingGraphics()
