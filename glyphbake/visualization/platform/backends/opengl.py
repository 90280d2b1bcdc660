"""OpenGL 3.3 core implementation of the graphics backend over PyOpenGL."""

from __future__ import annotations

import ctypes
from typing import Tuple

import numpy as np
from OpenGL import GL as gl

from glyphbake import log
from glyphbake.visualization.platform.backends.base import (
    GPUTextureHandle,
    GraphicsBackend,
    ShaderHandle,
    TileBufferHandle,
)


class ShaderCompilationError(RuntimeError):
    """Raised when GLSL compilation or program linking fails."""


_BLEND_FACTORS = {
    "zero": gl.GL_ZERO,
    "one": gl.GL_ONE,
    "src_alpha": gl.GL_SRC_ALPHA,
    "one_minus_src_alpha": gl.GL_ONE_MINUS_SRC_ALPHA,
}


def _compile_stage(source: str, stage) -> int:
    shader = gl.glCreateShader(stage)
    gl.glShaderSource(shader, source)
    gl.glCompileShader(shader)
    if not gl.glGetShaderiv(shader, gl.GL_COMPILE_STATUS):
        message = gl.glGetShaderInfoLog(shader)
        gl.glDeleteShader(shader)
        if isinstance(message, bytes):
            message = message.decode("utf-8", "replace")
        raise ShaderCompilationError(message)
    return shader


class OpenGLShaderHandle(ShaderHandle):
    def __init__(self, vertex_source: str, fragment_source: str):
        vs = _compile_stage(vertex_source, gl.GL_VERTEX_SHADER)
        fs = _compile_stage(fragment_source, gl.GL_FRAGMENT_SHADER)
        program = gl.glCreateProgram()
        gl.glAttachShader(program, vs)
        gl.glAttachShader(program, fs)
        gl.glLinkProgram(program)
        gl.glDeleteShader(vs)
        gl.glDeleteShader(fs)
        if not gl.glGetProgramiv(program, gl.GL_LINK_STATUS):
            message = gl.glGetProgramInfoLog(program)
            gl.glDeleteProgram(program)
            if isinstance(message, bytes):
                message = message.decode("utf-8", "replace")
            raise ShaderCompilationError(message)
        self._program = program
        self._locations: dict[str, int] = {}

    def _location(self, name: str) -> int:
        loc = self._locations.get(name)
        if loc is None:
            loc = gl.glGetUniformLocation(self._program, name)
            self._locations[name] = loc
        return loc

    def use(self):
        gl.glUseProgram(self._program)

    def stop(self):
        gl.glUseProgram(0)

    def delete(self):
        if self._program:
            gl.glDeleteProgram(self._program)
            self._program = 0

    def set_uniform_matrix4(self, name: str, matrix):
        data = np.asarray(matrix, dtype=np.float32)
        # numpy is row-major, GL expects column-major
        gl.glUniformMatrix4fv(self._location(name), 1, gl.GL_TRUE, data)

    def set_uniform_vec4(self, name: str, vector):
        x, y, z, w = (float(v) for v in vector)
        gl.glUniform4f(self._location(name), x, y, z, w)

    def set_uniform_int(self, name: str, value: int):
        gl.glUniform1i(self._location(name), int(value))


class OpenGLTextureHandle(GPUTextureHandle):
    def __init__(self, image_data, size: Tuple[int, int], channels: int, mipmap: bool, clamp: bool):
        width, height = size
        formats = {1: gl.GL_RED, 4: gl.GL_RGBA}
        if channels not in formats:
            raise ValueError(f"Unsupported channel count: {channels}")
        fmt = formats[channels]
        internal = gl.GL_R8 if channels == 1 else gl.GL_RGBA8

        data = np.ascontiguousarray(image_data, dtype=np.uint8)
        self._tex_id = gl.glGenTextures(1)
        gl.glBindTexture(gl.GL_TEXTURE_2D, self._tex_id)
        gl.glPixelStorei(gl.GL_UNPACK_ALIGNMENT, 1)
        gl.glTexImage2D(gl.GL_TEXTURE_2D, 0, internal, width, height, 0, fmt, gl.GL_UNSIGNED_BYTE, data)

        if channels == 1:
            # Sample single-channel atlases as white with coverage in alpha
            swizzle = np.array([gl.GL_ONE, gl.GL_ONE, gl.GL_ONE, gl.GL_RED], dtype=np.int32)
            gl.glTexParameteriv(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_SWIZZLE_RGBA, swizzle)

        min_filter = gl.GL_LINEAR_MIPMAP_LINEAR if mipmap else gl.GL_NEAREST
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MIN_FILTER, min_filter)
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_MAG_FILTER, gl.GL_NEAREST)
        wrap = gl.GL_CLAMP_TO_EDGE if clamp else gl.GL_REPEAT
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_WRAP_S, wrap)
        gl.glTexParameteri(gl.GL_TEXTURE_2D, gl.GL_TEXTURE_WRAP_T, wrap)
        if mipmap:
            gl.glGenerateMipmap(gl.GL_TEXTURE_2D)
        gl.glBindTexture(gl.GL_TEXTURE_2D, 0)

    def bind(self, unit: int = 0):
        gl.glActiveTexture(gl.GL_TEXTURE0 + unit)
        gl.glBindTexture(gl.GL_TEXTURE_2D, self._tex_id or 0)

    def delete(self):
        if self._tex_id:
            gl.glDeleteTextures(1, [self._tex_id])
            self._tex_id = 0


class OpenGLTileBufferHandle(TileBufferHandle):
    """VAO with one interleaved (x, y, u, v) VBO and an index buffer."""

    def __init__(self):
        self._vao = gl.glGenVertexArrays(1)
        self._vbo = gl.glGenBuffers(1)
        self._ebo = gl.glGenBuffers(1)
        self._index_count = 0

        gl.glBindVertexArray(self._vao)
        gl.glBindBuffer(gl.GL_ARRAY_BUFFER, self._vbo)
        gl.glBindBuffer(gl.GL_ELEMENT_ARRAY_BUFFER, self._ebo)
        stride = 4 * 4
        gl.glEnableVertexAttribArray(0)
        gl.glVertexAttribPointer(0, 2, gl.GL_FLOAT, gl.GL_FALSE, stride, ctypes.c_void_p(0))
        gl.glEnableVertexAttribArray(1)
        gl.glVertexAttribPointer(1, 2, gl.GL_FLOAT, gl.GL_FALSE, stride, ctypes.c_void_p(8))
        gl.glBindVertexArray(0)

    def upload(self, vertices, indices):
        vertices = np.ascontiguousarray(vertices, dtype=np.float32)
        indices = np.ascontiguousarray(indices, dtype=np.uint32)
        gl.glBindVertexArray(self._vao)
        gl.glBindBuffer(gl.GL_ARRAY_BUFFER, self._vbo)
        gl.glBufferData(gl.GL_ARRAY_BUFFER, vertices.nbytes, vertices if vertices.size else None, gl.GL_DYNAMIC_DRAW)
        gl.glBindBuffer(gl.GL_ELEMENT_ARRAY_BUFFER, self._ebo)
        gl.glBufferData(gl.GL_ELEMENT_ARRAY_BUFFER, indices.nbytes, indices if indices.size else None, gl.GL_DYNAMIC_DRAW)
        gl.glBindVertexArray(0)
        self._index_count = int(indices.size)

    def draw(self):
        if self._index_count == 0:
            return
        gl.glBindVertexArray(self._vao)
        gl.glDrawElements(gl.GL_TRIANGLES, self._index_count, gl.GL_UNSIGNED_INT, ctypes.c_void_p(0))
        gl.glBindVertexArray(0)

    def delete(self):
        if self._vao:
            gl.glDeleteVertexArrays(1, [self._vao])
            gl.glDeleteBuffers(2, [self._vbo, self._ebo])
            self._vao = self._vbo = self._ebo = 0
            self._index_count = 0


class OpenGLGraphicsBackend(GraphicsBackend):
    """Requires a current OpenGL 3.3 core context."""

    def __init__(self):
        self._ready = False

    def ensure_ready(self):
        if self._ready:
            return
        version = gl.glGetString(gl.GL_VERSION)
        if isinstance(version, bytes):
            version = version.decode("ascii", "replace")
        log.info(f"[OpenGL] {version}")
        self._ready = True

    def set_viewport(self, x: int, y: int, w: int, h: int):
        gl.glViewport(x, y, w, h)

    def clear_color(self, color):
        r, g, b, a = color
        gl.glClearColor(r, g, b, a)
        gl.glClear(gl.GL_COLOR_BUFFER_BIT)

    def set_blend(self, enabled: bool):
        if enabled:
            gl.glEnable(gl.GL_BLEND)
        else:
            gl.glDisable(gl.GL_BLEND)

    def set_blend_func(self, src: str, dst: str):
        gl.glBlendFunc(_BLEND_FACTORS[src], _BLEND_FACTORS[dst])

    def create_shader(self, vertex_source: str, fragment_source: str) -> ShaderHandle:
        return OpenGLShaderHandle(vertex_source, fragment_source)

    def create_texture(self, image_data, size: Tuple[int, int], channels: int = 4, mipmap: bool = True, clamp: bool = False) -> GPUTextureHandle:
        return OpenGLTextureHandle(image_data, size, channels, mipmap, clamp)

    def create_tile_buffer(self) -> TileBufferHandle:
        return OpenGLTileBufferHandle()


__all__ = [
    "ShaderCompilationError",
    "OpenGLShaderHandle",
    "OpenGLTextureHandle",
    "OpenGLTileBufferHandle",
    "OpenGLGraphicsBackend",
]
