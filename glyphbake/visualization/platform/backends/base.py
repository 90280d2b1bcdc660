"""Backend interfaces decoupling text rendering from specific libraries."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, Callable, Tuple


class Key(IntEnum):
    UNKNOWN = -1

    E = 69
    R = 82

    # Special keys (GLFW-compatible values)
    ESCAPE = 256
    DOWN = 264
    UP = 265


class Action(IntEnum):
    RELEASE = 0
    PRESS = 1
    REPEAT = 2


class ShaderHandle(ABC):
    """Backend-specific shader program."""

    @abstractmethod
    def use(self):
        ...

    @abstractmethod
    def stop(self):
        ...

    @abstractmethod
    def delete(self):
        ...

    @abstractmethod
    def set_uniform_matrix4(self, name: str, matrix):
        ...

    @abstractmethod
    def set_uniform_vec4(self, name: str, vector):
        ...

    @abstractmethod
    def set_uniform_int(self, name: str, value: int):
        ...


class GPUTextureHandle(ABC):
    """Backend GPU texture object."""

    @abstractmethod
    def bind(self, unit: int = 0):
        ...

    @abstractmethod
    def delete(self):
        ...


class TileBufferHandle(ABC):
    """
    GPU vertex/index buffers for a batch of textured quads.

    Vertices are float32 rows of (x, y, u, v), indices are uint32 triangles.
    """

    @abstractmethod
    def upload(self, vertices, indices):
        ...

    @abstractmethod
    def draw(self):
        ...

    @abstractmethod
    def delete(self):
        ...


class GraphicsBackend(ABC):
    """Abstract graphics backend (OpenGL, etc.)."""

    @abstractmethod
    def ensure_ready(self):
        ...

    @abstractmethod
    def set_viewport(self, x: int, y: int, w: int, h: int):
        ...

    @abstractmethod
    def clear_color(self, color):
        ...

    @abstractmethod
    def set_blend(self, enabled: bool):
        ...

    @abstractmethod
    def set_blend_func(self, src: str, dst: str):
        ...

    @abstractmethod
    def create_shader(self, vertex_source: str, fragment_source: str) -> ShaderHandle:
        ...

    @abstractmethod
    def create_texture(self, image_data, size: Tuple[int, int], channels: int = 4, mipmap: bool = True, clamp: bool = False) -> GPUTextureHandle:
        ...

    @abstractmethod
    def create_tile_buffer(self) -> TileBufferHandle:
        ...


class BackendWindow(ABC):
    """Abstract window wrapper."""

    @abstractmethod
    def close(self):
        ...

    @abstractmethod
    def should_close(self) -> bool:
        ...

    @abstractmethod
    def make_current(self):
        ...

    @abstractmethod
    def swap_buffers(self):
        ...

    @abstractmethod
    def framebuffer_size(self) -> Tuple[int, int]:
        ...

    @abstractmethod
    def set_should_close(self, flag: bool):
        ...

    @abstractmethod
    def set_key_callback(self, callback: Callable):
        ...

    @abstractmethod
    def set_title(self, title: str):
        ...


class WindowBackend(ABC):
    """Abstract window backend (GLFW, etc.)."""

    @abstractmethod
    def create_window(self, width: int, height: int, title: str, share: Any = None) -> BackendWindow:
        ...

    @abstractmethod
    def poll_events(self):
        ...

    @abstractmethod
    def terminate(self):
        ...
