"""Graphics and window backends.

Only the interfaces are imported eagerly; OpenGL and GLFW implementations
are imported from their modules so that baking and layout work without a
GL driver.
"""

from glyphbake.visualization.platform.backends.base import (
    Action,
    BackendWindow,
    GPUTextureHandle,
    GraphicsBackend,
    Key,
    ShaderHandle,
    TileBufferHandle,
    WindowBackend,
)

__all__ = [
    "Action",
    "BackendWindow",
    "GPUTextureHandle",
    "GraphicsBackend",
    "Key",
    "ShaderHandle",
    "TileBufferHandle",
    "WindowBackend",
]
