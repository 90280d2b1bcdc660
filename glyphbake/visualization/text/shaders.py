"""Built-in text shader and pixel-space projection."""

from __future__ import annotations

import numpy as np


TEXT_VERTEX_SHADER = """
#version 330 core
layout(location=0) in vec2 a_position;
layout(location=1) in vec2 a_uv;

uniform mat4 u_projection;

out vec2 v_uv;

void main(){
    v_uv = a_uv;
    gl_Position = u_projection * vec4(a_position, 0, 1);
}
"""

TEXT_FRAGMENT_SHADER = """
#version 330 core
uniform sampler2D u_texture;
uniform vec4 u_color;

in vec2 v_uv;
out vec4 FragColor;

void main(){
    // Atlas coverage lives in alpha, color comes from the font
    float a = texture(u_texture, v_uv).a * u_color.a;
    FragColor = vec4(u_color.rgb, a);
}
"""


def pixel_projection(width: float, height: float) -> np.ndarray:
    """Orthographic projection mapping pixels (origin top-left, y down) to NDC."""
    m = np.identity(4, dtype=np.float32)
    m[0, 0] = 2.0 / width
    m[1, 1] = -2.0 / height
    m[0, 3] = -1.0
    m[1, 3] = 1.0
    return m


__all__ = ["TEXT_VERTEX_SHADER", "TEXT_FRAGMENT_SHADER", "pixel_projection"]
