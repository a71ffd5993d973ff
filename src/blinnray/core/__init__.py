"""Core rendering module.

Components:
    vector: f64 vector type and vector math, with zero-length detection
    color: Saturating RGB color arithmetic
    ray: Ray record with normalized direction
    shading: Blinn-Phong model, shadow darkening, and ShadingConfig
    engine: Per-pixel pipeline and the RayTracer host API

All per-pixel work runs in Taichi kernels in double precision.
"""

from .color import BLACK, WHITE, Color, color_add, color_multiply, color_scale
from .ray import Ray, make_ray, position_at
from .vector import (
    add,
    dot,
    get_degenerate_count,
    length,
    reset_degenerate_count,
    scale,
    subtract,
    unit,
    vec3,
)

# Note: shading and engine are NOT imported here; engine depends on the scene
# and camera packages. Import them from blinnray.core.shading and
# blinnray.core.engine.

__all__ = [
    "vec3",
    "add",
    "subtract",
    "scale",
    "dot",
    "length",
    "unit",
    "reset_degenerate_count",
    "get_degenerate_count",
    "Color",
    "BLACK",
    "WHITE",
    "color_add",
    "color_multiply",
    "color_scale",
    "Ray",
    "make_ray",
    "position_at",
]
