"""Saturating RGB color arithmetic.

Colors are ``vec3`` values holding (red, green, blue). Every operation clamps
each channel to at most 1.0 so ambient, diffuse, and specular terms can be
summed without a final clamp pass. There is no lower clamp: channels may go
negative, and downstream code must tolerate that.

Host code describes colors as plain ``(r, g, b)`` tuples.
"""

import taichi as ti
import taichi.math as tm

from blinnray.core.vector import vec3

# Host-side color description
Color = tuple[float, float, float]

BLACK: Color = (0.0, 0.0, 0.0)
WHITE: Color = (1.0, 1.0, 1.0)


@ti.func
def _saturate(c: vec3) -> vec3:
    return tm.min(c, vec3(1.0, 1.0, 1.0))


@ti.func
def color_add(a: vec3, b: vec3) -> vec3:
    """Add two colors channel by channel, saturating at 1.0."""
    return _saturate(a + b)


@ti.func
def color_multiply(a: vec3, b: vec3) -> vec3:
    """Multiply two colors channel by channel, saturating at 1.0."""
    return _saturate(a * b)


@ti.func
def color_scale(c: vec3, k: ti.f64) -> vec3:
    """Scale every channel by k, saturating at 1.0."""
    return _saturate(c * k)
