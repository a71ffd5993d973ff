"""Ray record for primary and shadow rays.

A ray's direction is always unit length: ``make_ray`` normalizes on
construction, and the pipeline builds every ray through it. Intersection
routines rely on this (the quadratic's leading coefficient is taken as 1).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from blinnray.core.ray import make_ray, position_at
    >>> # Within a Taichi kernel:
    >>> # ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 2.0))
    >>> # point = position_at(ray, 5.0)  # (0, 0, 5)
"""

import taichi as ti

from blinnray.core.vector import add, scale, unit, vec3


@ti.dataclass
class Ray:
    """A half-line with an origin and a unit direction.

    Attributes:
        origin: The starting point of the ray.
        direction: The unit direction of the ray.
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray, normalizing its direction.

    Args:
        origin: The starting point of the ray.
        direction: Any non-zero direction vector.

    Returns:
        A Ray whose direction is ``unit(direction)``.
    """
    return Ray(origin=origin, direction=unit(direction))


@ti.func
def position_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point origin + direction * t."""
    return add(ray.origin, scale(ray.direction, t))
