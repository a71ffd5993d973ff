"""Sphere primitive with ray-sphere intersection.

Solves |o + t*d - c|^2 = r^2 for a ray with unit direction d:

    t^2 + b*t + k = 0,  b = 2 * dot(d, o - c),  k = |o - c|^2 - r^2

Policy for the roots (d1, d2):
    - discriminant <= 0: miss, including the tangent case
    - both positive: the nearer one (ray starts outside)
    - exactly one positive: that one (ray starts inside, hits the far wall)
    - neither positive: miss (sphere is behind the origin)

A miss is reported as positive infinity rather than a flag, so distances
compare directly in the nearest-hit search.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from blinnray.geometry.sphere import Sphere, sphere_intersection_dist
    >>> # Use sphere_intersection_dist(sphere, ray) within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from blinnray.core.ray import Ray
from blinnray.core.vector import dot, subtract, unit, vec3


@ti.dataclass
class Sphere:
    """A sphere with a base color.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
        color: The base RGB color used for shading.
    """

    center: vec3
    radius: ti.f64
    color: vec3


@ti.func
def sphere_intersection_dist(sphere: Sphere, ray: Ray) -> ti.f64:
    """Distance along the ray to the sphere, or +inf when there is no hit.

    Args:
        sphere: The sphere to test.
        ray: The ray to test (direction must be unit length).

    Returns:
        The nearest positive root of the intersection quadratic, or
        ``tm.inf`` when the ray misses, grazes, or points away.
    """
    sphere_to_origin = subtract(ray.origin, sphere.center)

    a = 1.0  # dot(direction, direction) for a unit direction
    b = 2.0 * dot(ray.direction, sphere_to_origin)
    c = dot(sphere_to_origin, sphere_to_origin) - sphere.radius * sphere.radius

    discriminant = b * b - 4.0 * a * c

    dist = tm.inf
    if discriminant > 0.0:
        sqrt_d = ti.sqrt(discriminant)
        d1 = (-b + sqrt_d) / (2.0 * a)
        d2 = (-b - sqrt_d) / (2.0 * a)

        if d1 > 0.0 and d2 > 0.0:
            dist = tm.min(d1, d2)
        elif d1 > 0.0:
            dist = d1
        elif d2 > 0.0:
            dist = d2

    return dist


@ti.func
def sphere_normal_at(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal at a point on the sphere's surface."""
    return unit(subtract(point, sphere.center))


@ti.func
def sphere_color(sphere: Sphere) -> vec3:
    return sphere.color
