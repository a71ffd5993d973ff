"""Scene-level primitive table and nearest-hit search.

Primitives live in Taichi fields for kernel access. The table is a tagged
variant: ``primitive_kinds[i]`` says which kind primitive ``i`` is and
``primitive_slots[i]`` indexes that kind's storage arrays. Index ``i`` is the
insertion order, so every scan visits primitives in scene order no matter
how many kinds there are.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from blinnray.scene.intersection import add_sphere, clear_scene, query_nearest
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, 2.0), 0.6, (0.6, 0.1, 0.4))
    0
    >>> index, dist = query_nearest((0.0, 0.0, -1.0), (0.0, 0.0, 1.0))
    >>> index
    0
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from blinnray.core.ray import Ray, make_ray
from blinnray.core.vector import vec3
from blinnray.errors import InvalidSceneError
from blinnray.geometry.sphere import (
    Sphere,
    sphere_color,
    sphere_intersection_dist,
    sphere_normal_at,
)


class PrimitiveKind(IntEnum):
    """Enumeration of supported primitive kinds.

    Used for dispatch in the primitive table.
    """

    SPHERE = 0


# Maximum number of primitives supported in the scene
MAX_PRIMITIVES = 1024

# Primitive table in scene order
primitive_kinds = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
primitive_slots = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
num_primitives = ti.field(dtype=ti.i32, shape=())

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_PRIMITIVES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_PRIMITIVES)
sphere_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_PRIMITIVES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Results of the last query_nearest call
_query_index = ti.field(dtype=ti.i32, shape=())
_query_dist = ti.field(dtype=ti.f64, shape=())


def clear_scene() -> None:
    """Remove all primitives from the table.

    Resets the counts to zero. Field data is overwritten by later adds.
    """
    num_primitives[None] = 0
    num_spheres[None] = 0


def _append_primitive(kind: PrimitiveKind, slot: int) -> int:
    idx = num_primitives[None]
    primitive_kinds[idx] = int(kind)
    primitive_slots[idx] = slot
    num_primitives[None] = idx + 1
    return idx


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    color: tuple[float, float, float],
) -> int:
    """Append a sphere to the primitive table.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (validated by the caller).
        color: The base RGB color.

    Returns:
        The scene index of the added primitive.

    Raises:
        InvalidSceneError: If the table is full.
    """
    if num_primitives[None] >= MAX_PRIMITIVES:
        raise InvalidSceneError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
    slot = num_spheres[None]
    sphere_centers[slot] = [center[0], center[1], center[2]]
    sphere_radii[slot] = radius
    sphere_colors[slot] = [color[0], color[1], color[2]]
    num_spheres[None] = slot + 1
    return _append_primitive(PrimitiveKind.SPHERE, slot)


def get_primitive_count() -> int:
    """Get the number of primitives in the table."""
    return int(num_primitives[None])


def get_sphere_count() -> int:
    """Get the number of spheres in the table."""
    return int(num_spheres[None])


@ti.func
def _sphere_at(slot: ti.i32) -> Sphere:
    return Sphere(
        center=sphere_centers[slot],
        radius=sphere_radii[slot],
        color=sphere_colors[slot],
    )


@ti.func
def intersection_dist(index: ti.i32, ray: Ray) -> ti.f64:
    """Distance along the ray to primitive ``index``, or +inf on a miss."""
    dist = tm.inf
    if primitive_kinds[index] == int(PrimitiveKind.SPHERE):
        dist = sphere_intersection_dist(_sphere_at(primitive_slots[index]), ray)
    return dist


@ti.func
def normal_at(index: ti.i32, point: vec3) -> vec3:
    """Outward unit normal of primitive ``index`` at a surface point."""
    normal = vec3(0.0, 0.0, 0.0)
    if primitive_kinds[index] == int(PrimitiveKind.SPHERE):
        normal = sphere_normal_at(_sphere_at(primitive_slots[index]), point)
    return normal


@ti.func
def color_of(index: ti.i32) -> vec3:
    """Base color of primitive ``index``."""
    color = vec3(0.0, 0.0, 0.0)
    if primitive_kinds[index] == int(PrimitiveKind.SPHERE):
        color = sphere_color(_sphere_at(primitive_slots[index]))
    return color


@ti.func
def nearest_hit(ray: Ray):
    """Find the nearest primitive along a ray.

    Scans the table in scene order and keeps the primitive with the strictly
    smallest distance, so on ties the earlier primitive wins.

    Args:
        ray: The ray to trace.

    Returns:
        A tuple (index, dist). On a miss, index is -1 and dist is +inf.
    """
    nearest = -1
    closest_dist = tm.inf
    for i in range(num_primitives[None]):
        dist = intersection_dist(i, ray)
        if dist < closest_dist:
            closest_dist = dist
            nearest = i
    return nearest, closest_dist


@ti.kernel
def _query_nearest_kernel(
    ox: ti.f64, oy: ti.f64, oz: ti.f64, dx: ti.f64, dy: ti.f64, dz: ti.f64
):
    ray = make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz))
    index, dist = nearest_hit(ray)
    _query_index[None] = index
    _query_dist[None] = dist


def query_nearest(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[int, float]:
    """Run the nearest-hit search for one ray from Python.

    Intended for scene inspection and testing; rendering traces rays inside
    the engine kernel.

    Args:
        origin: The ray origin.
        direction: The ray direction (normalized by ray construction).

    Returns:
        Tuple of (index, dist); (-1, inf) when nothing is hit.
    """
    _query_nearest_kernel(
        origin[0], origin[1], origin[2], direction[0], direction[1], direction[2]
    )
    return int(_query_index[None]), float(_query_dist[None])
