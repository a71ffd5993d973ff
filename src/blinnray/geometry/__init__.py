"""Geometry module for scene primitives.

Components:
    sphere: Sphere record with ray-sphere intersection

Every primitive exposes the same three operations as Taichi functions:
    intersection distance (``+inf`` on a miss), outward unit normal at a
    surface point, and base color.

The scene's primitive table (``blinnray.scene.intersection``) dispatches to
these per primitive kind.
"""

from .sphere import Sphere, sphere_color, sphere_intersection_dist, sphere_normal_at

__all__ = [
    "Sphere",
    "sphere_intersection_dist",
    "sphere_normal_at",
    "sphere_color",
]
