"""Scene module: primitive table, scene description, and scene files.

Components:
    intersection: Taichi primitive table in scene order, per-kind dispatch,
        and the nearest-hit search used for primary and shadow rays
    manager: Host-side Scene, primitive descriptions, and JSON scene files
    default_scene: The reference four-sphere scene

Primitive data is stored in Taichi fields:
    - A tagged table (kind, slot) indexed by scene order
    - Structure-of-Arrays storage per primitive kind
"""

from .default_scene import create_default_scene
from .intersection import (
    MAX_PRIMITIVES,
    PrimitiveKind,
    add_sphere,
    clear_scene,
    color_of,
    get_primitive_count,
    get_sphere_count,
    intersection_dist,
    nearest_hit,
    normal_at,
    query_nearest,
)
from .manager import (
    Primitive,
    Scene,
    SceneConfig,
    SphereInfo,
    load_scene_file,
    primitive_from_dict,
    save_scene_file,
)

__all__ = [
    # Intersection module
    "PrimitiveKind",
    "MAX_PRIMITIVES",
    "add_sphere",
    "clear_scene",
    "get_primitive_count",
    "get_sphere_count",
    "intersection_dist",
    "normal_at",
    "color_of",
    "nearest_hit",
    "query_nearest",
    # Manager module
    "Scene",
    "SceneConfig",
    "SphereInfo",
    "Primitive",
    "primitive_from_dict",
    "load_scene_file",
    "save_scene_file",
    # Default scene
    "create_default_scene",
]
