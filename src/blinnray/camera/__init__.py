"""Camera module: eye point, point light, and screen mapping.

Components:
    view: Camera, Light, and Screen descriptions, their upload to Taichi
        fields, and the per-pixel screen mapping used by the engine.
"""

from .view import (
    Camera,
    Light,
    Screen,
    camera_position,
    light_position,
    pixel_position,
    setup_view,
)

__all__ = [
    "Camera",
    "Light",
    "Screen",
    "setup_view",
    "camera_position",
    "light_position",
    "pixel_position",
]
