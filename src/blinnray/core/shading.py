"""Blinn-Phong shading with flat shadow darkening.

For an unshadowed hit with base color C, unit normal N, unit vector L toward
the light, and unit vector V toward the camera:

    ambient  = C * ambient_factor * white
    diffuse  = C * white * dot(L, N)
    specular = C * specular_boost * white * dot(N, unit(L + V)) ** (shininess / 4)
    result   = ambient + diffuse + specular

using saturating color arithmetic at every step. The dot products are not
clamped at zero: surfaces facing away from the light or camera contribute
negative terms before saturation, which is visible in rendered output.

A shadowed hit is C * shadow_attenuation.

The constants live in ``ShadingConfig`` and are uploaded to Taichi fields by
``setup_shading`` so they can change without recompiling kernels.
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from blinnray.core.color import color_add, color_multiply, color_scale
from blinnray.core.vector import add, dot, subtract, unit, vec3
from blinnray.errors import InvalidSceneError

# =============================================================================
# Shading Constants
# =============================================================================

# Offset of the shadow ray origin along the normal, against shadow acne
SHADOW_BIAS = 1e-5

# Blinn-Phong shininess; the half-vector term is raised to shininess / 4
SHININESS = 300.0

# Color multiplier for shadowed hits
SHADOW_ATTENUATION = 0.1

# Ambient term multiplier
AMBIENT_FACTOR = 0.1

# Specular term multiplier
SPECULAR_BOOST = 1.5

# The light is white; it has no intensity parameter
LIGHT_COLOR = vec3(1.0, 1.0, 1.0)


@dataclass(frozen=True)
class ShadingConfig:
    """Tunable constants of the shading stage.

    Attributes:
        shadow_bias: Distance the shadow ray origin is pushed along the normal.
        shininess: Blinn-Phong shininess. The exponent is shininess / 4.
        shadow_attenuation: Multiplier applied to a shadowed hit's color.
        ambient_factor: Multiplier for the ambient term.
        specular_boost: Multiplier for the specular term.
    """

    shadow_bias: float = SHADOW_BIAS
    shininess: float = SHININESS
    shadow_attenuation: float = SHADOW_ATTENUATION
    ambient_factor: float = AMBIENT_FACTOR
    specular_boost: float = SPECULAR_BOOST

    def __post_init__(self) -> None:
        for name in (
            "shadow_bias",
            "shininess",
            "shadow_attenuation",
            "ambient_factor",
            "specular_boost",
        ):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InvalidSceneError(f"ShadingConfig.{name} must be finite, got {value}")

    @property
    def specular_exponent(self) -> float:
        return self.shininess / 4.0


# =============================================================================
# Taichi Fields for Shading State
# =============================================================================

_shadow_bias = ti.field(dtype=ti.f64, shape=())
_specular_exponent = ti.field(dtype=ti.f64, shape=())
_shadow_attenuation = ti.field(dtype=ti.f64, shape=())
_ambient_factor = ti.field(dtype=ti.f64, shape=())
_specular_boost = ti.field(dtype=ti.f64, shape=())


def setup_shading(config: ShadingConfig | None = None) -> None:
    """Upload shading constants for rendering.

    Args:
        config: The constants to use. Defaults to ``ShadingConfig()``.
    """
    if config is None:
        config = ShadingConfig()
    _shadow_bias[None] = config.shadow_bias
    _specular_exponent[None] = config.specular_exponent
    _shadow_attenuation[None] = config.shadow_attenuation
    _ambient_factor[None] = config.ambient_factor
    _specular_boost[None] = config.specular_boost


@ti.func
def shadow_bias() -> ti.f64:
    return _shadow_bias[None]


@ti.func
def shadowed_color(base_color: vec3) -> vec3:
    """Flat darkening for a hit the light cannot see."""
    return color_scale(base_color, _shadow_attenuation[None])


@ti.func
def _real_pow(base: ti.f64, exponent: ti.f64) -> ti.f64:
    """C-style pow: a negative base is allowed when the exponent is integral."""
    magnitude = ti.abs(base) ** exponent
    result = magnitude
    if base < 0.0:
        if exponent == ti.floor(exponent):
            if ti.cast(exponent, ti.i64) % 2 == 1:
                result = -magnitude
        else:
            result = tm.nan
    return result


@ti.func
def blinn_phong(
    base_color: vec3,
    point: vec3,
    normal: vec3,
    light_pos: vec3,
    camera_pos: vec3,
) -> vec3:
    """Shade an unshadowed hit with the Blinn-Phong model.

    Args:
        base_color: The hit primitive's base color.
        point: The hit point on the surface.
        normal: The outward unit normal at the hit point.
        light_pos: The point light position.
        camera_pos: The camera position.

    Returns:
        ambient + diffuse + specular, each channel saturated at 1.0.
    """
    to_light = unit(subtract(light_pos, point))
    to_camera = unit(subtract(camera_pos, point))
    half_vector = unit(add(to_light, to_camera))

    ambient = color_multiply(color_scale(base_color, _ambient_factor[None]), LIGHT_COLOR)
    diffuse = color_scale(color_multiply(base_color, LIGHT_COLOR), dot(to_light, normal))
    specular = color_scale(
        color_multiply(color_scale(base_color, _specular_boost[None]), LIGHT_COLOR),
        _real_pow(dot(normal, half_vector), _specular_exponent[None]),
    )

    return color_add(color_add(ambient, diffuse), specular)
