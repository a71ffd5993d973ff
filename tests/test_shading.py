"""Tests for Blinn-Phong shading and shadow darkening.

Tests cover:
- Shading constants and their validation
- Flat shadow darkening
- Blinn-Phong against a direct evaluation of the formula
- Negative terms for surfaces facing away from the light
"""

import math

import pytest
import taichi as ti


def _unit(v):
    n = math.sqrt(sum(c * c for c in v))
    return [c / n for c in v]


def _dot(a, b):
    return sum(x * y for x, y in zip(a, b))


def _reference_blinn_phong(base, point, normal, light, camera):
    """Evaluate the shading formula with saturation at every step."""
    to_light = _unit([l - p for l, p in zip(light, point)])
    to_camera = _unit([c - p for c, p in zip(camera, point)])
    half = _unit([a + b for a, b in zip(to_light, to_camera)])
    diffuse_k = _dot(to_light, normal)
    specular_k = math.pow(_dot(normal, half), 75.0)

    result = []
    for c in base:
        ambient = min(min(c * 0.1, 1.0) * 1.0, 1.0)
        diffuse = min(min(c * 1.0, 1.0) * diffuse_k, 1.0)
        specular = min(min(min(c * 1.5, 1.0) * 1.0, 1.0) * specular_k, 1.0)
        result.append(min(min(ambient + diffuse, 1.0) + specular, 1.0))
    return result


def _shade(base, point, normal, light, camera):
    """Run blinn_phong in a kernel with default shading constants."""
    from blinnray.core.shading import blinn_phong, setup_shading

    setup_shading()
    inputs = ti.Vector.field(3, dtype=ti.f64, shape=5)
    for i, v in enumerate((base, point, normal, light, camera)):
        inputs[i] = list(v)
    result = ti.Vector.field(3, dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel():
        result[None] = blinn_phong(inputs[0], inputs[1], inputs[2], inputs[3], inputs[4])

    test_kernel()
    return result.to_numpy().tolist()


class TestShadingConfig:
    """Tests for the shading constants."""

    def test_defaults(self):
        from blinnray.core.shading import ShadingConfig

        config = ShadingConfig()
        assert config.shadow_bias == 1e-5
        assert config.shadow_attenuation == 0.1
        assert config.ambient_factor == 0.1
        assert config.specular_boost == 1.5
        assert config.specular_exponent == 75.0

    @pytest.mark.parametrize("name", ["shadow_bias", "shininess", "specular_boost"])
    def test_non_finite_rejected(self, name):
        from blinnray.core.shading import ShadingConfig
        from blinnray.errors import InvalidSceneError

        with pytest.raises(InvalidSceneError):
            ShadingConfig(**{name: math.nan})

    def test_rejection_is_value_error(self):
        """Test callers catching ValueError still see bad shading constants."""
        from blinnray.core.shading import ShadingConfig

        with pytest.raises(ValueError):
            ShadingConfig(ambient_factor=math.inf)


class TestShadowedColor:
    """Tests for the flat shadow darkening."""

    def _shadowed(self, base, config=None):
        from blinnray.core.shading import setup_shading, shadowed_color
        from blinnray.core.vector import vec3

        setup_shading(config)
        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel(r: ti.f64, g: ti.f64, b: ti.f64):
            result[None] = shadowed_color(vec3(r, g, b))

        test_kernel(*base)
        return result.to_numpy().tolist()

    def test_default_attenuation(self):
        assert self._shadowed((0.6, 0.1, 0.4)) == pytest.approx([0.06, 0.01, 0.04])

    def test_custom_attenuation(self):
        from blinnray.core.shading import ShadingConfig

        config = ShadingConfig(shadow_attenuation=0.5)
        assert self._shadowed((0.6, 0.1, 0.4), config) == pytest.approx([0.3, 0.05, 0.2])


class TestBlinnPhong:
    """Tests for the Blinn-Phong model."""

    def test_front_of_sphere(self):
        """Test the point of a sphere closest to the camera."""
        base = (0.6, 0.1, 0.4)
        args = (base, (0.0, 0.0, 1.4), (0.0, 0.0, -1.0), (1.0, 1.0, 0.0), (0.0, 0.0, -1.0))

        color = _shade(*args)
        assert color == pytest.approx(_reference_blinn_phong(*args), abs=1e-12)
        assert color == pytest.approx([0.48431, 0.08072, 0.32287], abs=1e-4)

    def test_oblique_geometry(self):
        normal = _unit([0.3, 0.5, -0.8])
        args = ((0.2, 0.9, 0.4), (0.1, 0.4, 0.9), normal, (2.0, 3.0, -1.0), (0.0, 0.0, -1.5))

        assert _shade(*args) == pytest.approx(_reference_blinn_phong(*args), abs=1e-12)

    def test_bright_base_saturates(self):
        """Test that a near-white surface facing the light saturates at 1.0."""
        args = ((0.95, 0.95, 0.95), (0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -2.0), (0.0, 0.0, -2.0))

        assert _shade(*args) == pytest.approx([1.0, 1.0, 1.0])

    def test_facing_away_goes_negative(self):
        """Test negative dot products pass through unclamped."""
        # Light and camera behind the surface: dot(L, N) = dot(N, H) = -1
        args = ((0.5, 0.5, 0.5), (0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, -5.0), (0.0, 0.0, -5.0))

        color = _shade(*args)
        # 0.05 - 0.5 - 0.75
        assert color == pytest.approx([-1.2, -1.2, -1.2])


class TestRealPow:
    """Tests for pow with negative bases."""

    @pytest.mark.parametrize(
        "base,exponent,expected",
        [
            (2.0, 3.0, 8.0),
            (-2.0, 3.0, -8.0),
            (-2.0, 2.0, 4.0),
            (0.5, 75.0, 0.5**75),
            (-0.9, 75.0, -(0.9**75)),
            (0.0, 75.0, 0.0),
        ],
    )
    def test_values(self, base, exponent, expected):
        from blinnray.core.shading import _real_pow

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel(b: ti.f64, e: ti.f64):
            result[None] = _real_pow(b, e)

        test_kernel(base, exponent)
        assert result[None] == pytest.approx(expected, rel=1e-12)

    def test_negative_base_fractional_exponent(self):
        from blinnray.core.shading import _real_pow

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = _real_pow(-0.5, 0.5)

        test_kernel()
        assert math.isnan(result[None])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
