"""Unit tests for vector math.

Tests cover:
- Addition, subtraction, scaling
- Dot product and length
- Normalization and zero-length detection
"""

import pytest
import taichi as ti


class TestVectorArithmetic:
    """Tests for component-wise vector operations."""

    def test_add_subtract_scale(self):
        """Test add, subtract, and scale on known vectors."""
        from blinnray.core.vector import add, scale, subtract, vec3

        sum_result = ti.Vector.field(3, dtype=ti.f64, shape=())
        diff_result = ti.Vector.field(3, dtype=ti.f64, shape=())
        scaled_result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            a = vec3(1.0, 2.0, 3.0)
            b = vec3(4.0, -5.0, 0.5)
            sum_result[None] = add(a, b)
            diff_result[None] = subtract(a, b)
            scaled_result[None] = scale(a, -2.0)

        test_kernel()
        assert sum_result.to_numpy().tolist() == pytest.approx([5.0, -3.0, 3.5])
        assert diff_result.to_numpy().tolist() == pytest.approx([-3.0, 7.0, 2.5])
        assert scaled_result.to_numpy().tolist() == pytest.approx([-2.0, -4.0, -6.0])

    def test_dot_product(self):
        """Test dot product computation."""
        from blinnray.core.vector import dot, vec3

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = dot(vec3(1.0, 2.0, 3.0), vec3(4.0, 5.0, 6.0))

        test_kernel()
        # 1*4 + 2*5 + 3*6 = 32
        assert result[None] == pytest.approx(32.0)

    def test_dot_product_perpendicular(self):
        """Test dot product of perpendicular vectors is zero."""
        from blinnray.core.vector import dot, vec3

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = dot(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert result[None] == 0.0

    def test_length(self):
        """Test Euclidean length."""
        from blinnray.core.vector import length, vec3

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = length(vec3(3.0, 4.0, 12.0))

        test_kernel()
        assert result[None] == pytest.approx(13.0, abs=1e-12)


class TestUnit:
    """Tests for normalization."""

    def test_unit_has_length_one(self):
        """Test that unit() returns a unit vector in the same direction."""
        from blinnray.core.vector import length, unit, vec3

        result_vec = ti.Vector.field(3, dtype=ti.f64, shape=())
        result_len = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            n = unit(vec3(3.0, 4.0, 0.0))
            result_vec[None] = n
            result_len[None] = length(n)

        test_kernel()
        assert result_len[None] == pytest.approx(1.0, abs=1e-12)
        assert result_vec.to_numpy().tolist() == pytest.approx([0.6, 0.8, 0.0], abs=1e-12)

    @pytest.mark.parametrize(
        "components",
        [(1e-6, 0.0, 0.0), (123.0, -456.0, 789.0), (-1e5, 3e4, 2.5)],
    )
    def test_unit_length_within_tolerance(self, components):
        """Test unit length holds for small and large inputs."""
        from blinnray.core.vector import length, unit, vec3

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel(x: ti.f64, y: ti.f64, z: ti.f64):
            result[None] = length(unit(vec3(x, y, z)))

        test_kernel(*components)
        assert abs(result[None] - 1.0) < 1e-9

    def test_unit_zero_vector_is_recorded(self):
        """Test that normalizing a zero vector bumps the degenerate counter."""
        from blinnray.core.vector import get_degenerate_count, unit, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = unit(vec3(0.0, 0.0, 0.0))

        assert get_degenerate_count() == 0
        test_kernel()
        assert get_degenerate_count() == 1
        # No NaN leaks out of the degenerate case
        assert result.to_numpy().tolist() == [0.0, 0.0, 0.0]

    def test_reset_degenerate_count(self):
        """Test that the counter can be reset."""
        from blinnray.core.vector import (
            get_degenerate_count,
            reset_degenerate_count,
            unit,
            vec3,
        )

        @ti.kernel
        def test_kernel():
            unit(vec3(0.0, 0.0, 0.0))

        test_kernel()
        test_kernel()
        assert get_degenerate_count() == 2
        reset_degenerate_count()
        assert get_degenerate_count() == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
