"""Double-precision 3D vector math for Taichi kernels.

Vectors are Taichi ``vec3`` values (immutable inside a ``@ti.func``: every
operation returns a new vector). The helpers here are thin wrappers so the
rest of the pipeline reads in terms of the operations it needs.

Normalizing a zero-length vector is a precondition violation. Kernels cannot
raise, so ``unit`` leaves the vector unchanged and bumps a counter instead;
host code calls ``get_degenerate_count`` after a kernel and fails fast.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from blinnray.core.vector import unit, vec3
    >>> # Use unit(vec3(3.0, 4.0, 0.0)) within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# 3-component double-precision vector
vec3 = ti.types.vector(3, ti.f64)

# Number of zero-length normalizations since the last reset
_degenerate_count = ti.field(dtype=ti.i32, shape=())


def reset_degenerate_count() -> None:
    """Reset the zero-length normalization counter."""
    _degenerate_count[None] = 0


def get_degenerate_count() -> int:
    """Get the number of zero-length normalizations since the last reset."""
    return int(_degenerate_count[None])


@ti.func
def add(a: vec3, b: vec3) -> vec3:
    return a + b


@ti.func
def subtract(a: vec3, b: vec3) -> vec3:
    return a - b


@ti.func
def scale(v: vec3, k: ti.f64) -> vec3:
    return v * k


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def length(v: vec3) -> ti.f64:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(tm.dot(v, v))


@ti.func
def unit(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector. Must have non-zero length.

    Returns:
        v divided by its length. A zero-length input is returned unchanged
        and recorded in the degenerate counter.
    """
    len_v = length(v)
    result = v
    if len_v > 0.0:
        result = v / len_v
    else:
        ti.atomic_add(_degenerate_count[None], 1)
    return result
