"""Pytest configuration for ray tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    All kernels compute in double precision, so the runtime is initialized
    with default_fp=ti.f64. Using session scope prevents multiple ti.init()
    calls, which would invalidate fields declared at import time.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64)
    yield


@pytest.fixture(autouse=True)
def clear_scene_state():
    """Clear the primitive table and degenerate counter around each test.

    This ensures tests are isolated from each other.
    """
    # Import here so Taichi is initialized before fields are declared
    from blinnray.core.vector import reset_degenerate_count
    from blinnray.scene.intersection import clear_scene

    clear_scene()
    reset_degenerate_count()
    yield
    clear_scene()
    reset_degenerate_count()
