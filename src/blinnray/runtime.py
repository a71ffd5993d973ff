"""Taichi runtime initialization.

All kernels in this package compute in double precision. Taichi must be
initialized with ``default_fp=ti.f64`` before any module that declares
fields (``blinnray.core.vector``, ``blinnray.scene.intersection``,
``blinnray.camera.view``, ``blinnray.core.shading``) is imported.

Example:
    >>> from blinnray.runtime import init_taichi
    >>> init_taichi()
    >>> from blinnray.core.engine import RayTracer
"""

import logging

import taichi as ti

logger = logging.getLogger(__name__)


def init_taichi(arch=None, debug: bool = False) -> None:
    """Initialize Taichi with double-precision defaults.

    Args:
        arch: Taichi backend (e.g. ``ti.cpu``). When None, CUDA is requested;
            Taichi itself falls back to CPU when CUDA is unavailable. Backends
            without f64 support (Metal, OpenGL) should not be requested.
        debug: Enable Taichi's debug mode (bounds checking in kernels).
    """
    if arch is None:
        arch = ti.cuda
    ti.init(arch=arch, default_fp=ti.f64, debug=debug)
    logger.info("Taichi initialized (requested arch=%s, default_fp=f64)", arch)
