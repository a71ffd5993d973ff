"""Render engine: per-pixel ray casting, shadow test, and shading.

For every pixel (row, col):
    1. Map the pixel to its point on the screen plane.
    2. Cast a primary ray from the camera through that point.
    3. Find the nearest primitive; a miss is black.
    4. Compute the hit point and the outward normal there.
    5. Push the point off the surface by the shadow bias along the normal.
    6. Cast a shadow ray toward the light against the whole scene.
    7. Any finite hit means shadow: flat darkening of the base color.
    8. Otherwise shade with Blinn-Phong.

Pixels are independent, so a band of rows is traced in one parallel Taichi
kernel. Bands run top to bottom and the finished buffer is row-major.

Example:
    >>> from blinnray.runtime import init_taichi
    >>> init_taichi()
    >>> from blinnray.core.engine import RayTracer
    >>> from blinnray.scene.default_scene import create_default_scene
    >>>
    >>> scene, camera, screen, light = create_default_scene()
    >>> tracer = RayTracer(scene, camera, screen, light)
    >>> tracer.render()
    >>> pixels = tracer.get_pixels()  # (width * height, 3), row-major
"""

import logging
import time
from collections.abc import Callable, Iterable

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from blinnray.camera.view import (
    Camera,
    Light,
    Screen,
    camera_position,
    light_position,
    pixel_position,
    setup_view,
)
from blinnray.core.ray import make_ray, position_at
from blinnray.core.shading import (
    ShadingConfig,
    blinn_phong,
    setup_shading,
    shadow_bias,
    shadowed_color,
)
from blinnray.core.vector import (
    add,
    get_degenerate_count,
    reset_degenerate_count,
    scale,
    subtract,
    vec3,
)
from blinnray.errors import DegenerateGeometryError
from blinnray.scene.intersection import color_of, nearest_hit, normal_at
from blinnray.scene.manager import Primitive, Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


# =============================================================================
# Per-pixel Pipeline
# =============================================================================


@ti.func
def trace_pixel(row: ti.i32, col: ti.i32) -> vec3:
    """Trace the primary and shadow rays for one pixel and shade the result.

    Args:
        row: Pixel row (0 = top).
        col: Pixel column (0 = left).

    Returns:
        The pixel color.
    """
    eye = camera_position()
    light_pos = light_position()
    primary_ray = make_ray(eye, subtract(pixel_position(row, col), eye))

    index, dist = nearest_hit(primary_ray)

    color = vec3(0.0, 0.0, 0.0)  # black when nothing is hit
    if index >= 0:
        hit_point = position_at(primary_ray, dist)
        normal = normal_at(index, hit_point)
        shifted_point = add(hit_point, scale(normal, shadow_bias()))
        shadow_ray = make_ray(shifted_point, subtract(light_pos, shifted_point))

        _, shadow_dist = nearest_hit(shadow_ray)
        base_color = color_of(index)

        if shadow_dist < tm.inf:
            color = shadowed_color(base_color)
        else:
            color = blinn_phong(base_color, hit_point, normal, light_pos, eye)

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(
    row_start: ti.i32,
    row_end: ti.i32,
    width: ti.i32,
    pixels: ti.types.ndarray(dtype=ti.f64, ndim=3),
):
    """Trace every pixel in rows [row_start, row_end) into ``pixels``."""
    for row, col in ti.ndrange((row_start, row_end), width):
        color = trace_pixel(row, col)
        for c in ti.static(range(3)):
            pixels[row, col, c] = color[c]


@ti.kernel
def _render_single_pixel(row: ti.i32, col: ti.i32) -> vec3:
    return trace_pixel(row, col)


# =============================================================================
# Public Rendering API
# =============================================================================


class RayTracer:
    """Renders one scene, seen from one camera, into one screen.

    The tracer holds its inputs for the duration of a render. Rendering
    uploads the scene, view, and shading constants to Taichi fields, so only
    one tracer renders at a time.

    Attributes:
        scene: The primitives to render, in tie-break order.
        camera: The eye point.
        screen: The image plane; receives the pixel buffer.
        light: The point light.
        shading: The shading constants.
    """

    def __init__(
        self,
        scene: Scene | Iterable[Primitive],
        camera: Camera,
        screen: Screen,
        light: Light,
        shading: ShadingConfig | None = None,
    ) -> None:
        """Initialize the tracer.

        Args:
            scene: A Scene, or an ordered iterable of primitive descriptions.
            camera: The eye point.
            screen: The image plane.
            light: The point light.
            shading: Shading constants (defaults to ``ShadingConfig()``).

        Raises:
            InvalidSceneError: If a primitive description is invalid.
        """
        if not isinstance(scene, Scene):
            scene = Scene.from_primitives(scene)
        self.scene = scene
        self.camera = camera
        self.screen = screen
        self.light = light
        self.shading = shading if shading is not None else ShadingConfig()

    def _prepare(self) -> None:
        self.scene.upload()
        setup_view(self.camera, self.screen, self.light)
        setup_shading(self.shading)
        reset_degenerate_count()

    def _check_degenerate(self) -> None:
        count = get_degenerate_count()
        if count > 0:
            raise DegenerateGeometryError(count)

    def render(
        self,
        rows_per_batch: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> npt.NDArray[np.float64]:
        """Render every pixel into the screen's pixel buffer.

        Args:
            rows_per_batch: Rows traced per kernel launch. None traces the
                whole image in one launch.
            callback: Called as ``callback(rows_done, total_rows)`` after
                each batch.

        Returns:
            The screen's pixel buffer (see ``Screen.get_pixels``).

        Raises:
            ValueError: If rows_per_batch is not positive.
            DegenerateGeometryError: If a zero-length vector was normalized.
                The screen is left without pixels.
        """
        width, height = self.screen.resolution
        if rows_per_batch is None:
            rows_per_batch = height
        if rows_per_batch <= 0:
            raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")

        self.screen.clear_pixels()
        self._prepare()
        logger.info("Rendering %d primitive(s) at %dx%d", len(self.scene), width, height)

        start_time = time.perf_counter()
        pixels = np.zeros((height, width, 3), dtype=np.float64)

        for row_start in range(0, height, rows_per_batch):
            row_end = min(row_start + rows_per_batch, height)
            _render_rows(row_start, row_end, width, pixels)
            if callback is not None:
                callback(row_end, height)

        self._check_degenerate()
        self.screen.store_pixels(pixels)

        logger.info(
            "Rendered %d pixels in %.3fs", width * height, time.perf_counter() - start_time
        )
        return self.screen.get_pixels()

    def get_pixels(self) -> npt.NDArray[np.float64]:
        """Get the colors from the last render, row-major.

        Raises:
            RuntimeError: If render() has not completed.
        """
        return self.screen.get_pixels()

    def render_pixel(self, row: int, col: int) -> tuple[float, float, float]:
        """Trace a single pixel without touching the pixel buffer.

        Useful for testing and debugging individual pixels.

        Args:
            row: Pixel row (0 = top).
            col: Pixel column (0 = left).

        Returns:
            Tuple of (R, G, B) color values.

        Raises:
            ValueError: If the pixel lies outside the screen.
            DegenerateGeometryError: If a zero-length vector was normalized.
        """
        width, height = self.screen.resolution
        if not (0 <= row < height and 0 <= col < width):
            raise ValueError(f"Pixel ({row}, {col}) outside {width}x{height} screen")

        self._prepare()
        color = _render_single_pixel(row, col)
        self._check_degenerate()

        return (float(color[0]), float(color[1]), float(color[2]))
