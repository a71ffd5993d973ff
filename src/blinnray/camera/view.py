"""Camera, point light, and screen mapping.

The view is a fixed eye point looking through a rectangular screen that lies
in a plane of constant z. The screen is described by its top-left and
bottom-right corners; pixel (row, col) maps to the point

    x = top_left.x + col * (bottom_right.x - top_left.x) / width
    y = top_left.y - row * (top_left.y - bottom_right.y) / height
    z = top_left.z

so rows go downward and columns go rightward. Primary rays run from the
camera through these points.

The host-side dataclasses are uploaded to Taichi fields by ``setup_view``
before rendering; ``pixel_position`` and the camera/light accessors read
those fields inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from blinnray.camera.view import Camera, Light, Screen, setup_view
    >>> screen = Screen.for_aspect(900, 600)
    >>> setup_view(Camera((0.0, 0.0, -1.0)), screen, Light((1.0, 1.0, 0.0)))
    >>> x, y, z = screen.get_pixel_position(300, 450)  # screen center
"""

import math
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt
import taichi as ti

from blinnray.core.vector import vec3
from blinnray.errors import InvalidSceneError

Point = tuple[float, float, float]


def _check_point(name: str, point: Point) -> Point:
    try:
        values = [float(v) for v in point]
    except (TypeError, ValueError) as e:
        raise InvalidSceneError(f"{name} must be 3 numbers, got {point!r}") from e
    if len(values) != 3:
        raise InvalidSceneError(f"{name} must have 3 components, got {len(values)}")
    if not all(math.isfinite(v) for v in values):
        raise InvalidSceneError(f"{name} must be finite, got {point}")
    return (values[0], values[1], values[2])


def _check_resolution(resolution) -> tuple[int, int]:
    try:
        width, height = resolution
        valid = int(width) == width and int(height) == height and width > 0 and height > 0
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidSceneError(
            f"Screen resolution must be positive integers, got {resolution!r}"
        ) from e
    if not valid:
        raise InvalidSceneError(f"Screen resolution must be positive integers, got {resolution}")
    return (int(width), int(height))


# =============================================================================
# Host-side View Description
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """The eye point all primary rays start from.

    Attributes:
        position: Camera position in world space (x, y, z).
    """

    position: Point

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _check_point("Camera position", self.position))


@dataclass(frozen=True)
class Light:
    """A point light. It has no intensity or falloff; only its position matters.

    Attributes:
        position: Light position in world space (x, y, z).
    """

    position: Point

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _check_point("Light position", self.position))


@dataclass
class Screen:
    """The image plane and its pixel buffer.

    The buffer is filled by the render engine in row-major order and is
    read back through ``get_pixels``.

    Attributes:
        resolution: (width, height) in pixels.
        top_left: Top-left corner of the screen in world space. Its z is the
            depth of the whole screen plane.
        bottom_right: Bottom-right corner of the screen (only x and y used).
    """

    resolution: tuple[int, int]
    top_left: Point
    bottom_right: Point
    _pixels: npt.NDArray[np.float64] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self.resolution = _check_resolution(self.resolution)
        self.top_left = _check_point("Screen top_left", self.top_left)
        self.bottom_right = _check_point("Screen bottom_right", self.bottom_right)

    @classmethod
    def for_aspect(cls, width: int, height: int, depth: float = 0.0) -> "Screen":
        """Create a screen spanning x in [-1, 1] with the image's aspect ratio.

        The y extent is +-1/aspect so pixels stay square.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.
            depth: The z coordinate of the screen plane.

        Returns:
            A Screen centered on the z axis.
        """
        width, height = _check_resolution((width, height))
        half_height = 1.0 / (width / height)
        return cls(
            resolution=(width, height),
            top_left=(-1.0, half_height, depth),
            bottom_right=(1.0, -half_height, depth),
        )

    @property
    def width(self) -> int:
        return self.resolution[0]

    @property
    def height(self) -> int:
        return self.resolution[1]

    def get_pixel_position(self, row: int, col: int) -> Point:
        """Get the world-space point for a pixel.

        Args:
            row: Pixel row (0 = top).
            col: Pixel column (0 = left).

        Returns:
            The point on the screen plane for this pixel.
        """
        width, height = self.resolution
        tl = self.top_left
        br = self.bottom_right
        x = tl[0] + col * (br[0] - tl[0]) / width
        y = tl[1] - row * (tl[1] - br[1]) / height
        return (x, y, tl[2])

    def store_pixels(self, pixels: npt.NDArray[np.float64]) -> None:
        """Replace the pixel buffer with a finished render.

        Args:
            pixels: Array of shape (height, width, 3).

        Raises:
            ValueError: If the shape does not match the resolution.
        """
        expected = (self.height, self.width, 3)
        if pixels.shape != expected:
            raise ValueError(f"Pixel buffer shape {pixels.shape} does not match {expected}")
        buffer = pixels.reshape(self.height * self.width, 3).copy()
        buffer.flags.writeable = False
        self._pixels = buffer

    def clear_pixels(self) -> None:
        """Discard the pixel buffer."""
        self._pixels = None

    def has_pixels(self) -> bool:
        return self._pixels is not None

    def get_pixels(self) -> npt.NDArray[np.float64]:
        """Get the rendered colors.

        Returns:
            Read-only array of shape (width * height, 3), one (r, g, b) row per
            pixel in row-major order.

        Raises:
            RuntimeError: If nothing has been rendered into this screen.
        """
        if self._pixels is None:
            raise RuntimeError("Screen has no pixels. Render the scene first.")
        return self._pixels

    def get_image(self) -> npt.NDArray[np.float64]:
        """Get the rendered colors as an image array of shape (height, width, 3)."""
        return self.get_pixels().reshape(self.height, self.width, 3)


# =============================================================================
# Taichi Fields for View State
# =============================================================================

_camera_position = ti.Vector.field(3, dtype=ti.f64, shape=())
_light_position = ti.Vector.field(3, dtype=ti.f64, shape=())
_screen_top_left = ti.Vector.field(3, dtype=ti.f64, shape=())
_screen_bottom_right = ti.Vector.field(3, dtype=ti.f64, shape=())
_screen_width = ti.field(dtype=ti.i32, shape=())
_screen_height = ti.field(dtype=ti.i32, shape=())


def setup_view(camera: Camera, screen: Screen, light: Light) -> None:
    """Upload the camera, screen geometry, and light for rendering.

    Args:
        camera: The eye point.
        screen: The image plane (only its geometry is uploaded).
        light: The point light.
    """
    _camera_position[None] = list(camera.position)
    _light_position[None] = list(light.position)
    _screen_top_left[None] = list(screen.top_left)
    _screen_bottom_right[None] = list(screen.bottom_right)
    _screen_width[None] = screen.width
    _screen_height[None] = screen.height


@ti.func
def camera_position() -> vec3:
    return _camera_position[None]


@ti.func
def light_position() -> vec3:
    return _light_position[None]


@ti.func
def pixel_position(row: ti.i32, col: ti.i32) -> vec3:
    """World-space point on the screen plane for pixel (row, col).

    Args:
        row: Pixel row (0 = top).
        col: Pixel column (0 = left).

    Returns:
        The interpolated point between the screen corners.
    """
    tl = _screen_top_left[None]
    br = _screen_bottom_right[None]
    width = ti.cast(_screen_width[None], ti.f64)
    height = ti.cast(_screen_height[None], ti.f64)
    x = tl.x + ti.cast(col, ti.f64) * (br.x - tl.x) / width
    y = tl.y - ti.cast(row, ti.f64) * (tl.y - br.y) / height
    return vec3(x, y, tl.z)
