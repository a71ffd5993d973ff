"""Reference sphere scene.

Three small spheres floating above a "floor" that is really a huge sphere,
lit by a point light up and to the right of the camera:

- Large red sphere behind the others
- Small pink sphere in front, right of center
- Small green sphere in front, left of center
- Blue floor sphere (radius 20000) whose top sits at y = -1

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from blinnray.scene.default_scene import create_default_scene
    >>> scene, camera, screen, light = create_default_scene()
    >>> len(scene)
    4
"""

from blinnray.camera.view import Camera, Light, Screen
from blinnray.scene.manager import Scene

# =============================================================================
# Default Scene Constants
# =============================================================================

DEFAULT_WIDTH = 900
DEFAULT_HEIGHT = 600

CAMERA_POSITION = (0.0, 0.0, -1.5)
LIGHT_POSITION = (1.0, 1.0, 0.0)

# (center, radius, color) in scene order
DEFAULT_SPHERES = (
    ((-0.2, 0.2, 2.0), 0.7, (0.8, 0.2, 0.2)),
    ((0.1, -0.1, 1.0), 0.1, (0.8, 0.3, 0.7)),
    ((-0.3, 0.2, 0.8), 0.2, (0.2, 0.9, 0.4)),
    ((0.0, -20001.0, 2.0), 20000.0, (0.3, 0.3, 0.9)),
)


def create_default_scene(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> tuple[Scene, Camera, Screen, Light]:
    """Create the reference sphere scene.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        Tuple of (scene, camera, screen, light). The screen lies in the z = 0
        plane and spans x in [-1, 1] at the image aspect ratio.
    """
    scene = Scene()
    for center, radius, color in DEFAULT_SPHERES:
        scene.add_sphere(center, radius, color)

    camera = Camera(CAMERA_POSITION)
    screen = Screen.for_aspect(width, height)
    light = Light(LIGHT_POSITION)

    return scene, camera, screen, light
