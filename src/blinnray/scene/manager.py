"""Host-side scene description and scene files.

A ``Scene`` is the ordered list of primitive descriptions to render. Order
matters: when two primitives are hit at exactly the same distance, the one
added first wins. ``Scene.upload`` writes the descriptions into the Taichi
primitive table in that order.

Scenes (together with the camera, light, and screen) can be saved to and
loaded from JSON:

    {
      "primitives": [
        {"type": "sphere", "center": [0, 0, 2], "radius": 0.6, "color": [0.6, 0.1, 0.4]}
      ],
      "camera": {"position": [0, 0, -1]},
      "light": {"position": [1, 1, 0]},
      "screen": {"resolution": [900, 600]}
    }

A screen without ``top_left``/``bottom_right`` spans x in [-1, 1] at the
image aspect ratio (see ``Screen.for_aspect``).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from blinnray.scene.manager import Scene
    >>> scene = Scene()
    >>> scene.add_sphere(center=(0, 0, 2), radius=0.6, color=(0.6, 0.1, 0.4))
    0
    >>> scene.upload()
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar

from blinnray.camera.view import Camera, Light, Screen
from blinnray.errors import InvalidSceneError
from blinnray.scene.intersection import (
    MAX_PRIMITIVES,
    PrimitiveKind,
    add_sphere,
    clear_scene,
    get_primitive_count,
)

logger = logging.getLogger(__name__)


def _triple(name: str, values: Any) -> tuple[float, float, float]:
    try:
        items = [float(v) for v in values]
    except (TypeError, ValueError) as e:
        raise InvalidSceneError(f"{name} must be 3 numbers, got {values!r}") from e
    if len(items) != 3:
        raise InvalidSceneError(f"{name} must have 3 components, got {len(items)}")
    if not all(math.isfinite(v) for v in items):
        raise InvalidSceneError(f"{name} must be finite, got {values!r}")
    return (items[0], items[1], items[2])


def _expect(name: str, value: Any, kind: type) -> Any:
    if not isinstance(value, kind):
        raise InvalidSceneError(f"{name} must be a {kind.__name__}, got {value!r}")
    return value


@dataclass(frozen=True)
class SphereInfo:
    """Description of a sphere in the scene.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere (finite and positive).
        color: The base RGB color.
    """

    center: tuple[float, float, float]
    radius: float
    color: tuple[float, float, float]

    kind: ClassVar[PrimitiveKind] = PrimitiveKind.SPHERE

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", _triple("Sphere center", self.center))
        object.__setattr__(self, "color", _triple("Sphere color", self.color))
        try:
            radius = float(self.radius)
        except (TypeError, ValueError) as e:
            raise InvalidSceneError(f"Sphere radius must be a number, got {self.radius!r}") from e
        if not math.isfinite(radius) or radius <= 0.0:
            raise InvalidSceneError(f"Sphere radius must be finite and positive, got {radius}")
        object.__setattr__(self, "radius", radius)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "sphere",
            "center": list(self.center),
            "radius": self.radius,
            "color": list(self.color),
        }


# Any primitive description the primitive table can store
Primitive = SphereInfo


def primitive_from_dict(data: dict[str, Any]) -> Primitive:
    """Build a primitive description from its dictionary form.

    Raises:
        InvalidSceneError: If the type is unknown or a field is missing/invalid.
    """
    _expect("Primitive", data, dict)
    prim_type = str(data.get("type", "")).lower()
    if prim_type == "sphere":
        try:
            return SphereInfo(
                center=data["center"],
                radius=data["radius"],
                color=data["color"],
            )
        except KeyError as e:
            raise InvalidSceneError(f"Sphere is missing field {e.args[0]!r}") from e
    raise InvalidSceneError(f"Unknown primitive type: {prim_type!r}")


class Scene:
    """Ordered collection of primitives.

    Attributes:
        primitives: The primitive descriptions in insertion order.

    Example:
        >>> scene = Scene()
        >>> scene.add_sphere((-0.2, 0.2, 2.0), 0.7, (0.8, 0.2, 0.2))
        0
        >>> scene.add_sphere((0.0, -20001.0, 2.0), 20000.0, (0.3, 0.3, 0.9))
        1
        >>> len(scene)
        2
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.primitives: list[Primitive] = []

    @classmethod
    def from_primitives(cls, primitives: Iterable[Primitive]) -> Scene:
        """Create a scene holding the given primitives in order."""
        scene = cls()
        for primitive in primitives:
            scene.add(primitive)
        return scene

    def __len__(self) -> int:
        return len(self.primitives)

    def __iter__(self) -> Iterator[Primitive]:
        return iter(self.primitives)

    def clear(self) -> None:
        """Remove all primitives."""
        self.primitives.clear()

    def add(self, primitive: Primitive) -> int:
        """Append a primitive description.

        Args:
            primitive: The primitive to add.

        Returns:
            The scene index of the primitive.

        Raises:
            InvalidSceneError: If the primitive type is unsupported or the
                scene is full.
        """
        if not isinstance(primitive, SphereInfo):
            raise InvalidSceneError(f"Unsupported primitive: {primitive!r}")
        if len(self.primitives) >= MAX_PRIMITIVES:
            raise InvalidSceneError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
        self.primitives.append(primitive)
        return len(self.primitives) - 1

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        color: tuple[float, float, float],
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere.
            color: The base color as (R, G, B).

        Returns:
            The scene index of the sphere.

        Raises:
            InvalidSceneError: If the sphere is invalid or the scene is full.
        """
        return self.add(SphereInfo(center=center, radius=radius, color=color))

    def upload(self) -> None:
        """Write the primitives into the Taichi primitive table, in order."""
        clear_scene()
        for primitive in self.primitives:
            if primitive.kind == PrimitiveKind.SPHERE:
                add_sphere(primitive.center, primitive.radius, primitive.color)
        logger.debug("Uploaded %d primitive(s)", get_primitive_count())

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the primitives to a dictionary (for JSON serialization)."""
        return {"primitives": [p.to_dict() for p in self.primitives]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Scene:
        """Create a scene from a dictionary with a 'primitives' list."""
        return cls.from_primitives(
            primitive_from_dict(p)
            for p in _expect("primitives", data.get("primitives", []), list)
        )


@dataclass
class SceneConfig:
    """Configuration for a complete render setup, as stored in scene files.

    Attributes:
        primitives: List of primitive configurations.
        camera: Camera configuration ({"position": [x, y, z]}).
        light: Light configuration ({"position": [x, y, z]}).
        screen: Screen configuration ({"resolution": [w, h]} plus optional
            "top_left" and "bottom_right").
    """

    primitives: list[dict[str, Any]] = field(default_factory=list)
    camera: dict[str, Any] = field(default_factory=dict)
    light: dict[str, Any] = field(default_factory=dict)
    screen: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_objects(
        cls, scene: Scene, camera: Camera, screen: Screen, light: Light
    ) -> SceneConfig:
        """Export a render setup to a configuration object."""
        return cls(
            primitives=scene.to_dict()["primitives"],
            camera={"position": list(camera.position)},
            light={"position": list(light.position)},
            screen={
                "resolution": list(screen.resolution),
                "top_left": list(screen.top_left),
                "bottom_right": list(screen.bottom_right),
            },
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SceneConfig:
        return cls(
            primitives=list(_expect("primitives", data.get("primitives", []), list)),
            camera=dict(_expect("camera", data.get("camera", {}), dict)),
            light=dict(_expect("light", data.get("light", {}), dict)),
            screen=dict(_expect("screen", data.get("screen", {}), dict)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "primitives": self.primitives,
            "camera": self.camera,
            "light": self.light,
            "screen": self.screen,
        }

    def build(
        self, resolution: tuple[int, int] | None = None
    ) -> tuple[Scene, Camera, Screen, Light]:
        """Construct the scene and view objects described by this config.

        Args:
            resolution: Overrides the screen resolution. When the config has
                explicit corners they are kept; otherwise the screen is
                rebuilt for the new aspect ratio.

        Returns:
            Tuple of (scene, camera, screen, light).

        Raises:
            InvalidSceneError: If a required section is missing or invalid.
        """
        if "position" not in self.camera:
            raise InvalidSceneError("Scene config is missing camera.position")
        if "position" not in self.light:
            raise InvalidSceneError("Scene config is missing light.position")

        scene = Scene.from_dict({"primitives": self.primitives})
        camera = Camera(_triple("Camera position", self.camera["position"]))
        light = Light(_triple("Light position", self.light["position"]))

        if resolution is None:
            if "resolution" not in self.screen:
                raise InvalidSceneError("Scene config is missing screen.resolution")
            res = self.screen["resolution"]
            if not isinstance(res, (list, tuple)) or len(res) != 2:
                raise InvalidSceneError(f"screen.resolution must be [width, height], got {res!r}")
            resolution = (res[0], res[1])

        width, height = resolution
        if "top_left" in self.screen and "bottom_right" in self.screen:
            screen = Screen(
                resolution=(width, height),
                top_left=_triple("Screen top_left", self.screen["top_left"]),
                bottom_right=_triple("Screen bottom_right", self.screen["bottom_right"]),
            )
        else:
            screen = Screen.for_aspect(width, height)

        return scene, camera, screen, light


def load_scene_file(
    path: str | Path, resolution: tuple[int, int] | None = None
) -> tuple[Scene, Camera, Screen, Light]:
    """Load a render setup from a JSON scene file.

    Args:
        path: Path to the JSON file.
        resolution: Optional resolution override (see ``SceneConfig.build``).

    Returns:
        Tuple of (scene, camera, screen, light).

    Raises:
        OSError: If the file cannot be read.
        InvalidSceneError: If the file is not valid JSON or describes an
            invalid scene.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidSceneError(f"Scene file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise InvalidSceneError(f"Scene file {path} must contain a JSON object")

    logger.info("Loading scene file %s", path)
    return SceneConfig.from_dict(data).build(resolution)


def save_scene_file(
    path: str | Path, scene: Scene, camera: Camera, screen: Screen, light: Light
) -> None:
    """Save a render setup to a JSON scene file."""
    config = SceneConfig.from_objects(scene, camera, screen, light)
    Path(path).write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
