"""Exception types raised by the ray tracer."""


class BlinnrayError(Exception):
    """Base class for all ray tracer errors."""


class InvalidSceneError(BlinnrayError, ValueError):
    """Scene, view, or shading input violates a precondition.

    Raised while a scene is being built or uploaded, before any kernel runs.
    """


class DegenerateGeometryError(BlinnrayError, ArithmeticError):
    """A zero-length vector was normalized during a render.

    Attributes:
        count: Number of normalizations that hit a zero-length vector.
    """

    def __init__(self, count: int) -> None:
        super().__init__(
            f"{count} zero-length vector normalization(s) during render; "
            "check for a camera or light lying on a pixel or surface point"
        )
        self.count = count


class ImageWriteError(BlinnrayError, OSError):
    """The encoded image could not be persisted."""
