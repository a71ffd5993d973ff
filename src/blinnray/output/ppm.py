"""Plain-text PPM (P3) encoding of rendered pixels.

The format is a header line ``P3 <width> <height> <max>`` followed by one
``R G B`` line per pixel in row-major order, joined with newlines (no
trailing newline).

Color channels in [0, 1] become integers by scaling with the maximum channel
value and truncating toward zero. Nothing is clamped here: a channel that
went negative upstream encodes as a negative integer.

Example:
    >>> from blinnray.output.ppm import generate_ppm
    >>> generate_ppm((1, 1), 255, [(255, 255, 255)])
    'P3 1 1 255\\n255 255 255'
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from blinnray.errors import ImageWriteError

if TYPE_CHECKING:
    from blinnray.core.engine import RayTracer

logger = logging.getLogger(__name__)

# Conventional 8-bit maximum channel value
DEFAULT_MAX_VALUE = 255


def colors_to_channels(
    colors: npt.ArrayLike,
    max_value: int = DEFAULT_MAX_VALUE,
) -> npt.NDArray[np.int64]:
    """Convert [0, 1] colors to integer channel values.

    Args:
        colors: Array of shape (N, 3) (or any shape ending in 3) of floats.
        max_value: The integer value a channel of 1.0 maps to.

    Returns:
        Integer array of the same shape: ``trunc(channel * max_value)``.
    """
    scaled = np.asarray(colors, dtype=np.float64) * max_value
    return np.trunc(scaled).astype(np.int64)


def generate_ppm(
    resolution: tuple[int, int],
    max_value: int,
    pixels: Iterable[tuple[int, int, int]] | npt.NDArray[np.integer],
) -> str:
    """Encode integer pixels as P3 text.

    Args:
        resolution: (width, height) in pixels.
        max_value: The maximum channel value written in the header.
        pixels: width * height integer (R, G, B) triples in row-major order.

    Returns:
        The PPM text.
    """
    width, height = resolution
    header = f"P3 {width} {height} {max_value}"
    body = "\n".join(f"{r} {g} {b}" for r, g, b in pixels)
    return "\n".join([header, body])


def save_ppm(path: str | Path, text: str) -> Path:
    """Write encoded PPM text to a file.

    Args:
        path: Output file path. Missing parent directories are created.
        text: The PPM text.

    Returns:
        The path written.

    Raises:
        ImageWriteError: If the file cannot be written.
    """
    output = Path(path)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="ascii")
    except OSError as e:
        raise ImageWriteError(f"Cannot write image to {output}: {e}") from e
    logger.info("Wrote %s", output)
    return output


def write_render(
    tracer: RayTracer,
    path: str | Path,
    max_value: int = DEFAULT_MAX_VALUE,
) -> Path:
    """Encode a finished render and save it as a PPM file.

    Args:
        tracer: A RayTracer whose render() has completed.
        path: Output file path.
        max_value: The maximum channel value.

    Returns:
        The path written.

    Raises:
        RuntimeError: If the tracer has not rendered yet.
        ImageWriteError: If the file cannot be written.
    """
    channels = colors_to_channels(tracer.get_pixels(), max_value)
    text = generate_ppm(tracer.screen.resolution, max_value, channels.tolist())
    return save_ppm(path, text)
