"""Output module: encoding and persisting rendered pixel buffers.

Components:
    ppm: Color-to-integer conversion, plain-text PPM (P3) encoding, and
        file output
"""

from blinnray.output.ppm import (
    DEFAULT_MAX_VALUE,
    colors_to_channels,
    generate_ppm,
    save_ppm,
    write_render,
)

__all__ = [
    "DEFAULT_MAX_VALUE",
    "colors_to_channels",
    "generate_ppm",
    "save_ppm",
    "write_render",
]
