#!/usr/bin/env python3
"""Render a sphere scene to a PPM image.

This script renders either the built-in reference scene (three spheres over a
floor) or a JSON scene file, and writes the result as plain-text PPM.

Usage:
    python examples/render_spheres.py [options]

Options:
    --width WIDTH            Image width in pixels (default: 900)
    --height HEIGHT          Image height in pixels (default: 600)
    --scene PATH             JSON scene file (default: built-in scene)
    --output OUTPUT          Output file path (default: images/render.ppm)
    --max-value MAX          Maximum channel value (default: 255)
    --rows-per-batch ROWS    Rows per progress update (default: 50)
    --cpu                    Force the CPU backend
    --quiet                  Suppress progress output
    --verbose                Enable debug logging

Example:
    python examples/render_spheres.py --width 450 --height 300 --output small.ppm
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sphere scene to a PPM image.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Image width in pixels (default: 900, or the scene file's)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Image height in pixels (default: 600, or the scene file's)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in reference scene)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="images/render.ppm",
        help="Output file path (default: images/render.ppm)",
    )
    parser.add_argument(
        "--max-value",
        type=int,
        default=255,
        help="Maximum channel value (default: 255)",
    )
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=50,
        help="Rows per progress update (default: 50)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args()


def render_spheres(
    width: int | None = None,
    height: int | None = None,
    scene_path: str | None = None,
    output_path: str = "images/render.ppm",
    max_value: int = 255,
    rows_per_batch: int = 50,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it as PPM.

    Args:
        width: Image width in pixels (None keeps the scene's default).
        height: Image height in pixels (None keeps the scene's default).
        scene_path: JSON scene file, or None for the reference scene.
        output_path: Output file path (PPM).
        max_value: Maximum channel value for encoding.
        rows_per_batch: Rows to render between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from blinnray.core.engine import RayTracer
    from blinnray.output.ppm import write_render
    from blinnray.scene.default_scene import (
        DEFAULT_HEIGHT,
        DEFAULT_WIDTH,
        create_default_scene,
    )
    from blinnray.scene.manager import load_scene_file

    if scene_path is None:
        scene, camera, screen, light = create_default_scene(
            width or DEFAULT_WIDTH, height or DEFAULT_HEIGHT
        )
    else:
        scene, camera, screen, light = load_scene_file(scene_path)
        if width is not None or height is not None:
            resolution = (width or screen.width, height or screen.height)
            scene, camera, screen, light = load_scene_file(scene_path, resolution)

    if not quiet:
        print(f"Rendering {len(scene)} primitive(s) at {screen.width}x{screen.height}...")

    tracer = RayTracer(scene, camera, screen, light)
    start_time = time.time()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not quiet:
            progress_pct = (rows_done / total_rows) * 100 if total_rows > 0 else 0
            print(
                f"\r  Progress: {rows_done}/{total_rows} rows ({progress_pct:.1f}%)",
                end="",
                flush=True,
            )

    tracer.render(rows_per_batch=rows_per_batch, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = write_render(tracer, output_path, max_value=max_value)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    from blinnray.runtime import init_taichi

    init_taichi(arch=ti.cpu if args.cpu else None)

    from blinnray.errors import BlinnrayError

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            scene_path=args.scene,
            output_path=args.output,
            max_value=args.max_value,
            rows_per_batch=args.rows_per_batch,
            quiet=args.quiet,
        )
        return 0
    except (BlinnrayError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
