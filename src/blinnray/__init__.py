"""Taichi-accelerated ray tracer for scenes built from spheres.

This package renders a static scene of primitives into an RGB pixel buffer:
- One primary ray per pixel through a planar screen
- Nearest-hit search over an ordered primitive table
- Hard shadows from a single point light
- Blinn-Phong local illumination with saturating color arithmetic
- Plain-text PPM (P3) output

Subpackages:
    core: Vector math, colors, rays, shading, and the render engine
    geometry: Primitive records and their intersection routines
    scene: Primitive table, scene description, and scene files
    camera: Camera, light, and screen mapping
    output: Pixel buffer encoding and persistence

Modules holding Taichi fields must be imported after ``ti.init``; see
``blinnray.runtime.init_taichi``.
"""

__version__ = "0.1.0"
