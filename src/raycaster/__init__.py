"""Taichi-based ray caster.

This package renders scenes of spheres and one-sided planes lit by a single
directional light, with:
- One primary ray per pixel from a pinhole camera at the origin
- Nearest-hit scene queries with per-query element exclusion
- Lambertian diffuse shading with binary shadow rays
- JSON scene descriptions and PNG export

Subpackages:
    core: Ray utilities, the shading integrator and the Renderer facade
    geometry: Sphere and plane primitives and their intersection tests
    materials: Lambertian shading
    scene: Scene description, validation, storage and ray-scene queries
    camera: Pinhole camera with prime ray generation
    preview: Image export utilities
"""

__version__ = "0.1.0"
