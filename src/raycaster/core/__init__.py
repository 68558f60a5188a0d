"""Core rendering module.

This module contains the fundamental building blocks of the ray caster:

Components:
    ray: Ray data structure and vector utilities
    integrator: Directional light, shading and the per-pixel render kernel
    renderer: Renderer facade turning a Scene into a pixel buffer

Rendering is plain ray casting: one primary ray per pixel, one shadow ray
per hit, Lambertian shading, no recursion.
"""

from .ray import (
    Ray,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    vec3,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from raycaster.core.integrator or raycaster.core.renderer.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
]
