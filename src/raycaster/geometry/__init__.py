"""Geometry module for shape primitives.

This module provides the two geometric primitives of the ray caster:

Components:
    sphere: Sphere primitive with geometric ray-sphere intersection
    plane: One-sided infinite plane

All intersection routines are Taichi functions (@ti.func) returning a
HitRecord, and each primitive has a matching surface normal function:
    rec = hit_shape(ray_origin, ray_direction, shape)
    normal = shape_normal(shape, point)
"""

from .plane import PLANE_EPSILON, Plane, hit_plane, make_plane, plane_normal
from .sphere import (
    HitRecord,
    Sphere,
    SphereRootPolicy,
    hit_sphere,
    make_sphere,
    sphere_normal,
)

__all__ = [
    "Sphere",
    "SphereRootPolicy",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
    "sphere_normal",
    "Plane",
    "PLANE_EPSILON",
    "hit_plane",
    "make_plane",
    "plane_normal",
]
