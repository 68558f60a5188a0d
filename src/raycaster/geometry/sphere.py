"""Sphere primitive with geometric ray-sphere intersection.

This module provides a Sphere dataclass, the shared HitRecord returned by all
primitive intersection routines, and the sphere intersection and surface
normal functions.

The intersection uses the geometric (projection) formulation rather than the
quadratic one. With to_center the vector from the ray origin to the sphere center:

    adj = dot(to_center, direction)                  # projection onto the ray
    d2  = dot(to_center, to_center) - adj * adj      # squared distance center to ray
    thc = sqrt(radius^2 - d2)                        # half chord length
    t0, t1 = adj - thc, adj + thc

The ray direction must be unit length for d2 to be a squared distance.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -5), radius=1.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class SphereRootPolicy(IntEnum):
    """How the reported distance is chosen from the two sphere roots.

    NEAREST reports min(t0, t1) even when t0 is negative, so a ray starting
    inside the sphere yields a negative distance. FIRST_POSITIVE reports t1
    in that case, i.e. the exit point in front of the ray origin.
    """

    NEAREST = 0
    FIRST_POSITIVE = 1


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere. Zero or negative radii are a
            caller precondition violation and are not checked.
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Result of a ray-primitive intersection test.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: The distance along the ray to the intersection.
            Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    root_policy: ti.i32,
) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction vector of the ray.
        sphere: The sphere to test intersection against.
        root_policy: A SphereRootPolicy value selecting the reported root.

    Returns:
        A HitRecord. The ray misses when it passes farther than the radius
        from the center, or when both roots lie behind the origin.
    """
    to_center = sphere.center - ray_origin
    adj = tm.dot(to_center, ray_direction)
    d2 = tm.dot(to_center, to_center) - adj * adj
    radius2 = sphere.radius * sphere.radius

    did_hit = 0
    hit_t = 0.0

    if d2 <= radius2:
        thc = ti.sqrt(radius2 - d2)
        t0 = adj - thc
        t1 = adj + thc

        if not (t0 < 0.0 and t1 < 0.0):
            did_hit = 1
            hit_t = tm.min(t0, t1)
            if root_policy == int(SphereRootPolicy.FIRST_POSITIVE) and hit_t < 0.0:
                hit_t = tm.max(t0, t1)

    return HitRecord(hit=did_hit, t=hit_t)


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal of the sphere at a surface point."""
    return tm.normalize(point - sphere.center)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
