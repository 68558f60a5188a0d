"""One-sided infinite plane primitive.

A plane is defined by a point on it (origin) and a unit normal. The plane is
one-sided: a ray only hits it when it travels along the normal,
i.e. when dot(normal, direction) is positive. Seen from the camera, the
normal therefore points away from the visible face, and the shading normal
is its negation.

Ray-plane intersection:
    denom = dot(normal, direction)
    t = dot(origin - ray_origin, normal) / denom

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.geometry.plane import Plane, hit_plane
    >>> # Floor at y = -2, visible from above
    >>> floor = Plane(origin=ti.math.vec3(0, -2, -5), normal=ti.math.vec3(0, -1, 0))
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from .sphere import HitRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Rays with dot(normal, direction) at or below this are treated as missing
PLANE_EPSILON = 1e-6


@ti.dataclass
class Plane:
    """An infinite one-sided plane.

    Attributes:
        origin: Any point on the plane (vec3).
        normal: Unit normal (vec3), pointing away from the lit, visible side.
    """

    origin: vec3
    normal: vec3


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: Plane,
) -> HitRecord:
    """Test for ray-plane intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction vector of the ray.
        plane: The plane to test intersection against.

    Returns:
        A HitRecord. Rays parallel to the plane, rays approaching from the
        back face and intersections behind the origin all miss.
    """
    denom = tm.dot(plane.normal, ray_direction)

    did_hit = 0
    hit_t = 0.0

    if denom > PLANE_EPSILON:
        v = plane.origin - ray_origin
        t = tm.dot(v, plane.normal) / denom
        if t >= 0.0:
            did_hit = 1
            hit_t = t

    return HitRecord(hit=did_hit, t=hit_t)


@ti.func
def plane_normal(plane: Plane) -> vec3:
    """Shading normal of the plane, constant over its surface."""
    return -plane.normal


@ti.func
def make_plane(origin: vec3, normal: vec3) -> Plane:
    """Create a plane from a point and a normal."""
    return Plane(origin=origin, normal=normal)
