"""Scene-level element storage and nearest-hit search.

Scene geometry is a closed sum type (sphere | plane) stored as a structure of
arrays in Taichi fields. Every element has a type tag, shape parameters and
its surface attributes (color and albedo). Elements are addressed by their
index in the scene's element list; intersection records refer back to the
geometry through that index.

The nearest-hit search scans every element in list order (no acceleration
structure), optionally skipping one element so a shadow ray leaving a surface
cannot hit that same surface.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.scene.intersection import (
    ...     add_sphere, add_plane, clear_scene, trace
    ... )
    >>> clear_scene()
    >>> add_sphere((0, 0, -5), 1.0, color=(1.0, 0.0, 0.0))
    >>> add_plane((0, -2, -5), (0, -1, 0), color=(0.5, 1.0, 0.5))
    >>> hit, distance, element_id = trace((0, 0, 0), (0, 0, -1))
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from raycaster.geometry.plane import Plane, hit_plane, plane_normal
from raycaster.geometry.sphere import (
    HitRecord,
    Sphere,
    SphereRootPolicy,
    hit_sphere,
    sphere_normal,
)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class ElementType(IntEnum):
    """Type tag of a scene element."""

    SPHERE = 0
    PLANE = 1


@ti.dataclass
class SceneHitRecord:
    """Record of the nearest ray-scene intersection.

    Attributes:
        hit: Whether the ray intersected any element (1 if hit, 0 if miss).
        t: The distance along the ray to the intersection.
            Only valid if hit == 1.
        element_id: Index of the hit element in the scene's element list.
            -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    element_id: ti.i32


# Maximum number of elements supported in the scene
MAX_ELEMENTS = 1024

# Hits at or beyond this distance are ignored
TRACE_MAX_DISTANCE = 30000.0

# Element id meaning "exclude nothing"
NO_ELEMENT = -1

# Element storage: Structure of Arrays layout
# element_positions holds the sphere center or the plane origin
element_types = ti.field(dtype=ti.i32, shape=MAX_ELEMENTS)
element_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_ELEMENTS)
element_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_ELEMENTS)
element_radii = ti.field(dtype=ti.f32, shape=MAX_ELEMENTS)
element_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_ELEMENTS)
element_albedos = ti.field(dtype=ti.f32, shape=MAX_ELEMENTS)
num_elements = ti.field(dtype=ti.i32, shape=())

# Root selection for sphere hits (a SphereRootPolicy value)
_sphere_root_policy = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all elements from the scene.

    Resets the element count to zero. Field data is overwritten when new
    elements are added. The sphere root policy is reset to NEAREST.
    """
    num_elements[None] = 0
    _sphere_root_policy[None] = int(SphereRootPolicy.NEAREST)


def set_sphere_root_policy(policy: SphereRootPolicy) -> None:
    """Select how sphere hits choose between their two roots."""
    _sphere_root_policy[None] = int(policy)


def get_sphere_root_policy() -> SphereRootPolicy:
    """Get the active sphere root policy."""
    return SphereRootPolicy(int(_sphere_root_policy[None]))


def _next_element_index() -> int:
    idx = num_elements[None]
    if idx >= MAX_ELEMENTS:
        raise RuntimeError(f"Maximum number of elements ({MAX_ELEMENTS}) exceeded")
    return idx


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    color: tuple[float, float, float],
    albedo: float = 1.0,
) -> int:
    """Append a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        color: Surface color with channels normalized to [0, 1].
        albedo: Diffuse reflectivity in [0, 1].

    Returns:
        The element id of the added sphere.

    Raises:
        RuntimeError: If the maximum number of elements is exceeded.
    """
    idx = _next_element_index()
    element_types[idx] = int(ElementType.SPHERE)
    element_positions[idx] = [center[0], center[1], center[2]]
    element_normals[idx] = [0.0, 0.0, 0.0]
    element_radii[idx] = radius
    element_colors[idx] = [color[0], color[1], color[2]]
    element_albedos[idx] = albedo
    num_elements[None] = idx + 1
    return idx


def add_plane(
    origin: tuple[float, float, float],
    normal: tuple[float, float, float],
    color: tuple[float, float, float],
    albedo: float = 1.0,
) -> int:
    """Append a one-sided plane to the scene.

    Args:
        origin: Any point on the plane.
        normal: Unit normal pointing away from the visible side.
        color: Surface color with channels normalized to [0, 1].
        albedo: Diffuse reflectivity in [0, 1].

    Returns:
        The element id of the added plane.

    Raises:
        RuntimeError: If the maximum number of elements is exceeded.
    """
    idx = _next_element_index()
    element_types[idx] = int(ElementType.PLANE)
    element_positions[idx] = [origin[0], origin[1], origin[2]]
    element_normals[idx] = [normal[0], normal[1], normal[2]]
    element_radii[idx] = 0.0
    element_colors[idx] = [color[0], color[1], color[2]]
    element_albedos[idx] = albedo
    num_elements[None] = idx + 1
    return idx


def get_element_count() -> int:
    """Get the number of elements in the scene."""
    return int(num_elements[None])


# =============================================================================
# Element Dispatch
# =============================================================================


@ti.func
def _make_miss_record() -> SceneHitRecord:
    return SceneHitRecord(hit=0, t=0.0, element_id=NO_ELEMENT)


@ti.func
def intersect_element(element_id: ti.i32, ray_origin: vec3, ray_direction: vec3) -> HitRecord:
    """Intersect a ray with one scene element, dispatching on its type tag.

    Args:
        element_id: Index of the element.
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction vector of the ray.

    Returns:
        The primitive's HitRecord. Unknown type tags never hit.
    """
    rec = HitRecord(hit=0, t=0.0)
    element_type = element_types[element_id]

    if element_type == int(ElementType.SPHERE):
        sphere = Sphere(center=element_positions[element_id], radius=element_radii[element_id])
        rec = hit_sphere(ray_origin, ray_direction, sphere, _sphere_root_policy[None])

    elif element_type == int(ElementType.PLANE):
        plane = Plane(origin=element_positions[element_id], normal=element_normals[element_id])
        rec = hit_plane(ray_origin, ray_direction, plane)

    return rec


@ti.func
def element_normal(element_id: ti.i32, point: vec3) -> vec3:
    """Shading normal of a scene element at a surface point.

    Args:
        element_id: Index of the element.
        point: A point on the element's surface.

    Returns:
        The sphere's outward normal, or the negated plane normal.
    """
    normal = vec3(0.0, 0.0, 0.0)
    element_type = element_types[element_id]

    if element_type == int(ElementType.SPHERE):
        sphere = Sphere(center=element_positions[element_id], radius=element_radii[element_id])
        normal = sphere_normal(sphere, point)

    elif element_type == int(ElementType.PLANE):
        plane = Plane(origin=element_positions[element_id], normal=element_normals[element_id])
        normal = plane_normal(plane)

    return normal


@ti.func
def get_element_color(element_id: ti.i32) -> vec3:
    """Normalized surface color of an element."""
    return element_colors[element_id]


@ti.func
def get_element_albedo(element_id: ti.i32) -> ti.f32:
    """Diffuse reflectivity of an element."""
    return element_albedos[element_id]


# =============================================================================
# Nearest-Hit Search
# =============================================================================


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    exclude_id: ti.i32,
) -> SceneHitRecord:
    """Find the nearest element hit by a ray.

    Tests every element in list order and keeps the hit with the smallest
    distance. A later element must be strictly closer to replace an earlier
    one, so equal distances resolve to the first element in the list.

    Distances are not required to be positive. Under SphereRootPolicy.NEAREST
    a ray starting inside a sphere reports the negative entry root, and that
    hit beats every positive-distance hit in front of the ray. Use
    FIRST_POSITIVE to get the nearest hit ahead of the origin instead.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction vector of the ray.
        exclude_id: Element id to skip, or NO_ELEMENT.

    Returns:
        A SceneHitRecord for the nearest hit closer than TRACE_MAX_DISTANCE,
        or a miss record.
    """
    closest_t = TRACE_MAX_DISTANCE
    result = _make_miss_record()

    n = num_elements[None]
    for i in range(n):
        if i != exclude_id:
            rec = intersect_element(i, ray_origin, ray_direction)
            if rec.hit == 1 and rec.t < closest_t:
                closest_t = rec.t
                result = SceneHitRecord(hit=1, t=rec.t, element_id=i)

    return result


# Single-query result storage for the Python-side trace()
_trace_hit = ti.field(dtype=ti.i32, shape=())
_trace_t = ti.field(dtype=ti.f32, shape=())
_trace_element_id = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _trace_kernel(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    exclude_id: ti.i32,
):
    # Single-iteration outer loop keeps the element scan serial
    for _ in range(1):
        rec = intersect_scene(vec3(ox, oy, oz), tm.normalize(vec3(dx, dy, dz)), exclude_id)
        _trace_hit[None] = rec.hit
        _trace_t[None] = rec.t
        _trace_element_id[None] = rec.element_id


def trace(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    exclude_id: int = NO_ELEMENT,
) -> tuple[bool, float, int]:
    """Find the nearest element hit by a ray (Python side).

    This is a Python-callable wrapper around intersect_scene() for
    inspection and testing. The direction is normalized before tracing.

    Args:
        origin: The starting point of the ray.
        direction: The direction of the ray (any non-zero length).
        exclude_id: Element id to skip, or NO_ELEMENT.

    Returns:
        Tuple of (found, distance, element_id). On a miss the distance is
        0.0 and the element id is -1.
    """
    _trace_kernel(
        origin[0],
        origin[1],
        origin[2],
        direction[0],
        direction[1],
        direction[2],
        exclude_id,
    )
    return bool(_trace_hit[None]), float(_trace_t[None]), int(_trace_element_id[None])
