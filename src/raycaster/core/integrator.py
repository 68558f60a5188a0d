"""Ray casting integrator: directional light, shading and the pixel loop.

This module implements the rendering kernel. For each pixel a primary ray is
cast through the pixel center, the nearest element hit is found, and the hit
is shaded with Lambertian diffuse reflection of a single directional light.
One shadow ray per hit decides whether the light is visible; there is no
recursion, ambient term or multi-sampling.

Shading of a hit at distance t along ray (o, d) on element e:
    1. hit_point = o + d * t
    2. normal = surface normal of e at hit_point
    3. direction_to_light = -normalize(light.direction)
    4. light_power = dot(normal, direction_to_light) * light.intensity
    5. light_reflected = albedo / pi
    6. a shadow ray from hit_point + normal * shadow_bias toward the light,
       traced with e excluded; any hit means the pixel is black
    7. otherwise color = clamp01(e.color * light.color * power * reflected)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.core.integrator import (
    ...     setup_render_target, render_image, get_normalized_image_numpy
    ... )
    >>> from raycaster.scene.intersection import add_sphere, clear_scene
    >>> from raycaster.scene.light import reset_shading, setup_light
    >>> clear_scene()
    >>> reset_shading()
    >>> add_sphere((0, 0, -5), 1.0, color=(1.0, 0.0, 0.0))
    >>> setup_light(direction=(0, 0, -1), color=(1.0, 1.0, 1.0), intensity=1.0)
    >>> setup_render_target(100, 100, fov=90.0)
    >>> render_image()
    >>> image = get_normalized_image_numpy()
"""

import logging
import time

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from raycaster.camera.pinhole import (
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    fov_adjustment,
    get_prime_ray,
    validate_sensor,
)
from raycaster.core.ray import Ray, make_ray, ray_at
from raycaster.materials.lambertian import (
    LambertianMaterial,
    lambert_light_power,
    shade_lambertian_material,
)
from raycaster.scene.intersection import (
    NO_ELEMENT,
    SceneHitRecord,
    element_normal,
    get_element_albedo,
    get_element_color,
    intersect_scene,
)
from raycaster.scene.light import (
    get_clamp_light_power,
    get_light_color,
    get_light_direction,
    get_light_intensity,
    get_shadow_bias,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Canvas fill for pixels whose primary ray misses (light sky blue)
DEFAULT_BACKGROUND = (135 / 255, 206 / 255, 250 / 255)

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())
_fov_adjustment = ti.field(dtype=ti.f32, shape=())

# Color buffer indexed [x, y] with y = 0 the top row (preallocated to max size)
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_background_color = ti.Vector.field(3, dtype=ti.f32, shape=())

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(
    width: int,
    height: int,
    fov: float,
    background: tuple[float, float, float] = DEFAULT_BACKGROUND,
) -> None:
    """Initialize the render target and camera projection.

    Validates the sensor, sets the active image dimensions and fills the
    buffer with the background color.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).
        fov: Field of view in degrees.
        background: Canvas fill color, channels in [0, 1].

    Raises:
        SceneConfigurationError: If width < height, a dimension is not
            positive or the image exceeds the maximum supported size.
    """
    validate_sensor(width, height)

    _image_width[None] = width
    _image_height[None] = height
    _fov_adjustment[None] = fov_adjustment(fov)
    _background_color[None] = [background[0], background[1], background[2]]
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Fill the active region of the render target with the background."""
    width, height = get_image_dimensions()
    if width > 0 and height > 0:
        _fill_background(width, height)


@ti.kernel
def _fill_background(width: ti.i32, height: ti.i32):
    for x, y in ti.ndrange(width, height):
        _color_buffer[x, y] = _background_color[None]


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def reset_render_target() -> None:
    """Mark the render target as not set up."""
    _render_target_initialized[None] = 0
    _image_width[None] = 0
    _image_height[None] = 0


def get_image() -> "ti.MatrixField":
    """Get the color buffer.

    Note: This returns the full preallocated buffer. Use get_image_dimensions()
    to determine the active region.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return _color_buffer


# =============================================================================
# Shading
# =============================================================================


@ti.func
def is_in_shadow(hit_point: vec3, normal: vec3, element_id: ti.i32) -> ti.i32:
    """Cast a shadow ray toward the light.

    Args:
        hit_point: The shaded surface point.
        normal: The shading normal at hit_point.
        element_id: The shaded element, excluded from the shadow test.

    Returns:
        1 if any other element lies along the ray toward the light.
    """
    shadow_origin = hit_point + normal * get_shadow_bias()
    shadow_ray = make_ray(shadow_origin, -get_light_direction())
    occluder = intersect_scene(shadow_ray.origin, shadow_ray.direction, element_id)
    return occluder.hit


@ti.func
def shade_hit(ray: Ray, hit: SceneHitRecord) -> vec3:
    """Compute the color of a primary ray hit.

    Args:
        ray: The primary ray.
        hit: Its nearest intersection (hit == 1).

    Returns:
        The pixel color with channels in [0, 1]; black when shadowed.
    """
    element_id = hit.element_id
    hit_point = ray_at(ray, hit.t)
    normal = element_normal(element_id, hit_point)
    direction_to_light = -tm.normalize(get_light_direction())

    light_power = lambert_light_power(
        normal, direction_to_light, get_light_intensity(), get_clamp_light_power()
    )

    color = vec3(0.0, 0.0, 0.0)
    if is_in_shadow(hit_point, normal, element_id) == 0:
        material = LambertianMaterial(
            color=get_element_color(element_id),
            albedo=get_element_albedo(element_id),
        )
        color = shade_lambertian_material(material, get_light_color(), light_power)
    return color


@ti.func
def render_pixel_impl(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Cast and shade the primary ray of one pixel.

    Returns:
        The shaded color, or the background color if nothing is hit.
    """
    ray = get_prime_ray(x, y, width, height, _fov_adjustment[None])
    hit = intersect_scene(ray.origin, ray.direction, NO_ELEMENT)
    color = _background_color[None]
    if hit.hit == 1:
        color = shade_hit(ray, hit)
    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_kernel(width: ti.i32, height: ti.i32):
    """Cast one primary ray per pixel and write hits into the color buffer.

    Pixels are independent and each writes only its own cell, so the loop
    runs in parallel and the result does not depend on scheduling.
    """
    for x, y in ti.ndrange(width, height):
        ray = get_prime_ray(x, y, width, height, _fov_adjustment[None])
        hit = intersect_scene(ray.origin, ray.direction, NO_ELEMENT)
        if hit.hit == 1:
            _color_buffer[x, y] = shade_hit(ray, hit)


@ti.kernel
def _render_single_pixel(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    # Single-iteration outer loop keeps the element scans serial
    color = vec3(0.0, 0.0, 0.0)
    for _ in range(1):
        color = render_pixel_impl(x, y, width, height)
    return color


# =============================================================================
# Public Rendering API
# =============================================================================


def render_pixel(x: int, y: int) -> tuple[float, float, float]:
    """Render a single pixel without touching the color buffer.

    This is a Python-callable function for testing. For production rendering,
    use render_image() which processes all pixels in parallel.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) color values in [0, 1].

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If (x, y) lies outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not (0 <= x < width and 0 <= y < height):
        raise ValueError(f"Pixel ({x}, {y}) is outside the {width}x{height} image")
    color = _render_single_pixel(x, y, width, height)

    return (float(color[0]), float(color[1]), float(color[2]))


def render_image() -> None:
    """Render every pixel of the render target.

    The buffer is refilled with the background first, so calling this again
    reproduces the same image.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    start_time = time.perf_counter()

    clear_render_target()
    _render_kernel(width, height)
    ti.sync()

    logger.info(
        "Rendered %dx%d image in %.3fs", width, height, time.perf_counter() - start_time
    )


def get_normalized_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    Returns the color buffer with values in [0, 1] range (clamped).
    The array shape is (height, width, 3) with row 0 at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    # Get raw image data (full buffer) and extract the active region
    full_image = _color_buffer.to_numpy()
    image = full_image[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3) for standard image format
    image = np.transpose(image, (1, 0, 2))

    image = np.clip(image, 0.0, 1.0)

    return image.astype(np.float32)
