"""Pinhole camera model for primary ray generation.

The camera sits at the origin and looks down the negative Z axis. Each pixel
(x, y) is mapped to a point on a virtual sensor at unit distance:

    fov_adjustment = tan(radians(fov) / 2)
    aspect_ratio   = width / height
    sensor_x = ((x + 0.5) / width * 2 - 1) * aspect_ratio * fov_adjustment
    sensor_y = (1 - (y + 0.5) / height * 2) * fov_adjustment

so pixel centers are sampled, x grows to the right and y = 0 is the top row.
The field of view spans the sensor's vertical axis, which is the narrower one:
the sensor must be landscape or square (width >= height).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.camera.pinhole import create_prime_ray
    >>> origin, direction = create_prime_ray(50, 50, 100, 100, fov=90.0)
"""

import math

import taichi as ti
import taichi.math as tm

from raycaster.core.ray import Ray, make_ray, vec3
from raycaster.errors import SceneConfigurationError

# Maximum supported image dimensions (the render target is preallocated)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# =============================================================================
# Camera Setup (Python-side)
# =============================================================================


def validate_sensor(width: int, height: int) -> None:
    """Check that a sensor of the given size can be rendered.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Raises:
        SceneConfigurationError: If a dimension is not positive, the sensor
            is in portrait orientation (width < height) or it is larger than
            MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.
    """
    if width <= 0 or height <= 0:
        raise SceneConfigurationError(
            f"Image dimensions must be positive, got {width}x{height}"
        )
    if width < height:
        raise SceneConfigurationError(
            f"Image width must be at least its height, got {width}x{height}"
        )
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise SceneConfigurationError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )


def fov_adjustment(fov: float) -> float:
    """Half-extent of the sensor at unit distance for a field of view.

    Args:
        fov: Field of view in degrees.

    Returns:
        tan(fov / 2) with the angle converted to radians.
    """
    return math.tan(math.radians(fov) / 2.0)


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_prime_ray(
    x: ti.i32,
    y: ti.i32,
    width: ti.i32,
    height: ti.i32,
    fov_adj: ti.f32,
) -> Ray:
    """Generate the primary ray through the center of pixel (x, y).

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.
        fov_adj: Value of fov_adjustment() for the scene's field of view.

    Returns:
        A Ray from the origin with a unit-length direction.
    """
    aspect_ratio = ti.cast(width, ti.f32) / ti.cast(height, ti.f32)
    sensor_x = ((ti.cast(x, ti.f32) + 0.5) / width * 2.0 - 1.0) * aspect_ratio * fov_adj
    sensor_y = (1.0 - (ti.cast(y, ti.f32) + 0.5) / height * 2.0) * fov_adj
    return make_ray(vec3(0.0, 0.0, 0.0), vec3(sensor_x, sensor_y, -1.0))


@ti.kernel
def _prime_ray_direction(
    x: ti.i32,
    y: ti.i32,
    width: ti.i32,
    height: ti.i32,
    fov_adj: ti.f32,
) -> vec3:
    ray = get_prime_ray(x, y, width, height, fov_adj)
    return ray.direction


def create_prime_ray(
    x: int,
    y: int,
    width: int,
    height: int,
    fov: float,
) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """Generate the primary ray for a pixel (Python side).

    Args:
        x: Pixel column in [0, width).
        y: Pixel row in [0, height).
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Field of view in degrees.

    Returns:
        Tuple of (origin, direction); the direction has unit length.

    Raises:
        SceneConfigurationError: If the sensor dimensions are invalid.
    """
    validate_sensor(width, height)
    direction = _prime_ray_direction(x, y, width, height, fov_adjustment(fov))
    return (0.0, 0.0, 0.0), (float(direction[0]), float(direction[1]), float(direction[2]))


def get_camera_info(width: int, height: int, fov: float) -> dict[str, float]:
    """Get the derived camera parameters for debugging.

    Returns:
        Dictionary with aspect_ratio, fov_adjustment and the sensor
        half-extents (half_width, half_height) at unit distance.
    """
    adj = fov_adjustment(fov)
    aspect_ratio = width / height
    return {
        "aspect_ratio": aspect_ratio,
        "fov_adjustment": adj,
        "half_width": aspect_ratio * adj,
        "half_height": adj,
    }
