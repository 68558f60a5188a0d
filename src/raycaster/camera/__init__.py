"""Camera module for primary ray generation.

Components:
    pinhole: Fixed pinhole camera at the origin looking down -Z

Camera responsibilities:
    - Map integer pixel coordinates to sensor positions (pixel centers)
    - Correct for aspect ratio and field of view
    - Reject sensor shapes the projection does not support (width < height)

Pixel coordinates follow raster order: x = 0 is the left column and
y = 0 is the top row.
"""

from .pinhole import (
    create_prime_ray,
    fov_adjustment,
    get_camera_info,
    get_prime_ray,
    validate_sensor,
)

__all__ = [
    "create_prime_ray",
    "fov_adjustment",
    "get_camera_info",
    "get_prime_ray",
    "validate_sensor",
]
