"""Image export utilities for rendered images.

This module turns rendered pixel buffers into 8-bit RGB image files via
Pillow. Float images are expected to hold channels in [0, 1]; conversion to
8 bits truncates, so 0.999 becomes 254.

Supported formats:
    - PNG (8-bit RGB via Pillow)
    - Anything else Pillow infers from the file extension

Example:
    >>> from raycaster.preview.export import save_png
    >>> from raycaster.core.renderer import Renderer
    >>> from raycaster.scene.default_scene import create_default_scene
    >>>
    >>> renderer = Renderer()
    >>> renderer.render(create_default_scene())
    >>> save_png(renderer, "output.png")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from raycaster.core.renderer import Renderer

logger = logging.getLogger(__name__)


def image_to_uint8(image: npt.NDArray[np.generic]) -> npt.NDArray[np.uint8]:
    """Convert an image to uint8 for export.

    uint8 input is returned unchanged. Float input is clipped to [0, 1] and
    scaled by 255 with truncation.

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If the array is not an (H, W, 3) image.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    if image.dtype == np.uint8:
        return image

    clipped = np.clip(image.astype(np.float32), 0.0, 1.0)
    return (clipped * 255).astype(np.uint8)


def save_png_from_array(image: npt.NDArray[np.generic], filepath: str) -> None:
    """Save a NumPy array as an 8-bit RGB image file.

    Args:
        image: Image array of shape (H, W, 3), uint8 or floats in [0, 1].
        filepath: Output file path (should end in .png).
    """
    image_uint8 = image_to_uint8(image)

    pil_image = PILImage.fromarray(image_uint8, mode="RGB")
    pil_image.save(filepath)
    logger.info(
        "Saved %dx%d image to %s", image_uint8.shape[1], image_uint8.shape[0], filepath
    )


def save_png(renderer: Renderer, filepath: str) -> None:
    """Save the renderer's last image as a PNG file.

    Args:
        renderer: A Renderer that has rendered at least one scene.
        filepath: Output file path (should end in .png).

    Raises:
        RuntimeError: If nothing has been rendered yet.
    """
    save_png_from_array(renderer.get_image_uint8(), filepath)


def load_png(filepath: str) -> npt.NDArray[np.uint8]:
    """Load an image file as an 8-bit RGB array of shape (H, W, 3)."""
    with PILImage.open(filepath) as pil_image:
        return np.asarray(pil_image.convert("RGB"), dtype=np.uint8)


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
