"""Preview module for rendered image output.

Components:
    export: PNG export and image comparison utilities

Example:
    >>> from raycaster.preview import save_png
    >>> from raycaster.core.renderer import Renderer
    >>>
    >>> renderer = Renderer()
    >>> renderer.render(scene)
    >>> save_png(renderer, "output.png")
"""

from raycaster.preview.export import (
    compute_rmse,
    image_to_uint8,
    load_png,
    save_png,
    save_png_from_array,
)

__all__ = [
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "load_png",
    "compute_rmse",
]
