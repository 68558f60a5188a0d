"""Renderer facade: render(scene) -> pixel buffer.

This module provides a convenient wrapper around the core integrator that
takes an explicit Scene (and optional RenderOptions), uploads it, renders
every pixel and hands back the image as a NumPy array.

The Taichi-side scene storage and render target are shared by every
Renderer. Each render() uploads the scene it is given, so one Renderer can
render different scenes one after another, and a Renderer whose upload was
replaced by another one re-uploads its own scene before reading pixels back.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.core.renderer import Renderer
    >>> from raycaster.scene.default_scene import create_default_scene
    >>>
    >>> renderer = Renderer()
    >>> image = renderer.render(create_default_scene())  # (600, 800, 3) uint8
    >>> renderer.save_image("scene.png")
"""

from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt

from raycaster.core.integrator import (
    get_normalized_image_numpy,
    render_image,
    render_pixel,
    setup_render_target,
)
from raycaster.scene.manager import RenderOptions, Scene, SceneManager, normalize_color

logger = logging.getLogger(__name__)


class Renderer:
    """Renders Scene descriptions into RGB pixel buffers.

    Attributes:
        manager: The SceneManager used to upload scenes.
        options: Default RenderOptions for scenes rendered without explicit
            options.
    """

    def __init__(self, options: RenderOptions | None = None) -> None:
        """Initialize the renderer.

        Args:
            options: Default shading switches. Defaults to RenderOptions().
        """
        self.options = options or RenderOptions()
        self.manager = SceneManager()
        self._width = 0
        self._height = 0
        self._has_image = False

    @property
    def width(self) -> int:
        """Width of the last prepared image (0 before the first render)."""
        return self._width

    @property
    def height(self) -> int:
        """Height of the last prepared image (0 before the first render)."""
        return self._height

    def prepare(self, scene: Scene, options: RenderOptions | None = None) -> None:
        """Validate and upload a scene and size the render target.

        Raises:
            SceneConfigurationError: If the scene is invalid. Nothing is
                uploaded or rendered in that case.
        """
        options = options or self.options
        self.manager.load(scene, options)
        setup_render_target(
            scene.width,
            scene.height,
            scene.fov,
            background=normalize_color(scene.background),
        )
        self._width = scene.width
        self._height = scene.height
        self._has_image = False

    def render(
        self,
        scene: Scene,
        options: RenderOptions | None = None,
    ) -> npt.NDArray[np.uint8]:
        """Render a scene.

        Args:
            scene: The scene to render.
            options: Shading switches for this render; defaults to the
                renderer's options.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8.

        Raises:
            SceneConfigurationError: If the scene is invalid.
        """
        self.prepare(scene, options)
        logger.info(
            "Rendering %dx%d scene with %d elements",
            scene.width,
            scene.height,
            len(scene.elements),
        )
        render_image()
        self._has_image = True
        return self.get_image_uint8()

    def _ensure_current(self, with_image: bool) -> None:
        """Re-upload this renderer's scene if another upload replaced it."""
        if self.manager.scene is None:
            raise RuntimeError("No scene has been prepared. Call render() first.")
        if self.manager.is_current():
            return
        logger.debug("Scene storage was replaced; re-uploading")
        had_image = self._has_image
        self.prepare(self.manager.scene, self.manager.options)
        if with_image and had_image:
            render_image()
            self._has_image = True

    def render_pixel(self, x: int, y: int) -> tuple[int, int, int]:
        """Render one pixel of the prepared scene.

        Returns:
            The 8-bit (R, G, B) color render() writes at (x, y).

        Raises:
            RuntimeError: If no scene has been prepared.
            ValueError: If (x, y) lies outside the image.
        """
        self._ensure_current(with_image=False)
        color = np.clip(np.array(render_pixel(x, y), dtype=np.float32), 0.0, 1.0)
        r, g, b = (color * 255).astype(np.uint8)
        return (int(r), int(g), int(b))

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered image as floats in [0, 1], shape (height, width, 3)."""
        self._ensure_current(with_image=True)
        return get_normalized_image_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an 8-bit NumPy array.

        Channel values are truncated, not rounded: 0.999 maps to 254.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8.
        """
        image = self.get_image_numpy()
        return (image * 255).astype(np.uint8)

    def save_image(self, filepath: str) -> None:
        """Save the rendered image to a file (format from the extension)."""
        from PIL import Image as PILImage

        pil_image = PILImage.fromarray(self.get_image_uint8(), mode="RGB")
        pil_image.save(filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return f"Renderer(width={self.width}, height={self.height}, options={self.options})"
