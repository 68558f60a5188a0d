"""Integration tests for the end-to-end rendering pipeline.

This module tests the complete pipeline from scene description through the
Renderer facade to the exported image. It verifies that all components work
together correctly and that the output meets basic quality criteria.

Tests are designed to be fast (low resolution) while still exercising the
full pipeline.

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

SKY = (135, 206, 250)


def _red_sphere_scene(**overrides):
    """A red sphere straight ahead, lit by white light travelling away from the camera."""
    from raycaster.scene.manager import Light, Scene, SphereInfo

    params = dict(
        width=100,
        height=100,
        fov=90.0,
        light=Light(direction=(0.0, 0.0, -1.0), color=(255, 255, 255), intensity=1.0),
        elements=[SphereInfo(center=(0.0, 0.0, -5.0), radius=1.0, color=(255, 0, 0))],
    )
    params.update(overrides)
    return Scene(**params)


def _shadow_scene(with_occluder):
    from raycaster.scene.manager import Light, Scene, SphereInfo

    elements = [SphereInfo(center=(0.0, 0.0, -5.0), radius=1.0, color=(255, 0, 0))]
    if with_occluder:
        elements.append(SphereInfo(center=(0.0, 2.0, -2.0), radius=0.5, color=(255, 255, 255)))
    return Scene(
        width=21,
        height=21,
        fov=90.0,
        light=Light(direction=(0.0, -1.0, -1.0), color=(255, 255, 255), intensity=1.0),
        elements=elements,
    )


class TestRedSphereEndToEnd:
    """A single lit sphere rendered through the Renderer."""

    def test_output_shape_and_dtype(self) -> None:
        """Test the renderer returns a (height, width, 3) uint8 image."""
        from raycaster.core.renderer import Renderer

        renderer = Renderer()
        image = renderer.render(_red_sphere_scene(width=120, height=90))

        assert image.shape == (90, 120, 3)
        assert image.dtype == np.uint8
        assert renderer.width == 120
        assert renderer.height == 90

    def test_center_pixel_is_lit_red(self) -> None:
        """Test the center pixel shows the red sphere at albedo / pi."""
        from raycaster.core.renderer import Renderer

        image = Renderer().render(_red_sphere_scene())
        r, g, b = (int(c) for c in image[50, 50])

        # 255 / pi truncates to 81; the slight off-axis normal can lose one level
        assert 80 <= r <= 81
        assert g == 0
        assert b == 0

    @pytest.mark.parametrize("x,y", [(0, 0), (99, 0), (0, 99), (99, 99)])
    def test_corners_are_background(self, x: int, y: int) -> None:
        """Test pixels that miss the sphere show the canvas fill."""
        from raycaster.core.renderer import Renderer

        image = Renderer().render(_red_sphere_scene())
        assert tuple(int(c) for c in image[y, x]) == SKY

    def test_custom_background(self) -> None:
        """Test the scene's background color fills missed pixels."""
        from raycaster.core.renderer import Renderer

        image = Renderer().render(_red_sphere_scene(background=(0, 0, 0)))
        assert tuple(int(c) for c in image[0, 0]) == (0, 0, 0)

    def test_sphere_is_centered_and_round(self) -> None:
        """Test the lit region is symmetric about the image center."""
        from raycaster.core.renderer import Renderer

        image = Renderer().render(_red_sphere_scene())
        lit = image[:, :, 0] != SKY[0]
        rows = np.nonzero(lit.any(axis=1))[0]
        cols = np.nonzero(lit.any(axis=0))[0]

        # Extents mirror about the center; allow one pixel at the silhouette
        assert abs((rows[0] + rows[-1]) - 99) <= 1
        assert abs((cols[0] + cols[-1]) - 99) <= 1
        assert abs((rows[-1] - rows[0]) - (cols[-1] - cols[0])) <= 1
        # Angular radius asin(1 / 5) spans about 20 pixels across
        assert 18 <= rows[-1] - rows[0] + 1 <= 23

    def test_render_is_deterministic(self) -> None:
        """Test identical inputs give byte-identical images."""
        from raycaster.core.renderer import Renderer

        renderer = Renderer()
        first = renderer.render(_red_sphere_scene()).copy()
        second = renderer.render(_red_sphere_scene())

        assert np.array_equal(first, second)

    def test_render_pixel_matches_image(self) -> None:
        """Test single-pixel rendering agrees with the full image."""
        from raycaster.core.renderer import Renderer

        renderer = Renderer()
        image = renderer.render(_red_sphere_scene())

        for x, y in [(50, 50), (40, 45), (0, 0), (60, 55)]:
            assert renderer.render_pixel(x, y) == tuple(int(c) for c in image[y, x])

    def test_light_from_behind_gives_black_sphere(self) -> None:
        """Test light travelling toward the camera leaves the visible face black."""
        from raycaster.core.renderer import Renderer
        from raycaster.scene.manager import Light

        scene = _red_sphere_scene(
            light=Light(direction=(0.0, 0.0, 1.0), color=(255, 255, 255), intensity=1.0)
        )
        image = Renderer().render(scene)

        assert tuple(int(c) for c in image[50, 50]) == (0, 0, 0)
        assert tuple(int(c) for c in image[0, 0]) == SKY


class TestShadowsEndToEnd:
    """Binary shadows through the full pipeline."""

    def test_occluder_blackens_pixel(self) -> None:
        """Test the center pixel turns black when an occluder blocks the light."""
        from raycaster.core.renderer import Renderer

        renderer = Renderer()
        lit = renderer.render(_shadow_scene(with_occluder=False)).copy()
        shadowed = renderer.render(_shadow_scene(with_occluder=True))

        assert lit[10, 10][0] > 0
        assert tuple(int(c) for c in shadowed[10, 10]) == (0, 0, 0)

    def test_scene_switch_leaves_no_residue(self) -> None:
        """Test rendering a second scene with one renderer forgets the first."""
        from raycaster.core.renderer import Renderer

        renderer = Renderer()
        renderer.render(_shadow_scene(with_occluder=True))
        after = renderer.render(_shadow_scene(with_occluder=False))

        fresh = Renderer().render(_shadow_scene(with_occluder=False))
        assert np.array_equal(after, fresh)


class TestRenderOptionsEndToEnd:
    """Render options applied through the Renderer."""

    def test_first_positive_changes_interior_view(self) -> None:
        """Test the root policy decides what a camera inside a sphere sees."""
        from raycaster.core.renderer import Renderer
        from raycaster.geometry.sphere import SphereRootPolicy
        from raycaster.scene.manager import RenderOptions, SphereInfo

        scene = _red_sphere_scene(
            width=21,
            height=21,
            elements=[SphereInfo(center=(0.0, 0.0, 0.0), radius=10.0, color=(255, 0, 0))],
        )
        nearest = Renderer().render(scene)
        first_positive = Renderer(
            RenderOptions(sphere_root_policy=SphereRootPolicy.FIRST_POSITIVE)
        ).render(scene)

        assert nearest[10, 10][0] > 0
        assert tuple(int(c) for c in first_positive[10, 10]) == (0, 0, 0)

    def test_clamp_light_power_keeps_image(self) -> None:
        """Test clamping negative power does not change the final image."""
        from raycaster.core.renderer import Renderer
        from raycaster.scene.manager import RenderOptions

        scene = _red_sphere_scene(width=40, height=40)
        unclamped = Renderer().render(scene)
        clamped = Renderer(RenderOptions(clamp_light_power=True)).render(scene)

        assert np.array_equal(unclamped, clamped)


class TestInvalidScenes:
    """Invalid scenes fail before any rendering work."""

    def test_portrait_scene_rejected(self) -> None:
        """Test a portrait sensor raises before rendering."""
        from raycaster.core.renderer import Renderer
        from raycaster.errors import SceneConfigurationError

        renderer = Renderer()
        with pytest.raises(SceneConfigurationError):
            renderer.render(_red_sphere_scene(width=50, height=100))
        assert renderer.width == 0

    def test_oversized_scene_rejected(self) -> None:
        """Test an oversized scene is refused and the previous scene survives."""
        from raycaster.core.integrator import MAX_IMAGE_WIDTH
        from raycaster.core.renderer import Renderer
        from raycaster.errors import SceneConfigurationError
        from raycaster.scene.manager import SphereInfo

        renderer = Renderer()
        small = _red_sphere_scene()
        renderer.render(small)
        before = renderer.render_pixel(50, 50)

        big = _red_sphere_scene(
            width=MAX_IMAGE_WIDTH + 1,
            height=10,
            elements=[SphereInfo(center=(0.0, 0.0, -5.0), radius=1.0, color=(0, 0, 255))],
        )
        with pytest.raises(SceneConfigurationError, match="exceed maximum"):
            renderer.render(big)

        assert renderer.manager.scene is small
        assert (renderer.width, renderer.height) == (100, 100)
        assert renderer.render_pixel(50, 50) == before

    @pytest.mark.parametrize("x,y", [(-1, 50), (100, 50), (50, 100)])
    def test_pixel_outside_image_rejected(self, x: int, y: int) -> None:
        """Test render_pixel refuses coordinates outside the image."""
        from raycaster.core.renderer import Renderer

        renderer = Renderer()
        renderer.render(_red_sphere_scene())
        with pytest.raises(ValueError, match="outside"):
            renderer.render_pixel(x, y)

    def test_render_pixel_before_render_raises(self) -> None:
        """Test render_pixel needs a prepared scene."""
        from raycaster.core.renderer import Renderer

        with pytest.raises(RuntimeError, match="No scene has been prepared"):
            Renderer().render_pixel(0, 0)


class TestSeveralRenderers:
    """Renderers sharing the kernel-side storage do not disturb each other."""

    def test_new_renderer_keeps_prepared_scene(self) -> None:
        """Test constructing a renderer leaves another renderer's scene in place."""
        from raycaster.core.renderer import Renderer

        first = Renderer()
        image = first.render(_red_sphere_scene()).copy()
        Renderer()

        assert first.render_pixel(50, 50) == tuple(int(c) for c in image[50, 50])
        assert first.render_pixel(50, 50)[0] > 0

    def test_render_pixel_after_other_render(self) -> None:
        """Test a renderer reads its own scene after another renderer rendered."""
        from raycaster.core.renderer import Renderer
        from raycaster.scene.manager import SphereInfo

        red = Renderer()
        red_image = red.render(_red_sphere_scene()).copy()

        blue = Renderer()
        blue_scene = _red_sphere_scene(
            width=60,
            height=40,
            elements=[SphereInfo(center=(0.0, 0.0, -5.0), radius=1.0, color=(0, 0, 255))],
        )
        blue_image = blue.render(blue_scene).copy()

        assert red.render_pixel(50, 50) == tuple(int(c) for c in red_image[50, 50])
        assert (red.width, red.height) == (100, 100)
        assert blue.render_pixel(30, 20) == tuple(int(c) for c in blue_image[20, 30])

    def test_get_image_after_other_render(self) -> None:
        """Test a renderer's image is restored after another renderer rendered."""
        from raycaster.core.renderer import Renderer

        first = Renderer()
        expected = first.render(_red_sphere_scene()).copy()
        Renderer().render(_shadow_scene(with_occluder=True))

        assert np.array_equal(first.get_image_uint8(), expected)


class TestSaveImage:
    """Saving rendered images to disk."""

    def test_save_png(self, tmp_path: Path) -> None:
        """Test the saved PNG matches the rendered buffer."""
        from raycaster.core.renderer import Renderer
        from raycaster.preview.export import load_png, save_png

        renderer = Renderer()
        image = renderer.render(_red_sphere_scene(width=64, height=48))

        output_path = tmp_path / "sphere.png"
        save_png(renderer, str(output_path))

        assert output_path.exists()
        assert np.array_equal(load_png(str(output_path)), image)

    def test_renderer_save_image(self, tmp_path: Path) -> None:
        """Test Renderer.save_image writes a readable file."""
        from PIL import Image as PILImage

        from raycaster.core.renderer import Renderer

        renderer = Renderer()
        renderer.render(_red_sphere_scene(width=32, height=32))

        output_path = tmp_path / "sphere.png"
        renderer.save_image(str(output_path))

        with PILImage.open(output_path) as img:
            assert img.size == (32, 32)
            assert img.mode == "RGB"

    def test_repr(self) -> None:
        """Test the renderer repr reports its size."""
        from raycaster.core.renderer import Renderer

        renderer = Renderer()
        renderer.render(_red_sphere_scene(width=32, height=16))
        assert "width=32" in repr(renderer)
        assert "height=16" in repr(renderer)
