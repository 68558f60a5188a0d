"""Pytest configuration for ray caster tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data, shading settings and the render target around each test.

    This ensures tests are isolated from each other.
    """
    # Import here so the Taichi fields are created after ti.init()
    from raycaster.core.integrator import reset_render_target
    from raycaster.scene.intersection import clear_scene
    from raycaster.scene.light import reset_shading

    def _clear_all():
        clear_scene()
        reset_shading()
        reset_render_target()

    _clear_all()

    yield

    _clear_all()
