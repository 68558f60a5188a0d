"""Built-in demo scene.

Two spheres above a floor plane, lit from straight above by a white
directional light:

- Green sphere at (-1, 0, -3), radius 1.5
- Red sphere at (1, 1, -5), radius 1
- Light green floor plane through (0, -2, -5), normal (0, -1, 0)
- White light travelling along (0, -1, 0) with intensity 2

The red sphere sits behind and above the green one, so part of the floor is
shadowed by both spheres.

Example:
    >>> from raycaster.scene.default_scene import create_default_scene
    >>> scene = create_default_scene()
    >>> scene.width, scene.height
    (800, 600)
"""

from __future__ import annotations

from dataclasses import dataclass

from raycaster.scene.manager import Light, PlaneInfo, Scene, SphereInfo

# =============================================================================
# Default Scene Parameters
# =============================================================================


@dataclass
class DefaultSceneParams:
    """Parameters for configuring the demo scene.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Field of view in degrees.
        light_direction: Direction the light travels.
        light_color: 8-bit RGB color of the light.
        light_intensity: Light intensity.

    Example:
        >>> params = DefaultSceneParams(width=400, height=300)
        >>> scene = create_default_scene(params)
    """

    width: int = 800
    height: int = 600
    fov: float = 90.0
    light_direction: tuple[float, float, float] = (0.0, -1.0, 0.0)
    light_color: tuple[int, int, int] = (255, 255, 255)
    light_intensity: float = 2.0


GREEN = (0, 255, 0)
RED = (255, 0, 0)
LIGHT_GREEN = (144, 238, 144)


def create_default_scene(params: DefaultSceneParams | None = None) -> Scene:
    """Create the demo scene.

    Args:
        params: Optional overrides for image size, field of view and light.

    Returns:
        A Scene ready to be validated and rendered.
    """
    if params is None:
        params = DefaultSceneParams()

    elements = [
        SphereInfo(center=(-1.0, 0.0, -3.0), radius=1.5, color=GREEN),
        SphereInfo(center=(1.0, 1.0, -5.0), radius=1.0, color=RED),
        PlaneInfo(origin=(0.0, -2.0, -5.0), normal=(0.0, -1.0, 0.0), color=LIGHT_GREEN),
    ]

    return Scene(
        width=params.width,
        height=params.height,
        fov=params.fov,
        light=Light(
            direction=params.light_direction,
            color=params.light_color,
            intensity=params.light_intensity,
        ),
        elements=elements,
    )
