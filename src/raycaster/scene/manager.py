"""Scene description and manager.

A Scene is plain configuration data: image size, field of view, shadow bias,
one directional light, a background fill and an ordered list of elements
(spheres and planes). It is built by the caller, validated once, and never
mutated during a render. Colors are 8-bit RGB tuples on this side and are
normalized to [0, 1] when uploaded.

The SceneManager uploads a Scene into the Taichi-side element storage and
shading settings, keeping the uploaded element infos for inspection. Element
ids in the kernel storage equal the positions in Scene.elements.

Scenes serialize to dictionaries (and JSON files) whose keys mirror the
dataclass fields; each element dictionary carries a "type" key.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.scene.manager import Light, Scene, SceneManager, SphereInfo
    >>> scene = Scene(
    ...     width=100,
    ...     height=100,
    ...     fov=90.0,
    ...     elements=[SphereInfo(center=(0, 0, -5), radius=1.0, color=(255, 0, 0))],
    ...     light=Light(direction=(0, 0, -1), color=(255, 255, 255), intensity=1.0),
    ... )
    >>> manager = SceneManager()
    >>> manager.load(scene)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from raycaster.camera.pinhole import validate_sensor
from raycaster.errors import SceneConfigurationError
from raycaster.geometry.sphere import SphereRootPolicy
from raycaster.scene.intersection import (
    MAX_ELEMENTS,
    ElementType,
    add_plane,
    add_sphere,
    clear_scene,
    get_element_count,
    set_sphere_root_policy,
)
from raycaster.scene.light import (
    DEFAULT_SHADOW_BIAS,
    reset_shading,
    set_clamp_light_power,
    set_shadow_bias,
    setup_light,
)

logger = logging.getLogger(__name__)

Color = tuple[int, int, int]
Vector3 = tuple[float, float, float]

# Light sky blue canvas fill for pixels that hit nothing
DEFAULT_BACKGROUND: Color = (135, 206, 250)


def normalize_color(color: Color) -> Vector3:
    """Convert an 8-bit RGB color to channels in [0, 1]."""
    return (color[0] / 255.0, color[1] / 255.0, color[2] / 255.0)


def _as_vector(values: Any) -> Vector3:
    return (float(values[0]), float(values[1]), float(values[2]))


def _as_color(values: Any) -> Color:
    return (int(values[0]), int(values[1]), int(values[2]))


@dataclass
class Light:
    """A directional light.

    Attributes:
        direction: Direction the light travels, from the light into the
            scene. Shading uses its negation as the direction to the light.
            Must not be zero-length (not checked).
        color: Light color as 8-bit (R, G, B).
        intensity: Light intensity, >= 0.
    """

    direction: Vector3
    color: Color = (255, 255, 255)
    intensity: float = 1.0


@dataclass
class SphereInfo:
    """A sphere element.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere (positive, not checked).
        color: Surface color as 8-bit (R, G, B).
        albedo: Diffuse reflectivity in [0, 1].
    """

    center: Vector3
    radius: float
    color: Color
    albedo: float = 1.0

    element_type = ElementType.SPHERE


@dataclass
class PlaneInfo:
    """A one-sided plane element.

    Attributes:
        origin: Any point on the plane.
        normal: Unit normal pointing away from the visible side.
        color: Surface color as 8-bit (R, G, B).
        albedo: Diffuse reflectivity in [0, 1].
    """

    origin: Vector3
    normal: Vector3
    color: Color
    albedo: float = 1.0

    element_type = ElementType.PLANE


Element = Union[SphereInfo, PlaneInfo]


@dataclass
class RenderOptions:
    """Switches for the two shading behaviours that have alternatives.

    Attributes:
        clamp_light_power: Clamp negative light power to zero. Off by default;
            surfaces facing away from the light end up black either way once
            the channels are clamped.
        sphere_root_policy: Root reported for rays starting inside a sphere.
    """

    clamp_light_power: bool = False
    sphere_root_policy: SphereRootPolicy = SphereRootPolicy.NEAREST


@dataclass
class Scene:
    """Complete description of what to render.

    Attributes:
        width: Image width in pixels; must be at least the height.
        height: Image height in pixels.
        fov: Field of view in degrees, in (0, 180).
        light: The single directional light.
        elements: Ordered scene geometry. Order decides ties in hit distance.
        shadow_bias: Offset along the normal for shadow ray origins.
        background: Canvas fill color for pixels that hit nothing.
    """

    width: int
    height: int
    fov: float
    light: Light
    elements: list[Element] = field(default_factory=list)
    shadow_bias: float = DEFAULT_SHADOW_BIAS
    background: Color = DEFAULT_BACKGROUND

    def validate(self) -> None:
        """Check the scene before any rendering work.

        Raises:
            SceneConfigurationError: If the sensor is portrait, empty or
                larger than the render target, the field of view is outside
                (0, 180), the shadow bias is not positive, the light
                intensity is negative, an albedo is outside [0, 1], a color
                channel is outside [0, 255], an element is not a sphere or
                plane, or there are too many elements.
        """
        validate_sensor(self.width, self.height)
        if not 0.0 < self.fov < 180.0:
            raise SceneConfigurationError(f"Field of view must be in (0, 180), got {self.fov}")
        if self.shadow_bias <= 0.0:
            raise SceneConfigurationError(f"Shadow bias must be positive, got {self.shadow_bias}")
        if self.light.intensity < 0.0:
            raise SceneConfigurationError(
                f"Light intensity must be >= 0, got {self.light.intensity}"
            )
        if len(self.elements) > MAX_ELEMENTS:
            raise SceneConfigurationError(
                f"Scene has {len(self.elements)} elements, maximum is {MAX_ELEMENTS}"
            )

        _check_color("light color", self.light.color)
        _check_color("background", self.background)
        for i, element in enumerate(self.elements):
            if not isinstance(element, (SphereInfo, PlaneInfo)):
                raise SceneConfigurationError(f"Element {i} is not a sphere or plane: {element!r}")
            _check_color(f"element {i} color", element.color)
            if element.albedo < 0.0 or element.albedo > 1.0:
                raise SceneConfigurationError(
                    f"Element {i} albedo = {element.albedo} is outside [0, 1]"
                )

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        elements: list[dict[str, Any]] = []
        for element in self.elements:
            if isinstance(element, SphereInfo):
                elements.append(
                    {
                        "type": "sphere",
                        "center": list(element.center),
                        "radius": element.radius,
                        "color": list(element.color),
                        "albedo": element.albedo,
                    }
                )
            else:
                elements.append(
                    {
                        "type": "plane",
                        "origin": list(element.origin),
                        "normal": list(element.normal),
                        "color": list(element.color),
                        "albedo": element.albedo,
                    }
                )

        return {
            "width": self.width,
            "height": self.height,
            "fov": self.fov,
            "shadow_bias": self.shadow_bias,
            "background": list(self.background),
            "light": {
                "direction": list(self.light.direction),
                "color": list(self.light.color),
                "intensity": self.light.intensity,
            },
            "elements": elements,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Scene:
        """Build a scene from a dictionary.

        Args:
            data: Dictionary with the keys produced by to_dict(). width,
                height, fov and light are required.

        Raises:
            ValueError: If an element has an unknown type.
            KeyError: If a required key is missing.
        """
        light_data = data["light"]
        light = Light(
            direction=_as_vector(light_data["direction"]),
            color=_as_color(light_data.get("color", [255, 255, 255])),
            intensity=float(light_data.get("intensity", 1.0)),
        )

        elements: list[Element] = []
        for element_data in data.get("elements", []):
            element_type = str(element_data.get("type", "")).lower()
            color = _as_color(element_data.get("color", [255, 255, 255]))
            albedo = float(element_data.get("albedo", 1.0))
            if element_type == "sphere":
                elements.append(
                    SphereInfo(
                        center=_as_vector(element_data["center"]),
                        radius=float(element_data["radius"]),
                        color=color,
                        albedo=albedo,
                    )
                )
            elif element_type == "plane":
                elements.append(
                    PlaneInfo(
                        origin=_as_vector(element_data["origin"]),
                        normal=_as_vector(element_data["normal"]),
                        color=color,
                        albedo=albedo,
                    )
                )
            else:
                raise ValueError(f"Unknown element type: {element_type}")

        return cls(
            width=int(data["width"]),
            height=int(data["height"]),
            fov=float(data["fov"]),
            light=light,
            elements=elements,
            shadow_bias=float(data.get("shadow_bias", DEFAULT_SHADOW_BIAS)),
            background=_as_color(data.get("background", DEFAULT_BACKGROUND)),
        )


def _check_color(name: str, color: Color) -> None:
    for i, channel in enumerate(color):
        if channel < 0 or channel > 255:
            raise SceneConfigurationError(f"{name} channel {i} = {channel} is outside [0, 255]")


# Bumped on every clear or upload of the shared kernel-side storage
_upload_generation = 0


def _next_upload_generation() -> int:
    global _upload_generation
    _upload_generation += 1
    return _upload_generation


def load_scene(path: str | Path) -> Scene:
    """Read a scene from a JSON file."""
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    scene = Scene.from_dict(data)
    logger.info("Loaded scene %s with %d elements", path, len(scene.elements))
    return scene


def save_scene(scene: Scene, path: str | Path) -> None:
    """Write a scene to a JSON file."""
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        json.dump(scene.to_dict(), f, indent=2)


class SceneManager:
    """Uploads scenes into the kernel-side storage.

    The manager owns nothing beyond the description it last uploaded: every
    load() clears the element storage and resets the shading settings, so no
    state carries over from one scene to the next.

    The kernel-side storage is shared by all managers. Creating a manager
    leaves it untouched; is_current() tells whether this manager's upload is
    still the one in storage.

    Attributes:
        scene: The most recently loaded Scene, or None.
        options: The RenderOptions used for that load.
    """

    def __init__(self) -> None:
        """Initialize a manager that has not uploaded anything yet."""
        self.scene: Scene | None = None
        self.options = RenderOptions()
        self._generation: int | None = None

    def clear(self) -> None:
        """Remove all elements and reset the light and shading settings."""
        clear_scene()
        reset_shading()
        self.scene = None
        self._generation = _next_upload_generation()

    def is_current(self) -> bool:
        """Check whether the storage still holds this manager's last upload."""
        return self._generation == _upload_generation

    def load(self, scene: Scene, options: RenderOptions | None = None) -> None:
        """Validate a scene and upload it.

        Args:
            scene: The scene to upload.
            options: Shading switches; defaults to RenderOptions().

        Raises:
            SceneConfigurationError: If the scene fails validation. Nothing
                is uploaded in that case.
        """
        scene.validate()
        options = options or RenderOptions()

        self.clear()
        for element in scene.elements:
            self._add_element(element)

        setup_light(
            direction=scene.light.direction,
            color=normalize_color(scene.light.color),
            intensity=scene.light.intensity,
        )
        set_shadow_bias(scene.shadow_bias)
        set_clamp_light_power(options.clamp_light_power)
        set_sphere_root_policy(options.sphere_root_policy)

        self.scene = scene
        self.options = options
        self._generation = _next_upload_generation()
        logger.debug("Uploaded scene with %d elements", len(scene.elements))

    def _add_element(self, element: Element) -> int:
        if isinstance(element, SphereInfo):
            return add_sphere(
                element.center, element.radius, normalize_color(element.color), element.albedo
            )
        if isinstance(element, PlaneInfo):
            return add_plane(
                element.origin, element.normal, normalize_color(element.color), element.albedo
            )
        raise TypeError(f"Unsupported scene element: {element!r}")

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_element_count(self) -> int:
        """Get the number of uploaded elements."""
        return get_element_count()

    def get_sphere_count(self) -> int:
        """Get the number of uploaded spheres."""
        if self.scene is None:
            return 0
        return sum(1 for e in self.scene.elements if e.element_type == ElementType.SPHERE)

    def get_plane_count(self) -> int:
        """Get the number of uploaded planes."""
        if self.scene is None:
            return 0
        return sum(1 for e in self.scene.elements if e.element_type == ElementType.PLANE)

    @staticmethod
    def get_max_elements() -> int:
        """Get the maximum number of elements supported."""
        return MAX_ELEMENTS
