"""Scene module for scene description, storage and ray-scene queries.

Components:
    intersection: Element storage (spheres, planes) and nearest-hit search
    light: Directional light and scene-wide shading settings
    manager: Scene dataclasses, validation, serialization and upload
    default_scene: The built-in demo scene

Scene data is organized for kernel access:
    - Structure-of-Arrays layout for element data, tagged by element type
    - Element ids equal positions in the scene's element list
"""

# Built-in demo scene
from .default_scene import DefaultSceneParams, create_default_scene

# Scene intersection and hit records
from .intersection import (
    MAX_ELEMENTS,
    NO_ELEMENT,
    TRACE_MAX_DISTANCE,
    ElementType,
    SceneHitRecord,
    add_plane,
    add_sphere,
    clear_scene,
    element_normal,
    get_element_count,
    intersect_element,
    intersect_scene,
    set_sphere_root_policy,
    trace,
)
from .light import (
    DEFAULT_SHADOW_BIAS,
    disable_light,
    reset_shading,
    set_clamp_light_power,
    set_shadow_bias,
    setup_light,
)

# Scene description and upload
from .manager import (
    Light,
    PlaneInfo,
    RenderOptions,
    Scene,
    SceneManager,
    SphereInfo,
    load_scene,
    save_scene,
)

__all__ = [
    # Intersection module
    "ElementType",
    "SceneHitRecord",
    "add_sphere",
    "add_plane",
    "clear_scene",
    "element_normal",
    "get_element_count",
    "intersect_element",
    "intersect_scene",
    "set_sphere_root_policy",
    "trace",
    "MAX_ELEMENTS",
    "NO_ELEMENT",
    "TRACE_MAX_DISTANCE",
    # Light module
    "DEFAULT_SHADOW_BIAS",
    "setup_light",
    "disable_light",
    "reset_shading",
    "set_shadow_bias",
    "set_clamp_light_power",
    # Manager module
    "Light",
    "SphereInfo",
    "PlaneInfo",
    "RenderOptions",
    "Scene",
    "SceneManager",
    "load_scene",
    "save_scene",
    # Default scene
    "DefaultSceneParams",
    "create_default_scene",
]
