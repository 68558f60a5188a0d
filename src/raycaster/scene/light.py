"""Directional light and shading settings storage.

The scene has exactly one light: a directional light with a color and an
intensity. Its direction is the direction the light travels; shading uses
the negated, normalized direction as the direction toward the light.

The shadow bias and the light power clamp switch live here as well, since
they are scene-wide shading parameters read by every shaded hit.
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# Offset along the surface normal for shadow ray origins
DEFAULT_SHADOW_BIAS = 1e-4

# Directional light (configured by setup_light)
_light_direction = ti.Vector.field(3, dtype=ti.f32, shape=())
_light_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_light_intensity = ti.field(dtype=ti.f32, shape=())

# Shading settings
_shadow_bias = ti.field(dtype=ti.f32, shape=())
_clamp_light_power = ti.field(dtype=ti.i32, shape=())


def setup_light(
    direction: tuple[float, float, float],
    color: tuple[float, float, float],
    intensity: float,
) -> None:
    """Configure the directional light.

    Args:
        direction: Direction the light travels (from the light into the
            scene). Need not be normalized, but must not be zero.
        color: Light color with channels normalized to [0, 1].
        intensity: Light intensity (>= 0).
    """
    _light_direction[None] = [direction[0], direction[1], direction[2]]
    _light_color[None] = [color[0], color[1], color[2]]
    _light_intensity[None] = intensity


def disable_light() -> None:
    """Turn the light off by setting its intensity to zero."""
    _light_intensity[None] = 0.0


def set_shadow_bias(bias: float) -> None:
    """Set the normal offset applied to shadow ray origins."""
    _shadow_bias[None] = bias


def set_clamp_light_power(enabled: bool) -> None:
    """Clamp negative light power to zero before combining channels."""
    _clamp_light_power[None] = int(enabled)


def reset_shading() -> None:
    """Restore default shading settings and switch the light off."""
    _light_direction[None] = [0.0, -1.0, 0.0]
    _light_color[None] = [1.0, 1.0, 1.0]
    _light_intensity[None] = 0.0
    _shadow_bias[None] = DEFAULT_SHADOW_BIAS
    _clamp_light_power[None] = 0


def get_light_info() -> dict[str, object]:
    """Get the current light and shading settings (Python side)."""
    direction = _light_direction[None]
    color = _light_color[None]
    return {
        "direction": (float(direction[0]), float(direction[1]), float(direction[2])),
        "color": (float(color[0]), float(color[1]), float(color[2])),
        "intensity": float(_light_intensity[None]),
        "shadow_bias": float(_shadow_bias[None]),
        "clamp_light_power": bool(_clamp_light_power[None]),
    }


@ti.func
def get_light_direction() -> vec3:
    """Direction the light travels, as configured (not normalized)."""
    return _light_direction[None]


@ti.func
def get_light_color() -> vec3:
    return _light_color[None]


@ti.func
def get_light_intensity() -> ti.f32:
    return _light_intensity[None]


@ti.func
def get_shadow_bias() -> ti.f32:
    return _shadow_bias[None]


@ti.func
def get_clamp_light_power() -> ti.i32:
    return _clamp_light_power[None]
