"""Lambertian (ideal diffuse) shading for a single directional light.

The Lambertian BRDF is constant:
    f_r = albedo / pi

For a directional light of color L and intensity I arriving from direction
w_l, a surface with color C and normal n reflects per channel:
    out = C * L * (dot(n, w_l) * I) * albedo / pi

clamped to [0, 1]. The light power term dot(n, w_l) * I goes negative for
surfaces facing away from the light; it is left unclamped unless requested,
and the final channel clamp then maps those surfaces to black.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.materials.lambertian import (
    ...     eval_lambertian, lambert_light_power, shade_lambertian
    ... )
    >>> # Use within a Taichi kernel:
    >>> # power = lambert_light_power(normal, to_light, intensity, 0)
    >>> # color = shade_lambertian(surface_color, light_color, power, albedo)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class LambertianMaterial:
    """Diffuse surface attributes of a scene element.

    Attributes:
        color: Surface color (RGB, each channel in [0, 1]).
        albedo: Fraction of incident light reflected diffusely, in [0, 1].
    """

    color: vec3
    albedo: ti.f32


@ti.func
def eval_lambertian(albedo: ti.f32) -> ti.f32:
    """Evaluate the Lambertian BRDF (albedo / pi)."""
    return albedo / tm.pi


@ti.func
def lambert_light_power(
    normal: vec3,
    direction_to_light: vec3,
    intensity: ti.f32,
    clamp_negative: ti.i32,
) -> ti.f32:
    """Compute the light power arriving at a surface.

    Args:
        normal: The unit surface normal.
        direction_to_light: Unit vector from the surface toward the light.
        intensity: The light intensity.
        clamp_negative: If 1, negative power is clamped to zero.

    Returns:
        dot(normal, direction_to_light) * intensity.
    """
    power = tm.dot(normal, direction_to_light) * intensity
    if clamp_negative == 1:
        power = tm.max(power, 0.0)
    return power


@ti.func
def shade_lambertian(
    surface_color: vec3,
    light_color: vec3,
    light_power: ti.f32,
    albedo: ti.f32,
) -> vec3:
    """Combine surface color, light color and power into a pixel color.

    Args:
        surface_color: Surface color, channels in [0, 1].
        light_color: Light color, channels in [0, 1].
        light_power: Output of lambert_light_power().
        albedo: Diffuse reflectivity of the surface.

    Returns:
        The reflected color, each channel clamped to [0, 1].
    """
    light_reflected = eval_lambertian(albedo)
    color = surface_color * light_color * light_power * light_reflected
    return tm.clamp(color, 0.0, 1.0)


@ti.func
def shade_lambertian_material(
    material: LambertianMaterial,
    light_color: vec3,
    light_power: ti.f32,
) -> vec3:
    """Convenience wrapper of shade_lambertian() for a LambertianMaterial."""
    return shade_lambertian(material.color, light_color, light_power, material.albedo)
