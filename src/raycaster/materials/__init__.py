"""Materials module for surface shading.

Components:
    lambertian: Ideal diffuse (Lambertian) reflection of a directional light

Every scene element is a Lambertian surface with a color and an albedo.
Shading is evaluated once per primary hit; there is no scattering or
secondary bounce.
"""

from .lambertian import (
    LambertianMaterial,
    eval_lambertian,
    lambert_light_power,
    shade_lambertian,
    shade_lambertian_material,
)

__all__ = [
    "LambertianMaterial",
    "eval_lambertian",
    "lambert_light_power",
    "shade_lambertian",
    "shade_lambertian_material",
]
