"""Materials module for surface scattering.

This module provides the material model and the shading routine for each
material kind:

Components:
    material: Material dataclass and the MaterialType tag
    lambertian: Ideal diffuse scattering with cosine-weighted sampling
    specular: Mirror reflection with optional Schlick Fresnel weighting

Emitters need no scattering routine: the integrator returns their emitted
spectrum and ends the path.
"""

from .lambertian import scatter_lambertian, shade_lambertian
from .material import Material, MaterialType
from .specular import fresnel_color, scatter_specular, shade_specular

__all__ = [
    "Material",
    "MaterialType",
    "scatter_lambertian",
    "shade_lambertian",
    "scatter_specular",
    "shade_specular",
    "fresnel_color",
]
