"""Specular (mirror) shading with optional Schlick Fresnel weighting.

The incident direction is reflected about the normal and traced further.
The returned radiance is tinted by the specular color; with Fresnel enabled,
each sample of that color is used as the normal-incidence reflectance R0 of
Schlick's approximation.
"""

from __future__ import annotations

import numpy as np

from src.prism.core.config import RAY_EPSILON
from src.prism.core.ray import Ray, dot, reflect, schlick_fresnel
from src.prism.core.spectrum import SampledSpectrum
from src.prism.geometry.shape import Intersection
from src.prism.materials.lambertian import TraceFn


def scatter_specular(hit: Intersection) -> Ray:
    """Mirror-reflect the incident ray about the hit normal."""
    direction = reflect(hit.ray.direction, hit.normal)
    return Ray(hit.point + hit.normal * RAY_EPSILON, direction)


def fresnel_color(color: SampledSpectrum, cosine: float) -> SampledSpectrum:
    """Weight a specular color per sample by Schlick's approximation.

    Args:
        color: Reflectance at normal incidence, per wavelength.
        cosine: Cosine between the normal and the reflected direction.

    Returns:
        R0 + (1 - R0) * (1 - cosine)^5 for every sample.
    """
    cosine = min(max(cosine, 0.0), 1.0)
    return SampledSpectrum(schlick_fresnel(cosine, color.samples))


def shade_specular(
    hit: Intersection,
    depth: int,
    rng: np.random.Generator,
    trace: TraceFn,
    fresnel: bool = False,
) -> SampledSpectrum:
    """Radiance reflected by a mirror surface.

    Args:
        hit: The intersection, with its normal facing the incoming ray.
        depth: Remaining recursion budget at this hit.
        rng: Source of uniform samples for the continuation path.
        trace: Function tracing a ray to a given depth.
        fresnel: Apply Schlick's approximation to the specular color.

    Returns:
        The reflected spectral radiance.
    """
    reflected = scatter_specular(hit)
    color = hit.material.specular_color
    if color is None:
        color = SampledSpectrum(1.0)
    if fresnel:
        color = fresnel_color(color, dot(hit.normal, reflected.direction))
    return trace(reflected, depth - 1, rng) * color
