"""Lambertian (ideal diffuse) shading.

An ideal diffuse surface scatters in a cosine-weighted distribution about
the normal. Sampling with pdf = cos(theta) / pi cancels the cosine and the
1/pi of the BRDF, so the estimate is simply albedo * L(scattered ray).
"""

from __future__ import annotations

from collections.abc import Callable

import numpy as np

from src.prism.core.config import RAY_EPSILON
from src.prism.core.ray import Ray, sample_cosine_hemisphere
from src.prism.core.spectrum import SampledSpectrum, black
from src.prism.geometry.shape import Intersection

TraceFn = Callable[[Ray, int, np.random.Generator], SampledSpectrum]


def scatter_lambertian(hit: Intersection, rng: np.random.Generator) -> Ray:
    """Sample a continuation ray from a diffuse hit.

    Args:
        hit: The intersection, with its normal facing the incoming ray.
        rng: Source of uniform samples.

    Returns:
        A ray offset from the hit point along the normal, in a
        cosine-weighted direction about the normal.
    """
    direction = sample_cosine_hemisphere(hit.normal, rng)
    return Ray(hit.point + hit.normal * RAY_EPSILON, direction)


def shade_lambertian(
    hit: Intersection, depth: int, rng: np.random.Generator, trace: TraceFn
) -> SampledSpectrum:
    albedo = hit.material.diffuse_albedo
    if albedo is None:
        return black()
    return trace(scatter_lambertian(hit, rng), depth - 1, rng) * albedo
