"""Core rendering module.

This module contains the fundamental building blocks of the renderer:

Components:
    ray: Ray data structure, vector helpers and hemisphere sampling
    transform: Affine transforms for points, vectors, normals and rays
    spectrum: Sampled spectra and RGB / CIE XYZ conversion
    spectral_data: Raw tabulated matching functions and basis spectra
    config: Render settings, numeric constants and exceptions
    scheduler: Tile partitioning and the worker thread pool
    integrator: Light transport estimators, tone mapping and pixel buffers

Spectral tables must be initialized with init_spectral_tables() before any
color conversion or render.
"""

from .config import (
    ConfigurationError,
    PrismError,
    RenderCancelledError,
    RenderSettings,
    SpectralTablesNotInitializedError,
    TileRenderError,
)
from .ray import (
    Ray,
    build_onb_from_normal,
    cross,
    dot,
    length,
    normalize,
    random_cosine_direction,
    reflect,
    sample_cosine_hemisphere,
    schlick_fresnel,
    vec3,
)
from .spectrum import (
    SampledSpectrum,
    SpectralTables,
    SpectrumType,
    init_spectral_tables,
    rgb_to_xyz,
    xyz_to_rgb,
)
from .transform import Transform

# Note: scheduler and integrator are NOT imported here to avoid circular imports.
# Import directly from src.prism.core.integrator or src.prism.core.scheduler.

__all__ = [
    "Ray",
    "vec3",
    "length",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "schlick_fresnel",
    "random_cosine_direction",
    "build_onb_from_normal",
    "sample_cosine_hemisphere",
    "Transform",
    "SampledSpectrum",
    "SpectralTables",
    "SpectrumType",
    "init_spectral_tables",
    "rgb_to_xyz",
    "xyz_to_rgb",
    "RenderSettings",
    "PrismError",
    "ConfigurationError",
    "SpectralTablesNotInitializedError",
    "RenderCancelledError",
    "TileRenderError",
]
