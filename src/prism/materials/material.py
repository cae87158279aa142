"""Tagged surface material model.

A Material carries a MaterialType tag that selects the shading routine plus
optional spectral colors for each role. Emitted colors are decoded with the
illuminant basis; every reflected color uses the reflectance basis.

Example:
    >>> from src.prism.core.spectrum import init_spectral_tables
    >>> from src.prism.materials.material import Material
    >>> init_spectral_tables()
    >>> light = Material.emitter((1.0, 1.0, 1.0))
    >>> wall = Material.lambertian((0.73, 0.73, 0.73))
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

from src.prism.core.spectrum import SampledSpectrum, SpectralTables, SpectrumType


class MaterialType(IntEnum):
    """Shading behavior selected by a material."""

    EMITTER = 0
    LAMBERTIAN = 1
    SPECULAR = 2


@dataclass(frozen=True, eq=False)
class Material:
    """Surface description consumed by the integrators.

    Attributes:
        type: Which shading routine applies.
        ambient_color: Diffuse albedo used by Lambertian shading.
        emitted_color: Emitted radiance of an emitter.
        diffuse_color: Secondary diffuse reflectance (imported materials).
        specular_color: Mirror albedo used by specular shading.
        specular_exponent: Phong exponent; parsed but unused by shading.
        optical_density: Index of refraction; parsed but unused by shading.
    """

    type: MaterialType
    ambient_color: SampledSpectrum | None = None
    emitted_color: SampledSpectrum | None = None
    diffuse_color: SampledSpectrum | None = None
    specular_color: SampledSpectrum | None = None
    specular_exponent: float | None = None
    optical_density: float | None = None

    @classmethod
    def emitter(cls, rgb: Sequence[float], tables: SpectralTables | None = None) -> Material:
        """A light source emitting the given linear RGB radiance."""
        return cls(
            MaterialType.EMITTER,
            emitted_color=SampledSpectrum.from_rgb(rgb, SpectrumType.ILLUMINANT, tables),
        )

    @classmethod
    def lambertian(cls, rgb: Sequence[float], tables: SpectralTables | None = None) -> Material:
        """An ideal diffuse surface with the given linear RGB albedo."""
        return cls(
            MaterialType.LAMBERTIAN,
            ambient_color=SampledSpectrum.from_rgb(rgb, SpectrumType.REFLECTANCE, tables),
        )

    @classmethod
    def specular(cls, rgb: Sequence[float], tables: SpectralTables | None = None) -> Material:
        """A perfect mirror tinted by the given linear RGB albedo."""
        return cls(
            MaterialType.SPECULAR,
            specular_color=SampledSpectrum.from_rgb(rgb, SpectrumType.REFLECTANCE, tables),
        )

    @property
    def diffuse_albedo(self) -> SampledSpectrum | None:
        """Albedo scaling diffuse bounces: ambient, else diffuse, else None."""
        if self.ambient_color is not None:
            return self.ambient_color
        return self.diffuse_color

    @property
    def base_color(self) -> SampledSpectrum | None:
        """First color present among ambient, emitted, diffuse and specular."""
        for color in (self.ambient_color, self.emitted_color, self.diffuse_color, self.specular_color):
            if color is not None:
                return color
        return None
