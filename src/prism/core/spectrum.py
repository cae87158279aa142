"""Sampled spectral power distributions and color conversion.

Radiance and reflectance are carried through the renderer as
SampledSpectrum values: N_SPECTRAL_SAMPLES bins evenly covering
LAMBDA_START..LAMBDA_END nanometers. Spectra form a vector space and
convert to and from RGB and CIE XYZ through a set of basis tables.

The basis tables are process-wide state built once by
init_spectral_tables(). Every conversion accepts an explicit ``tables``
argument; without one it uses the initialized instance and raises
SpectralTablesNotInitializedError if there is none yet.

Illuminant colors decode and re-encode exactly. Reflectance colors use the
plain Smits basis spectra, which stay non-negative and at most about one but
do not reproduce their RGB exactly; a reflectance reads as its RGB once it is
multiplied by a white illuminant.

Example:
    >>> from src.prism.core.spectrum import (
    ...     SampledSpectrum, SpectrumType, init_spectral_tables)
    >>> tables = init_spectral_tables()
    >>> white = SampledSpectrum.from_rgb((1.0, 1.0, 1.0), SpectrumType.ILLUMINANT)
    >>> red = SampledSpectrum.from_rgb((1.0, 0.0, 0.0), SpectrumType.REFLECTANCE)
    >>> rgb = (white * red * 0.5).to_rgb()  # approximately (0.5, 0.0, 0.0)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum, IntEnum

import numpy as np
import numpy.typing as npt

from src.prism.core import spectral_data
from src.prism.core.config import SpectralTablesNotInitializedError

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

N_SPECTRAL_SAMPLES = 60
LAMBDA_START = 400.0
LAMBDA_END = 700.0

# Linear sRGB primaries, D65 white
XYZ_TO_RGB = np.array(
    [
        [3.2404790, -1.537150, -0.498535],
        [-0.969256, 1.875991, 0.041556],
        [0.0556480, -0.204043, 1.057311],
    ],
    dtype=np.float64,
)
RGB_TO_XYZ = np.array(
    [
        [0.412453, 0.357580, 0.180423],
        [0.212671, 0.715160, 0.072169],
        [0.019334, 0.119193, 0.950227],
    ],
    dtype=np.float64,
)
XYZ_TO_RGB.flags.writeable = False
RGB_TO_XYZ.flags.writeable = False

# Normalization of the matching-function integral over the sampled range
XYZ_SCALE = (LAMBDA_END - LAMBDA_START) / (spectral_data.CIE_Y_INTEGRAL * N_SPECTRAL_SAMPLES)


class SpectrumType(Enum):
    """Which RGB basis set a color is decoded with.

    REFLECTANCE is for albedos that scale light multiplicatively;
    ILLUMINANT is for emitted radiance.
    """

    REFLECTANCE = "reflectance"
    ILLUMINANT = "illuminant"


class _Basis(IntEnum):
    """Row order of the basis arrays in SpectralTables."""

    WHITE = 0
    CYAN = 1
    MAGENTA = 2
    YELLOW = 3
    RED = 4
    GREEN = 5
    BLUE = 6


# Ideal linear RGB image of each basis spectrum
_BASIS_TARGETS = np.array(
    [
        [1.0, 1.0, 1.0],
        [0.0, 1.0, 1.0],
        [1.0, 0.0, 1.0],
        [1.0, 1.0, 0.0],
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, 0.0, 1.0],
    ],
    dtype=np.float64,
)


def xyz_to_rgb(xyz: Sequence[float] | npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Convert CIE XYZ tristimulus values to linear RGB."""
    return XYZ_TO_RGB @ np.asarray(xyz, dtype=np.float64)


def rgb_to_xyz(rgb: Sequence[float] | npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Convert linear RGB to CIE XYZ tristimulus values."""
    return RGB_TO_XYZ @ np.asarray(rgb, dtype=np.float64)


# =============================================================================
# Resampling
# =============================================================================


def average_spectrum_samples(
    wavelengths: npt.NDArray[np.float64],
    values: npt.NDArray[np.float64],
    lambda_start: float,
    lambda_end: float,
) -> float:
    """Average a piecewise-linear function over a wavelength interval.

    The function interpolates (wavelengths, values) linearly and extends the
    first and last sample as constants outside the tabulated range.

    Args:
        wavelengths: Sorted sample wavelengths.
        values: Sample values, same length as wavelengths.
        lambda_start: Start of the averaging interval.
        lambda_end: End of the averaging interval (> lambda_start).

    Returns:
        The mean value of the interpolant over [lambda_start, lambda_end].
    """
    inner = wavelengths[(wavelengths > lambda_start) & (wavelengths < lambda_end)]
    xs = np.concatenate(([lambda_start], inner, [lambda_end]))
    ys = np.interp(xs, wavelengths, values)
    # Trapezoids are exact for a piecewise-linear function split at its knots
    area = 0.5 * float(np.sum((ys[1:] + ys[:-1]) * np.diff(xs)))
    return area / (lambda_end - lambda_start)


def _resample(
    wavelengths: Sequence[float] | npt.NDArray[np.float64],
    values: Sequence[float] | npt.NDArray[np.float64],
) -> npt.NDArray[np.float64]:
    wl = np.asarray(wavelengths, dtype=np.float64)
    v = np.asarray(values, dtype=np.float64)
    order = np.argsort(wl, kind="stable")
    wl, v = wl[order], v[order]
    edges = np.linspace(LAMBDA_START, LAMBDA_END, N_SPECTRAL_SAMPLES + 1)
    return np.array(
        [average_spectrum_samples(wl, v, lo, hi) for lo, hi in zip(edges[:-1], edges[1:])],
        dtype=np.float64,
    )


# =============================================================================
# Basis Tables
# =============================================================================


@dataclass(frozen=True)
class SpectralTables:
    """Immutable conversion tables shared by every spectrum.

    Attributes:
        xyz_matching: CIE x-bar, y-bar, z-bar resampled into the spectral bins,
            shape (3, N).
        reflectance_basis: White, cyan, magenta, yellow, red, green and blue
            reflectance spectra, shape (7, N).
        illuminant_basis: The same seven colors as emission spectra, shape (7, N).
    """

    xyz_matching: npt.NDArray[np.float64]
    reflectance_basis: npt.NDArray[np.float64]
    illuminant_basis: npt.NDArray[np.float64]

    def basis(self, spectrum_type: SpectrumType) -> npt.NDArray[np.float64]:
        """Return the basis set used to decode colors of the given type."""
        if spectrum_type is SpectrumType.ILLUMINANT:
            return self.illuminant_basis
        return self.reflectance_basis


def _calibrate(
    basis: npt.NDArray[np.float64], response: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """Apply the smallest change to each basis row that maps it to its ideal RGB.

    For a row b with RGB image c = R b, adds R^T (R R^T)^-1 (target - c).
    Only used for the illuminant set, where the correction is small next to
    the D65-weighted rows.
    """
    gram = response @ response.T
    residual = _BASIS_TARGETS - basis @ response.T
    correction = np.linalg.solve(gram, residual.T).T @ response
    return basis + correction


def _build_tables() -> SpectralTables:
    xyz = np.stack(
        [
            _resample(*zip(*samples))
            for samples in (
                spectral_data.CIE_X_SAMPLES,
                spectral_data.CIE_Y_SAMPLES,
                spectral_data.CIE_Z_SAMPLES,
            )
        ]
    )
    d65_wl, d65_values = (np.asarray(c, dtype=np.float64) for c in zip(*spectral_data.D65_SAMPLES))
    smits_wl = np.asarray(spectral_data.SMITS_WAVELENGTHS, dtype=np.float64)
    d65_at_smits = np.interp(smits_wl, d65_wl, d65_values) / 100.0

    smits = np.array(
        [
            spectral_data.SMITS_WHITE,
            spectral_data.SMITS_CYAN,
            spectral_data.SMITS_MAGENTA,
            spectral_data.SMITS_YELLOW,
            spectral_data.SMITS_RED,
            spectral_data.SMITS_GREEN,
            spectral_data.SMITS_BLUE,
        ],
        dtype=np.float64,
    )
    reflectance = np.stack([_resample(smits_wl, row) for row in smits])
    illuminant = np.stack([_resample(smits_wl, row * d65_at_smits) for row in smits])

    # Reflectance rows stay as resampled; only the illuminant rows are calibrated
    illuminant = _calibrate(illuminant, XYZ_TO_RGB @ (xyz * XYZ_SCALE))

    for arr in (xyz, reflectance, illuminant):
        arr.flags.writeable = False
    return SpectralTables(xyz_matching=xyz, reflectance_basis=reflectance, illuminant_basis=illuminant)


_tables: SpectralTables | None = None
_tables_lock = threading.Lock()


def init_spectral_tables() -> SpectralTables:
    """Build the process-wide spectral tables if needed and return them.

    Idempotent and safe to call from several threads; later calls return the
    instance built by the first one. Must complete before any render starts.
    """
    global _tables
    with _tables_lock:
        if _tables is None:
            _tables = _build_tables()
            logger.debug(
                "Initialized spectral tables: %d samples over %.0f-%.0f nm",
                N_SPECTRAL_SAMPLES,
                LAMBDA_START,
                LAMBDA_END,
            )
        return _tables


def get_spectral_tables() -> SpectralTables:
    """Return the initialized spectral tables.

    Raises:
        SpectralTablesNotInitializedError: If init_spectral_tables() has not run.
    """
    tables = _tables
    if tables is None:
        raise SpectralTablesNotInitializedError(
            "Spectral tables are not initialized; call init_spectral_tables() first"
        )
    return tables


def _resolve(tables: SpectralTables | None) -> SpectralTables:
    return tables if tables is not None else get_spectral_tables()


# =============================================================================
# Sampled Spectrum
# =============================================================================


class SampledSpectrum:
    """A spectral distribution sampled at N fixed wavelength bins.

    Values are immutable: every arithmetic operation returns a new spectrum.
    Binary operators accept another spectrum or a scalar.

    Attributes:
        samples: Read-only float64 array of shape (N_SPECTRAL_SAMPLES,).
    """

    __slots__ = ("_samples",)

    # Make NumPy scalars defer to the reflected operators below
    __array_ufunc__ = None

    def __init__(self, samples: float | Sequence[float] | npt.NDArray[np.float64] = 0.0) -> None:
        """Create a spectrum.

        Args:
            samples: A scalar (constant spectrum) or N sample values.

        Raises:
            ValueError: If a sequence of the wrong length is given.
        """
        if np.isscalar(samples):
            arr = np.full(N_SPECTRAL_SAMPLES, float(samples), dtype=np.float64)
        else:
            arr = np.array(samples, dtype=np.float64)
            if arr.shape != (N_SPECTRAL_SAMPLES,):
                raise ValueError(
                    f"Expected {N_SPECTRAL_SAMPLES} spectral samples, got shape {arr.shape}"
                )
        arr.flags.writeable = False
        self._samples = arr

    @classmethod
    def _wrap(cls, arr: npt.NDArray[np.float64]) -> SampledSpectrum:
        spectrum = cls.__new__(cls)
        arr.flags.writeable = False
        spectrum._samples = arr
        return spectrum

    @property
    def samples(self) -> npt.NDArray[np.float64]:
        return self._samples

    # -------------------------------------------------------------------------
    # Construction from colors and tabulated data
    # -------------------------------------------------------------------------

    @classmethod
    def from_rgb(
        cls,
        rgb: Sequence[float] | npt.NDArray[np.float64],
        spectrum_type: SpectrumType = SpectrumType.REFLECTANCE,
        tables: SpectralTables | None = None,
    ) -> SampledSpectrum:
        """Decode a linear RGB color into a smooth spectrum.

        The smallest channel contributes white, the difference between the
        two larger channels contributes the secondary color they share, and
        the remainder of the largest channel contributes its primary.

        Args:
            rgb: Linear RGB triple.
            spectrum_type: Basis set to decode with.
            tables: Conversion tables; defaults to the initialized instance.

        Returns:
            The decoded spectrum.
        """
        basis = _resolve(tables).basis(spectrum_type)
        r, g, b = (float(c) for c in rgb)
        W, C, M, Y = _Basis.WHITE, _Basis.CYAN, _Basis.MAGENTA, _Basis.YELLOW
        R, G, B = _Basis.RED, _Basis.GREEN, _Basis.BLUE

        if r <= g and r <= b:
            if g <= b:
                weights = ((W, r), (C, g - r), (B, b - g))
            else:
                weights = ((W, r), (C, b - r), (G, g - b))
        elif g <= r and g <= b:
            if r <= b:
                weights = ((W, g), (M, r - g), (B, b - r))
            else:
                weights = ((W, g), (M, b - g), (R, r - b))
        else:
            if r <= g:
                weights = ((W, b), (Y, r - b), (G, g - r))
            else:
                weights = ((W, b), (Y, g - b), (R, r - g))

        arr = np.zeros(N_SPECTRAL_SAMPLES, dtype=np.float64)
        for index, weight in weights:
            if weight != 0.0:
                arr += weight * basis[index]
        return cls._wrap(arr)

    @classmethod
    def from_xyz(
        cls,
        xyz: Sequence[float] | npt.NDArray[np.float64],
        spectrum_type: SpectrumType = SpectrumType.REFLECTANCE,
        tables: SpectralTables | None = None,
    ) -> SampledSpectrum:
        """Decode CIE XYZ tristimulus values via their linear RGB."""
        return cls.from_rgb(xyz_to_rgb(xyz), spectrum_type, tables)

    @classmethod
    def from_sampled(cls, pairs: Iterable[tuple[float, float]]) -> SampledSpectrum:
        """Build a spectrum from tabulated (wavelength, value) samples.

        Samples may be unsorted. Each bin receives the average of the
        piecewise-linear interpolant over its wavelength range; the first and
        last samples extend as constants beyond the tabulated range.

        Raises:
            ValueError: If no samples are given.
        """
        pairs = list(pairs)
        if not pairs:
            raise ValueError("from_sampled requires at least one (wavelength, value) pair")
        wavelengths, values = zip(*pairs)
        return cls._wrap(_resample(wavelengths, values))

    # -------------------------------------------------------------------------
    # Color conversion
    # -------------------------------------------------------------------------

    def to_xyz(self, tables: SpectralTables | None = None) -> npt.NDArray[np.float64]:
        """Integrate against the CIE matching functions."""
        return (_resolve(tables).xyz_matching @ self._samples) * XYZ_SCALE

    def to_rgb(self, tables: SpectralTables | None = None) -> npt.NDArray[np.float64]:
        """Convert to linear RGB through XYZ."""
        return xyz_to_rgb(self.to_xyz(tables))

    def y(self, tables: SpectralTables | None = None) -> float:
        """Luminance (the Y tristimulus value)."""
        return float(_resolve(tables).xyz_matching[1] @ self._samples) * XYZ_SCALE

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_black(self) -> bool:
        return not np.any(self._samples)

    def has_nan(self) -> bool:
        return bool(np.isnan(self._samples).any())

    def max_value(self) -> float:
        return float(self._samples.max())

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    @staticmethod
    def _operand(other):
        if isinstance(other, SampledSpectrum):
            return other._samples
        if isinstance(other, (int, float, np.floating, np.integer)):
            return float(other)
        return None

    def __add__(self, other):
        value = self._operand(other)
        if value is None:
            return NotImplemented
        return SampledSpectrum._wrap(self._samples + value)

    __radd__ = __add__

    def __sub__(self, other):
        value = self._operand(other)
        if value is None:
            return NotImplemented
        return SampledSpectrum._wrap(self._samples - value)

    def __rsub__(self, other):
        value = self._operand(other)
        if value is None:
            return NotImplemented
        return SampledSpectrum._wrap(value - self._samples)

    def __mul__(self, other):
        value = self._operand(other)
        if value is None:
            return NotImplemented
        return SampledSpectrum._wrap(self._samples * value)

    __rmul__ = __mul__

    def __truediv__(self, other):
        value = self._operand(other)
        if value is None:
            return NotImplemented
        return SampledSpectrum._wrap(self._samples / value)

    def __neg__(self) -> SampledSpectrum:
        return SampledSpectrum._wrap(-self._samples)

    def sqrt(self) -> SampledSpectrum:
        return SampledSpectrum._wrap(np.sqrt(self._samples))

    def pow(self, exponent: float) -> SampledSpectrum:
        return SampledSpectrum._wrap(np.power(self._samples, exponent))

    def exp(self) -> SampledSpectrum:
        return SampledSpectrum._wrap(np.exp(self._samples))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SampledSpectrum):
            return NotImplemented
        return bool(np.array_equal(self._samples, other._samples))

    __hash__ = None

    def __len__(self) -> int:
        return N_SPECTRAL_SAMPLES

    def __getitem__(self, index: int) -> float:
        return float(self._samples[index])

    def __repr__(self) -> str:
        return (
            f"SampledSpectrum(min={self._samples.min():.4g}, "
            f"max={self._samples.max():.4g}, mean={self._samples.mean():.4g})"
        )


def lerp(t: float, s1: SampledSpectrum, s2: SampledSpectrum) -> SampledSpectrum:
    """Linearly interpolate between two spectra: (1 - t) * s1 + t * s2."""
    return s1 * (1.0 - t) + s2 * t


def black() -> SampledSpectrum:
    """Return the all-zero spectrum."""
    return SampledSpectrum._wrap(np.zeros(N_SPECTRAL_SAMPLES, dtype=np.float64))

