"""Unit tests for sampled spectra and color conversion.

Tests cover:
- Table initialization and the uninitialized error
- RGB and XYZ round trips through both basis sets
- Resampling of tabulated data into spectral bins
- Spectrum arithmetic and queries
"""

import numpy as np
import pytest

from src.prism.core import spectrum
from src.prism.core.config import SpectralTablesNotInitializedError
from src.prism.core.spectral_data import SMITS_RED
from src.prism.core.spectrum import (
    LAMBDA_END,
    LAMBDA_START,
    N_SPECTRAL_SAMPLES,
    SampledSpectrum,
    SpectrumType,
    average_spectrum_samples,
    black,
    get_spectral_tables,
    init_spectral_tables,
    lerp,
    rgb_to_xyz,
    xyz_to_rgb,
)


class TestTables:
    """Tests for the process-wide conversion tables."""

    def test_init_is_idempotent(self, spectral_tables):
        """Test that repeated initialization returns the same instance."""
        assert init_spectral_tables() is spectral_tables
        assert get_spectral_tables() is spectral_tables

    def test_table_shapes(self, spectral_tables):
        """Test the shapes of the matching functions and basis sets."""
        assert spectral_tables.xyz_matching.shape == (3, N_SPECTRAL_SAMPLES)
        assert spectral_tables.reflectance_basis.shape == (7, N_SPECTRAL_SAMPLES)
        assert spectral_tables.illuminant_basis.shape == (7, N_SPECTRAL_SAMPLES)

    def test_tables_are_read_only(self, spectral_tables):
        """Test that table arrays cannot be modified."""
        with pytest.raises(ValueError):
            spectral_tables.reflectance_basis[0, 0] = 2.0

    def test_uninitialized_conversion_raises(self, monkeypatch):
        """Test that conversions fail loudly before initialization."""
        monkeypatch.setattr(spectrum, "_tables", None)
        with pytest.raises(SpectralTablesNotInitializedError):
            SampledSpectrum(1.0).to_rgb()
        with pytest.raises(SpectralTablesNotInitializedError):
            SampledSpectrum.from_rgb((0.5, 0.5, 0.5))

    def test_explicit_tables_bypass_global_state(self, monkeypatch, spectral_tables):
        """Test that passing tables works without the global instance."""
        monkeypatch.setattr(spectrum, "_tables", None)
        s = SampledSpectrum.from_rgb((0.2, 0.4, 0.6), SpectrumType.ILLUMINANT, tables=spectral_tables)
        np.testing.assert_allclose(s.to_rgb(spectral_tables), [0.2, 0.4, 0.6], atol=1e-9)


class TestColorConversion:
    """Tests for RGB and XYZ conversion."""

    COLORS = [
        (1.0, 0.0, 0.0),
        (0.0, 1.0, 0.0),
        (0.0, 0.0, 1.0),
        (0.73, 0.73, 0.73),
        (0.65, 0.05, 0.05),
        (0.12, 0.45, 0.15),
        (0.3, 0.9, 0.6),
        (0.8, 0.2, 0.5),
    ]

    @pytest.mark.parametrize("rgb", COLORS)
    def test_illuminant_round_trip(self, rgb):
        """Test that decoding then re-encoding an emitted color recovers it."""
        s = SampledSpectrum.from_rgb(rgb, SpectrumType.ILLUMINANT)
        np.testing.assert_allclose(s.to_rgb(), rgb, atol=1e-9)

    @pytest.mark.parametrize("rgb", COLORS)
    def test_lit_reflectance_round_trip(self, rgb):
        """Test that a reflectance under white light approximates its color and keeps channel order."""
        white = SampledSpectrum.from_rgb((1.0, 1.0, 1.0), SpectrumType.ILLUMINANT)
        result = (white * SampledSpectrum.from_rgb(rgb, SpectrumType.REFLECTANCE)).to_rgb()
        np.testing.assert_allclose(result, rgb, atol=0.15)
        for i in range(3):
            for j in range(3):
                if rgb[i] < rgb[j]:
                    assert result[i] < result[j]

    def test_reflectance_is_non_negative_and_bounded(self):
        """Test that decoded reflectances never go negative or exceed the basis peak."""
        rng = np.random.default_rng(3)
        for rgb in rng.random((500, 3)):
            samples = SampledSpectrum.from_rgb(rgb, SpectrumType.REFLECTANCE).samples
            assert samples.min() >= 0.0
            assert samples.max() <= max(SMITS_RED) + 1e-12

    def test_white_reflectance_is_flat(self):
        """Test that the white reflectance basis is nearly constant one."""
        s = SampledSpectrum.from_rgb((1.0, 1.0, 1.0), SpectrumType.REFLECTANCE)
        assert s.samples.min() > 0.99
        assert s.samples.max() <= 1.0 + 1e-12

    def test_black_decodes_to_zero(self):
        """Test that RGB black gives the zero spectrum."""
        assert SampledSpectrum.from_rgb((0.0, 0.0, 0.0)).is_black()

    def test_from_xyz(self):
        """Test decoding tristimulus values via their RGB."""
        xyz = rgb_to_xyz((0.25, 0.5, 0.75))
        s = SampledSpectrum.from_xyz(xyz, SpectrumType.ILLUMINANT)
        np.testing.assert_allclose(s.to_xyz(), xyz, atol=1e-6)

    def test_matrices_are_inverse(self):
        """Test that the XYZ and RGB matrices nearly invert each other."""
        np.testing.assert_allclose(xyz_to_rgb(rgb_to_xyz((0.1, 0.6, 0.3))), [0.1, 0.6, 0.3], atol=1e-3)

    def test_constant_spectrum_luminance(self):
        """Test that a unit constant spectrum has luminance close to one."""
        assert SampledSpectrum(1.0).y() == pytest.approx(1.0, abs=0.02)

    def test_luminance_matches_xyz(self):
        """Test that y() is the middle tristimulus value."""
        s = SampledSpectrum.from_rgb((0.3, 0.6, 0.1))
        assert s.y() == pytest.approx(s.to_xyz()[1])


class TestResampling:
    """Tests for averaging tabulated data into bins."""

    def test_average_of_linear_function(self):
        """Test that the average of a line is its midpoint value."""
        wl = np.array([0.0, 10.0])
        values = np.array([0.0, 10.0])
        assert average_spectrum_samples(wl, values, 2.0, 4.0) == pytest.approx(3.0)

    def test_constant_extension_outside_range(self):
        """Test that values are held constant beyond the tabulated range."""
        wl = np.array([500.0, 600.0])
        values = np.array([2.0, 4.0])
        assert average_spectrum_samples(wl, values, 300.0, 400.0) == pytest.approx(2.0)
        assert average_spectrum_samples(wl, values, 700.0, 750.0) == pytest.approx(4.0)

    def test_from_sampled_constant(self):
        """Test that a constant table resamples to a constant spectrum."""
        s = SampledSpectrum.from_sampled([(LAMBDA_END, 0.5), (LAMBDA_START, 0.5)])
        np.testing.assert_allclose(s.samples, 0.5)

    def test_from_sampled_ramp(self):
        """Test that a linear ramp averages to the bin midpoints."""
        s = SampledSpectrum.from_sampled([(LAMBDA_START, 0.0), (LAMBDA_END, LAMBDA_END - LAMBDA_START)])
        width = (LAMBDA_END - LAMBDA_START) / N_SPECTRAL_SAMPLES
        expected = width * (np.arange(N_SPECTRAL_SAMPLES) + 0.5)
        np.testing.assert_allclose(s.samples, expected)

    def test_from_sampled_empty_raises(self):
        """Test that at least one sample is required."""
        with pytest.raises(ValueError, match="at least one"):
            SampledSpectrum.from_sampled([])


class TestArithmetic:
    """Tests for spectrum operators and queries."""

    def test_scalar_construction(self):
        """Test that a scalar fills every sample."""
        s = SampledSpectrum(0.25)
        assert len(s) == N_SPECTRAL_SAMPLES
        assert s[0] == 0.25
        assert s[N_SPECTRAL_SAMPLES - 1] == 0.25

    def test_wrong_length_raises(self):
        """Test that sample arrays must have N entries."""
        with pytest.raises(ValueError, match="spectral samples"):
            SampledSpectrum([1.0, 2.0, 3.0])

    def test_operators(self):
        """Test elementwise operators with spectra and scalars."""
        a = SampledSpectrum(2.0)
        b = SampledSpectrum(0.5)
        assert a + b == SampledSpectrum(2.5)
        assert a - b == SampledSpectrum(1.5)
        assert a * b == SampledSpectrum(1.0)
        assert a / b == SampledSpectrum(4.0)
        assert 3.0 * b == SampledSpectrum(1.5)
        assert 1.0 - b == SampledSpectrum(0.5)
        assert -a == SampledSpectrum(-2.0)

    def test_numpy_scalar_operand(self):
        """Test that NumPy scalars combine like Python floats."""
        result = np.float64(2.0) * SampledSpectrum(1.5)
        assert isinstance(result, SampledSpectrum)
        assert result == SampledSpectrum(3.0)

    def test_unsupported_operand(self):
        """Test that arbitrary objects are rejected."""
        with pytest.raises(TypeError):
            SampledSpectrum(1.0) + "red"

    def test_elementwise_functions(self):
        """Test sqrt, pow and exp."""
        s = SampledSpectrum(4.0)
        assert s.sqrt() == SampledSpectrum(2.0)
        assert s.pow(0.5) == SampledSpectrum(2.0)
        np.testing.assert_allclose(SampledSpectrum(0.0).exp().samples, 1.0)

    def test_immutability(self):
        """Test that operations do not modify their operands."""
        a = SampledSpectrum(1.0)
        _ = a * 3.0
        assert a == SampledSpectrum(1.0)
        with pytest.raises(ValueError):
            a.samples[0] = 5.0

    def test_queries(self):
        """Test is_black, has_nan and max_value."""
        assert black().is_black()
        assert not SampledSpectrum(0.1).is_black()
        assert SampledSpectrum(float("nan")).has_nan()
        values = np.linspace(0.0, 1.0, N_SPECTRAL_SAMPLES)
        assert SampledSpectrum(values).max_value() == pytest.approx(1.0)

    def test_lerp(self):
        """Test linear interpolation between spectra."""
        result = lerp(0.25, SampledSpectrum(0.0), SampledSpectrum(4.0))
        np.testing.assert_allclose(result.samples, 1.0)

    def test_not_hashable(self):
        """Test that mutable-looking values are not hashable."""
        with pytest.raises(TypeError):
            hash(SampledSpectrum(1.0))
