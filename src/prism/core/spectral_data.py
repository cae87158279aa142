"""Raw tabulated spectral data.

Each table is a sequence of (wavelength_nm, value) samples. They are only
read by spectrum.init_spectral_tables(), which resamples them into the
fixed bins of SampledSpectrum.

Sources:
    CIE 1931 2-degree standard observer, 5 nm, 380-780 nm (CIE 15:2004 T.2)
    CIE standard illuminant D65, 5 nm, 300-780 nm (CIE 15:2004 T.1),
        normalized to 100 at 560 nm
    Smits (1999) RGB-to-spectrum reflectance basis, 10 bins over 380-720 nm
"""

# =============================================================================
# CIE Color Matching Functions
# =============================================================================

# Integral of the y-bar matching function over wavelength
CIE_Y_INTEGRAL = 106.856895

CIE_X_SAMPLES: tuple[tuple[float, float], ...] = (
    (380.0, 0.001368),
    (385.0, 0.002236),
    (390.0, 0.004243),
    (395.0, 0.007650),
    (400.0, 0.014310),
    (405.0, 0.023190),
    (410.0, 0.043510),
    (415.0, 0.077630),
    (420.0, 0.134380),
    (425.0, 0.214770),
    (430.0, 0.283900),
    (435.0, 0.328500),
    (440.0, 0.348280),
    (445.0, 0.348060),
    (450.0, 0.336200),
    (455.0, 0.318700),
    (460.0, 0.290800),
    (465.0, 0.251100),
    (470.0, 0.195360),
    (475.0, 0.142100),
    (480.0, 0.095640),
    (485.0, 0.058010),
    (490.0, 0.032010),
    (495.0, 0.014700),
    (500.0, 0.004900),
    (505.0, 0.002400),
    (510.0, 0.009300),
    (515.0, 0.029100),
    (520.0, 0.063270),
    (525.0, 0.109600),
    (530.0, 0.165500),
    (535.0, 0.225750),
    (540.0, 0.290400),
    (545.0, 0.359700),
    (550.0, 0.433450),
    (555.0, 0.512050),
    (560.0, 0.594500),
    (565.0, 0.678400),
    (570.0, 0.762100),
    (575.0, 0.842500),
    (580.0, 0.916300),
    (585.0, 0.978600),
    (590.0, 1.026300),
    (595.0, 1.056700),
    (600.0, 1.062200),
    (605.0, 1.045600),
    (610.0, 1.002600),
    (615.0, 0.938400),
    (620.0, 0.854450),
    (625.0, 0.751400),
    (630.0, 0.642400),
    (635.0, 0.541900),
    (640.0, 0.447900),
    (645.0, 0.360800),
    (650.0, 0.283500),
    (655.0, 0.218700),
    (660.0, 0.164900),
    (665.0, 0.121200),
    (670.0, 0.087400),
    (675.0, 0.063600),
    (680.0, 0.046770),
    (685.0, 0.032900),
    (690.0, 0.022700),
    (695.0, 0.015840),
    (700.0, 0.011359),
    (705.0, 0.008111),
    (710.0, 0.005790),
    (715.0, 0.004109),
    (720.0, 0.002899),
    (725.0, 0.002049),
    (730.0, 0.001440),
    (735.0, 0.001000),
    (740.0, 0.000690),
    (745.0, 0.000476),
    (750.0, 0.000332),
    (755.0, 0.000235),
    (760.0, 0.000166),
    (765.0, 0.000117),
    (770.0, 0.000083),
    (775.0, 0.000059),
    (780.0, 0.000042),
)

CIE_Y_SAMPLES: tuple[tuple[float, float], ...] = (
    (380.0, 0.000039),
    (385.0, 0.000064),
    (390.0, 0.000120),
    (395.0, 0.000217),
    (400.0, 0.000396),
    (405.0, 0.000640),
    (410.0, 0.001210),
    (415.0, 0.002180),
    (420.0, 0.004000),
    (425.0, 0.007300),
    (430.0, 0.011600),
    (435.0, 0.016840),
    (440.0, 0.023000),
    (445.0, 0.029800),
    (450.0, 0.038000),
    (455.0, 0.048000),
    (460.0, 0.060000),
    (465.0, 0.073900),
    (470.0, 0.090980),
    (475.0, 0.112600),
    (480.0, 0.139020),
    (485.0, 0.169300),
    (490.0, 0.208020),
    (495.0, 0.258600),
    (500.0, 0.323000),
    (505.0, 0.407300),
    (510.0, 0.503000),
    (515.0, 0.608200),
    (520.0, 0.710000),
    (525.0, 0.793200),
    (530.0, 0.862000),
    (535.0, 0.914850),
    (540.0, 0.954000),
    (545.0, 0.980300),
    (550.0, 0.994950),
    (555.0, 1.000000),
    (560.0, 0.995000),
    (565.0, 0.978600),
    (570.0, 0.952000),
    (575.0, 0.915400),
    (580.0, 0.870000),
    (585.0, 0.816300),
    (590.0, 0.757000),
    (595.0, 0.694900),
    (600.0, 0.631000),
    (605.0, 0.566800),
    (610.0, 0.503000),
    (615.0, 0.441200),
    (620.0, 0.381000),
    (625.0, 0.321000),
    (630.0, 0.265000),
    (635.0, 0.217000),
    (640.0, 0.175000),
    (645.0, 0.138200),
    (650.0, 0.107000),
    (655.0, 0.081600),
    (660.0, 0.061000),
    (665.0, 0.044580),
    (670.0, 0.032000),
    (675.0, 0.023200),
    (680.0, 0.017000),
    (685.0, 0.011920),
    (690.0, 0.008210),
    (695.0, 0.005723),
    (700.0, 0.004102),
    (705.0, 0.002929),
    (710.0, 0.002091),
    (715.0, 0.001484),
    (720.0, 0.001047),
    (725.0, 0.000740),
    (730.0, 0.000520),
    (735.0, 0.000361),
    (740.0, 0.000249),
    (745.0, 0.000172),
    (750.0, 0.000120),
    (755.0, 0.000085),
    (760.0, 0.000060),
    (765.0, 0.000042),
    (770.0, 0.000030),
    (775.0, 0.000021),
    (780.0, 0.000015),
)

CIE_Z_SAMPLES: tuple[tuple[float, float], ...] = (
    (380.0, 0.006450),
    (385.0, 0.010550),
    (390.0, 0.020050),
    (395.0, 0.036210),
    (400.0, 0.067850),
    (405.0, 0.110200),
    (410.0, 0.207400),
    (415.0, 0.371300),
    (420.0, 0.645600),
    (425.0, 1.039050),
    (430.0, 1.385600),
    (435.0, 1.622960),
    (440.0, 1.747060),
    (445.0, 1.782600),
    (450.0, 1.772110),
    (455.0, 1.744100),
    (460.0, 1.669200),
    (465.0, 1.528100),
    (470.0, 1.287640),
    (475.0, 1.041900),
    (480.0, 0.812950),
    (485.0, 0.616200),
    (490.0, 0.465180),
    (495.0, 0.353300),
    (500.0, 0.272000),
    (505.0, 0.212300),
    (510.0, 0.158200),
    (515.0, 0.111700),
    (520.0, 0.078250),
    (525.0, 0.057250),
    (530.0, 0.042160),
    (535.0, 0.029840),
    (540.0, 0.020300),
    (545.0, 0.013400),
    (550.0, 0.008750),
    (555.0, 0.005750),
    (560.0, 0.003900),
    (565.0, 0.002750),
    (570.0, 0.002100),
    (575.0, 0.001800),
    (580.0, 0.001650),
    (585.0, 0.001400),
    (590.0, 0.001100),
    (595.0, 0.001000),
    (600.0, 0.000800),
    (605.0, 0.000600),
    (610.0, 0.000340),
    (615.0, 0.000240),
    (620.0, 0.000190),
    (625.0, 0.000100),
    (630.0, 0.000050),
    (635.0, 0.000030),
    (640.0, 0.000020),
    (645.0, 0.000010),
    (650.0, 0.000000),
    (655.0, 0.000000),
    (660.0, 0.000000),
    (665.0, 0.000000),
    (670.0, 0.000000),
    (675.0, 0.000000),
    (680.0, 0.000000),
    (685.0, 0.000000),
    (690.0, 0.000000),
    (695.0, 0.000000),
    (700.0, 0.000000),
    (705.0, 0.000000),
    (710.0, 0.000000),
    (715.0, 0.000000),
    (720.0, 0.000000),
    (725.0, 0.000000),
    (730.0, 0.000000),
    (735.0, 0.000000),
    (740.0, 0.000000),
    (745.0, 0.000000),
    (750.0, 0.000000),
    (755.0, 0.000000),
    (760.0, 0.000000),
    (765.0, 0.000000),
    (770.0, 0.000000),
    (775.0, 0.000000),
    (780.0, 0.000000),
)


# =============================================================================
# Illuminant
# =============================================================================

D65_SAMPLES: tuple[tuple[float, float], ...] = (
    (300.0, 0.034100),
    (305.0, 1.6643),
    (310.0, 3.2945),
    (315.0, 11.7652),
    (320.0, 20.236),
    (325.0, 28.6447),
    (330.0, 37.0535),
    (335.0, 38.5011),
    (340.0, 39.9488),
    (345.0, 42.4302),
    (350.0, 44.9117),
    (355.0, 45.775),
    (360.0, 46.6383),
    (365.0, 49.3637),
    (370.0, 52.0891),
    (375.0, 51.0323),
    (380.0, 49.9755),
    (385.0, 52.3118),
    (390.0, 54.6482),
    (395.0, 68.7015),
    (400.0, 82.7549),
    (405.0, 87.1204),
    (410.0, 91.486),
    (415.0, 92.4589),
    (420.0, 93.4318),
    (425.0, 90.057),
    (430.0, 86.6823),
    (435.0, 95.7736),
    (440.0, 104.865),
    (445.0, 110.936),
    (450.0, 117.008),
    (455.0, 117.410),
    (460.0, 117.812),
    (465.0, 116.336),
    (470.0, 114.861),
    (475.0, 115.392),
    (480.0, 115.923),
    (485.0, 112.367),
    (490.0, 108.811),
    (495.0, 109.082),
    (500.0, 109.354),
    (505.0, 108.578),
    (510.0, 107.802),
    (515.0, 106.296),
    (520.0, 104.790),
    (525.0, 106.239),
    (530.0, 107.689),
    (535.0, 106.047),
    (540.0, 104.405),
    (545.0, 104.225),
    (550.0, 104.046),
    (555.0, 102.023),
    (560.0, 100.000),
    (565.0, 98.1671),
    (570.0, 96.3342),
    (575.0, 96.0611),
    (580.0, 95.788),
    (585.0, 92.2368),
    (590.0, 88.6856),
    (595.0, 89.3459),
    (600.0, 90.0062),
    (605.0, 89.8026),
    (610.0, 89.5991),
    (615.0, 88.6489),
    (620.0, 87.6987),
    (625.0, 85.4936),
    (630.0, 83.2886),
    (635.0, 83.4939),
    (640.0, 83.6992),
    (645.0, 81.8630),
    (650.0, 80.0268),
    (655.0, 80.1207),
    (660.0, 80.2146),
    (665.0, 81.2462),
    (670.0, 82.2778),
    (675.0, 80.2810),
    (680.0, 78.2842),
    (685.0, 74.0027),
    (690.0, 69.7213),
    (695.0, 70.6652),
    (700.0, 71.6091),
    (705.0, 72.979),
    (710.0, 74.349),
    (715.0, 67.9765),
    (720.0, 61.604),
    (725.0, 65.7448),
    (730.0, 69.8856),
    (735.0, 72.4863),
    (740.0, 75.087),
    (745.0, 69.3398),
    (750.0, 63.5927),
    (755.0, 55.0054),
    (760.0, 46.4182),
    (765.0, 56.6118),
    (770.0, 66.8054),
    (775.0, 65.0941),
    (780.0, 63.3828),
)


# =============================================================================
# RGB-to-Spectrum Reflectance Basis
# =============================================================================
# Values at ten evenly spaced wavelengths from 380 to 720 nm. The illuminant
# basis is derived from these by weighting with the D65 distribution.

SMITS_WAVELENGTHS: tuple[float, ...] = tuple(380.0 + i * (720.0 - 380.0) / 9.0 for i in range(10))

SMITS_WHITE = (1.0000, 1.0000, 0.9999, 0.9993, 0.9992, 0.9998, 1.0000, 1.0000, 1.0000, 1.0000)
SMITS_CYAN = (0.9710, 0.9426, 1.0007, 1.0007, 1.0007, 1.0007, 0.1564, 0.0000, 0.0000, 0.0000)
SMITS_MAGENTA = (1.0000, 1.0000, 0.9685, 0.2229, 0.0000, 0.0458, 0.8369, 1.0000, 1.0000, 0.9959)
SMITS_YELLOW = (0.0001, 0.0000, 0.1088, 0.6651, 1.0000, 1.0000, 0.9996, 0.9586, 0.9685, 0.9840)
SMITS_RED = (0.1012, 0.0515, 0.0000, 0.0000, 0.0000, 0.0000, 0.8325, 1.0149, 1.0149, 1.0149)
SMITS_GREEN = (0.0000, 0.0000, 0.0273, 0.7937, 1.0000, 0.9418, 0.1719, 0.0000, 0.0000, 0.0025)
SMITS_BLUE = (1.0000, 1.0000, 0.8916, 0.3323, 0.0000, 0.0000, 0.0003, 0.0369, 0.0483, 0.0496)
