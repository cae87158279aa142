"""Pytest configuration for renderer tests.

This module provides shared fixtures for all test modules, including the
spectral table initialization that must happen once per session before any
color conversion.
"""

import numpy as np
import pytest

from src.prism.camera.pinhole import Camera
from src.prism.core.spectrum import init_spectral_tables


@pytest.fixture(scope="session", autouse=True)
def spectral_tables():
    """Initialize the spectral tables once for the entire test session."""
    return init_spectral_tables()


@pytest.fixture
def rng():
    """A seeded random generator for reproducible sampling tests."""
    return np.random.default_rng(42)


@pytest.fixture
def small_camera():
    """A 24x20 camera at the origin looking down +x."""
    return Camera(
        focus=(0.0, 0.0, 0.0),
        focal_distance=1.0,
        field_of_view=60.0,
        rotation=(0.0, 0.0, 0.0),
        resolution=(24, 20),
    )
