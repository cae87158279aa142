"""Render settings, numeric constants and the exception hierarchy.

Constants here are shared by the intersection kernels, the integrators and
the scheduler. RenderSettings bundles the per-render knobs that a scene
description (or a caller) binds before rendering starts.

Example:
    >>> from src.prism.core.config import RenderSettings
    >>> settings = RenderSettings(samples_per_pixel=16, max_depth=5, seed=7)
    >>> settings.tile_size
    16
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

# =============================================================================
# Numeric Constants
# =============================================================================

# Offset applied along the normal to continuation rays to avoid self-hits
RAY_EPSILON = 1e-10

# Möller-Trumbore determinant threshold (near-parallel rays miss)
TRIANGLE_EPSILON = 1e-10

# Edge length in pixels of a square render tile
DEFAULT_TILE_SIZE = 16

# Display gamma applied before 8-bit quantization
GAMMA = 2.2

# Upper clamp for linear channels before quantization, [0, 1 - eps)
CHANNEL_CLAMP_EPSILON = 1e-6


# =============================================================================
# Exceptions
# =============================================================================


class PrismError(Exception):
    """Base class for all renderer errors."""


class ConfigurationError(PrismError, ValueError):
    """Raised when a scene, camera or material description is malformed."""


class SpectralTablesNotInitializedError(PrismError, RuntimeError):
    """Raised when a color conversion runs before init_spectral_tables()."""


class RenderCancelledError(PrismError, RuntimeError):
    """Raised by render() when the scheduler was cancelled mid-render."""


class TileRenderError(PrismError, RuntimeError):
    """Raised when one or more tile tasks failed during a render.

    Attributes:
        failures: List of (task_index, exception) pairs, in completion order.
    """

    def __init__(self, failures: list[tuple[int, BaseException]]) -> None:
        self.failures = failures
        first_index, first_error = failures[0]
        super().__init__(
            f"{len(failures)} tile task(s) failed; first failure in task "
            f"{first_index}: {first_error!r}"
        )


# =============================================================================
# Render Settings
# =============================================================================


@dataclass(frozen=True)
class RenderSettings:
    """Per-render parameters bound before rendering starts.

    Attributes:
        samples_per_pixel: Number of jittered camera rays averaged per pixel.
        max_depth: Recursion budget of the light-transport integrator.
        tile_size: Edge length of the square tiles handed to workers.
        num_threads: Worker thread count. None uses os.cpu_count().
        seed: Base seed for per-tile random generators. None draws fresh
            entropy, so renders are not reproducible.
        fresnel: Apply Schlick's approximation to specular reflections.
            False reproduces the baseline (unadjusted specular color).
    """

    samples_per_pixel: int = 8
    max_depth: int = 5
    tile_size: int = DEFAULT_TILE_SIZE
    num_threads: int | None = None
    seed: int | None = None
    fresnel: bool = False

    def __post_init__(self) -> None:
        if self.samples_per_pixel < 1:
            raise ValueError(
                f"samples_per_pixel must be positive, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if self.tile_size < 1:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")
        if self.num_threads is not None and self.num_threads < 1:
            raise ValueError(f"num_threads must be positive, got {self.num_threads}")

    @property
    def worker_count(self) -> int:
        """Number of worker threads the scheduler will start."""
        if self.num_threads is not None:
            return self.num_threads
        return os.cpu_count() or 1

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RenderSettings:
        """Build settings from a scene description's [Render] table.

        Args:
            data: Mapping with any subset of the dataclass field names.

        Returns:
            A validated RenderSettings instance.

        Raises:
            ConfigurationError: If an unknown key is present or a value is
                rejected by validation.
        """
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown render settings: {', '.join(unknown)}")
        try:
            return cls(**data)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid render settings: {e}") from e
