"""Ray data structure and vector utilities for CPU ray tracing.

This module provides the immutable Ray type and the small set of vector
helpers shared by the intersection kernels and the integrators. Vectors are
float64 NumPy arrays of shape (3,).

Example:
    >>> from src.prism.core.ray import Ray, vec3
    >>> ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -2.0))
    >>> ray.direction
    array([ 0.,  0., -1.])
    >>> ray.at(5.0)  # Point 5 units along the ray
    array([ 0.,  0., -5.])
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

# Type alias for 3D vectors, points and normals
Vec3 = npt.NDArray[np.float64]


def vec3(x: float, y: float, z: float) -> Vec3:
    """Create a 3D vector."""
    return np.array((x, y, z), dtype=np.float64)


def as_vec3(value: Sequence[float] | Vec3) -> Vec3:
    """Convert a 3-sequence to a float64 vector.

    Args:
        value: Any sequence or array holding exactly three numbers.

    Returns:
        A new float64 array of shape (3,).

    Raises:
        ValueError: If the value does not hold exactly three components.
    """
    arr = np.array(value, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"Expected 3 components, got shape {arr.shape}")
    return arr


class Ray:
    """A half-line with an origin, a unit direction and an upper bound on t.

    The direction is normalized on construction. Rays are never mutated;
    transforming a ray produces a new one.

    Attributes:
        origin: The starting point of the ray.
        direction: The unit direction of the ray.
        max_t: Upper bound of the valid parameter range (may be infinite).
    """

    __slots__ = ("_origin", "_direction", "_max_t")

    def __init__(
        self,
        origin: Sequence[float] | Vec3,
        direction: Sequence[float] | Vec3,
        max_t: float = math.inf,
    ) -> None:
        """Create a ray.

        Args:
            origin: The starting point of the ray.
            direction: The direction of the ray; need not be normalized.
            max_t: Upper bound on the ray parameter. Defaults to infinity.

        Raises:
            ValueError: If the direction has zero or non-finite length.
        """
        o = as_vec3(origin)
        d = as_vec3(direction)
        norm = math.sqrt(float(d @ d))
        if norm == 0.0 or not math.isfinite(norm):
            raise ValueError(f"Ray direction must have finite non-zero length, got {d}")
        o.flags.writeable = False
        d = d / norm
        d.flags.writeable = False
        self._origin = o
        self._direction = d
        self._max_t = float(max_t)

    @property
    def origin(self) -> Vec3:
        """The starting point of the ray."""
        return self._origin

    @property
    def direction(self) -> Vec3:
        """The unit direction of the ray."""
        return self._direction

    @property
    def max_t(self) -> float:
        """Upper bound of the valid parameter range."""
        return self._max_t

    def at(self, t: float) -> Vec3 | None:
        """Compute the point along the ray at parameter t.

        Args:
            t: The parameter value.

        Returns:
            origin + t * direction, or None when t lies outside [0, max_t].
        """
        if t < 0.0 or t > self._max_t:
            return None
        return self._origin + self._direction * t

    def __repr__(self) -> str:
        return (
            f"Ray(origin={self._origin.tolist()}, direction={self._direction.tolist()}, "
            f"max_t={self._max_t})"
        )


# =============================================================================
# Vector Utility Functions
# =============================================================================


def dot(a: Vec3, b: Vec3) -> float:
    """Compute the dot product of two vectors."""
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def cross(a: Vec3, b: Vec3) -> Vec3:
    """Compute the cross product a x b."""
    return np.array(
        (
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ),
        dtype=np.float64,
    )


def length(v: Vec3) -> float:
    """Compute the Euclidean length of a vector."""
    return math.sqrt(dot(v, v))


def normalize(v: Vec3) -> Vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v.
        If v is zero-length, returns a zero vector.
    """
    n = length(v)
    if n == 0.0:
        return np.zeros(3, dtype=np.float64)
    return v / n


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Reflect an incident vector about a normal.

    Computes r = i - 2 (i . n) n. The normal should be unit length.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - normal * (2.0 * dot(incident, normal))


def schlick_fresnel(cosine: float, r0: float | npt.NDArray[np.float64]):
    """Compute Fresnel reflectance using Schlick's approximation.

    R(theta) = R0 + (1 - R0) * (1 - cos(theta))^5

    Args:
        cosine: Cosine of the angle between the normal and the direction.
        r0: Reflectance at normal incidence; a scalar or a per-sample array.

    Returns:
        The approximate reflectance, with the same shape as r0.
    """
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


def build_onb_from_normal(normal: Vec3) -> tuple[Vec3, Vec3, Vec3]:
    """Build an orthonormal basis whose third axis is the given normal.

    The canonical axis least aligned with the normal is Gram-Schmidt
    orthogonalized against it; the third axis is their cross product.

    Args:
        normal: The surface normal (should be normalized).

    Returns:
        A tuple (tangent, bitangent, normal) forming an orthonormal basis.
    """
    axis = int(np.argmin(np.abs(normal)))
    seed = np.zeros(3, dtype=np.float64)
    seed[axis] = 1.0
    tangent = normalize(seed - normal * dot(seed, normal))
    bitangent = cross(normal, tangent)
    return tangent, bitangent, normal


def random_cosine_direction(rng: np.random.Generator) -> Vec3:
    """Generate a random direction with cosine-weighted distribution.

    Uses sin(theta) = sqrt(R1), cos(theta) = sqrt(1 - R1), phi = 2 pi R2.
    The distribution has PDF = cos(theta) / pi.

    Args:
        rng: Source of uniform samples in [0, 1).

    Returns:
        A random unit direction in the local coordinate frame (z-up).
    """
    r1, r2 = rng.random(2)
    sin_theta = math.sqrt(r1)
    cos_theta = math.sqrt(1.0 - r1)
    phi = 2.0 * math.pi * r2
    return vec3(math.cos(phi) * sin_theta, math.sin(phi) * sin_theta, cos_theta)


def sample_cosine_hemisphere(normal: Vec3, rng: np.random.Generator) -> Vec3:
    """Cosine-weighted hemisphere sampling around a normal.

    Args:
        normal: The surface normal defining the hemisphere orientation.
        rng: Source of uniform samples in [0, 1).

    Returns:
        A unit direction in world space with a non-negative normal component.
    """
    local = random_cosine_direction(rng)
    tangent, bitangent, n = build_onb_from_normal(normal)
    return local[0] * tangent + local[1] * bitangent + local[2] * n
