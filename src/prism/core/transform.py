"""Affine transforms for placing shapes and cameras in world space.

A Transform wraps a 4x4 homogeneous matrix together with its inverse. It
maps points (full transform), vectors (linear part only), normals
(inverse-transpose of the linear part) and rays.

Example:
    >>> from src.prism.core.transform import Transform
    >>> t = Transform.from_srt(scale=(2.0, 2.0, 2.0), translation=(0.0, 0.0, -5.0))
    >>> t.apply_point((1.0, 0.0, 0.0))
    array([ 2.,  0., -5.])
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

from src.prism.core.ray import Ray, Vec3, as_vec3, normalize

Matrix4 = npt.NDArray[np.float64]


class Transform:
    """An invertible affine map.

    Attributes:
        matrix: The 4x4 forward matrix (read-only).
        inverse_matrix: The 4x4 inverse matrix (read-only).
    """

    __slots__ = ("_m", "_inv", "_normal_m")

    def __init__(self, matrix: Matrix4 | Sequence[Sequence[float]], inverse: Matrix4 | None = None) -> None:
        """Create a transform from a 4x4 matrix.

        Args:
            matrix: Homogeneous affine matrix.
            inverse: Its inverse, if already known.

        Raises:
            ValueError: If the matrix is not 4x4 or is singular.
        """
        m = np.array(matrix, dtype=np.float64)
        if m.shape != (4, 4):
            raise ValueError(f"Transform matrix must be 4x4, got shape {m.shape}")
        if inverse is None:
            try:
                inv = np.linalg.inv(m)
            except np.linalg.LinAlgError as e:
                raise ValueError("Transform matrix is singular") from e
        else:
            inv = np.array(inverse, dtype=np.float64)
        m.flags.writeable = False
        inv.flags.writeable = False
        self._m = m
        self._inv = inv
        self._normal_m = inv[:3, :3].T.copy()

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def identity(cls) -> Transform:
        eye = np.eye(4)
        return cls(eye, eye)

    @classmethod
    def translation(cls, offset: Sequence[float] | Vec3) -> Transform:
        """Translate by the given offset."""
        d = as_vec3(offset)
        m = np.eye(4)
        m[:3, 3] = d
        inv = np.eye(4)
        inv[:3, 3] = -d
        return cls(m, inv)

    @classmethod
    def scaling(cls, factors: float | Sequence[float] | Vec3) -> Transform:
        """Scale along each axis; a scalar scales uniformly.

        Raises:
            ValueError: If any factor is zero.
        """
        s = np.full(3, float(factors)) if np.isscalar(factors) else as_vec3(factors)
        if np.any(s == 0.0):
            raise ValueError(f"Scale factors must be non-zero, got {s}")
        return cls(np.diag([*s, 1.0]), np.diag([*(1.0 / s), 1.0]))

    @classmethod
    def rotation(cls, axis: Sequence[float] | Vec3, angle: float) -> Transform:
        """Rotate by angle radians about an axis through the origin (right-handed)."""
        a = normalize(as_vec3(axis))
        if not a.any():
            raise ValueError("Rotation axis must be non-zero")
        x, y, z = a
        c, s = math.cos(angle), math.sin(angle)
        k = 1.0 - c
        m = np.eye(4)
        m[:3, :3] = [
            [c + x * x * k, x * y * k - z * s, x * z * k + y * s],
            [y * x * k + z * s, c + y * y * k, y * z * k - x * s],
            [z * x * k - y * s, z * y * k + x * s, c + z * z * k],
        ]
        return cls(m, m.T)

    @classmethod
    def rotation_euler(cls, roll: float, pitch: float, yaw: float) -> Transform:
        """Rotate by roll about x, then pitch about y, then yaw about z (radians)."""
        return (
            cls.rotation((0.0, 0.0, 1.0), yaw)
            @ cls.rotation((0.0, 1.0, 0.0), pitch)
            @ cls.rotation((1.0, 0.0, 0.0), roll)
        )

    @classmethod
    def from_srt(
        cls,
        scale: float | Sequence[float] | Vec3 = 1.0,
        rotation: Sequence[float] | Vec3 = (0.0, 0.0, 0.0),
        translation: Sequence[float] | Vec3 = (0.0, 0.0, 0.0),
    ) -> Transform:
        """Compose scale, then Euler rotation (roll, pitch, yaw), then translation."""
        roll, pitch, yaw = as_vec3(rotation)
        return (
            cls.translation(translation)
            @ cls.rotation_euler(roll, pitch, yaw)
            @ cls.scaling(scale)
        )

    # -------------------------------------------------------------------------
    # Algebra
    # -------------------------------------------------------------------------

    @property
    def matrix(self) -> Matrix4:
        return self._m

    @property
    def inverse_matrix(self) -> Matrix4:
        return self._inv

    def __matmul__(self, other: Transform) -> Transform:
        """Compose: (self @ other) applies other first, then self."""
        if not isinstance(other, Transform):
            return NotImplemented
        return Transform(self._m @ other._m, other._inv @ self._inv)

    def inverse(self) -> Transform:
        return Transform(self._inv, self._m)

    def is_identity(self) -> bool:
        return bool(np.array_equal(self._m, np.eye(4)))

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------

    def apply_point(self, p: Sequence[float] | Vec3) -> Vec3:
        """Transform a point, including translation."""
        m = self._m
        return m[:3, :3] @ np.asarray(p, dtype=np.float64) + m[:3, 3]

    def apply_vector(self, v: Sequence[float] | Vec3) -> Vec3:
        """Transform a direction; translation does not apply."""
        return self._m[:3, :3] @ np.asarray(v, dtype=np.float64)

    def apply_normal(self, n: Sequence[float] | Vec3) -> Vec3:
        """Transform a surface normal and renormalize it.

        Uses the inverse-transpose of the linear part so that normals stay
        perpendicular to surfaces under non-uniform scale.
        """
        return normalize(self._normal_m @ np.asarray(n, dtype=np.float64))

    def apply_ray(self, ray: Ray) -> Ray:
        """Transform a ray; the direction is renormalized and max_t kept."""
        return Ray(self.apply_point(ray.origin), self.apply_vector(ray.direction), ray.max_t)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return bool(np.array_equal(self._m, other._m))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Transform({self._m.tolist()})"
