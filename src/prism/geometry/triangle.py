"""Triangle primitive using the Möller-Trumbore intersection test.

Provides the scalar test used by a single Triangle and a vectorized
variant over many triangles that Mesh uses to test a whole triangle list
with one set of NumPy operations.

Example:
    >>> from src.prism.core.ray import Ray
    >>> from src.prism.geometry.triangle import intersect_ray_triangle
    >>> verts = ((1.0, -1.0, 0.0), (1.0, 1.0, 0.0), (1.0, 0.0, 1.0))
    >>> intersect_ray_triangle(verts, Ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.5))) is not None
    True
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from src.prism.core.config import TRIANGLE_EPSILON
from src.prism.core.ray import Ray, Vec3, as_vec3, cross, dot, normalize
from src.prism.core.transform import Transform
from src.prism.geometry.aabb import AABB
from src.prism.geometry.shape import Intersection, Shape

if TYPE_CHECKING:
    from src.prism.materials.material import Material


def intersect_ray_triangle(
    vertices: Sequence[Sequence[float] | Vec3], ray: Ray
) -> tuple[float, float, float] | None:
    """Möller-Trumbore ray-triangle intersection.

    Args:
        vertices: The three triangle vertices, in the same frame as the ray.
        ray: The query ray.

    Returns:
        Barycentric (t, u, v) of the hit, or None. Near-parallel rays
        (|det| < TRIANGLE_EPSILON) and hits behind the origin are misses.
    """
    v0 = as_vec3(vertices[0])
    e1 = as_vec3(vertices[1]) - v0
    e2 = as_vec3(vertices[2]) - v0
    d = ray.direction

    p = cross(d, e2)
    det = dot(p, e1)
    if abs(det) < TRIANGLE_EPSILON:
        return None
    inv_det = 1.0 / det

    s = ray.origin - v0
    q = cross(s, e1)
    t = dot(q, e2) * inv_det
    if t < 0.0:
        return None
    u = dot(p, s) * inv_det
    if u < 0.0 or u > 1.0:
        return None
    v = dot(q, d) * inv_det
    if v < 0.0 or u + v > 1.0:
        return None
    return t, u, v


def intersect_ray_triangles(
    v0: npt.NDArray[np.float64],
    e1: npt.NDArray[np.float64],
    e2: npt.NDArray[np.float64],
    origin: Vec3,
    direction: Vec3,
) -> tuple[int, float] | None:
    """Vectorized Möller-Trumbore over M triangles.

    Args:
        v0: First vertices, shape (M, 3).
        e1: Edges v1 - v0, shape (M, 3).
        e2: Edges v2 - v0, shape (M, 3).
        origin: Ray origin.
        direction: Unit ray direction.

    Returns:
        (index, t) of the nearest accepted hit, or None.
    """
    p = np.cross(direction, e2)
    det = np.einsum("ij,ij->i", p, e1)
    valid = np.abs(det) >= TRIANGLE_EPSILON
    if not valid.any():
        return None
    inv_det = np.divide(1.0, det, out=np.zeros_like(det), where=valid)

    s = origin - v0
    q = np.cross(s, e1)
    t = np.einsum("ij,ij->i", q, e2) * inv_det
    u = np.einsum("ij,ij->i", p, s) * inv_det
    v = (q @ direction) * inv_det
    valid &= (t >= 0.0) & (u >= 0.0) & (u <= 1.0) & (v >= 0.0) & (u + v <= 1.0)
    if not valid.any():
        return None
    candidates = np.where(valid, t, np.inf)
    index = int(np.argmin(candidates))
    return index, float(candidates[index])


class Triangle(Shape):
    """A single triangle with a precomputed face normal.

    The face normal follows the right-hand rule over (v0, v1, v2).
    """

    def __init__(
        self,
        v0: Sequence[float] | Vec3,
        v1: Sequence[float] | Vec3,
        v2: Sequence[float] | Vec3,
        material: Material | None,
        local_to_world: Transform | None = None,
    ) -> None:
        super().__init__(material, local_to_world)
        self._vertices = (as_vec3(v0), as_vec3(v1), as_vec3(v2))
        a, b, c = self._vertices
        self._normal = normalize(cross(b - a, c - a))
        self._box = AABB.from_points(self._local_to_world.apply_point(v) for v in self._vertices)

    @property
    def vertices(self) -> tuple[Vec3, Vec3, Vec3]:
        """Local-space vertices."""
        return self._vertices

    @property
    def normal(self) -> Vec3:
        """Local-space unit face normal."""
        return self._normal

    @property
    def bounding_box(self) -> AABB:
        return self._box

    def intersect(self, ray: Ray) -> Intersection | None:
        local = self._world_to_local.apply_ray(ray)
        hit = intersect_ray_triangle(self._vertices, local)
        if hit is None:
            return None
        t = hit[0]
        return self._world_hit(ray, local.origin + local.direction * t, self._normal)

    def __repr__(self) -> str:
        return "Triangle({})".format(", ".join(str(v.tolist()) for v in self._vertices))
