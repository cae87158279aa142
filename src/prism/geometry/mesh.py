"""Triangle mesh shape.

A Mesh is an imported, already triangulated collection of faces sharing one
material. It is reduced to a flat triangle list plus an aggregate bounding
box; hits report the individual Triangle that was struck.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from src.prism.core.ray import Ray, Vec3
from src.prism.core.transform import Transform
from src.prism.geometry.aabb import AABB
from src.prism.geometry.shape import Intersection, Shape
from src.prism.geometry.triangle import Triangle, intersect_ray_triangles

if TYPE_CHECKING:
    from src.prism.materials.material import Material


class Mesh(Shape):
    """An indexed triangle mesh.

    Attributes:
        triangles: The flat triangle list, one Triangle per face.
        material: Material shared by every face.
    """

    def __init__(
        self,
        vertices: Sequence[Sequence[float]] | npt.NDArray[np.float64],
        faces: Sequence[Sequence[int]] | npt.NDArray[np.int64],
        material: Material | None,
        local_to_world: Transform | None = None,
    ) -> None:
        """Create a mesh from a vertex array and triangle index triples.

        Args:
            vertices: Local-space vertex positions, shape (V, 3).
            faces: Zero-based vertex indices, shape (F, 3).
            material: Material shared by all faces.
            local_to_world: Optional placement of the mesh.

        Raises:
            ValueError: If the arrays have the wrong shape, a face index is
                out of range, or there are no faces.
        """
        super().__init__(material, local_to_world)
        verts = np.asarray(vertices, dtype=np.float64)
        idx = np.asarray(faces, dtype=np.int64)
        if verts.ndim != 2 or verts.shape[1] != 3:
            raise ValueError(f"Mesh vertices must have shape (V, 3), got {verts.shape}")
        if idx.ndim != 2 or idx.shape[1] != 3 or len(idx) == 0:
            raise ValueError(f"Mesh faces must have shape (F, 3) with F > 0, got {idx.shape}")
        if idx.min() < 0 or idx.max() >= len(verts):
            raise ValueError(f"Mesh face index out of range for {len(verts)} vertices")

        self._triangles = tuple(
            Triangle(verts[a], verts[b], verts[c], material, self._local_to_world)
            for a, b, c in idx
        )
        self._v0 = verts[idx[:, 0]]
        self._e1 = verts[idx[:, 1]] - self._v0
        self._e2 = verts[idx[:, 2]] - self._v0
        box = self._triangles[0].bounding_box
        for triangle in self._triangles[1:]:
            box = box.union(triangle.bounding_box)
        self._box = box

    @property
    def triangles(self) -> tuple[Triangle, ...]:
        return self._triangles

    @property
    def bounding_box(self) -> AABB:
        return self._box

    def intersect(self, ray: Ray) -> Intersection | None:
        if self._box.intersect_ray(ray) is None:
            return None
        local = self._world_to_local.apply_ray(ray)
        hit = intersect_ray_triangles(self._v0, self._e1, self._e2, local.origin, local.direction)
        if hit is None:
            return None
        index, t = hit
        triangle = self._triangles[index]
        local_point: Vec3 = local.origin + local.direction * t
        return self._world_hit(ray, local_point, triangle.normal, shape=triangle)

    def __len__(self) -> int:
        return len(self._triangles)

    def __repr__(self) -> str:
        return f"Mesh(triangles={len(self._triangles)})"
