"""Shape interface and the intersection record it produces.

Every shape stores a local_to_world transform. Intersection is performed by
moving the incoming ray into the local frame, running the closed-form
primitive test there, and mapping the hit point and normal back to world
space.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

import numpy as np

from src.prism.core.ray import Ray, Vec3, dot, length
from src.prism.core.transform import Transform
from src.prism.geometry.aabb import AABB

if TYPE_CHECKING:
    from src.prism.materials.material import Material


@dataclass(frozen=True, eq=False)
class Intersection:
    """Record of a ray-shape intersection.

    Attributes:
        shape: The primitive that was hit.
        ray: The incident world-space ray.
        point: World-space hit point.
        normal: Unit outward geometric normal at the hit point.
        t: Distance from the ray origin to the hit point.
        inside: True when the ray arrived from behind the outward normal
            (the outward normal and the ray direction agree).
    """

    shape: Shape
    ray: Ray
    point: Vec3
    normal: Vec3
    t: float
    inside: bool

    @property
    def material(self) -> Material:
        return self.shape.material

    @property
    def direction_out(self) -> Vec3:
        """Direction from the hit point back toward the ray origin."""
        return -self.ray.direction

    def flipped(self) -> Intersection:
        """The same hit with the normal reversed; inside is unchanged."""
        return replace(self, normal=-self.normal)


class Shape(ABC):
    """Base class for everything a ray can hit.

    Subclasses implement intersect() and bounding_box. Shapes are immutable
    after construction.
    """

    def __init__(self, material: Material | None, local_to_world: Transform | None = None) -> None:
        self._material = material
        self._local_to_world = local_to_world if local_to_world is not None else Transform.identity()
        self._world_to_local = self._local_to_world.inverse()

    @property
    def material(self) -> Material | None:
        return self._material

    @property
    def local_to_world(self) -> Transform:
        return self._local_to_world

    @property
    @abstractmethod
    def bounding_box(self) -> AABB:
        """World-space box enclosing the shape."""

    @abstractmethod
    def intersect(self, ray: Ray) -> Intersection | None:
        """Intersect a world-space ray with the shape.

        Returns:
            The nearest hit in front of the ray origin, or None.
        """

    def _world_hit(
        self,
        ray: Ray,
        local_point: Vec3,
        local_normal: Vec3,
        shape: Shape | None = None,
    ) -> Intersection | None:
        """Map a local-frame hit back to a world-space Intersection.

        The world t is recomputed as the distance from the world ray origin,
        so it stays comparable across shapes with different transforms.
        """
        point = self._local_to_world.apply_point(local_point)
        normal = self._local_to_world.apply_normal(local_normal)
        t = length(point - ray.origin)
        if t > ray.max_t:
            return None
        return Intersection(
            shape=shape if shape is not None else self,
            ray=ray,
            point=point,
            normal=normal,
            t=t,
            inside=dot(normal, ray.direction) > 0.0,
        )


def transformed_box(corners_min: Vec3, corners_max: Vec3, transform: Transform) -> AABB:
    """World box around a local box after transformation."""
    lo = np.asarray(corners_min, dtype=np.float64)
    hi = np.asarray(corners_max, dtype=np.float64)
    corners = [
        transform.apply_point((x, y, z))
        for x in (lo[0], hi[0])
        for y in (lo[1], hi[1])
        for z in (lo[2], hi[2])
    ]
    return AABB.from_points(corners)


def nearest(hits) -> Intersection | None:
    """The hit with the smallest t among an iterable of optional hits."""
    best = None
    for hit in hits:
        if hit is not None and (best is None or hit.t < best.t):
            best = hit
    return best
