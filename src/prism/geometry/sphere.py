"""Sphere primitive with a closed-form ray-sphere intersection.

The sphere is stored centered at the origin of its local frame; its
world-space center is folded into local_to_world.

Example:
    >>> from src.prism.core.ray import Ray
    >>> from src.prism.geometry.sphere import Sphere
    >>> sphere = Sphere(center=(0.0, 0.0, 0.0), radius=1.0, material=None)
    >>> hit = sphere.intersect(Ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0)))
    >>> hit.t
    4.0
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TYPE_CHECKING

from src.prism.core.ray import Ray, Vec3, dot
from src.prism.core.transform import Transform
from src.prism.geometry.aabb import AABB
from src.prism.geometry.shape import Intersection, Shape, transformed_box

if TYPE_CHECKING:
    from src.prism.materials.material import Material


def intersect_ray_sphere(origin: Vec3, direction: Vec3, radius: float) -> float | None:
    """Intersect a ray with a sphere of the given radius centered at the origin.

    With a unit direction the quadratic reduces to t^2 + 2ht + c = 0, where
    h = D.O and c = |O|^2 - r^2.

    Args:
        origin: Ray origin in the sphere's local frame.
        direction: Unit ray direction in the sphere's local frame.
        radius: Sphere radius.

    Returns:
        The smallest non-negative root, or None when both roots lie behind
        the origin or the discriminant is negative.
    """
    h = dot(direction, origin)
    c = dot(origin, origin) - radius * radius
    discriminant = h * h - c
    if discriminant < 0.0:
        return None
    sqrt_d = math.sqrt(discriminant)
    t_far = -h + sqrt_d
    if t_far < 0.0:
        return None
    t_near = -h - sqrt_d
    return t_near if t_near >= 0.0 else t_far


class Sphere(Shape):
    """A sphere shape.

    Attributes:
        center: World-space center of the sphere (before local_to_world).
        radius: Radius in the local frame.
        material: Surface material.
    """

    def __init__(
        self,
        center: Sequence[float] | Vec3,
        radius: float,
        material: Material | None,
        local_to_world: Transform | None = None,
    ) -> None:
        """Create a sphere.

        Args:
            center: Sphere center, in the frame local_to_world maps from.
            radius: Sphere radius (must be positive).
            material: Surface material.
            local_to_world: Optional placement applied after the center offset.

        Raises:
            ValueError: If the radius is not positive.
        """
        if not radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        placement = local_to_world if local_to_world is not None else Transform.identity()
        super().__init__(material, placement @ Transform.translation(center))
        self._radius = float(radius)
        self._box = transformed_box(
            (-self._radius,) * 3, (self._radius,) * 3, self._local_to_world
        )

    @property
    def center(self) -> Vec3:
        return self._local_to_world.apply_point((0.0, 0.0, 0.0))

    @property
    def radius(self) -> float:
        return self._radius

    @property
    def bounding_box(self) -> AABB:
        return self._box

    def intersect(self, ray: Ray) -> Intersection | None:
        local = self._world_to_local.apply_ray(ray)
        t = intersect_ray_sphere(local.origin, local.direction, self._radius)
        if t is None:
            return None
        local_point = local.origin + local.direction * t
        return self._world_hit(ray, local_point, local_point / self._radius)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center.tolist()}, radius={self._radius})"
