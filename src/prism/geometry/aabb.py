"""Axis-aligned bounding boxes with a slab-test ray query.

Boxes prune intersection work: every shape reports its world-space box and
a BoundingGroup rejects rays that miss the union of its children's boxes.

Example:
    >>> from src.prism.core.ray import Ray
    >>> from src.prism.geometry.aabb import AABB
    >>> box = AABB((1.0, 1.0, 1.0), (2.0, 2.0, 2.0))
    >>> t = box.intersect_ray(Ray((0.0, 0.0, 0.0), (1.0, 1.0, 1.0)))  # sqrt(3)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from src.prism.core.ray import Ray, Vec3, as_vec3


class AABB:
    """A box spanned by a min and a max corner.

    The constructor accepts any two opposite corners and orders them, so
    min <= max holds on every axis. The empty box is the degenerate box at
    the origin.

    Attributes:
        min: Corner with the smallest coordinates.
        max: Corner with the largest coordinates.
    """

    __slots__ = ("_min", "_max")

    def __init__(
        self,
        p1: Sequence[float] | Vec3 = (0.0, 0.0, 0.0),
        p2: Sequence[float] | Vec3 | None = None,
    ) -> None:
        a = as_vec3(p1)
        b = a if p2 is None else as_vec3(p2)
        lo = np.minimum(a, b)
        hi = np.maximum(a, b)
        lo.flags.writeable = False
        hi.flags.writeable = False
        self._min = lo
        self._max = hi

    @classmethod
    def empty(cls) -> AABB:
        return cls()

    @classmethod
    def from_point(cls, p: Sequence[float] | Vec3) -> AABB:
        """A zero-volume box containing a single point."""
        return cls(p, p)

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float] | Vec3]) -> AABB:
        """The tightest box around a non-empty collection of points.

        Raises:
            ValueError: If no points are given.
        """
        arr = np.asarray(list(points), dtype=np.float64)
        if arr.size == 0:
            raise ValueError("from_points requires at least one point")
        return cls(arr.min(axis=0), arr.max(axis=0))

    @property
    def min(self) -> Vec3:
        return self._min

    @property
    def max(self) -> Vec3:
        return self._max

    # -------------------------------------------------------------------------
    # Set operations
    # -------------------------------------------------------------------------

    def union(self, other: AABB) -> AABB:
        """The smallest box containing both boxes."""
        return AABB(np.minimum(self._min, other._min), np.maximum(self._max, other._max))

    def union_point(self, p: Sequence[float] | Vec3) -> AABB:
        """The smallest box containing this box and a point."""
        q = as_vec3(p)
        return AABB(np.minimum(self._min, q), np.maximum(self._max, q))

    def intersection(self, other: AABB) -> AABB | None:
        """The overlap of two boxes, or None if they are disjoint."""
        lo = np.maximum(self._min, other._min)
        hi = np.minimum(self._max, other._max)
        if np.any(lo > hi):
            return None
        return AABB(lo, hi)

    def overlaps(self, other: AABB) -> bool:
        return bool(np.all(self._max >= other._min) and np.all(self._min <= other._max))

    def contains(self, p: Sequence[float] | Vec3) -> bool:
        """Whether a point lies inside or on the boundary."""
        q = np.asarray(p, dtype=np.float64)
        return bool(np.all(q >= self._min) and np.all(q <= self._max))

    def contains_box(self, other: AABB) -> bool:
        return bool(np.all(other._min >= self._min) and np.all(other._max <= self._max))

    def expand(self, delta: float) -> AABB:
        """Grow the box by delta on every side."""
        return AABB(self._min - delta, self._max + delta)

    # -------------------------------------------------------------------------
    # Measures
    # -------------------------------------------------------------------------

    def diagonal(self) -> Vec3:
        return self._max - self._min

    def surface_area(self) -> float:
        dx, dy, dz = self.diagonal()
        return float(2.0 * (dx * dy + dx * dz + dy * dz))

    def volume(self) -> float:
        return float(np.prod(self.diagonal()))

    def centroid(self) -> Vec3:
        return 0.5 * (self._min + self._max)

    # -------------------------------------------------------------------------
    # Ray query
    # -------------------------------------------------------------------------

    def intersect_ray(self, ray: Ray) -> float | None:
        """Slab test against the box.

        Intersects the running parameter interval, starting at [0, max_t],
        with each axis slab. An axis whose direction component is exactly
        zero rejects only when the origin lies outside that slab.

        Args:
            ray: The query ray.

        Returns:
            The entry parameter (0 when the origin is inside), or None on a miss.
        """
        origin = ray.origin
        direction = ray.direction
        t_min = 0.0
        t_max = ray.max_t
        for axis in range(3):
            o = origin[axis]
            d = direction[axis]
            lo = self._min[axis]
            hi = self._max[axis]
            if d == 0.0:
                if o < lo or o > hi:
                    return None
                continue
            inv_d = 1.0 / d
            t_near = (lo - o) * inv_d
            t_far = (hi - o) * inv_d
            if t_near > t_far:
                t_near, t_far = t_far, t_near
            if t_near > t_min:
                t_min = t_near
            if t_far < t_max:
                t_max = t_far
            if t_min > t_max:
                return None
        return float(t_min)

    def hit(self, ray: Ray) -> bool:
        return self.intersect_ray(ray) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AABB):
            return NotImplemented
        return bool(np.array_equal(self._min, other._min) and np.array_equal(self._max, other._max))

    __hash__ = None

    def __repr__(self) -> str:
        return f"AABB(min={self._min.tolist()}, max={self._max.tolist()})"


def union_all(boxes: Iterable[AABB]) -> AABB:
    """Union of a collection of boxes; the empty box if there are none."""
    result = None
    for box in boxes:
        result = box if result is None else result.union(box)
    return result if result is not None else AABB.empty()
