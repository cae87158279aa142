"""Bounding-volume group of shapes.

A BoundingGroup is a test-and-dispatch filter: a ray that misses the union
box of the children skips the whole subscene. It is flat, not a sorted
acceleration structure.
"""

from __future__ import annotations

from collections.abc import Iterable

from src.prism.core.ray import Ray
from src.prism.geometry.aabb import AABB, union_all
from src.prism.geometry.shape import Intersection, Shape, nearest


class BoundingGroup(Shape):
    """A list of child shapes behind one bounding box.

    Attributes:
        children: The grouped shapes, in insertion order.
        first_hit: When True, return the first child hit found instead of the
            nearest one. Only correct for children that do not overlap along
            any ray.
    """

    def __init__(self, children: Iterable[Shape], first_hit: bool = False) -> None:
        """Create a group.

        Raises:
            ValueError: If no children are given.
        """
        super().__init__(material=None)
        self._children = tuple(children)
        if not self._children:
            raise ValueError("BoundingGroup requires at least one child shape")
        self._box = union_all(child.bounding_box for child in self._children)
        self._first_hit = first_hit

    @property
    def children(self) -> tuple[Shape, ...]:
        return self._children

    @property
    def first_hit(self) -> bool:
        return self._first_hit

    @property
    def bounding_box(self) -> AABB:
        return self._box

    def intersect(self, ray: Ray) -> Intersection | None:
        if self._box.intersect_ray(ray) is None:
            return None
        if self._first_hit:
            for child in self._children:
                hit = child.intersect(ray)
                if hit is not None:
                    return hit
            return None
        return nearest(child.intersect(ray) for child in self._children)

    def __len__(self) -> int:
        return len(self._children)

    def __repr__(self) -> str:
        return f"BoundingGroup(children={len(self._children)}, first_hit={self._first_hit})"
