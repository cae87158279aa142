"""Scene container answering nearest-hit queries."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from src.prism.core.ray import Ray
from src.prism.geometry.aabb import AABB, union_all
from src.prism.geometry.shape import Intersection, Shape, nearest


class Scene:
    """An ordered collection of shapes.

    Shapes are added before rendering starts; the scene is only read while
    workers are running.
    """

    def __init__(self, shapes: Iterable[Shape] = ()) -> None:
        self._shapes: list[Shape] = list(shapes)

    def add_shape(self, shape: Shape) -> None:
        """Append a shape to the scene."""
        self._shapes.append(shape)

    @property
    def shapes(self) -> tuple[Shape, ...]:
        return tuple(self._shapes)

    @property
    def bounding_box(self) -> AABB:
        return union_all(shape.bounding_box for shape in self._shapes)

    def intersect_ray(self, ray: Ray) -> Intersection | None:
        """The hit with the smallest t over every shape, or None.

        Ties go to the shape added first.
        """
        return nearest(shape.intersect(ray) for shape in self._shapes)

    def __len__(self) -> int:
        return len(self._shapes)

    def __iter__(self) -> Iterator[Shape]:
        return iter(self._shapes)

    def __repr__(self) -> str:
        return f"Scene(shapes={len(self._shapes)})"
