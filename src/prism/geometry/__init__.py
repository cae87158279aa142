"""Geometry module for bounding boxes and shape primitives.

This module provides the shapes a ray can hit and their intersection kernels:

Components:
    aabb: Axis-aligned bounding box with the slab-test ray query
    shape: Shape base class and the Intersection hit record
    sphere: Sphere primitive with closed-form ray-sphere intersection
    triangle: Triangle primitive with Möller-Trumbore intersection
    mesh: Flat triangle list sharing one material
    group: BoundingGroup that skips a whole subscene on a box miss

Every shape stores a local_to_world transform and intersects in its local
frame. Degenerate cases (parallel rays, empty discriminants) are misses,
reported as None, never exceptions.
"""

from .aabb import AABB, union_all
from .group import BoundingGroup
from .mesh import Mesh
from .shape import Intersection, Shape, nearest
from .sphere import Sphere, intersect_ray_sphere
from .triangle import Triangle, intersect_ray_triangle, intersect_ray_triangles

__all__ = [
    "AABB",
    "union_all",
    "Shape",
    "Intersection",
    "nearest",
    "Sphere",
    "intersect_ray_sphere",
    "Triangle",
    "intersect_ray_triangle",
    "intersect_ray_triangles",
    "Mesh",
    "BoundingGroup",
]
