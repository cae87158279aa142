"""Unit tests for meshes, bounding groups and the scene container.

Tests cover:
- Mesh validation, bounds and nearest-triangle hits
- BoundingGroup nearest versus first-hit traversal
- Scene nearest-hit queries
"""

import numpy as np
import pytest

from src.prism.core.ray import Ray
from src.prism.core.transform import Transform
from src.prism.geometry.group import BoundingGroup
from src.prism.geometry.mesh import Mesh
from src.prism.geometry.sphere import Sphere
from src.prism.scene.scene import Scene

# Two unit quads facing -x at x = 2 and x = 4
QUADS_VERTICES = [
    (2.0, -1.0, -1.0),
    (2.0, 1.0, -1.0),
    (2.0, 1.0, 1.0),
    (2.0, -1.0, 1.0),
    (4.0, -1.0, -1.0),
    (4.0, 1.0, -1.0),
    (4.0, 1.0, 1.0),
    (4.0, -1.0, 1.0),
]
QUADS_FACES = [(4, 5, 6), (4, 6, 7), (0, 1, 2), (0, 2, 3)]


@pytest.fixture
def quads():
    return Mesh(QUADS_VERTICES, QUADS_FACES, material=None)


class TestMesh:
    """Tests for the triangle mesh shape."""

    def test_triangle_list_and_bounds(self, quads):
        """Test that the mesh holds one triangle per face and a tight box."""
        assert len(quads) == 4
        np.testing.assert_allclose(quads.bounding_box.min, [2.0, -1.0, -1.0])
        np.testing.assert_allclose(quads.bounding_box.max, [4.0, 1.0, 1.0])

    def test_nearest_face_wins(self, quads):
        """Test that the nearest triangle is returned regardless of face order."""
        hit = quads.intersect(Ray((0.0, 0.2, 0.3), (1.0, 0.0, 0.0)))
        assert hit.t == pytest.approx(2.0)
        assert hit.shape is quads.triangles[2] or hit.shape is quads.triangles[3]

    def test_box_miss(self, quads):
        """Test that a ray missing the mesh box misses."""
        assert quads.intersect(Ray((0.0, 5.0, 0.0), (1.0, 0.0, 0.0))) is None

    def test_transformed_mesh(self):
        """Test that placement moves both hits and bounds."""
        mesh = Mesh(
            QUADS_VERTICES,
            QUADS_FACES,
            material=None,
            local_to_world=Transform.translation((10.0, 0.0, 0.0)),
        )
        hit = mesh.intersect(Ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)))
        assert hit.t == pytest.approx(12.0)
        np.testing.assert_allclose(mesh.bounding_box.min, [12.0, -1.0, -1.0])

    def test_invalid_faces_raise(self):
        """Test that out-of-range indices and empty face lists are rejected."""
        with pytest.raises(ValueError, match="out of range"):
            Mesh(QUADS_VERTICES, [(0, 1, 8)], material=None)
        with pytest.raises(ValueError, match="faces"):
            Mesh(QUADS_VERTICES, np.zeros((0, 3), dtype=int), material=None)
        with pytest.raises(ValueError, match="vertices"):
            Mesh([(0.0, 0.0)], [(0, 0, 0)], material=None)


class TestBoundingGroup:
    """Tests for grouped shapes."""

    def test_nearest_child_wins(self):
        """Test that the default group returns the nearest child hit."""
        far = Sphere((10.0, 0.0, 0.0), 1.0, material=None)
        near = Sphere((5.0, 0.0, 0.0), 1.0, material=None)
        group = BoundingGroup([far, near])
        hit = group.intersect(Ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)))
        assert hit.shape is near

    def test_first_hit_returns_first_child(self):
        """Test that first_hit groups stop at the first child that is hit."""
        far = Sphere((10.0, 0.0, 0.0), 1.0, material=None)
        near = Sphere((5.0, 0.0, 0.0), 1.0, material=None)
        group = BoundingGroup([far, near], first_hit=True)
        hit = group.intersect(Ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)))
        assert hit.shape is far

    def test_bounding_box_is_union(self):
        """Test that the group box encloses every child."""
        group = BoundingGroup(
            [Sphere((0.0, 0.0, 0.0), 1.0, material=None), Sphere((5.0, 0.0, 0.0), 1.0, material=None)]
        )
        np.testing.assert_allclose(group.bounding_box.min, [-1.0, -1.0, -1.0])
        np.testing.assert_allclose(group.bounding_box.max, [6.0, 1.0, 1.0])

    def test_box_miss_skips_children(self):
        """Test that a ray outside the group box misses."""
        group = BoundingGroup([Sphere((5.0, 0.0, 0.0), 1.0, material=None)])
        assert group.intersect(Ray((0.0, 3.0, 0.0), (1.0, 0.0, 0.0))) is None

    def test_empty_group_raises(self):
        """Test that a group needs at least one child."""
        with pytest.raises(ValueError, match="at least one"):
            BoundingGroup([])


class TestScene:
    """Tests for the scene container."""

    def test_empty_scene_misses(self):
        """Test that nothing is hit in an empty scene."""
        assert Scene().intersect_ray(Ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))) is None

    def test_nearest_over_shapes(self, quads):
        """Test that the scene returns the nearest hit across shapes."""
        sphere = Sphere((1.0, 0.0, 0.0), 0.5, material=None)
        scene = Scene([quads])
        scene.add_shape(sphere)
        hit = scene.intersect_ray(Ray((-2.0, 0.0, 0.0), (1.0, 0.0, 0.0)))
        assert hit.shape is sphere
        assert hit.t == pytest.approx(2.5)
        assert len(scene) == 2
        assert list(scene) == [quads, sphere]
