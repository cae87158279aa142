"""Unit tests for the pinhole camera.

Tests cover:
- Image plane corner placement
- Primary ray generation through pixel coordinates
- Rotated and translated cameras
- Parameter validation
"""

import math

import numpy as np
import pytest

from src.prism.camera.pinhole import Camera


def make_camera(focus=(0.0, 0.0, 0.0), rotation=(0.0, 0.0, 0.0), fov=90.0, resolution=(100, 100)):
    return Camera(focus, 1.0, fov, rotation, resolution)


class TestCorners:
    """Tests for the image plane geometry."""

    def test_corners_follow_aspect_ratio(self):
        """Test corner placement for a tall 500x1000 image."""
        camera = make_camera(resolution=(500, 1000))
        np.testing.assert_allclose(camera.corners[0], [1.0, -1.0, 2.0], atol=1e-12)
        np.testing.assert_allclose(camera.corners[1], [1.0, 1.0, 2.0], atol=1e-12)
        np.testing.assert_allclose(camera.corners[2], [1.0, -1.0, -2.0], atol=1e-12)
        np.testing.assert_allclose(camera.corners[3], [1.0, 1.0, -2.0], atol=1e-12)

    def test_corners_translate_with_focus(self):
        """Test that moving the focus moves the image plane."""
        camera = make_camera(focus=(1.0, 2.0, 3.0))
        np.testing.assert_allclose(camera.corners[0], [2.0, 1.0, 4.0], atol=1e-12)

    def test_properties(self):
        """Test the stored camera parameters."""
        camera = make_camera(resolution=(40, 20))
        assert camera.resolution == (40, 20)
        assert camera.width == 40
        assert camera.height == 20
        assert camera.aspect_ratio == pytest.approx(2.0)
        assert camera.field_of_view == 90.0


class TestGetRay:
    """Tests for primary ray generation."""

    def test_center_ray_looks_down_x(self):
        """Test that the image center maps to the view direction."""
        ray = make_camera().get_ray(50.0, 50.0)
        np.testing.assert_allclose(ray.origin, [0.0, 0.0, 0.0])
        np.testing.assert_allclose(ray.direction, [1.0, 0.0, 0.0], atol=1e-12)

    def test_first_pixel_edge_is_top_left(self):
        """Test that (0, 0) passes through the first corner."""
        ray = make_camera().get_ray(0.0, 0.0)
        expected = np.array([1.0, -1.0, 1.0]) / math.sqrt(3.0)
        np.testing.assert_allclose(ray.direction, expected, atol=1e-12)

    def test_columns_advance_along_y_and_rows_along_minus_z(self):
        """Test the orientation of the pixel axes."""
        camera = make_camera()
        center = camera.get_ray(50.0, 50.0).direction
        right = camera.get_ray(60.0, 50.0).direction
        down = camera.get_ray(50.0, 60.0).direction
        assert right[1] > center[1]
        assert down[2] < center[2]

    @pytest.mark.parametrize("resolution", [(200, 100), (100, 200)])
    def test_field_of_view_spans_image_width(self, resolution):
        """Test that the field of view is horizontal and the height follows the aspect ratio."""
        width, height = resolution
        camera = make_camera(fov=60.0, resolution=resolution)
        left = camera.get_ray(0.0, height / 2.0).direction
        top = camera.get_ray(width / 2.0, 0.0).direction
        assert math.degrees(math.atan2(-left[1], left[0])) == pytest.approx(30.0)
        half_height = math.tan(math.radians(30.0)) * height / width
        assert top[2] / top[0] == pytest.approx(half_height)

    def test_yaw_turns_view_direction(self):
        """Test that a quarter yaw looks down +y."""
        ray = make_camera(rotation=(0.0, 0.0, math.pi / 2.0)).get_ray(50.0, 50.0)
        np.testing.assert_allclose(ray.direction, [0.0, 1.0, 0.0], atol=1e-12)


class TestValidation:
    """Tests for rejected parameters."""

    @pytest.mark.parametrize("fov", [0.0, 180.0, -10.0])
    def test_bad_field_of_view(self, fov):
        """Test that the field of view must be in (0, 180)."""
        with pytest.raises(ValueError, match="Field of view"):
            make_camera(fov=fov)

    def test_bad_resolution(self):
        """Test that resolutions must be positive."""
        with pytest.raises(ValueError, match="resolution"):
            make_camera(resolution=(0, 10))

    def test_bad_focal_distance(self):
        """Test that the focal distance must be positive."""
        with pytest.raises(ValueError, match="Focal distance"):
            Camera((0.0, 0.0, 0.0), 0.0, 60.0, (0.0, 0.0, 0.0), (10, 10))
