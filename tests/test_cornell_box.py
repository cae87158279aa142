"""Tests for the Cornell box scene.

Tests cover:
- Scene composition and bounds
- Camera placement and primary ray hits
- Albedo render: wall colors land on the expected sides
- A small path-traced render (slow)
"""

import numpy as np
import pytest

from src.prism.core.config import RenderSettings
from src.prism.core.integrator import AlbedoIntegrator, PathIntegrator, tone_map
from src.prism.core.ray import Ray
from src.prism.geometry.group import BoundingGroup
from src.prism.geometry.triangle import Triangle
from src.prism.materials.material import MaterialType
from src.prism.scene.cornell_box import BOX_SIZE, CornellBoxParams, create_cornell_box_scene


@pytest.fixture(scope="module")
def cornell():
    return create_cornell_box_scene(width=32, height=32)


class TestComposition:
    """Tests for the scene layout."""

    def test_shape_count(self, cornell):
        """Test ten wall triangles, the light group and the sphere group."""
        scene, _ = cornell
        shapes = scene.shapes
        assert len(shapes) == 12
        assert all(isinstance(shape, Triangle) for shape in shapes[:10])
        assert isinstance(shapes[10], BoundingGroup)
        assert isinstance(shapes[11], BoundingGroup)
        assert len(shapes[11]) == 2

    def test_bounds(self, cornell):
        """Test that the scene fills the box."""
        scene, _ = cornell
        half = BOX_SIZE / 2.0
        np.testing.assert_allclose(scene.bounding_box.min, [0.0, -half, 0.0])
        np.testing.assert_allclose(scene.bounding_box.max, [BOX_SIZE, half, BOX_SIZE])

    def test_camera(self, cornell):
        """Test the camera placement and resolution."""
        _, camera = cornell
        assert camera.resolution == (32, 32)
        np.testing.assert_allclose(camera.focus, [-800.0, 0.0, BOX_SIZE / 2.0])

    def test_custom_params(self):
        """Test that parameters change the light color."""
        scene, _ = create_cornell_box_scene(8, 8, params=CornellBoxParams(light_intensity=2.0))
        light = scene.shapes[10].children[0].material
        assert light.type is MaterialType.EMITTER
        np.testing.assert_allclose(light.emitted_color.to_rgb(), [2.0, 2.0, 2.0], atol=1e-9)


class TestPrimaryHits:
    """Tests for rays cast into the box."""

    def test_center_ray_hits_back_wall(self, cornell):
        """Test that the view axis reaches the white back wall."""
        scene, camera = cornell
        hit = scene.intersect_ray(camera.get_ray(15.5, 15.5))
        assert hit.point[0] == pytest.approx(BOX_SIZE)
        np.testing.assert_allclose(np.abs(hit.normal), [1.0, 0.0, 0.0], atol=1e-12)
        assert hit.material.type is MaterialType.LAMBERTIAN

    def test_upward_ray_hits_light(self, cornell):
        """Test that a ray straight up from the box center hits the light."""
        scene, _ = cornell
        hit = scene.intersect_ray(Ray((BOX_SIZE / 2.0, 10.0, 300.0), (0.0, 0.0, 1.0)))
        assert hit.material.type is MaterialType.EMITTER
        assert hit.t == pytest.approx(BOX_SIZE - 1.0 - 300.0)


class TestRender:
    """Tests for rendering the box."""

    def test_albedo_wall_colors(self, cornell):
        """Test red on the left, green on the right and white in the middle."""
        scene, camera = cornell
        settings = RenderSettings(samples_per_pixel=1, tile_size=8, num_threads=2, seed=3)
        image = AlbedoIntegrator(scene, camera, settings).render()
        left, right, center = image[16, 4], image[16, 28], image[16, 16]
        assert left[0] > left[1] and left[0] > left[2]
        assert right[1] > right[0] and right[1] > right[2]
        expected = tone_map(np.array([0.73, 0.73, 0.73]))
        assert np.all(np.abs(center.astype(int) - expected.astype(int)) <= 3)

    @pytest.mark.slow
    def test_path_traced_render(self):
        """Test that a small path-traced render produces a lit image."""
        scene, camera = create_cornell_box_scene(width=24, height=24)
        settings = RenderSettings(samples_per_pixel=4, max_depth=4, tile_size=8, seed=7)
        image = PathIntegrator(scene, camera, settings).render()
        assert image.shape == (24, 24, 3)
        assert image.mean() > 0.0
