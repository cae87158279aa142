"""Unit tests for materials and their shading routines.

Tests cover:
- Material factories and color roles
- Lambertian and specular scattering directions
- Shading results inside a uniformly emitting enclosure
- The optional Schlick Fresnel weighting of mirrors
"""

import numpy as np
import pytest

from src.prism.core.config import RenderSettings
from src.prism.core.integrator import PathIntegrator
from src.prism.core.ray import Ray, dot
from src.prism.core.spectrum import SampledSpectrum, SpectrumType
from src.prism.geometry.sphere import Sphere
from src.prism.materials.lambertian import scatter_lambertian
from src.prism.materials.material import Material, MaterialType
from src.prism.materials.specular import fresnel_color, scatter_specular
from src.prism.scene.scene import Scene


def enclosure(inner_material, fresnel=False, camera=None):
    """A sphere of the given material inside a large white emitter sphere."""
    light = Material.emitter((1.0, 1.0, 1.0))
    scene = Scene(
        [
            Sphere((0.0, 0.0, 0.0), 100.0, light),
            Sphere((0.0, 0.0, 0.0), 1.0, inner_material),
        ]
    )
    return PathIntegrator(scene, camera, RenderSettings(max_depth=4, fresnel=fresnel)), light


class TestMaterial:
    """Tests for the material model."""

    def test_emitter_uses_illuminant_basis(self):
        """Test that emitters decode their color as an illuminant."""
        m = Material.emitter((1.0, 1.0, 1.0))
        assert m.type is MaterialType.EMITTER
        assert m.emitted_color == SampledSpectrum.from_rgb((1.0, 1.0, 1.0), SpectrumType.ILLUMINANT)

    def test_lambertian_albedo(self):
        """Test that Lambertian albedo comes from the ambient color."""
        m = Material.lambertian((0.5, 0.5, 0.5))
        assert m.type is MaterialType.LAMBERTIAN
        assert m.diffuse_albedo == SampledSpectrum.from_rgb((0.5, 0.5, 0.5), SpectrumType.REFLECTANCE)

    def test_diffuse_fallback(self):
        """Test that diffuse color is used when no ambient color is set."""
        diffuse = SampledSpectrum(0.3)
        m = Material(MaterialType.LAMBERTIAN, diffuse_color=diffuse)
        assert m.diffuse_albedo is diffuse
        assert m.base_color is diffuse

    def test_base_color_order(self):
        """Test that base_color prefers ambient, then emitted."""
        ambient, emitted = SampledSpectrum(0.1), SampledSpectrum(0.9)
        assert Material(MaterialType.EMITTER, ambient_color=ambient, emitted_color=emitted).base_color is ambient
        assert Material(MaterialType.EMITTER, emitted_color=emitted).base_color is emitted
        assert Material(MaterialType.SPECULAR).base_color is None


class TestScattering:
    """Tests for continuation ray generation."""

    def test_lambertian_scatters_into_upper_hemisphere(self, rng):
        """Test that diffuse bounces leave on the normal's side."""
        sphere = Sphere((0.0, 0.0, 0.0), 1.0, Material.lambertian((0.5, 0.5, 0.5)))
        hit = sphere.intersect(Ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0)))
        for _ in range(100):
            ray = scatter_lambertian(hit, rng)
            assert dot(ray.direction, hit.normal) >= 0.0
            assert ray.origin[2] < -1.0

    def test_specular_mirrors_direction(self):
        """Test mirror reflection about the normal."""
        sphere = Sphere((0.0, 0.0, 0.0), 1.0, Material.specular((1.0, 1.0, 1.0)))
        hit = sphere.intersect(Ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0)))
        np.testing.assert_allclose(scatter_specular(hit).direction, [0.0, 0.0, -1.0], atol=1e-12)

    def test_fresnel_color_limits(self):
        """Test Schlick weighting at normal and grazing incidence."""
        color = SampledSpectrum(0.04)
        np.testing.assert_allclose(fresnel_color(color, 1.0).samples, 0.04)
        np.testing.assert_allclose(fresnel_color(color, 0.0).samples, 1.0)
        np.testing.assert_allclose(fresnel_color(color, -0.5).samples, 1.0)


class TestShadingInEnclosure:
    """Tests for radiance estimates with a uniform surrounding light."""

    def test_emitter_seen_from_inside(self, small_camera, rng):
        """Test that a ray from inside an emitter returns its emission."""
        integrator, light = enclosure(Material.lambertian((0.5, 0.5, 0.5)), camera=small_camera)
        result = integrator.incident_light(Ray((0.0, 0.0, 50.0), (0.0, 0.0, 1.0)), 3, rng)
        assert result == light.emitted_color

    def test_lambertian_reflects_albedo_times_emission(self, small_camera, rng):
        """Test energy conservation: a convex diffuse body returns albedo * L."""
        inner = Material.lambertian((0.5, 0.5, 0.5))
        integrator, light = enclosure(inner, camera=small_camera)
        ray = Ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        for _ in range(20):
            result = integrator.incident_light(ray, 2, rng)
            expected = light.emitted_color * inner.diffuse_albedo
            np.testing.assert_allclose(result.samples, expected.samples, rtol=1e-12)
        assert result.to_rgb().max() <= light.emitted_color.to_rgb().max() + 1e-9

    @pytest.mark.parametrize("albedo", [(1.0, 1.0, 1.0), (0.95, 0.95, 0.95)])
    def test_bright_diffuse_stays_below_light_peak(self, small_camera, rng, albedo):
        """Test that no reflected sample exceeds the light's largest sample."""
        integrator, light = enclosure(Material.lambertian(albedo), camera=small_camera)
        ray = Ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        peak = light.emitted_color.max_value()
        for depth in range(2, RenderSettings().max_depth + 1):
            result = integrator.incident_light(ray, depth, rng)
            assert result.max_value() <= peak + 1e-12
            assert result.y() <= light.emitted_color.y() + 1e-12

    def test_white_stays_neutral_over_bounces(self):
        """Test that repeated white reflections neither tint nor brighten the light."""
        light = Material.emitter((1.0, 1.0, 1.0)).emitted_color
        white = Material.lambertian((1.0, 1.0, 1.0)).diffuse_albedo
        radiance = light
        for _ in range(10):
            radiance = radiance * white
            rgb = radiance.to_rgb()
            np.testing.assert_allclose(rgb, [1.0, 1.0, 1.0], atol=0.03)
            assert rgb.max() - rgb.min() < 0.02
            assert radiance.max_value() <= light.max_value() + 1e-12

    def test_depth_budget_exhausted(self, small_camera, rng):
        """Test that a diffuse hit at depth one returns black."""
        integrator, _ = enclosure(Material.lambertian((0.5, 0.5, 0.5)), camera=small_camera)
        result = integrator.incident_light(Ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0)), 1, rng)
        assert result.is_black()
        assert integrator.incident_light(Ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0)), 0, rng).is_black()

    def test_mirror_tints_by_specular_color(self, small_camera, rng):
        """Test that a mirror returns specular color times the reflected light."""
        inner = Material.specular((0.8, 0.8, 0.8))
        integrator, light = enclosure(inner, camera=small_camera)
        result = integrator.incident_light(Ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0)), 2, rng)
        expected = light.emitted_color * inner.specular_color
        np.testing.assert_allclose(result.samples, expected.samples, rtol=1e-12)

    def test_fresnel_matches_baseline_at_normal_incidence(self, small_camera, rng):
        """Test that Fresnel weighting leaves head-on reflections unchanged."""
        inner = Material.specular((0.8, 0.8, 0.8))
        plain, _ = enclosure(inner, camera=small_camera)
        weighted, _ = enclosure(inner, fresnel=True, camera=small_camera)
        ray = Ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        np.testing.assert_allclose(
            weighted.incident_light(ray, 2, rng).samples,
            plain.incident_light(ray, 2, rng).samples,
            rtol=1e-9,
        )

    def test_fresnel_brightens_grazing_reflections(self, small_camera, rng):
        """Test that Fresnel weighting increases reflectance at grazing angles."""
        inner = Material.specular((0.5, 0.5, 0.5))
        plain, _ = enclosure(inner, camera=small_camera)
        weighted, _ = enclosure(inner, fresnel=True, camera=small_camera)
        ray = Ray((0.0, 0.99, -5.0), (0.0, 0.0, 1.0))
        baseline = plain.incident_light(ray, 2, rng).y()
        assert weighted.incident_light(ray, 2, rng).y() > baseline
