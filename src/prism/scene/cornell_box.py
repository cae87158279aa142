"""Cornell box scene configuration.

This module provides a factory function to create the classic Cornell box scene,
a standard test scene used in computer graphics for evaluating global illumination
algorithms.

The Cornell box consists of:
- 5 walls built from triangle pairs (left, right, back, floor, ceiling)
- Left wall: red diffuse
- Right wall: green diffuse
- Back, floor, ceiling: white diffuse
- An emissive light panel just below the ceiling
- A diffuse sphere and a mirror sphere, grouped behind one bounding box

The camera looks down +x with +z up, so the box spans 0..size in x (depth)
and z (height) and -size/2..size/2 in y. Image columns run along +y, which
puts the red wall (y < 0) on the left of the rendered image.

Example:
    >>> from src.prism.core.spectrum import init_spectral_tables
    >>> from src.prism.scene.cornell_box import create_cornell_box_scene
    >>>
    >>> init_spectral_tables()
    >>> scene, camera = create_cornell_box_scene(width=128, height=128)
    >>> len(scene)
    12
"""

from __future__ import annotations

from dataclasses import dataclass

from src.prism.camera.pinhole import Camera
from src.prism.geometry.group import BoundingGroup
from src.prism.geometry.sphere import Sphere
from src.prism.geometry.triangle import Triangle
from src.prism.materials.material import Material
from src.prism.scene.scene import Scene

# =============================================================================
# Cornell Box Parameters
# =============================================================================


@dataclass
class CornellBoxParams:
    """Parameters for configuring a Cornell box scene.

    Attributes:
        light_intensity: Multiplier applied to the light color.
        light_color: Linear RGB color of the light panel.
        left_wall_color: RGB albedo of the left wall.
        right_wall_color: RGB albedo of the right wall.
        white_color: RGB albedo of the back wall, floor, ceiling and the
            diffuse sphere.
        mirror_color: RGB albedo of the mirror sphere.

    Example:
        >>> params = CornellBoxParams()
        >>> params.light_intensity
        15.0
    """

    light_intensity: float = 15.0
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    left_wall_color: tuple[float, float, float] = (0.65, 0.05, 0.05)
    right_wall_color: tuple[float, float, float] = (0.12, 0.45, 0.15)
    white_color: tuple[float, float, float] = (0.73, 0.73, 0.73)
    mirror_color: tuple[float, float, float] = (0.95, 0.93, 0.88)


# =============================================================================
# Cornell Box Constants
# =============================================================================

# Classic Cornell box dimensions (approximately 555x555x555 units)
BOX_SIZE = 555.0

# Classic light panel footprint
LIGHT_WIDTH = 130.0
LIGHT_DEPTH = 105.0

SPHERE_RADIUS = 80.0

CAMERA_DISTANCE = 800.0
CAMERA_FOV = 40.0


def _quad(a, b, c, d, material: Material) -> list[Triangle]:
    """Two triangles covering the quad a-b-c-d (vertices in order)."""
    return [Triangle(a, b, c, material), Triangle(a, c, d, material)]


# =============================================================================
# Cornell Box Factory
# =============================================================================


def create_cornell_box_scene(
    width: int = 256,
    height: int = 256,
    box_size: float = BOX_SIZE,
    params: CornellBoxParams | None = None,
) -> tuple[Scene, Camera]:
    """Create a Cornell box scene with standard configuration.

    Requires initialized spectral tables, since materials are decoded from RGB.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        box_size: Edge length of the box.
        params: Optional CornellBoxParams for customizing colors.

    Returns:
        A tuple of (Scene, Camera). The scene holds ten wall triangles, the
        light panel (as one BoundingGroup of two triangles) and one
        BoundingGroup with the two spheres.
    """
    if params is None:
        params = CornellBoxParams()

    s = box_size
    h = box_size / 2.0

    red = Material.lambertian(params.left_wall_color)
    green = Material.lambertian(params.right_wall_color)
    white = Material.lambertian(params.white_color)
    mirror = Material.specular(params.mirror_color)
    light = Material.emitter(tuple(c * params.light_intensity for c in params.light_color))

    scene = Scene()

    # =========================================================================
    # Walls
    # =========================================================================

    walls = (
        # Left wall (red), plane y = -h
        _quad((0, -h, 0), (s, -h, 0), (s, -h, s), (0, -h, s), red),
        # Right wall (green), plane y = +h
        _quad((0, h, 0), (0, h, s), (s, h, s), (s, h, 0), green),
        # Back wall, plane x = s
        _quad((s, -h, 0), (s, h, 0), (s, h, s), (s, -h, s), white),
        # Floor, plane z = 0
        _quad((0, -h, 0), (0, h, 0), (s, h, 0), (s, -h, 0), white),
        # Ceiling, plane z = s
        _quad((0, -h, s), (s, -h, s), (s, h, s), (0, h, s), white),
    )
    for wall in walls:
        for triangle in wall:
            scene.add_shape(triangle)

    # =========================================================================
    # Light panel, 1 unit below the ceiling
    # =========================================================================

    lx0 = (s - LIGHT_DEPTH) / 2.0
    lx1 = lx0 + LIGHT_DEPTH
    ly = LIGHT_WIDTH / 2.0
    lz = s - 1.0
    scene.add_shape(
        BoundingGroup(_quad((lx0, -ly, lz), (lx1, -ly, lz), (lx1, ly, lz), (lx0, ly, lz), light))
    )

    # =========================================================================
    # Spheres resting on the floor
    # =========================================================================

    r = SPHERE_RADIUS
    scene.add_shape(
        BoundingGroup(
            [
                Sphere((s * 0.65, -s * 0.23, r), r, white),
                Sphere((s * 0.45, s * 0.23, r), r, mirror),
            ]
        )
    )

    camera = Camera(
        focus=(-CAMERA_DISTANCE, 0.0, h),
        focal_distance=1.0,
        field_of_view=CAMERA_FOV,
        rotation=(0.0, 0.0, 0.0),
        resolution=(width, height),
    )
    return scene, camera
