"""Pinhole camera model for perspective ray generation.

The camera looks down its local +x axis. Its image plane sits at the focal
distance in front of the focus point. The field of view spans the image
width (pixel column i) along local y; the height (pixel row j) runs along
local z, scaled by height / width. The four corners of the plane are
rotated by Euler angles (roll about x, pitch about y, yaw about z) and
translated to the focus point.

Pixel coordinates are floats, so jittered sub-pixel offsets produce rays
through any point of the image plane.

Example:
    >>> from src.prism.camera.pinhole import Camera
    >>> camera = Camera((0.0, 0.0, 0.0), 1.0, 90.0, (0.0, 0.0, 0.0), (100, 100))
    >>> camera.get_ray(50.0, 50.0).direction
    array([1., 0., 0.])
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from src.prism.core.ray import Ray, Vec3, as_vec3
from src.prism.core.transform import Transform


class Camera:
    """An immutable pinhole camera.

    Attributes:
        focus: World-space center of projection.
        focal_distance: Distance from the focus to the image plane.
        field_of_view: Horizontal field of view in degrees.
        rotation: Euler angles (roll, pitch, yaw) in radians.
        width: Horizontal resolution in pixels.
        height: Vertical resolution in pixels.
        corners: The four world-space image plane corners, in the order
            (first pixel, end of first row, start of last row, last pixel).
    """

    def __init__(
        self,
        focus: Sequence[float] | Vec3,
        focal_distance: float,
        field_of_view: float,
        rotation: Sequence[float] | Vec3,
        resolution: tuple[int, int],
    ) -> None:
        """Create a camera.

        Args:
            focus: Center of projection.
            focal_distance: Distance to the image plane (must be positive).
            field_of_view: Field of view in degrees, in (0, 180).
            rotation: Euler angles (roll, pitch, yaw) in radians.
            resolution: (width, height) in pixels, both positive.

        Raises:
            ValueError: If any parameter is out of range.
        """
        width, height = resolution
        if int(width) != width or int(height) != height or width < 1 or height < 1:
            raise ValueError(f"Camera resolution must be positive integers, got {resolution}")
        if not focal_distance > 0.0:
            raise ValueError(f"Focal distance must be positive, got {focal_distance}")
        if not 0.0 < field_of_view < 180.0:
            raise ValueError(f"Field of view must be in (0, 180) degrees, got {field_of_view}")

        self._focus = as_vec3(focus)
        self._focus.flags.writeable = False
        self._rotation = as_vec3(rotation)
        self._focal_distance = float(focal_distance)
        self._field_of_view = float(field_of_view)
        self._width = int(width)
        self._height = int(height)

        delta_y = self._focal_distance * math.tan(math.radians(self._field_of_view) / 2.0)
        delta_z = delta_y * self._height / self._width
        f = self._focal_distance
        local_corners = (
            (f, -delta_y, delta_z),
            (f, delta_y, delta_z),
            (f, -delta_y, -delta_z),
            (f, delta_y, -delta_z),
        )
        roll, pitch, yaw = self._rotation
        to_world = Transform.translation(self._focus) @ Transform.rotation_euler(roll, pitch, yaw)
        corners = np.array([to_world.apply_point(c) for c in local_corners])
        corners.flags.writeable = False
        self._corners = corners
        self._step_x = (corners[1] - corners[0]) / self._width
        self._step_y = (corners[2] - corners[0]) / self._height

    @property
    def focus(self) -> Vec3:
        return self._focus

    @property
    def focal_distance(self) -> float:
        return self._focal_distance

    @property
    def field_of_view(self) -> float:
        return self._field_of_view

    @property
    def rotation(self) -> Vec3:
        return self._rotation.copy()

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def resolution(self) -> tuple[int, int]:
        return self._width, self._height

    @property
    def aspect_ratio(self) -> float:
        return self._width / self._height

    @property
    def corners(self) -> np.ndarray:
        return self._corners

    def get_ray(self, i: float, j: float) -> Ray:
        """Generate the primary ray through image-plane coordinate (i, j).

        Args:
            i: Horizontal pixel coordinate; 0 is the first column edge.
            j: Vertical pixel coordinate; 0 is the first row edge.

        Returns:
            A ray from the focus through the interpolated image-plane point.
        """
        point = self._corners[0] + self._step_x * i + self._step_y * j
        return Ray(self._focus, point - self._focus)

    def __repr__(self) -> str:
        return (
            f"Camera(focus={self._focus.tolist()}, focal_distance={self._focal_distance}, "
            f"field_of_view={self._field_of_view}, resolution={self.resolution})"
        )
