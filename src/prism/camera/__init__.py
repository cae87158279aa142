"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole camera with an Euler-rotated image plane
"""

from .pinhole import Camera

__all__ = ["Camera"]
