"""Scene module for assembling renderable worlds.

Components:
    scene: Scene container with nearest-hit queries
    loader: TOML scene descriptions and Wavefront OBJ/MTL mesh import
    cornell_box: Factory for the classic Cornell box test scene
"""

from .cornell_box import CornellBoxParams, create_cornell_box_scene
from .loader import (
    SceneDescription,
    load_mesh,
    load_scene_file,
    load_scene_string,
    parse_mtl,
    parse_obj,
)
from .scene import Scene

__all__ = [
    "Scene",
    "SceneDescription",
    "load_scene_file",
    "load_scene_string",
    "load_mesh",
    "parse_obj",
    "parse_mtl",
    "CornellBoxParams",
    "create_cornell_box_scene",
]
