"""Scene description loading: TOML scenes and Wavefront OBJ/MTL meshes.

A scene file is a TOML document with three parts:

    [Camera]
    position = [-5.0, 0.0, 0.0]
    focal_distance = 1.0
    field_of_view = 60.0
    rotation = [0.0, 0.0, 0.0]
    width = 320
    height = 240

    [Render]                      # optional, maps onto RenderSettings
    samples_per_pixel = 16
    max_depth = 5

    [[Scene]]
    type = "Sphere"
    center = [0.0, 0.0, 0.0]
    radius = 1.0
    material = { type = "Lambertian", color = [0.5, 0.5, 0.5] }

Shape types are Sphere, Triangle, Mesh and Group. Any shape may carry
``scale``, ``rotation`` (Euler radians) and ``translation`` keys that build
its local_to_world transform. A Mesh loads ``path`` (relative to the scene
file) and takes its material from the OBJ's first MTL material unless the
entry gives its own. A Group nests ``children`` and an optional
``first_hit`` flag.

Every malformed input raises ConfigurationError before rendering starts.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np

from src.prism.camera.pinhole import Camera
from src.prism.core.config import ConfigurationError, RenderSettings
from src.prism.core.spectrum import SampledSpectrum, SpectrumType
from src.prism.core.transform import Transform
from src.prism.geometry.group import BoundingGroup
from src.prism.geometry.mesh import Mesh
from src.prism.geometry.shape import Shape
from src.prism.geometry.sphere import Sphere
from src.prism.geometry.triangle import Triangle
from src.prism.materials.material import Material, MaterialType
from src.prism.scene.scene import Scene

logger = logging.getLogger(__name__)

MATERIAL_TYPES = {
    "Emitter": MaterialType.EMITTER,
    "Lambertian": MaterialType.LAMBERTIAN,
    "Specular": MaterialType.SPECULAR,
}


@dataclass(frozen=True)
class SceneDescription:
    """Everything a scene file binds before rendering.

    Attributes:
        scene: The loaded shapes.
        camera: The configured camera.
        settings: Render settings from the [Render] table (defaults if absent).
    """

    scene: Scene
    camera: Camera
    settings: RenderSettings


# =============================================================================
# Value helpers
# =============================================================================


def _number(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{what} must be a number, got {value!r}")
    return float(value)


def _vec3(value: Any, what: str) -> tuple[float, float, float]:
    if not isinstance(value, list) or len(value) != 3:
        raise ConfigurationError(f"{what} must be an array of 3 numbers, got {value!r}")
    x, y, z = (_number(v, what) for v in value)
    return x, y, z


def _require(table: Mapping[str, Any], key: str, what: str) -> Any:
    if key not in table:
        raise ConfigurationError(f"{what} is missing required key '{key}'")
    return table[key]


def _table(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"{what} must be a table, got {value!r}")
    return value


# =============================================================================
# TOML sections
# =============================================================================


def parse_camera(table: Mapping[str, Any]) -> Camera:
    """Build a Camera from a [Camera] table."""
    what = "Camera"
    width = _require(table, "width", what)
    height = _require(table, "height", what)
    if isinstance(width, bool) or isinstance(height, bool) or not (
        isinstance(width, int) and isinstance(height, int)
    ):
        raise ConfigurationError(f"Camera width and height must be integers, got {width!r}, {height!r}")
    try:
        return Camera(
            focus=_vec3(_require(table, "position", what), "Camera position"),
            focal_distance=_number(_require(table, "focal_distance", what), "Camera focal_distance"),
            field_of_view=_number(_require(table, "field_of_view", what), "Camera field_of_view"),
            rotation=_vec3(table.get("rotation", [0.0, 0.0, 0.0]), "Camera rotation"),
            resolution=(width, height),
        )
    except ValueError as e:
        if isinstance(e, ConfigurationError):
            raise
        raise ConfigurationError(f"Invalid camera: {e}") from e


def parse_material(table: Mapping[str, Any] | None) -> Material:
    """Build a Material from a shape's material table.

    The ``color`` key (alias ``albedo``) fills the slot the type shades
    with: emitted color for emitters, ambient color for Lambertian surfaces
    and specular color for mirrors. A missing table yields a black emitter.
    """
    if table is None:
        return Material(MaterialType.EMITTER)
    table = _table(table, "material")
    kind = _require(table, "type", "material")
    if kind not in MATERIAL_TYPES:
        raise ConfigurationError(
            f"Unknown material type {kind!r}; expected one of {', '.join(MATERIAL_TYPES)}"
        )
    material_type = MATERIAL_TYPES[kind]
    if "color" in table:
        rgb = _vec3(table["color"], "material color")
    elif "albedo" in table:
        rgb = _vec3(table["albedo"], "material albedo")
    else:
        raise ConfigurationError("material is missing required key 'color'")

    exponent = table.get("specular_exponent")
    density = table.get("optical_density")
    extras = {
        "specular_exponent": None if exponent is None else _number(exponent, "specular_exponent"),
        "optical_density": None if density is None else _number(density, "optical_density"),
    }
    if material_type == MaterialType.EMITTER:
        spectrum = SampledSpectrum.from_rgb(rgb, SpectrumType.ILLUMINANT)
        return Material(material_type, emitted_color=spectrum, **extras)
    spectrum = SampledSpectrum.from_rgb(rgb, SpectrumType.REFLECTANCE)
    if material_type == MaterialType.LAMBERTIAN:
        return Material(material_type, ambient_color=spectrum, **extras)
    return Material(material_type, specular_color=spectrum, **extras)


def _placement(table: Mapping[str, Any], what: str) -> Transform | None:
    if not any(key in table for key in ("scale", "rotation", "translation")):
        return None
    scale = table.get("scale", 1.0)
    scale = _number(scale, f"{what} scale") if not isinstance(scale, list) else _vec3(scale, f"{what} scale")
    try:
        return Transform.from_srt(
            scale=scale,
            rotation=_vec3(table.get("rotation", [0.0, 0.0, 0.0]), f"{what} rotation"),
            translation=_vec3(table.get("translation", [0.0, 0.0, 0.0]), f"{what} translation"),
        )
    except ValueError as e:
        if isinstance(e, ConfigurationError):
            raise
        raise ConfigurationError(f"Invalid {what} transform: {e}") from e


def parse_shape(table: Mapping[str, Any], base_dir: Path) -> Shape:
    """Build one shape from a [[Scene]] entry (or a Group child)."""
    table = _table(table, "Scene entry")
    kind = _require(table, "type", "Scene entry")
    what = str(kind)
    placement = _placement(table, what)

    if kind == "Sphere":
        center = _vec3(_require(table, "center", what), "Sphere center")
        radius = _number(_require(table, "radius", what), "Sphere radius")
        if radius <= 0.0:
            raise ConfigurationError(f"Sphere radius must be positive, got {radius}")
        return Sphere(center, radius, parse_material(table.get("material")), placement)

    if kind == "Triangle":
        vertices = _require(table, "vertices", what)
        if not isinstance(vertices, list) or len(vertices) != 3:
            raise ConfigurationError(f"Triangle vertices must be an array of 3 points, got {vertices!r}")
        v0, v1, v2 = (_vec3(v, "Triangle vertex") for v in vertices)
        return Triangle(v0, v1, v2, parse_material(table.get("material")), placement)

    if kind in ("Mesh", "ModelObj"):
        path = _require(table, "path", what)
        if not isinstance(path, str):
            raise ConfigurationError(f"Mesh path must be a string, got {path!r}")
        material = parse_material(table["material"]) if "material" in table else None
        return load_mesh(base_dir / path, material=material, local_to_world=placement)

    if kind == "Group":
        children = _require(table, "children", what)
        if not isinstance(children, list) or not children:
            raise ConfigurationError("Group children must be a non-empty array of shapes")
        first_hit = table.get("first_hit", False)
        if not isinstance(first_hit, bool):
            raise ConfigurationError(f"Group first_hit must be a boolean, got {first_hit!r}")
        return BoundingGroup([parse_shape(child, base_dir) for child in children], first_hit=first_hit)

    raise ConfigurationError(f"Unknown shape type {kind!r}; expected Sphere, Triangle, Mesh or Group")


def parse_scene(entries: Any, base_dir: Path) -> Scene:
    """Build a Scene from the [[Scene]] array."""
    if not isinstance(entries, list):
        raise ConfigurationError("Scene must be an array of tables ([[Scene]])")
    scene = Scene()
    for entry in entries:
        scene.add_shape(parse_shape(entry, base_dir))
    return scene


def load_scene_string(text: str, base_dir: str | Path = ".") -> SceneDescription:
    """Parse a TOML scene description.

    Requires initialized spectral tables, since material colors are decoded
    into spectra.

    Args:
        text: The TOML document.
        base_dir: Directory that relative mesh paths resolve against.

    Raises:
        ConfigurationError: If the document is malformed.
    """
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid scene description: {e}") from e

    camera = parse_camera(_table(_require(document, "Camera", "Scene description"), "Camera"))
    settings = RenderSettings.from_dict(dict(_table(document.get("Render", {}), "Render")))
    scene = parse_scene(_require(document, "Scene", "Scene description"), Path(base_dir))
    logger.info("Loaded scene with %d shapes, camera %dx%d", len(scene), camera.width, camera.height)
    return SceneDescription(scene=scene, camera=camera, settings=settings)


def load_scene_file(path: str | Path) -> SceneDescription:
    """Load a TOML scene file; mesh paths resolve relative to its directory."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read scene file {path}: {e}") from e
    return load_scene_string(text, base_dir=path.parent)


# =============================================================================
# Wavefront OBJ / MTL
# =============================================================================


@dataclass(frozen=True)
class ObjData:
    """Triangulated geometry read from an OBJ file.

    Attributes:
        vertices: Vertex positions, shape (V, 3).
        faces: Zero-based triangle indices, shape (F, 3).
        material_libraries: MTL file names referenced by ``mtllib``.
    """

    vertices: np.ndarray
    faces: np.ndarray
    material_libraries: tuple[str, ...]


def _floats(parts: list[str], count: int, where: str) -> list[float]:
    if len(parts) < count:
        raise ConfigurationError(f"{where}: expected {count} numbers, got {len(parts)}")
    try:
        return [float(p) for p in parts[:count]]
    except ValueError as e:
        raise ConfigurationError(f"{where}: {e}") from e


def _vertex_index(token: str, vertex_count: int, where: str) -> int:
    try:
        index = int(token.split("/")[0])
    except ValueError as e:
        raise ConfigurationError(f"{where}: bad face index {token!r}") from e
    if index > 0:
        resolved = index - 1
    elif index < 0:
        resolved = vertex_count + index
    else:
        raise ConfigurationError(f"{where}: face index 0 is invalid")
    if not 0 <= resolved < vertex_count:
        raise ConfigurationError(f"{where}: face index {index} out of range")
    return resolved


def parse_obj(text: str, source: str = "<obj>") -> ObjData:
    """Parse OBJ text, fan-triangulating polygons.

    Texture coordinates, normals, groups and smoothing directives are
    ignored.

    Raises:
        ConfigurationError: If a line cannot be parsed or no faces exist.
    """
    vertices: list[list[float]] = []
    faces: list[tuple[int, int, int]] = []
    libraries: list[str] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        keyword, *parts = line.split()
        where = f"{source}:{lineno}"
        if keyword == "v":
            vertices.append(_floats(parts, 3, where))
        elif keyword == "f":
            if len(parts) < 3:
                raise ConfigurationError(f"{where}: a face needs at least 3 vertices")
            indices = [_vertex_index(p, len(vertices), where) for p in parts]
            for k in range(1, len(indices) - 1):
                faces.append((indices[0], indices[k], indices[k + 1]))
        elif keyword == "mtllib":
            libraries.extend(parts)
    if not faces:
        raise ConfigurationError(f"{source}: no faces found")
    return ObjData(
        vertices=np.array(vertices, dtype=np.float64),
        faces=np.array(faces, dtype=np.int64),
        material_libraries=tuple(libraries),
    )


def parse_mtl(text: str, source: str = "<mtl>") -> Material:
    """Build a Material from the first material of MTL text.

    Ka, Kd and Ks become reflectance spectra and Ke an illuminant spectrum.
    The material is an emitter when Ke is non-black, specular when
    illum >= 3, and Lambertian otherwise.

    Raises:
        ConfigurationError: If the text holds no material or a bad value.
    """
    values: dict[str, Any] = {}
    seen = False
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        keyword, *parts = line.split()
        where = f"{source}:{lineno}"
        if keyword == "newmtl":
            if seen:
                break
            seen = True
        elif not seen:
            continue
        elif keyword in ("Ka", "Kd", "Ks", "Ke"):
            values[keyword] = _floats(parts, 3, where)
        elif keyword in ("Ns", "Ni"):
            values[keyword] = _floats(parts, 1, where)[0]
        elif keyword == "illum":
            values[keyword] = int(_floats(parts, 1, where)[0])
    if not seen:
        raise ConfigurationError(f"{source}: no material defined")

    def reflectance(key: str) -> SampledSpectrum | None:
        if key not in values:
            return None
        return SampledSpectrum.from_rgb(values[key], SpectrumType.REFLECTANCE)

    emitted = None
    if "Ke" in values and any(c != 0.0 for c in values["Ke"]):
        emitted = SampledSpectrum.from_rgb(values["Ke"], SpectrumType.ILLUMINANT)

    if emitted is not None:
        material_type = MaterialType.EMITTER
    elif values.get("illum", 0) >= 3:
        material_type = MaterialType.SPECULAR
    else:
        material_type = MaterialType.LAMBERTIAN

    return Material(
        material_type,
        ambient_color=reflectance("Ka"),
        emitted_color=emitted,
        diffuse_color=reflectance("Kd"),
        specular_color=reflectance("Ks"),
        specular_exponent=values.get("Ns"),
        optical_density=values.get("Ni"),
    )


def load_mesh(
    path: str | Path,
    material: Material | None = None,
    local_to_world: Transform | None = None,
) -> Mesh:
    """Load an OBJ file as a Mesh.

    Args:
        path: The OBJ file.
        material: Material for every face. When None, the first material of
            the first ``mtllib`` is used, or a black emitter if there is none.
        local_to_world: Optional placement of the mesh.

    Raises:
        ConfigurationError: If a file is missing or malformed.
    """
    path = Path(path)
    try:
        obj = parse_obj(path.read_text(encoding="utf-8"), source=str(path))
    except OSError as e:
        raise ConfigurationError(f"Cannot read mesh file {path}: {e}") from e

    if material is None:
        if obj.material_libraries:
            mtl_path = path.parent / obj.material_libraries[0]
            try:
                material = parse_mtl(mtl_path.read_text(encoding="utf-8"), source=str(mtl_path))
            except OSError as e:
                raise ConfigurationError(f"Cannot read material file {mtl_path}: {e}") from e
        else:
            material = Material(MaterialType.EMITTER)

    logger.debug("Loaded mesh %s: %d vertices, %d triangles", path, len(obj.vertices), len(obj.faces))
    return Mesh(obj.vertices, obj.faces, material, local_to_world)
