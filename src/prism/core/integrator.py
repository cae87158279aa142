"""Light transport integrators and per-pixel sampling.

Every integrator estimates the spectral radiance arriving along camera
rays. SamplerIntegrator owns the shared machinery: jittered sub-pixel
sampling, averaging, tone mapping and the tile-parallel render loop.
Subclasses only decide what incident_light() returns for a ray:

    PathIntegrator: recursive Monte Carlo light transport
    AlbedoIntegrator: base color of the first hit (debug view)
    NormalIntegrator: geometric normal of the first hit (debug view)

Per pixel, S samples are taken at the integer pixel coordinate plus a jitter
in [-0.5, 0.5) on each axis. The averaged spectrum is converted to linear
RGB, clamped to [0, 1 - eps), gamma corrected with 1/2.2 and quantized to
8 bits.

Random numbers come from one numpy Generator per tile, seeded from
(settings.seed, tile index), so the image does not depend on which worker
rendered which tile.

Example:
    >>> from src.prism.core.config import RenderSettings
    >>> from src.prism.core.integrator import PathIntegrator
    >>> from src.prism.core.spectrum import init_spectral_tables
    >>> from src.prism.scene.cornell_box import create_cornell_box_scene
    >>>
    >>> init_spectral_tables()
    >>> scene, camera = create_cornell_box_scene(width=64, height=64)
    >>> integrator = PathIntegrator(scene, camera, RenderSettings(samples_per_pixel=4))
    >>> image = integrator.render()
    >>> image.shape
    (64, 64, 3)
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

import numpy as np
import numpy.typing as npt

from src.prism.camera.pinhole import Camera
from src.prism.core.config import CHANNEL_CLAMP_EPSILON, GAMMA, RenderSettings
from src.prism.core.ray import Ray
from src.prism.core.scheduler import ProgressCallback, Tile, TileScheduler, partition_tiles
from src.prism.core.spectrum import (
    N_SPECTRAL_SAMPLES,
    SampledSpectrum,
    SpectralTables,
    SpectrumType,
    black,
    get_spectral_tables,
)
from src.prism.materials.lambertian import shade_lambertian
from src.prism.materials.material import MaterialType
from src.prism.materials.specular import shade_specular
from src.prism.scene.scene import Scene

logger = logging.getLogger(__name__)

# Width x height x RGB, 8 bits per channel
PixelBuffer = npt.NDArray[np.uint8]


def tone_map(rgb: npt.NDArray[np.float64]) -> npt.NDArray[np.uint8]:
    """Clamp, gamma correct and quantize a linear RGB triple.

    Args:
        rgb: Linear RGB values, any range.

    Returns:
        uint8 array of shape (3,).
    """
    clamped = np.clip(np.nan_to_num(rgb, nan=0.0), 0.0, 1.0 - CHANNEL_CLAMP_EPSILON)
    corrected = clamped ** (1.0 / GAMMA)
    return (256.0 * corrected).astype(np.uint8)


class SamplerIntegrator(ABC):
    """Base class for integrators that sample each pixel independently.

    Attributes:
        scene: The scene to render.
        camera: The camera generating primary rays.
        settings: Samples, depth, tiling, threading and seeding parameters.
        scheduler: The tile scheduler; call scheduler.cancel() to abort a
            render in progress.
    """

    name = "sampler"

    def __init__(
        self,
        scene: Scene,
        camera: Camera,
        settings: RenderSettings | None = None,
        tables: SpectralTables | None = None,
    ) -> None:
        """Bind the render inputs.

        Raises:
            SpectralTablesNotInitializedError: If no tables are given and
                init_spectral_tables() has not run.
        """
        self.scene = scene
        self.camera = camera
        self.settings = settings if settings is not None else RenderSettings()
        self.tables = tables if tables is not None else get_spectral_tables()
        self.scheduler: TileScheduler[Tile] = TileScheduler(self.settings.worker_count)

    @abstractmethod
    def incident_light(self, ray: Ray, depth: int, rng: np.random.Generator) -> SampledSpectrum:
        """Estimate the spectral radiance arriving along a ray.

        Args:
            ray: World-space ray.
            depth: Remaining recursion budget; zero yields black.
            rng: Per-tile random generator.
        """

    def render_pixel(self, x: int, y: int, rng: np.random.Generator) -> npt.NDArray[np.uint8]:
        """Compute the final 8-bit color of one pixel."""
        samples = self.settings.samples_per_pixel
        total = np.zeros(N_SPECTRAL_SAMPLES, dtype=np.float64)
        for _ in range(samples):
            jitter_x, jitter_y = rng.random(2) - 0.5
            ray = self.camera.get_ray(x + jitter_x, y + jitter_y)
            total += self.incident_light(ray, self.settings.max_depth, rng).samples
        return tone_map(SampledSpectrum(total / samples).to_rgb(self.tables))

    def tile_rng(self, tile: Tile) -> np.random.Generator:
        """Random generator for a tile, reproducible when a seed is set."""
        if self.settings.seed is None:
            return np.random.default_rng()
        return np.random.default_rng([self.settings.seed, tile.index])

    def render_tile(self, tile: Tile, buffer: PixelBuffer) -> None:
        """Render every pixel of a tile into its region of the buffer."""
        rng = self.tile_rng(tile)
        for x, y in tile.pixels():
            buffer[y, x] = self.render_pixel(x, y, rng)
        logger.debug("Finished tile %d (%dx%d at %d,%d)", tile.index, tile.width, tile.height, tile.x0, tile.y0)

    def render(self, progress: ProgressCallback | None = None) -> PixelBuffer:
        """Render the full image on the worker pool.

        Args:
            progress: Optional callback invoked on the calling thread as
                progress(completed_tiles, total_tiles) once per finished tile.

        Returns:
            uint8 array of shape (height, width, 3).

        Raises:
            TileRenderError: If any tile failed.
            RenderCancelledError: If the scheduler was cancelled.
        """
        width, height = self.camera.resolution
        tiles = partition_tiles(width, height, self.settings.tile_size)
        buffer = np.zeros((height, width, 3), dtype=np.uint8)
        logger.info(
            "Rendering %dx%d with %s: %d tiles on %d threads, %d spp, depth %d",
            width,
            height,
            self.name,
            len(tiles),
            min(self.scheduler.num_threads, len(tiles)),
            self.settings.samples_per_pixel,
            self.settings.max_depth,
        )
        start = time.perf_counter()
        self.scheduler.run(tiles, lambda tile: self.render_tile(tile, buffer), progress)
        logger.info("Render finished in %.2fs", time.perf_counter() - start)
        return buffer


class PathIntegrator(SamplerIntegrator):
    """Recursive Monte Carlo light transport.

    Emitters end a path with their emission. Lambertian and specular hits
    spawn one continuation ray each and recurse with depth - 1. Rays that
    escape the scene contribute nothing.
    """

    name = "path"

    def incident_light(self, ray: Ray, depth: int, rng: np.random.Generator) -> SampledSpectrum:
        if depth <= 0:
            return black()
        hit = self.scene.intersect_ray(ray)
        if hit is None:
            return black()
        if hit.inside:
            hit = hit.flipped()

        material = hit.material
        if material is None:
            return black()
        if material.type == MaterialType.EMITTER:
            return material.emitted_color if material.emitted_color is not None else black()
        if material.type == MaterialType.LAMBERTIAN:
            return shade_lambertian(hit, depth, rng, self.incident_light)
        if material.type == MaterialType.SPECULAR:
            return shade_specular(hit, depth, rng, self.incident_light, fresnel=self.settings.fresnel)
        return black()


class AlbedoIntegrator(SamplerIntegrator):
    """Shows the base color of the first surface hit.

    Reflectances are shown lit by a unit white illuminant; an emitter whose
    base color is its emission is shown as is.
    """

    name = "albedo"

    def __init__(
        self,
        scene: Scene,
        camera: Camera,
        settings: RenderSettings | None = None,
        tables: SpectralTables | None = None,
    ) -> None:
        super().__init__(scene, camera, settings, tables)
        self.white = SampledSpectrum.from_rgb((1.0, 1.0, 1.0), SpectrumType.ILLUMINANT, self.tables)

    def incident_light(self, ray: Ray, depth: int, rng: np.random.Generator) -> SampledSpectrum:
        hit = self.scene.intersect_ray(ray)
        if hit is None or hit.material is None:
            return black()
        color = hit.material.base_color
        if color is None:
            return black()
        if color is hit.material.emitted_color:
            return color
        return self.white * color


class NormalIntegrator(SamplerIntegrator):
    """Shows the outward geometric normal, remapped from [-1, 1] to [0, 1]."""

    name = "normal"

    def incident_light(self, ray: Ray, depth: int, rng: np.random.Generator) -> SampledSpectrum:
        hit = self.scene.intersect_ray(ray)
        if hit is None:
            return black()
        return SampledSpectrum.from_rgb(hit.normal * 0.5 + 0.5, SpectrumType.ILLUMINANT, self.tables)


INTEGRATORS: dict[str, type[SamplerIntegrator]] = {
    PathIntegrator.name: PathIntegrator,
    AlbedoIntegrator.name: AlbedoIntegrator,
    NormalIntegrator.name: NormalIntegrator,
}
