#!/usr/bin/env python3
"""Render a TOML scene (or the built-in Cornell box) to a PNG file.

Usage:
    python -m examples.render_scene [scene.toml] [options]

Options:
    --integrator NAME   path, albedo or normal (default: path)
    --samples SAMPLES   Samples per pixel (overrides the scene's [Render])
    --depth DEPTH       Maximum path depth (overrides the scene's [Render])
    --threads THREADS   Worker threads (default: one per CPU)
    --seed SEED         Seed for reproducible renders
    --fresnel           Apply Schlick's approximation to mirrors
    --width / --height  Resolution of the built-in Cornell box
    --output OUTPUT     Output file path (default: render.png)
    --quiet             Suppress the progress bar
    --verbose           Log at DEBUG level

Example:
    python -m examples.render_scene examples/scenes/spheres.toml --samples 32
    python -m examples.render_scene --width 128 --height 128 --output cornell.png
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from tqdm import tqdm

from src.prism.core.config import PrismError, RenderSettings
from src.prism.core.integrator import INTEGRATORS
from src.prism.core.spectrum import init_spectral_tables
from src.prism.preview.export import save_png
from src.prism.scene.cornell_box import create_cornell_box_scene
from src.prism.scene.loader import load_scene_file

logger = logging.getLogger("render_scene")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene description to PNG.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("scene", nargs="?", type=Path, help="TOML scene file (default: Cornell box)")
    parser.add_argument("--integrator", choices=sorted(INTEGRATORS), default="path")
    parser.add_argument("--samples", type=int, help="Samples per pixel")
    parser.add_argument("--depth", type=int, help="Maximum path depth")
    parser.add_argument("--threads", type=int, help="Worker threads (default: one per CPU)")
    parser.add_argument("--seed", type=int, help="Seed for reproducible renders")
    parser.add_argument("--fresnel", action="store_true", help="Schlick Fresnel on mirrors")
    parser.add_argument("--width", type=int, default=256, help="Cornell box width (default: 256)")
    parser.add_argument("--height", type=int, default=256, help="Cornell box height (default: 256)")
    parser.add_argument("--output", type=Path, default=Path("render.png"), help="Output PNG path")
    parser.add_argument("--quiet", action="store_true", help="Suppress the progress bar")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Tables must exist before any material color is decoded
    init_spectral_tables()

    try:
        if args.scene is not None:
            description = load_scene_file(args.scene)
            scene, camera, settings = description.scene, description.camera, description.settings
        else:
            scene, camera = create_cornell_box_scene(args.width, args.height)
            settings = RenderSettings()

        overrides = {
            "samples_per_pixel": args.samples,
            "max_depth": args.depth,
            "num_threads": args.threads,
            "seed": args.seed,
        }
        overrides = {key: value for key, value in overrides.items() if value is not None}
        if args.fresnel:
            overrides["fresnel"] = True
        settings = dataclasses.replace(settings, **overrides)
    except (PrismError, ValueError) as e:
        logger.error("%s", e)
        return 2

    integrator = INTEGRATORS[args.integrator](scene, camera, settings)

    with tqdm(total=None, unit="tile", disable=args.quiet) as bar:

        def on_progress(completed: int, total: int) -> None:
            bar.total = total
            bar.update(1)

        try:
            image = integrator.render(progress=on_progress)
        except PrismError as e:
            logger.error("Render failed: %s", e)
            return 1

    save_png(image, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
