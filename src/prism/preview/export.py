"""Image export utilities for rendered pixel buffers.

A render produces a PixelBuffer: an 8-bit array of shape (height, width, 3)
that is already clamped, gamma corrected and quantized. This module only
encodes it to a file.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from src.prism.preview.export import save_png
    >>> buffer = integrator.render()
    >>> save_png(buffer, "output.png")
"""

from __future__ import annotations

import logging
import os

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def save_png(buffer: npt.NDArray[np.uint8], filepath: str | os.PathLike[str]) -> None:
    """Save a pixel buffer as a PNG file.

    Args:
        buffer: uint8 array of shape (height, width, 3).
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the buffer has the wrong shape or dtype.
    """
    image = np.asarray(buffer)
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(
            f"Expected a uint8 buffer of shape (height, width, 3), got {image.dtype} {image.shape}"
        )
    PILImage.fromarray(np.ascontiguousarray(image)).save(filepath, format="PNG")
    logger.info("Saved %dx%d image to %s", image.shape[1], image.shape[0], filepath)


def load_png(filepath: str | os.PathLike[str]) -> npt.NDArray[np.uint8]:
    """Load a PNG file as a uint8 array of shape (height, width, 3)."""
    with PILImage.open(filepath) as image:
        return np.array(image.convert("RGB"), dtype=np.uint8)


def compute_rmse(image1: npt.NDArray[np.uint8], image2: npt.NDArray[np.uint8]) -> float:
    """Root mean square error between two buffers, in 8-bit units.

    Raises:
        ValueError: If the buffers differ in shape.
    """
    if image1.shape != image2.shape:
        raise ValueError(f"Shape mismatch: {image1.shape} vs {image2.shape}")
    diff = image1.astype(np.float64) - image2.astype(np.float64)
    return float(np.sqrt(np.mean(diff * diff)))
