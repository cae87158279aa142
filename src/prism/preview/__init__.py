"""Preview module for rendered output.

Components:
    export: PNG encoding and decoding of pixel buffers via Pillow

Example:
    >>> from src.prism.preview import save_png
    >>> save_png(buffer, "output.png")
"""

from src.prism.preview.export import compute_rmse, load_png, save_png

__all__ = [
    "save_png",
    "load_png",
    "compute_rmse",
]
