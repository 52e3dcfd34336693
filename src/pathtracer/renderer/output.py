# renderer/output.py
import logging
import os
from typing import Union

import numpy as np
from PIL import Image as PILImage

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def _check_rgb8(rgb8: np.ndarray):
    if rgb8.ndim != 3 or rgb8.shape[2] != 3:
        raise ValueError(f"expected an (height, width, 3) image, got shape {rgb8.shape}")


def write_ppm(filepath: PathLike, rgb8: np.ndarray):
    """
    Write an image as plain-text PPM (P3): the header, then one "r g b" line
    per pixel, rows from top to bottom.
    """
    _check_rgb8(rgb8)
    height, width, _ = rgb8.shape
    with open(filepath, "w") as f:
        f.write(f"P3\n{width} {height}\n255\n")
        for row in rgb8:
            f.writelines(f"{r} {g} {b}\n" for r, g, b in row.tolist())


def save_image(filepath: PathLike, rgb8: np.ndarray):
    """
    Save an image, picking the format from the file extension. PPM is written
    directly; anything else goes through Pillow.
    """
    _check_rgb8(rgb8)
    ext = os.path.splitext(os.fspath(filepath))[1].lower()
    if ext == ".ppm":
        write_ppm(filepath, rgb8)
    else:
        # An (h, w, 3) uint8 array is read as RGB
        pil_image = PILImage.fromarray(np.ascontiguousarray(rgb8, dtype=np.uint8))
        pil_image.save(filepath)
    logger.info("Wrote %dx%d image to %s", rgb8.shape[1], rgb8.shape[0], filepath)
