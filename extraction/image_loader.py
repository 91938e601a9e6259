"""Raster image loading using Pillow."""
from __future__ import annotations

import io

import numpy as np
from PIL import Image, UnidentifiedImageError

from comparison.errors import DecodeFailure
from utils.logging import logger


def load_image_as_pixel_buffer(data: bytes) -> np.ndarray:
    """Decode image bytes into an RGBA ``uint8`` array of shape (height, width, 4)."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            rgba = image.convert("RGBA")
            buffer = np.array(rgba, dtype=np.uint8)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise DecodeFailure(f"Unreadable image: {exc}") from exc
    logger.debug("Loaded image %dx%d", buffer.shape[1], buffer.shape[0])
    return buffer
