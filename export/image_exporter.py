"""Write difference masks and highlighted page rasters as PNG files."""
from __future__ import annotations

from pathlib import Path
from typing import List

import numpy as np
from PIL import Image

from comparison.models import DifferenceReport
from utils.logging import logger

_IMAGE_KEYS = ("mask", "raster_a", "raster_b")


def save_pixel_buffer(buffer: np.ndarray, output_path: str | Path) -> Path:
    """Save an RGBA (or RGB) uint8 array as PNG."""
    output = Path(output_path)
    Image.fromarray(np.ascontiguousarray(buffer, dtype=np.uint8)).save(output, format="PNG")
    return output


def export_images(report: DifferenceReport, output_dir: str | Path, stem: str = "comparison") -> List[Path]:
    """
    Save every pixel payload of a report as ``<stem>_<key>.png``.

    Returns:
        Paths written, in mask/raster_a/raster_b order; empty when the
        report carries no images
    """
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for key in _IMAGE_KEYS:
        buffer = report.highlights.get(key)
        if isinstance(buffer, np.ndarray) and buffer.size:
            written.append(save_pixel_buffer(buffer, directory / f"{stem}_{key}.png"))
    logger.info("Exported %d images to %s", len(written), directory)
    return written
