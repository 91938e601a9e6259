"""Coordinate transforms between page space and rasterized pixel space."""
from __future__ import annotations

from typing import Optional, Tuple


def page_to_raster(
    x: float,
    y: float,
    page_height: float,
    scale: float,
) -> Tuple[float, float]:
    """
    Convert a bottom-left-origin page anchor to top-left-origin pixel coordinates.

    Args:
        x: Horizontal anchor in page units
        y: Vertical anchor in page units, measured up from the page bottom
        page_height: Height of the page in page units
        scale: Render scale factor (pixels per page unit)

    Returns:
        (pixel_x, pixel_y) with pixel_y measured down from the raster top
    """
    return x * scale, (page_height - y) * scale


def glyph_extent(
    width: Optional[float],
    height: Optional[float],
    fallback_width: float,
    fallback_height: float,
) -> Tuple[float, float]:
    """Return usable (width, height) in page units, substituting fallbacks for missing or zero metrics."""
    usable_width = width if width else fallback_width
    usable_height = height if height else fallback_height
    return float(usable_width), float(usable_height)


def highlight_rect(
    x: float,
    y: float,
    width: Optional[float],
    height: Optional[float],
    page_height: float,
    scale: float,
    baseline_offset: float,
    fallback_width: float,
    fallback_height: float,
) -> Tuple[float, float, float, float]:
    """
    Compute the pixel-space highlight rectangle for a glyph run.

    The glyph anchor sits on the text baseline, so the rectangle's top edge is
    raised by ``baseline_offset * height * scale`` to cover the glyphs.

    Returns:
        (left, top, width, height) in pixels
    """
    glyph_width, glyph_height = glyph_extent(width, height, fallback_width, fallback_height)
    pixel_x, pixel_y = page_to_raster(x, y, page_height, scale)
    top = pixel_y - baseline_offset * glyph_height * scale
    return pixel_x, top, glyph_width * scale, glyph_height * scale


def clamp_rect(
    rect: Tuple[int, int, int, int],
    width: int,
    height: int,
) -> Optional[Tuple[int, int, int, int]]:
    """Clamp an (x0, y0, x1, y1) rectangle to the raster; None when nothing remains visible."""
    x0, y0, x1, y1 = rect
    x0 = max(0, min(x0, width))
    x1 = max(0, min(x1, width))
    y0 = max(0, min(y0, height))
    y1 = max(0, min(y1, height))
    if x1 <= x0 or y1 <= y0:
        return None
    return x0, y0, x1, y1
