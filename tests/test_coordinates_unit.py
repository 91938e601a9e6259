from __future__ import annotations

import pytest

from utils.coordinates import clamp_rect, glyph_extent, highlight_rect, page_to_raster


def test_page_to_raster_flips_vertical_axis():
    assert page_to_raster(10, 700, page_height=792, scale=2) == (20, 184)
    assert page_to_raster(0, 0, page_height=100, scale=1.5) == (0, 150)


def test_highlight_rect_raises_top_edge_by_baseline_offset():
    left, top, width, height = highlight_rect(
        x=10,
        y=700,
        width=30,
        height=10,
        page_height=792,
        scale=2,
        baseline_offset=0.8,
        fallback_width=50,
        fallback_height=20,
    )
    assert left == 20
    assert top == pytest.approx(168)
    assert width == 60
    assert height == 20


def test_highlight_rect_uses_fallback_metrics():
    left, top, width, height = highlight_rect(
        x=10,
        y=700,
        width=None,
        height=0,
        page_height=792,
        scale=2,
        baseline_offset=0.8,
        fallback_width=50,
        fallback_height=20,
    )
    assert width == 100
    assert height == 40
    assert top == pytest.approx(152)


def test_glyph_extent_keeps_real_metrics():
    assert glyph_extent(12.5, 4.0, 50, 20) == (12.5, 4.0)


def test_clamp_rect():
    assert clamp_rect((-5, -5, 10, 10), 8, 8) == (0, 0, 8, 8)
    assert clamp_rect((20, 20, 30, 30), 8, 8) is None
    assert clamp_rect((2, 3, 2, 6), 8, 8) is None
