"""Project lexical differences onto glyph runs and paint them on rasterized pages."""
from __future__ import annotations

from typing import Iterable, List, Tuple

import cv2
import numpy as np

from comparison.image_diff import as_pixel_buffer
from comparison.models import Classification, FillInstruction, GlyphPage, LexicalDiffResult
from config.settings import settings
from utils.coordinates import clamp_rect, highlight_rect
from utils.logging import logger
from utils.text_normalization import normalize_token


def project_highlights(
    page: GlyphPage,
    tokens: Iterable[str],
    classification: Classification,
    color: Tuple[int, int, int],
    alpha: float | None = None,
    scale: float | None = None,
) -> List[FillInstruction]:
    """
    Emit one fill instruction per glyph run whose normalized text is in ``tokens``.

    Runs whose normalized text is a single character or empty are skipped.
    Instructions are never merged and keep glyph order, so overlapping
    highlights overpaint in emission order.

    Args:
        page: Decoded page with glyph runs in bottom-left-origin page space
        tokens: Token set to highlight
        classification: ADDED or REMOVED, carried on every instruction
        color: RGB tint
        alpha: Fill opacity. If None, uses settings.
        scale: Render scale override. If None, each run's own scale is used.

    Returns:
        Fill instructions in raster pixel coordinates
    """
    if alpha is None:
        alpha = settings.highlight_alpha
    token_set = frozenset(tokens)
    instructions: List[FillInstruction] = []
    if not token_set:
        return instructions

    for run in page.glyph_runs:
        text = normalize_token(run.text)
        if len(text) <= 1 or text not in token_set:
            continue
        run_scale = run.scale if scale is None else scale
        left, top, width, height = highlight_rect(
            run.x,
            run.y,
            run.width,
            run.height,
            page_height=page.height,
            scale=run_scale,
            baseline_offset=settings.highlight_baseline_offset,
            fallback_width=settings.highlight_fallback_width,
            fallback_height=settings.highlight_fallback_height,
        )
        instructions.append(
            FillInstruction(
                x=left,
                y=top,
                width=width,
                height=height,
                color=color,
                alpha=alpha,
                token=text,
                classification=classification,
            )
        )

    logger.debug(
        "Projected %d %s highlights on page %d",
        len(instructions),
        classification.value,
        page.page_num,
    )
    return instructions


def project_document_highlights(
    page_a: GlyphPage,
    page_b: GlyphPage,
    lexical: LexicalDiffResult,
    scale_a: float | None = None,
    scale_b: float | None = None,
) -> Tuple[List[FillInstruction], List[FillInstruction]]:
    """Removed tokens are highlighted in red on page A, added tokens in green on page B."""
    removed = project_highlights(
        page_a,
        lexical.removed,
        Classification.REMOVED,
        settings.removed_color,
        scale=scale_a,
    )
    added = project_highlights(
        page_b,
        lexical.added,
        Classification.ADDED,
        settings.added_color,
        scale=scale_b,
    )
    logger.info("Glyph highlights: %d removed on A, %d added on B", len(removed), len(added))
    return removed, added


def paint_fill_instructions(
    image: np.ndarray,
    instructions: Iterable[FillInstruction],
) -> np.ndarray:
    """
    Paint translucent fills on a copy of a rasterized page.

    Rectangles are clamped to the raster; fully off-page instructions are
    skipped. The input image is never modified.
    """
    output = as_pixel_buffer(image).copy()
    img_height, img_width = output.shape[:2]

    for instruction in instructions:
        rect = clamp_rect(instruction.as_rect(), img_width, img_height)
        if rect is None:
            logger.debug("Skipping off-raster highlight for %r", instruction.token)
            continue
        x0, y0, x1, y1 = rect
        overlay = output.copy()
        r, g, b = instruction.color
        cv2.rectangle(overlay, (x0, y0), (x1 - 1, y1 - 1), (r, g, b, 255), thickness=-1)
        output = cv2.addWeighted(overlay, instruction.alpha, output, 1 - instruction.alpha, 0)

    return output
