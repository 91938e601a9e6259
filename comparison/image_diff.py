"""Pixel-level image comparison and difference mask generation."""
from __future__ import annotations

from enum import Enum
from typing import Tuple

import numpy as np

from comparison.errors import IncomparableDimensions
from comparison.models import ImageDiffResult
from config.settings import settings
from utils.logging import logger

DIFF_COLOR = np.array([255, 0, 0, 255], dtype=np.uint8)
DIMENSION_MISMATCH_MESSAGE = "Images have different dimensions"


class ThresholdPolicy(str, Enum):
    ANY_CHANNEL = "any_channel"
    SUM_OF_CHANNELS = "sum_of_channels"


class DimensionPolicy(str, Enum):
    CLIP = "clip"
    STRICT = "strict"


def as_pixel_buffer(image: np.ndarray) -> np.ndarray:
    """
    Coerce an image array to an RGBA ``uint8`` pixel buffer of shape (height, width, 4).

    Grayscale inputs are replicated across RGB; RGB inputs gain an opaque
    alpha channel.
    """
    array = np.asarray(image)
    if array.dtype != np.uint8:
        array = np.clip(array, 0, 255).astype(np.uint8)
    if array.ndim == 2:
        array = np.stack([array, array, array], axis=-1)
    if array.ndim != 3 or array.shape[2] not in (3, 4):
        raise ValueError(f"Unsupported pixel buffer shape {array.shape}")
    if array.shape[2] == 3:
        alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
        array = np.concatenate([array, alpha], axis=-1)
    return array


def reconcile(buffer_a: np.ndarray, buffer_b: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Clip both buffers to their overlapping top-left region of min(height) x min(width)."""
    height = min(buffer_a.shape[0], buffer_b.shape[0])
    width = min(buffer_a.shape[1], buffer_b.shape[1])
    return buffer_a[:height, :width], buffer_b[:height, :width]


def differing_pixels(
    buffer_a: np.ndarray,
    buffer_b: np.ndarray,
    threshold: int,
    policy: ThresholdPolicy,
) -> np.ndarray:
    """
    Boolean (height, width) array marking pixels whose RGB delta exceeds ``threshold``.

    Alpha is ignored. Buffers must already share a shape; call
    :func:`reconcile` first.
    """
    if buffer_a.shape[:2] != buffer_b.shape[:2]:
        raise IncomparableDimensions(
            f"Cannot compare {buffer_a.shape[1]}x{buffer_a.shape[0]} buffer "
            f"with {buffer_b.shape[1]}x{buffer_b.shape[0]} buffer without reconciling"
        )
    delta = np.abs(buffer_a[..., :3].astype(np.int16) - buffer_b[..., :3].astype(np.int16))
    if policy == ThresholdPolicy.SUM_OF_CHANNELS:
        return delta.sum(axis=-1) > threshold
    return delta.max(axis=-1) > threshold


def diff_mask(buffer_a: np.ndarray, differing: np.ndarray) -> np.ndarray:
    """Copy of ``buffer_a`` made fully opaque with differing pixels painted solid red."""
    mask = buffer_a.copy()
    mask[..., 3] = 255
    mask[differing] = DIFF_COLOR
    return mask


def compare_images(
    image_a: np.ndarray,
    image_b: np.ndarray,
    policy: ThresholdPolicy | str | None = None,
    threshold: int | None = None,
    dimension_policy: DimensionPolicy | str | None = None,
    precision: int | None = None,
) -> ImageDiffResult:
    """
    Compare two images channel by channel.

    Args:
        image_a: First image (RGBA, RGB or grayscale array)
        image_b: Second image
        policy: Threshold policy. If None, uses settings.
        threshold: Channel delta threshold. If None, uses settings.
        dimension_policy: 'clip' compares the overlapping region, 'strict'
            reports differently sized images as incomparable. If None, uses settings.
        precision: Decimal places for similarity. If None, uses settings.

    Returns:
        ImageDiffResult with the difference mask. ``incomparable`` is set
        (similarity 0.0 and a message) when strict mode rejects the sizes;
        ``similarity`` is None when the compared region has no pixels.
    """
    policy = ThresholdPolicy(policy or settings.image_threshold_policy)
    dimension_policy = DimensionPolicy(dimension_policy or settings.image_dimension_policy)
    if threshold is None:
        threshold = settings.image_pixel_threshold
    if precision is None:
        precision = settings.similarity_precision

    buffer_a = as_pixel_buffer(image_a)
    buffer_b = as_pixel_buffer(image_b)

    if buffer_a.shape[:2] != buffer_b.shape[:2]:
        if dimension_policy == DimensionPolicy.STRICT:
            logger.warning(
                "Image sizes differ (%dx%d vs %dx%d), strict policy: incomparable",
                buffer_a.shape[1],
                buffer_a.shape[0],
                buffer_b.shape[1],
                buffer_b.shape[0],
            )
            return ImageDiffResult(
                similarity=0.0,
                differing_pixels=0,
                total_pixels=0,
                width=0,
                height=0,
                incomparable=True,
                message=DIMENSION_MISMATCH_MESSAGE,
            )
        logger.info(
            "Clipping images to common region %dx%d",
            min(buffer_a.shape[1], buffer_b.shape[1]),
            min(buffer_a.shape[0], buffer_b.shape[0]),
        )
        buffer_a, buffer_b = reconcile(buffer_a, buffer_b)

    height, width = buffer_a.shape[:2]
    total = height * width
    if total == 0:
        logger.warning("Image comparison region is empty (%dx%d)", width, height)
        return ImageDiffResult(
            similarity=None,
            differing_pixels=0,
            total_pixels=0,
            width=width,
            height=height,
            mask=diff_mask(buffer_a, np.zeros((height, width), dtype=bool)),
            message="No pixels to compare",
        )

    differing = differing_pixels(buffer_a, buffer_b, threshold, policy)
    count = int(differing.sum())
    similarity = round((total - count) / total * 100, precision)
    logger.info(
        "Image diff (%s, threshold=%d): %d/%d pixels differ, similarity %.2f%%",
        policy.value,
        threshold,
        count,
        total,
        similarity,
    )
    return ImageDiffResult(
        similarity=similarity,
        differing_pixels=count,
        total_pixels=total,
        width=width,
        height=height,
        mask=diff_mask(buffer_a, differing),
    )
