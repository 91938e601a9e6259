"""Index-synchronized comparison of two token sequences."""
from __future__ import annotations

import difflib
import math
from typing import List, Optional, Sequence

from comparison.models import Classification, PositionalDiffResult, Token
from config.settings import settings
from utils.logging import logger

_MISSING = object()


def _as_strings(tokens: Sequence[str | Token]) -> List[str]:
    return [t.text if isinstance(t, Token) else t for t in tokens]


def _similarity(total: int, differences: int, precision: int) -> Optional[float]:
    if total == 0:
        return None
    return round((total - differences) / total * 100, precision)


def _split_differences(differences: int, fraction: float) -> tuple[int, int]:
    minor_changes = math.floor(differences * fraction)
    return minor_changes, differences - minor_changes


def compare_positional(
    tokens_a: Sequence[str | Token],
    tokens_b: Sequence[str | Token],
    minor_fraction: float | None = None,
    precision: int | None = None,
) -> PositionalDiffResult:
    """
    Compare two token sequences index by index.

    Position ``i`` matches only when both sequences hold an equal token
    there; an index past the end of either sequence never matches. A single
    inserted word therefore shifts every later index and shows up as a
    difference through the end of the shorter document.

    Args:
        tokens_a: Tokens of the first document
        tokens_b: Tokens of the second document
        minor_fraction: Share of differences reported as minor changes. If None, uses settings.
        precision: Decimal places for the similarity percentage. If None, uses settings.

    Returns:
        PositionalDiffResult; ``similarity`` is None when both sequences are empty
    """
    if minor_fraction is None:
        minor_fraction = settings.minor_change_fraction
    if precision is None:
        precision = settings.similarity_precision

    words_a = _as_strings(tokens_a)
    words_b = _as_strings(tokens_b)
    total = max(len(words_a), len(words_b))

    classifications: List[Classification] = []
    matched = set()
    for idx in range(total):
        word_a = words_a[idx] if idx < len(words_a) else _MISSING
        word_b = words_b[idx] if idx < len(words_b) else _MISSING
        if word_a is not _MISSING and word_a == word_b:
            matched.add(idx)
            classifications.append(Classification.IDENTICAL)
        elif word_a is _MISSING:
            classifications.append(Classification.ADDED)
        elif word_b is _MISSING:
            classifications.append(Classification.REMOVED)
        else:
            classifications.append(Classification.PARAPHRASED)

    differences = total - len(matched)
    minor_changes, paraphrased = _split_differences(differences, minor_fraction)
    similarity = _similarity(total, differences, precision)

    if total == 0:
        logger.warning("Positional diff: both documents have no tokens")
    else:
        logger.debug(
            "Positional diff: %d/%d positions differ (similarity %.2f%%)",
            differences,
            total,
            similarity,
        )

    return PositionalDiffResult(
        differences=differences,
        matches=len(matched),
        total_words=total,
        similarity=similarity,
        minor_changes=minor_changes,
        paraphrased=paraphrased,
        classifications=tuple(classifications),
        matched_indices=frozenset(matched),
    )


def side_flags(result: PositionalDiffResult, length: int) -> List[bool]:
    """
    Per-token match flags for one document's own token stream.

    Args:
        result: Positional diff result
        length: Number of tokens in the document being rendered

    Returns:
        ``flags[i]`` is True when token ``i`` matched the other document at index ``i``
    """
    return [idx in result.matched_indices for idx in range(length)]


def compare_aligned(
    tokens_a: Sequence[str | Token],
    tokens_b: Sequence[str | Token],
    minor_fraction: float | None = None,
    precision: int | None = None,
) -> PositionalDiffResult:
    """
    Alignment-based variant of :func:`compare_positional`.

    Uses ``difflib.SequenceMatcher`` so an inserted or deleted word only
    affects its own position. ``total_words`` stays ``max(len(a), len(b))``
    and differences are the unmatched positions of the longer side, so the
    counters use the same arithmetic as the positional mode.
    ``classifications`` follow document A's indices, then trailing additions.
    """
    if minor_fraction is None:
        minor_fraction = settings.minor_change_fraction
    if precision is None:
        precision = settings.similarity_precision

    words_a = _as_strings(tokens_a)
    words_b = _as_strings(tokens_b)
    total = max(len(words_a), len(words_b))

    matcher = difflib.SequenceMatcher(None, words_a, words_b, autojunk=False)
    classifications: List[Classification] = []
    matched = set()
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            for offset in range(i2 - i1):
                matched.add(i1 + offset)
                classifications.append(Classification.IDENTICAL)
        elif tag == "replace":
            span_a, span_b = i2 - i1, j2 - j1
            classifications.extend([Classification.PARAPHRASED] * min(span_a, span_b))
            if span_a > span_b:
                classifications.extend([Classification.REMOVED] * (span_a - span_b))
            else:
                classifications.extend([Classification.ADDED] * (span_b - span_a))
        elif tag == "delete":
            classifications.extend([Classification.REMOVED] * (i2 - i1))
        elif tag == "insert":
            classifications.extend([Classification.ADDED] * (j2 - j1))

    differences = total - len(matched)
    minor_changes, paraphrased = _split_differences(differences, minor_fraction)

    return PositionalDiffResult(
        differences=differences,
        matches=len(matched),
        total_words=total,
        similarity=_similarity(total, differences, precision),
        minor_changes=minor_changes,
        paraphrased=paraphrased,
        classifications=tuple(classifications),
        matched_indices=frozenset(matched),
    )
