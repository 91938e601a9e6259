"""Shared data models for extraction and comparison."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Literal, Optional, Tuple

import numpy as np

TokenSet = FrozenSet[str]


@dataclass(frozen=True)
class Token:
    text: str
    position: int


class Classification(str, Enum):
    IDENTICAL = "identical"
    MINOR_CHANGE = "minor_change"
    PARAPHRASED = "paraphrased"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class GlyphRun:
    """A positioned span of rendered text.

    ``x``/``y`` are the run's anchor in page space with the origin at the
    bottom-left corner (PDF convention). ``scale`` is the render scale factor
    of the page the run was decoded from.
    """

    text: str
    x: float
    y: float
    width: Optional[float] = None
    height: Optional[float] = None
    scale: float = 1.0


@dataclass
class GlyphPage:
    page_num: int
    width: float
    height: float
    glyph_runs: List[GlyphRun] = field(default_factory=list)


@dataclass(frozen=True)
class FillInstruction:
    """A translucent rectangle to paint on a rasterized page, in pixel coordinates."""

    x: float
    y: float
    width: float
    height: float
    color: Tuple[int, int, int]
    alpha: float
    token: str
    classification: Classification

    def as_rect(self) -> Tuple[int, int, int, int]:
        """Integer (x0, y0, x1, y1) rectangle."""
        return (
            int(round(self.x)),
            int(round(self.y)),
            int(round(self.x + self.width)),
            int(round(self.y + self.height)),
        )


@dataclass(frozen=True)
class PositionalDiffResult:
    differences: int
    matches: int
    total_words: int
    similarity: Optional[float]
    minor_changes: int
    paraphrased: int
    classifications: Tuple[Classification, ...] = ()
    matched_indices: FrozenSet[int] = frozenset()

    @property
    def no_content(self) -> bool:
        return self.total_words == 0

    @property
    def identical_words(self) -> int:
        return len(self.matched_indices)


@dataclass(frozen=True)
class LexicalDiffResult:
    removed: TokenSet
    added: TokenSet

    @property
    def is_empty(self) -> bool:
        return not self.removed and not self.added


@dataclass(frozen=True, eq=False)
class ImageDiffResult:
    similarity: Optional[float]
    differing_pixels: int
    total_pixels: int
    width: int
    height: int
    mask: Optional[np.ndarray] = None
    incomparable: bool = False
    message: Optional[str] = None

    @property
    def no_content(self) -> bool:
        return not self.incomparable and self.total_pixels == 0


ReportKind = Literal["text", "image"]


@dataclass(frozen=True)
class DifferenceReport:
    """Aggregate result of one comparison invocation.

    ``payload`` holds the kind-specific results: for text reports the
    positional diff (and lexical diff when a lexical highlight mode ran),
    for image reports the image diff with its mask.
    """

    kind: ReportKind
    similarity: Optional[float]
    differences: int
    total_units: int
    no_content: bool = False
    mode: Optional[str] = None
    payload: Dict[str, object] = field(default_factory=dict)
    highlights: Dict[str, object] = field(default_factory=dict)
    metadata: Dict[str, object] = field(default_factory=dict)

    @property
    def positional(self) -> Optional[PositionalDiffResult]:
        return self.payload.get("positional")  # type: ignore[return-value]

    @property
    def lexical(self) -> Optional[LexicalDiffResult]:
        return self.payload.get("lexical")  # type: ignore[return-value]

    @property
    def image(self) -> Optional[ImageDiffResult]:
        return self.payload.get("image")  # type: ignore[return-value]
