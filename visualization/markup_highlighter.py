"""Colored-span markup for prose rendering of text differences."""
from __future__ import annotations

import html
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from comparison.models import LexicalDiffResult
from config.settings import settings
from utils.logging import logger

# Matched/unmatched token colors for the side-by-side positional view
MATCHED_STYLE = {"background": "#fef2f2", "color": "#fecaca"}
UNMATCHED_STYLE = {"background": "#fee2e2", "color": "#dc2626"}


def _token_pattern(tokens: Iterable[str]) -> Optional[re.Pattern]:
    """Whole-word, case-insensitive alternation of raw tokens, longest first."""
    unique = sorted({t for t in tokens if t}, key=lambda t: (-len(t), t))
    if not unique:
        return None
    alternation = "|".join(re.escape(t) for t in unique)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)


# Splitting with a capture group puts tags at odd indices
_TAG_PATTERN = re.compile(r"(<[^>]*>)")


def _wrap(text: str, css_color: str) -> str:
    return f'<span style="background-color: {css_color};">{text}</span>'


def _highlight_segment(segment: str, pattern: re.Pattern, css_color: str) -> str:
    """Match tokens on the unescaped text of one segment, then escape it piece by piece."""
    text = html.unescape(segment)
    matches = list(pattern.finditer(text))
    if not matches:
        return segment
    pieces: List[str] = []
    cursor = 0
    for match in matches:
        pieces.append(html.escape(text[cursor:match.start()]))
        pieces.append(_wrap(html.escape(match.group(0)), css_color))
        cursor = match.end()
    pieces.append(html.escape(text[cursor:]))
    return "".join(pieces)


def highlight_markup(content: str, tokens: Iterable[str], css_color: str) -> str:
    """
    Wrap every whole-word occurrence of each token in a colored span.

    Tags pass through untouched. Text between tags is compared in its
    unescaped form, so tokens such as ``don't`` or ``r&d`` match their
    escaped rendering. All tokens are substituted in one pass, so markup
    produced for one token is never matched again by another.

    Args:
        content: Markup or plain text to annotate
        tokens: Raw lower-cased tokens to highlight (matched case-insensitively)
        css_color: CSS background color for the span

    Returns:
        Annotated content
    """
    pattern = _token_pattern(tokens)
    if pattern is None or not content:
        return content
    parts = _TAG_PATTERN.split(content)
    return "".join(
        part if idx % 2 else _highlight_segment(part, pattern, css_color)
        for idx, part in enumerate(parts)
    )


def highlight_markup_documents(
    markup_a: str,
    markup_b: str,
    lexical: LexicalDiffResult,
) -> Tuple[str, str]:
    """Mark removed tokens in document A and added tokens in document B."""
    highlighted_a = highlight_markup(markup_a, lexical.removed, settings.removed_markup_color)
    highlighted_b = highlight_markup(markup_b, lexical.added, settings.added_markup_color)
    logger.info(
        "Markup highlights: %d removed tokens on A, %d added tokens on B",
        len(lexical.removed),
        len(lexical.added),
    )
    return highlighted_a, highlighted_b


def plain_text_to_markup(text: str) -> str:
    """Escape plain text and turn blank-line separated blocks into paragraphs."""
    paragraphs = [p.strip() for p in re.split(r"\n\s*\n", text or "") if p.strip()]
    return "".join(f"<p>{html.escape(p)}</p>" for p in paragraphs)


def render_positional_stream(words: Sequence[str], flags: Sequence[bool]) -> str:
    """
    Render one document's token stream with each token colored by whether it matched.

    Args:
        words: Tokens of the document, in order
        flags: ``flags[i]`` is True when ``words[i]`` matched the other document at index ``i``
    """
    spans: List[str] = []
    for idx, word in enumerate(words):
        style = MATCHED_STYLE if idx < len(flags) and flags[idx] else UNMATCHED_STYLE
        spans.append(
            f'<span style="background-color: {style["background"]}; color: {style["color"]};">'
            f"{html.escape(word)} </span>"
        )
    return "".join(spans)
