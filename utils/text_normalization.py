"""Tokenization and normalization utilities for text comparison."""
from __future__ import annotations

import re
from typing import Iterable, List

from comparison.models import Token, TokenSet

_WHITESPACE_RE = re.compile(r"\s+")


def split_words(text: str) -> List[str]:
    """
    Split raw extracted text into lower-cased words on runs of whitespace.

    Leading and trailing whitespace never produces empty words. Lower-casing
    uses ``str.lower`` so the result does not depend on the process locale.

    Examples:
        >>> split_words("The  cat\\nSAT")
        ['the', 'cat', 'sat']
        >>> split_words("   ")
        []
    """
    if not text:
        return []
    return [piece.lower() for piece in _WHITESPACE_RE.split(text) if piece]


def tokenize(text: str) -> List[Token]:
    """Split text into ordered tokens carrying their ordinal position."""
    return [Token(text=word, position=idx) for idx, word in enumerate(split_words(text))]


def normalize_token(text: str) -> str:
    """Normalize a single glyph run or word for set membership tests."""
    if not text:
        return ""
    return text.strip().lower()


def build_token_set(words: Iterable[str | Token], min_length: int = 0) -> TokenSet:
    """
    Build the set of unique tokens, discarding those of ``min_length`` characters or fewer.

    Args:
        words: Token strings or ``Token`` objects
        min_length: Tokens with ``len(token) <= min_length`` are dropped

    Returns:
        Frozen set of normalized token strings
    """
    unique = set()
    for word in words:
        text = word.text if isinstance(word, Token) else normalize_token(word)
        if len(text) > min_length:
            unique.add(text)
    return frozenset(unique)
