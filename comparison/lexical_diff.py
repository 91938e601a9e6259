"""Set-based vocabulary comparison, independent of token position."""
from __future__ import annotations

from typing import Iterable

from comparison.models import LexicalDiffResult, Token, TokenSet
from utils.logging import logger
from utils.text_normalization import build_token_set, split_words


def compare_lexical(set_a: Iterable[str], set_b: Iterable[str]) -> LexicalDiffResult:
    """
    Compute removed and added vocabulary between two documents.

    ``removed`` holds tokens present in A and absent from B, ``added`` the
    reverse. Multiplicity is ignored: a token appearing five times in A and
    once in B is not removed.
    """
    vocab_a: TokenSet = frozenset(set_a)
    vocab_b: TokenSet = frozenset(set_b)
    result = LexicalDiffResult(removed=vocab_a - vocab_b, added=vocab_b - vocab_a)
    logger.debug(
        "Lexical diff: %d removed, %d added (vocabularies %d vs %d)",
        len(result.removed),
        len(result.added),
        len(vocab_a),
        len(vocab_b),
    )
    return result


def compare_lexical_tokens(
    tokens_a: Iterable[str | Token],
    tokens_b: Iterable[str | Token],
    min_length: int,
) -> LexicalDiffResult:
    """Build length-filtered token sets from two token streams and diff them."""
    return compare_lexical(
        build_token_set(tokens_a, min_length=min_length),
        build_token_set(tokens_b, min_length=min_length),
    )


def compare_lexical_texts(text_a: str, text_b: str, min_length: int) -> LexicalDiffResult:
    """Tokenize two raw texts and diff their filtered vocabularies."""
    return compare_lexical_tokens(split_words(text_a), split_words(text_b), min_length)
