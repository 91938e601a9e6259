"""Unit tests for comparison/positional_diff.py.

Tests cover:
- Position-synchronized counting and similarity arithmetic
- Minor change / paraphrased split
- Per-index classifications and per-side match flags
- Empty input sentinel
- Alignment-based variant
"""
from __future__ import annotations

import pytest

from comparison.models import Classification, Token
from comparison.positional_diff import compare_aligned, compare_positional, side_flags


# =============================================================================
# compare_positional
# =============================================================================

class TestComparePositional:
    def test_single_substitution_example(self):
        result = compare_positional(["the", "cat", "sat"], ["the", "dog", "sat"])

        assert result.differences == 1
        assert result.matches == 2
        assert result.total_words == 3
        assert result.similarity == 66.67
        assert result.minor_changes == 0
        assert result.paraphrased == 1
        assert result.matched_indices == frozenset({0, 2})
        assert result.identical_words == 2

    def test_identical_sequences(self):
        words = ["alpha", "beta", "gamma", "delta"]
        result = compare_positional(words, list(words))

        assert result.differences == 0
        assert result.similarity == 100.0
        assert result.minor_changes == 0
        assert result.paraphrased == 0
        assert all(c == Classification.IDENTICAL for c in result.classifications)

    @pytest.mark.parametrize("n", [1, 4, 9])
    def test_no_position_matching(self, n):
        a = [f"a{i}" for i in range(n)]
        b = [f"b{i}" for i in range(n)]
        result = compare_positional(a, b)

        assert result.differences == n
        assert result.similarity == 0.0

    @pytest.mark.parametrize(
        "a,b",
        [
            (["x"] * 10, ["y"] * 10),
            (["x"] * 7, ["x"] * 3),
            ([], ["q", "r"]),
            (["a", "b", "c"], ["a", "c", "b", "d", "e"]),
        ],
    )
    def test_minor_plus_paraphrased_equals_differences(self, a, b):
        result = compare_positional(a, b)
        assert result.minor_changes + result.paraphrased == result.differences

    def test_minor_changes_is_floor_of_thirty_percent(self):
        result = compare_positional(["x"] * 10, ["y"] * 10)
        assert result.minor_changes == 3
        assert result.paraphrased == 7

        result = compare_positional(["x"] * 7, ["y"] * 7)
        assert result.minor_changes == 2
        assert result.paraphrased == 5

    def test_indices_past_shorter_sequence_differ(self):
        result = compare_positional(["a", "b"], ["a", "b", "c"])

        assert result.total_words == 3
        assert result.differences == 1
        assert result.similarity == 66.67
        assert result.classifications == (
            Classification.IDENTICAL,
            Classification.IDENTICAL,
            Classification.ADDED,
        )

    def test_every_index_gets_exactly_one_classification(self):
        result = compare_positional(["a", "x", "c", "d"], ["a", "b"])
        assert len(result.classifications) == 4
        assert result.classifications == (
            Classification.IDENTICAL,
            Classification.PARAPHRASED,
            Classification.REMOVED,
            Classification.REMOVED,
        )

    def test_inserted_word_shifts_every_later_index(self):
        result = compare_positional(["x", "a", "b", "c"], ["a", "b", "c"])
        assert result.differences == 4
        assert result.similarity == 0.0

    def test_empty_documents_report_no_content(self):
        result = compare_positional([], [])

        assert result.no_content
        assert result.similarity is None
        assert result.differences == 0
        assert result.classifications == ()

    def test_accepts_token_objects(self):
        a = [Token("the", 0), Token("cat", 1)]
        b = [Token("the", 0), Token("dog", 1)]
        assert compare_positional(a, b).differences == 1

    def test_explicit_precision_and_fraction(self):
        result = compare_positional(["a", "b", "c"], ["a", "x", "y"], minor_fraction=0.5, precision=1)
        assert result.similarity == 33.3
        assert result.minor_changes == 1


# =============================================================================
# side_flags
# =============================================================================

def test_side_flags_follow_each_document_length():
    result = compare_positional(["the", "cat", "sat"], ["the", "dog", "sat", "down"])

    assert side_flags(result, 3) == [True, False, True]
    assert side_flags(result, 4) == [True, False, True, False]


# =============================================================================
# compare_aligned
# =============================================================================

class TestCompareAligned:
    def test_insertion_only_costs_one_position(self):
        result = compare_aligned(["x", "a", "b", "c"], ["a", "b", "c"])

        assert result.total_words == 4
        assert result.differences == 1
        assert result.similarity == 75.0
        assert result.classifications == (
            Classification.REMOVED,
            Classification.IDENTICAL,
            Classification.IDENTICAL,
            Classification.IDENTICAL,
        )

    def test_matches_positional_when_no_shift(self):
        a = ["the", "cat", "sat"]
        b = ["the", "dog", "sat"]
        aligned = compare_aligned(a, b)
        positional = compare_positional(a, b)

        assert aligned.differences == positional.differences
        assert aligned.similarity == positional.similarity
        assert aligned.minor_changes + aligned.paraphrased == aligned.differences

    def test_empty_documents_report_no_content(self):
        result = compare_aligned([], [])
        assert result.no_content
        assert result.similarity is None
