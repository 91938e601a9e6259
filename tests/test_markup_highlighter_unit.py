from __future__ import annotations

from comparison.lexical_diff import compare_lexical
from config.settings import settings
from visualization.markup_highlighter import (
    MATCHED_STYLE,
    UNMATCHED_STYLE,
    highlight_markup,
    highlight_markup_documents,
    plain_text_to_markup,
    render_positional_stream,
)

RED = "#f00"


def _span(text: str, color: str = RED) -> str:
    return f'<span style="background-color: {color};">{text}</span>'


def test_whole_word_case_insensitive_match():
    result = highlight_markup("The Cat sat on the category", {"cat"}, RED)
    assert result == f"The {_span('Cat')} sat on the category"


def test_every_occurrence_is_wrapped():
    result = highlight_markup("cat, CAT and cat.", {"cat"}, RED)
    assert result.count("<span") == 3


def test_replacement_output_is_not_rematched():
    result = highlight_markup("span style", {"span", "style"}, RED)
    assert result == f"{_span('span')} {_span('style')}"


def test_tags_and_entities_are_left_alone():
    result = highlight_markup("<strong>bold</strong> strong &amp; amp", {"strong", "amp"}, RED)
    assert result == f"<strong>bold</strong> {_span('strong')} &amp; {_span('amp')}"


def test_tokens_with_regex_characters():
    result = highlight_markup("price (usd) rose", {"(usd)"}, RED)
    assert result == f"price {_span('(usd)')} rose"


def test_no_tokens_returns_content_unchanged():
    assert highlight_markup("<p>hello</p>", set(), RED) == "<p>hello</p>"


def test_highlight_markup_documents_applies_removed_to_a_and_added_to_b():
    lexical = compare_lexical({"alpha", "beta"}, {"beta", "gamma"})
    a, b = highlight_markup_documents("<p>Alpha beta</p>", "<p>beta Gamma</p>", lexical)

    assert a == f"<p>{_span('Alpha', settings.removed_markup_color)} beta</p>"
    assert b == f"<p>beta {_span('Gamma', settings.added_markup_color)}</p>"


def test_plain_text_to_markup_escapes_and_splits_paragraphs():
    assert plain_text_to_markup("a < b\n\n second ") == "<p>a &lt; b</p><p>second</p>"
    assert plain_text_to_markup("") == ""


def test_render_positional_stream_colors_by_match():
    html = render_positional_stream(["the", "<cat>"], [True, False])

    assert MATCHED_STYLE["background"] in html.split("</span>")[0]
    assert UNMATCHED_STYLE["color"] in html.split("</span>")[1]
    assert "&lt;cat&gt;" in html
    assert html.count("<span") == 2


# =============================================================================
# Tokens containing characters that HTML escaping rewrites
# =============================================================================

def test_apostrophe_token_matches_escaped_text():
    result = highlight_markup(plain_text_to_markup("we don't agree"), {"don't"}, RED)
    assert result == f"<p>we {_span('don&#x27;t')} agree</p>"


def test_ampersand_token_matches_escaped_text():
    result = highlight_markup(plain_text_to_markup("R&D budget"), {"r&d"}, RED)
    assert result == f"<p>{_span('R&amp;D')} budget</p>"


def test_quoted_token_matches_escaped_text():
    result = highlight_markup(plain_text_to_markup('a "quoted" word'), {'"quoted"'}, RED)
    assert result == f"<p>a {_span('&quot;quoted&quot;')} word</p>"


def test_entity_text_is_not_matched_as_a_word():
    result = highlight_markup(plain_text_to_markup("fish & chips"), {"amp"}, RED)
    assert result == "<p>fish &amp; chips</p>"
