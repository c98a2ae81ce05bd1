from __future__ import annotations

import pytest

from chat_markdown.escaping import (
    escape_html,
    escape_markdown_chars,
    preprocess_html,
    restore_escaped_chars,
)


def test_escaped_punctuation_becomes_sentinel():
    assert escape_markdown_chars("\\*") == "\ue00042\ue001"


def test_escaped_letter_becomes_sentinel():
    assert escape_markdown_chars("\\a") == "\ue00097\ue001"


@pytest.mark.parametrize("text", ["\\0", "\\ ", "\\\n", "\\é", "\\"])
def test_unrecognized_escapes_are_kept(text):
    assert escape_markdown_chars(text) == text


def test_double_backslash_escapes_the_backslash():
    assert escape_markdown_chars("\\\\*") == "\ue00092\ue001*"


def test_restore_reverses_substitution():
    assert restore_escaped_chars(escape_markdown_chars("\\_x\\_ \\|\\|")) == "_x_ ||"


def test_restore_ignores_out_of_range_code_points():
    text = "\ue0009999999\ue001"
    assert restore_escaped_chars(text) == text


def test_restore_ignores_surrogate_code_points():
    for code_point in (0xD800, 0xDFFF):
        text = f"\ue000{code_point}\ue001"
        assert restore_escaped_chars(text) == text


def test_restore_ignores_overlong_numbers():
    text = "\ue000" + "9" * 5000 + "\ue001"
    assert restore_escaped_chars(text) == text


def test_restore_leaves_plain_text():
    assert restore_escaped_chars("no sentinels 42") == "no sentinels 42"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("a&nbsp;b", "a b"),
        ("a<br>b", "a\nb"),
        ('a<br class="x">b', "a\nb"),
        ("a<div><br></div>b", "a\nb"),
        ("a<div>b</div>", "a\nb"),
        ("<div>a</div> <div>b</div>", "\na\nb"),
        ("a</div>", "a"),
    ],
)
def test_preprocess_html_line_breaks(text, expected):
    assert preprocess_html(text) == expected


def test_preprocess_escapes_before_line_breaks():
    assert restore_escaped_chars(preprocess_html("\\<br>")) == "<br>"


def test_escape_html():
    assert escape_html("&<>\"'") == "&amp;&lt;&gt;&quot;&#039;"
    assert escape_html("plain") == "plain"
