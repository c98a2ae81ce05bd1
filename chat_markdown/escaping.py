"""String-level passes that run before and after the markup pipeline."""

from __future__ import annotations

import re
import sys

from .constants import (
    BR_PATTERN,
    DIV_BOUNDARY_PATTERN,
    DIV_CLOSE_PATTERN,
    DIV_OPEN_PATTERN,
    EMPTY_DIV_PATTERN,
    ESCAPE_END,
    ESCAPE_START,
    ESCAPED_CHAR_PATTERN,
    NBSP_PATTERN,
    SENTINEL_PATTERN,
)

_SURROGATES_START = 0xD800
_SURROGATES_END = 0xDFFF

_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)


def escape_markdown_chars(text: str) -> str:
    r"""Replace backslash-escaped characters with private-use sentinels.

    Each ``\c`` pair becomes ``U+E000 <code point of c> U+E001`` so that the
    tokenizer sees only digits and private-use characters.

    Args:
        text: Raw message text.

    Returns:
        str: Text with every recognized escape replaced by its sentinel.

    Examples:
        escape_markdown_chars("\\*")  # "\ue00042\ue001"
    """
    return ESCAPED_CHAR_PATTERN.sub(
        lambda match: f"{ESCAPE_START}{ord(match.group(1))}{ESCAPE_END}", text
    )


def preprocess_html(text: str) -> str:
    """Normalize HTML line-break artifacts and protect escaped characters.

    ``&nbsp;`` becomes a space, escapes are replaced by sentinels, then
    ``<div>`` and ``<br>`` line breaks are folded into newlines.

    Args:
        text: Raw message text, possibly taken from a contenteditable field.

    Returns:
        str: Text ready for tokenization.

    Examples:
        preprocess_html("a<div>b</div>")  # "a\\nb"
        preprocess_html("a<br>b&nbsp;c")  # "a\\nb c"
    """
    text = NBSP_PATTERN.sub(" ", text)
    text = escape_markdown_chars(text)

    text = EMPTY_DIV_PATTERN.sub("\n", text)
    text = BR_PATTERN.sub("\n", text)
    text = DIV_BOUNDARY_PATTERN.sub("\n", text)
    text = DIV_OPEN_PATTERN.sub("\n", text)
    text = DIV_CLOSE_PATTERN.sub("", text)

    return text


def restore_escaped_chars(text: str) -> str:
    """Turn sentinels back into the characters they encode.

    Sentinels whose number is not an encodable code point (out of range or a
    surrogate) are left untouched.

    Examples:
        restore_escaped_chars("\\ue00042\\ue001")  # "*"
    """
    return SENTINEL_PATTERN.sub(_restore_sentinel, text)


def _restore_sentinel(match: re.Match[str]) -> str:
    code_point = int(match.group(1))
    if code_point > sys.maxunicode or _SURROGATES_START <= code_point <= _SURROGATES_END:
        return match.group(0)
    return chr(code_point)


def escape_html(text: str) -> str:
    """Escape ``& < > " '`` for literal display inside markup.

    The single quote is written as ``&#039;`` to match the entity form the
    rich-text layer expects.
    """
    for character, entity in _HTML_ESCAPES:
        text = text.replace(character, entity)
    return text
