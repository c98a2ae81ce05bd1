"""Tokenizer for the chat markdown dialect."""

from __future__ import annotations

from .constants import INLINE_WHITESPACE, TEXT_STOP_CHARS
from .models import Token, TokenizerContext, TokenType

# Paired markers: single-character kind and doubled kind
_PAIRED_MARKERS = {
    "*": (TokenType.ASTERISK, TokenType.DOUBLE_ASTERISK),
    "_": (TokenType.UNDERSCORE, TokenType.DOUBLE_UNDERSCORE),
    "~": (TokenType.TILDE, TokenType.DOUBLE_TILDE),
    "|": (TokenType.TEXT, TokenType.DOUBLE_PIPE),
    ">": (TokenType.GT, TokenType.DOUBLE_GT),
}


def is_escaped(text: str, pos: int) -> bool:
    """Determine whether a character is escaped by preceding backslashes.

    Counts consecutive backslashes immediately before `pos`; an odd count marks
    the character as escaped.

    Args:
        text: Text containing the character.
        pos: Zero-based index of the character to inspect.

    Returns:
        bool: True when the character is escaped, otherwise False.

    Examples:
        is_escaped("\\\\*", 2)  # False, two backslashes
        is_escaped("\\*", 1)  # True, one backslash
    """
    if pos == 0:
        return False

    backslash_count = 0
    i = pos - 1
    while i >= 0 and text[i] == "\\":
        backslash_count += 1
        i -= 1

    return backslash_count % 2 == 1


def _advance(ctx: TokenizerContext) -> str:
    character = ctx.text[ctx.position]
    ctx.position += 1
    if character == "\n":
        ctx.last_was_newline = True
    elif character not in INLINE_WHITESPACE:
        ctx.last_was_newline = False
    return character


def _match(ctx: TokenizerContext, expected: str) -> bool:
    if ctx.position >= len(ctx.text) or ctx.text[ctx.position] != expected:
        return False
    _advance(ctx)
    return True


def _add_token(ctx: TokenizerContext, token_type: TokenType, value: str | None = None) -> None:
    if value is None:
        value = ctx.text[ctx.start : ctx.position]
    ctx.tokens.append(Token(type=token_type, value=value, position=ctx.start))


def _scan_backticks(ctx: TokenizerContext, at_line_start: bool) -> None:
    if not _match(ctx, "`"):
        _add_token(ctx, TokenType.BACKTICK)
        return
    if not _match(ctx, "`"):
        _add_token(ctx, TokenType.DOUBLE_BACKTICK)
        return
    # Only a fence at the start of a line opens a code block
    if at_line_start:
        _add_token(ctx, TokenType.TRIPLE_BACKTICK)
    else:
        _add_token(ctx, TokenType.TRIPLE_BACKTICK_INLINE)


def _scan_html_tag(ctx: TokenizerContext) -> None:
    # Tags are swallowed as text up to `>` or the end of the line
    while ctx.position < len(ctx.text):
        character = _advance(ctx)
        if character in (">", "\n"):
            break
    _add_token(ctx, TokenType.TEXT)


def _scan_text_run(ctx: TokenizerContext) -> None:
    while ctx.position < len(ctx.text) and ctx.text[ctx.position] not in TEXT_STOP_CHARS:
        _advance(ctx)
    _add_token(ctx, TokenType.TEXT)


def _scan_token(ctx: TokenizerContext) -> None:
    at_line_start = ctx.last_was_newline
    escaped = is_escaped(ctx.text, ctx.position)
    character = _advance(ctx)

    if escaped:
        _add_token(ctx, TokenType.TEXT, character)
        return

    if character in _PAIRED_MARKERS:
        single, double = _PAIRED_MARKERS[character]
        if _match(ctx, character):
            _add_token(ctx, double)
        else:
            _add_token(ctx, single)
    elif character == "`":
        _scan_backticks(ctx, at_line_start)
    elif character == "\n":
        _add_token(ctx, TokenType.NEWLINE)
    elif character in INLINE_WHITESPACE:
        _add_token(ctx, TokenType.TEXT, character)
    elif character == "<":
        _scan_html_tag(ctx)
    else:
        _scan_text_run(ctx)


def tokenize(text: str, allow_links: bool = False) -> list[Token]:
    """Split preprocessed message text into tokens.

    Scans left to right once and never fails: anything that is not a
    recognized marker becomes a ``TEXT`` token. The sequence always ends with
    an ``EOF`` token.

    Args:
        text: Text returned by `preprocess_html`.
        allow_links: Whether the caller asked for link syntax. Recorded on the
            tokenizer state; no link tokens are produced.

    Returns:
        list[Token]: Tokens in source order, terminated by ``EOF``.

    Examples:
        [token.type for token in tokenize("**hi**")]
        # [DOUBLE_ASTERISK, TEXT, DOUBLE_ASTERISK, EOF]
    """
    ctx = TokenizerContext(text=text, allow_links=allow_links)

    while ctx.position < len(ctx.text):
        ctx.start = ctx.position
        _scan_token(ctx)

    ctx.start = ctx.position
    _add_token(ctx, TokenType.EOF, "")
    return ctx.tokens
