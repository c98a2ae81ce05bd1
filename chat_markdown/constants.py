"""Constants used across the chat-markdown package."""

from __future__ import annotations

import re

from .models import MarkerInfo, NodeType, TokenType

# Private-use delimiters wrapping the code point of an escaped character
ESCAPE_START = "\ue000"
ESCAPE_END = "\ue001"

ESCAPED_CHAR_PATTERN = re.compile(r"\\([1-~]|[_*\[\]()~`>#+=\-|{}.!])")
SENTINEL_PATTERN = re.compile(rf"{ESCAPE_START}([0-9]{{1,7}}){ESCAPE_END}")

# HTML line-break artifacts left by contenteditable inputs
NBSP_PATTERN = re.compile(r"&nbsp;")
EMPTY_DIV_PATTERN = re.compile(r"<div><br([^>]*)?></div>")
BR_PATTERN = re.compile(r"<br([^>]*)?>")
DIV_BOUNDARY_PATTERN = re.compile(r"</div>(\s*)<div>")
DIV_OPEN_PATTERN = re.compile(r"<div>")
DIV_CLOSE_PATTERN = re.compile(r"</div>")

# Characters that end a plain text run
TEXT_STOP_CHARS = frozenset("*_~|`>\n\\")
INLINE_WHITESPACE = frozenset(" \t\r")

# Order encodes lookup priority
MARKERS: tuple[MarkerInfo, ...] = (
    MarkerInfo(TokenType.DOUBLE_UNDERSCORE, NodeType.UNDERLINE, "__", TokenType.DOUBLE_UNDERSCORE),
    MarkerInfo(TokenType.DOUBLE_ASTERISK, NodeType.BOLD, "**", TokenType.DOUBLE_ASTERISK),
    MarkerInfo(TokenType.UNDERSCORE, NodeType.ITALIC, "_", TokenType.UNDERSCORE),
    MarkerInfo(TokenType.ASTERISK, NodeType.BOLD, "*", TokenType.ASTERISK),
    MarkerInfo(TokenType.TILDE, NodeType.STRIKE, "~", TokenType.TILDE),
    MarkerInfo(TokenType.DOUBLE_TILDE, NodeType.STRIKE, "~~", TokenType.DOUBLE_TILDE),
    MarkerInfo(TokenType.DOUBLE_PIPE, NodeType.SPOILER, "||", TokenType.DOUBLE_PIPE),
)

CODE_FENCE = "```"

# Message entity identifiers understood by the rich-text layer
ENTITY_BOLD = "MessageEntityBold"
ENTITY_ITALIC = "MessageEntityItalic"
ENTITY_UNDERLINE = "MessageEntityUnderline"
ENTITY_STRIKE = "MessageEntityStrike"
ENTITY_SPOILER = "MessageEntitySpoiler"
ENTITY_BLOCKQUOTE = "MessageEntityBlockquote"

# Limits and file handling
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_MAX_INPUT_LENGTH = 1_000_000
INPUT_EXTENSIONS = (".md", ".markdown", ".txt")
