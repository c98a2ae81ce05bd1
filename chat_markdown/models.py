"""Data models for chat-markdown."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class TokenType(Enum):
    """Token kinds produced by the tokenizer.

    ``BRACKET_*`` and ``PAREN_*`` are reserved for link syntax and are never
    emitted. ``DOUBLE_BACKTICK``, ``GT`` and ``DOUBLE_GT`` are emitted but no
    parser rule consumes them, so they always render as literal text.
    """

    TEXT = "TEXT"
    ASTERISK = "ASTERISK"  # *
    DOUBLE_ASTERISK = "DOUBLE_ASTERISK"  # **
    UNDERSCORE = "UNDERSCORE"  # _
    DOUBLE_UNDERSCORE = "DOUBLE_UNDERSCORE"  # __
    TILDE = "TILDE"  # ~
    DOUBLE_TILDE = "DOUBLE_TILDE"  # ~~
    BACKTICK = "BACKTICK"  # `
    DOUBLE_BACKTICK = "DOUBLE_BACKTICK"  # ``
    TRIPLE_BACKTICK = "TRIPLE_BACKTICK"  # ``` at line start
    TRIPLE_BACKTICK_INLINE = "TRIPLE_BACKTICK_INLINE"  # ``` inside running text
    DOUBLE_PIPE = "DOUBLE_PIPE"  # ||
    GT = "GT"  # >
    DOUBLE_GT = "DOUBLE_GT"  # >>
    NEWLINE = "NEWLINE"
    BRACKET_OPEN = "BRACKET_OPEN"
    BRACKET_CLOSE = "BRACKET_CLOSE"
    PAREN_OPEN = "PAREN_OPEN"
    PAREN_CLOSE = "PAREN_CLOSE"
    EOF = "EOF"


class NodeType(Enum):
    """Node kinds of the syntax tree.

    Leaf kinds (``TEXT``, ``CODE``, ``PRE``) carry a value; every other kind
    carries children.
    """

    ROOT = "root"
    TEXT = "text"
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKE = "strike"
    SPOILER = "spoiler"
    CODE = "code"
    PRE = "pre"
    BLOCKQUOTE = "blockquote"
    EXPANDABLE_BLOCKQUOTE = "expandableBlockquote"


@dataclass(frozen=True)
class Token:
    """A single token of the scanned message.

    Attributes:
        type: Token kind.
        value: Literal source text of the token (empty for ``EOF``).
        position: Offset in the preprocessed text where the token started.
    """

    type: TokenType
    value: str
    position: int


@dataclass(frozen=True)
class ASTNode:
    """Immutable syntax tree node.

    Attributes:
        type: Node kind.
        value: Text payload of leaf nodes.
        children: Child nodes of container nodes, in source order.
        attributes: Read-only string attributes (``language`` on ``pre``
            nodes). Excluded from the hash.

    Examples:
        ASTNode(NodeType.BOLD, children=(ASTNode(NodeType.TEXT, value="hi"),))
    """

    type: NodeType
    value: str | None = None
    children: tuple[ASTNode, ...] = ()
    attributes: Mapping[str, str] | None = field(default=None, hash=False)

    def __post_init__(self):
        if self.attributes is not None:
            object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))


@dataclass(frozen=True)
class MarkerInfo:
    """Row of the formatting marker table.

    Attributes:
        type: Token kind that opens the span.
        node_type: Node kind produced when the span closes.
        symbol: Literal marker text used when the span is reconstructed.
        closing: Token kind that closes the span.
    """

    type: TokenType
    node_type: NodeType
    symbol: str
    closing: TokenType


@dataclass
class TokenizerContext:
    """Working state of one tokenizer run.

    Attributes:
        text: Preprocessed input being scanned.
        position: Index of the next character to scan.
        start: Index where the token being scanned started.
        last_was_newline: Whether the last non-blank character consumed was a
            newline. Starts True so input start counts as a line start.
        allow_links: Whether link syntax was requested by the caller.
        tokens: Tokens emitted so far.
    """

    text: str
    position: int = 0
    start: int = 0
    last_was_newline: bool = True
    allow_links: bool = False
    tokens: list[Token] = field(default_factory=list)


@dataclass
class ParserContext:
    """Working state of one parser run.

    Owned by a single `parse_tokens` call and never shared.

    Attributes:
        tokens: Token sequence terminated by an ``EOF`` token.
        current: Index of the next token to consume.
        active_markers: Marker kinds currently open on the parse path.
    """

    tokens: list[Token]
    current: int = 0
    active_markers: set[TokenType] = field(default_factory=set)
