"""Recursive-descent parser building the message syntax tree."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .constants import CODE_FENCE, MARKERS
from .languages import get_language_name
from .models import ASTNode, MarkerInfo, NodeType, ParserContext, Token, TokenType

logger = logging.getLogger(__name__)

LanguageLookup = Callable[[str], "str | None"]

_FENCE_TYPES = (TokenType.TRIPLE_BACKTICK, TokenType.TRIPLE_BACKTICK_INLINE)


def _peek(ctx: ParserContext) -> Token:
    return ctx.tokens[ctx.current]


def _is_at_end(ctx: ParserContext) -> bool:
    return ctx.current >= len(ctx.tokens) or _peek(ctx).type is TokenType.EOF


def _advance(ctx: ParserContext) -> Token:
    if not _is_at_end(ctx):
        ctx.current += 1
    return ctx.tokens[ctx.current - 1]


def _check(ctx: ParserContext, *types: TokenType) -> bool:
    if _is_at_end(ctx):
        return False
    return _peek(ctx).type in types


def _match(ctx: ParserContext, *types: TokenType) -> bool:
    if _check(ctx, *types):
        _advance(ctx)
        return True
    return False


def get_marker_info(token_type: TokenType) -> MarkerInfo | None:
    """Return the first marker table row opened by `token_type`, if any."""
    for marker in MARKERS:
        if marker.type is token_type:
            return marker
    return None


def _symbol_for(node_type: NodeType) -> str:
    for marker in MARKERS:
        if marker.node_type is node_type:
            return marker.symbol
    return ""


def _text(value: str) -> ASTNode:
    return ASTNode(NodeType.TEXT, value=value)


def node_to_source(node: ASTNode) -> str:
    """Reconstruct markdown source text for a parsed node.

    Used when a span cannot be closed and has to degrade to literal text.
    Formatting nodes are wrapped in the first marker symbol listed for their
    kind, so a bold span opened with ``*`` comes back as ``**``.

    Args:
        node: Node to reconstruct.

    Returns:
        str: Markdown source for the node and its descendants.

    Examples:
        node_to_source(ASTNode(NodeType.CODE, value="x"))  # "`x`"
    """
    if node.type is NodeType.TEXT:
        return node.value or ""
    if node.type is NodeType.CODE:
        return f"`{node.value or ''}`"
    if node.type is NodeType.PRE:
        language = (node.attributes or {}).get("language")
        header = f"{language}\n" if language else ""
        return f"{CODE_FENCE}{header}{node.value or ''}{CODE_FENCE}"

    inner = "".join(node_to_source(child) for child in node.children)
    symbol = _symbol_for(node.type)
    return f"{symbol}{inner}{symbol}"


def _collect_raw(ctx: ParserContext, stop: Callable[[], bool]) -> str:
    parts: list[str] = []
    while not _is_at_end(ctx) and not stop():
        parts.append(_advance(ctx).value)
    return "".join(parts)


def _parse_code_block(ctx: ParserContext, language_lookup: LanguageLookup) -> ASTNode:
    """Parse a fenced code block after its opening fence was consumed.

    The first line becomes the language when the lookup recognizes it and a
    newline follows; otherwise it stays in the body. Without a closing fence
    the consumed source is returned as text.
    """
    language = ""
    body: list[str] = []

    first_line = _collect_raw(ctx, lambda: _check(ctx, TokenType.NEWLINE, *_FENCE_TYPES))
    has_newline = _check(ctx, TokenType.NEWLINE)

    if has_newline and first_line:
        candidate = first_line.strip().lower()
        if language_lookup(candidate):
            language = candidate
        else:
            body.append(first_line + "\n")
        _match(ctx, TokenType.NEWLINE)
    elif first_line:
        body.append(first_line)

    body.append(_collect_raw(ctx, lambda: _check(ctx, *_FENCE_TYPES)))
    content = "".join(body)

    if _match(ctx, *_FENCE_TYPES):
        value = content.replace("\r", "").rstrip("\n")
        return ASTNode(
            NodeType.PRE,
            value=value,
            attributes={"language": language} if language else None,
        )

    logger.debug("Unclosed code fence, keeping %d characters as text", len(content))
    header = f"{language}\n" if language else ""
    return _text(f"{CODE_FENCE}{header}{content}")


def _parse_inline_code(ctx: ParserContext) -> ASTNode:
    content = _collect_raw(ctx, lambda: _check(ctx, TokenType.BACKTICK))

    if _match(ctx, TokenType.BACKTICK):
        return ASTNode(NodeType.CODE, value=content)

    logger.debug("Unclosed inline code span, keeping it as text")
    return _text(f"`{content}")


def _parse_marked_text(
    ctx: ParserContext, marker: MarkerInfo, language_lookup: LanguageLookup
) -> ASTNode:
    """Parse a formatting span opened by `marker`.

    A marker kind that is already open on the current path is not reopened;
    the token is kept as its literal symbol instead. When no closing marker
    exists the span degrades to its reconstructed source text.
    """
    _advance(ctx)

    if marker.type in ctx.active_markers:
        logger.debug("Marker %s already open, keeping it as text", marker.symbol)
        return _text(marker.symbol)

    children: list[ASTNode] = []
    ctx.active_markers.add(marker.type)
    try:
        while not _is_at_end(ctx) and not _check(ctx, marker.closing):
            node = _parse_node(ctx, language_lookup)
            if node is not None:
                children.append(node)
    finally:
        ctx.active_markers.discard(marker.type)

    if _match(ctx, marker.closing):
        return ASTNode(marker.node_type, children=tuple(children))

    logger.debug("Unclosed %s span, keeping it as text", marker.node_type.value)
    return _text(marker.symbol + "".join(node_to_source(child) for child in children))


def _parse_node(ctx: ParserContext, language_lookup: LanguageLookup) -> ASTNode | None:
    if _match(ctx, TokenType.TEXT, TokenType.NEWLINE):
        return _text(ctx.tokens[ctx.current - 1].value)

    if _match(ctx, TokenType.TRIPLE_BACKTICK):
        return _parse_code_block(ctx, language_lookup)

    if _match(ctx, TokenType.BACKTICK):
        return _parse_inline_code(ctx)

    marker = get_marker_info(_peek(ctx).type)
    if marker is not None:
        return _parse_marked_text(ctx, marker, language_lookup)

    # Tokens without a rule (``, >, >>, inline ```) stay literal
    if not _is_at_end(ctx):
        return _text(_advance(ctx).value)

    return None


def parse_tokens(
    tokens: list[Token], language_lookup: LanguageLookup = get_language_name
) -> ASTNode:
    """Build the syntax tree for a token sequence.

    Never fails: constructs that cannot be closed degrade to text nodes
    carrying their original source.

    Args:
        tokens: Output of `tokenize`, terminated by an ``EOF`` token.
        language_lookup: Returns a display name for a lower-cased fence
            language, or None when the language is unknown.

    Returns:
        ASTNode: ``root`` node whose children are the parsed nodes in order.

    Examples:
        parse_tokens(tokenize("**hi**"))
        # ASTNode(ROOT, children=(ASTNode(BOLD, children=(ASTNode(TEXT, "hi"),)),))
    """
    ctx = ParserContext(tokens=tokens)
    nodes: list[ASTNode] = []

    while not _is_at_end(ctx):
        node = _parse_node(ctx, language_lookup)
        if node is not None:
            nodes.append(node)

    return ASTNode(NodeType.ROOT, children=tuple(nodes))
