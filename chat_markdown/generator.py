"""Markup generation from the message syntax tree."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .constants import (
    ENTITY_BLOCKQUOTE,
    ENTITY_BOLD,
    ENTITY_ITALIC,
    ENTITY_SPOILER,
    ENTITY_STRIKE,
    ENTITY_UNDERLINE,
)
from .escaping import escape_html, restore_escaped_chars
from .models import ASTNode, NodeType

logger = logging.getLogger(__name__)


def _children(node: ASTNode) -> str:
    return "".join(generate_markup(child) for child in node.children)


def _code_body(node: ASTNode) -> str:
    # Escaped characters are restored before entity escaping
    return escape_html(restore_escaped_chars(node.value or ""))


def _render_pre(node: ASTNode) -> str:
    body = _code_body(node)
    language = (node.attributes or {}).get("language")
    if language:
        return f'<pre data-language="{language}"><code class="language-{language}">{body}</code></pre>'
    return f"<pre><code>{body}</code></pre>"


_RENDERERS: dict[NodeType, Callable[[ASTNode], str]] = {
    NodeType.ROOT: _children,
    NodeType.TEXT: lambda node: node.value or "",
    NodeType.BOLD: lambda node: f'<b data-entity-type="{ENTITY_BOLD}">{_children(node)}</b>',
    NodeType.ITALIC: lambda node: f'<i data-entity-type="{ENTITY_ITALIC}">{_children(node)}</i>',
    NodeType.UNDERLINE: (
        lambda node: f'<u data-entity-type="{ENTITY_UNDERLINE}">{_children(node)}</u>'
    ),
    NodeType.STRIKE: lambda node: f'<s data-entity-type="{ENTITY_STRIKE}">{_children(node)}</s>',
    NodeType.SPOILER: (
        lambda node: (
            f'<span class="spoiler" data-entity-type="{ENTITY_SPOILER}">{_children(node)}</span>'
        )
    ),
    NodeType.CODE: lambda node: f"<code>{_code_body(node)}</code>",
    NodeType.PRE: _render_pre,
    NodeType.BLOCKQUOTE: (
        lambda node: (
            '<blockquote class="text-entity-quote" dir="auto" '
            f'data-entity-type="{ENTITY_BLOCKQUOTE}">{_children(node)}</blockquote>'
        )
    ),
    NodeType.EXPANDABLE_BLOCKQUOTE: (
        lambda node: (
            '<blockquote class="text-entity-quote" dir="auto" '
            f'data-entity-type="{ENTITY_BLOCKQUOTE}" expandable>{_children(node)}</blockquote>'
        )
    ),
}


def generate_markup(node: ASTNode) -> str:
    """Render a syntax tree node and its descendants to markup.

    Text nodes are emitted as is. Code and pre bodies are HTML-escaped.
    Formatting nodes carry a ``data-entity-type`` attribute naming the
    message entity they map to.

    Args:
        node: Node to render, usually the root returned by `parse_tokens`.

    Returns:
        str: Markup fragment. Nodes of an unknown kind render as an empty
            string.

    Examples:
        generate_markup(ASTNode(NodeType.CODE, value="<b>"))
        # "<code>&lt;b&gt;</code>"
    """
    renderer = _RENDERERS.get(node.type)
    if renderer is None:
        logger.warning("No markup renderer for node type %r", node.type)
        return ""
    return renderer(node)
