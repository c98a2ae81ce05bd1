"""
chat-markdown: Markdown-to-markup compiler for chat messages.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    chat-markdown message.md

Library Usage:
    from chat_markdown import render

    markup = render("**bold** and `code`")
"""

from .config import ConfigError, RenderConfig
from .exceptions import InputTooLongError, RenderError
from .generator import generate_markup
from .models import ASTNode, NodeType, Token, TokenType
from .parser import parse_tokens
from .renderer import RenderFileError, render, render_file, render_text
from .tokenizer import tokenize

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "render",
    "render_text",
    "render_file",
    # Pipeline stages
    "tokenize",
    "parse_tokens",
    "generate_markup",
    # Data models
    "ASTNode",
    "NodeType",
    "Token",
    "TokenType",
    "RenderConfig",
    # Exceptions
    "ConfigError",
    "InputTooLongError",
    "RenderError",
    "RenderFileError",
    # Version
    "__version__",
]
