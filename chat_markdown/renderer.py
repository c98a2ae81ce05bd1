"""Entry points that run the full markdown-to-markup pipeline."""

from __future__ import annotations

from collections.abc import Iterable
from functools import partial
from pathlib import Path

from .config import RenderConfig, validate_config
from .escaping import preprocess_html, restore_escaped_chars
from .exceptions import InputTooLongError
from .filesystem import safe_read
from .generator import generate_markup
from .languages import get_language_name
from .parser import parse_tokens
from .tokenizer import tokenize


def render(text: str, allow_links: bool = False, extra_languages: Iterable[str] = ()) -> str:
    """Convert a chat markdown message to markup.

    Runs preprocessing, tokenization, parsing, markup generation and escape
    restoration. Never raises for string input: malformed or unterminated
    markers come back as the literal text they were written as.

    Args:
        text: Message text, possibly containing ``<div>``/``<br>`` line breaks.
        allow_links: Accepted for callers that request link syntax; links are
            not parsed and stay literal text.
        extra_languages: Lower-case fence language names recognized on top of
            the built-in registry.

    Returns:
        str: Markup for the message.

    Examples:
        render("**hello**")
        # '<b data-entity-type="MessageEntityBold">hello</b>'
        render("*hello")  # "*hello"
    """
    language_lookup = get_language_name
    extra = frozenset(extra_languages)
    if extra:
        language_lookup = partial(get_language_name, extra=extra)

    preprocessed = preprocess_html(text)
    tokens = tokenize(preprocessed, allow_links=allow_links)
    tree = parse_tokens(tokens, language_lookup=language_lookup)
    markup = generate_markup(tree)
    return restore_escaped_chars(markup)


def render_text(text: str, config: RenderConfig | None = None) -> str:
    """Render a message using configuration settings and limits.

    Args:
        text: Message text to render.
        config: Rendering configuration. Defaults to a new `RenderConfig`.

    Returns:
        str: Markup for the message.

    Raises:
        ConfigError: If the configuration fails validation.
        InputTooLongError: If `text` exceeds `config.max_input_length`.

    Examples:
        render_text("__hi__", RenderConfig(max_input_length=4096))
    """
    config = config or RenderConfig()
    validate_config(config)

    if len(text) > config.max_input_length:
        raise InputTooLongError(len(text), config.max_input_length)

    return render(
        text,
        allow_links=config.allow_links,
        extra_languages=[name.strip().lower() for name in config.extra_languages],
    )


class RenderFileError(Exception):
    """Raised when rendering a message file fails."""


def render_file(filepath: Path, config: RenderConfig | None = None) -> str:
    """Read a UTF-8 message file and render it.

    Args:
        filepath: Path to the message file.
        config: Rendering configuration; defaults to a new `RenderConfig`.

    Returns:
        str: Markup for the file content.

    Raises:
        RenderFileError: If the file cannot be read or decoded, or the content
            exceeds the configured limits.

    Examples:
        markup = render_file(Path("hello.md"))
    """
    try:
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise RenderFileError(error_message) from error
    except IOError as error:
        raise RenderFileError(str(error)) from error

    try:
        return render_text(content, config)
    except InputTooLongError as error:
        error_message = (
            f"{filepath} contains {error.length} characters, exceeding the maximum "
            f"allowed length of {error.max_input_length} characters."
        )
        raise RenderFileError(error_message) from error
    except ValueError as error:
        raise RenderFileError(f"{filepath}: {error}") from error
