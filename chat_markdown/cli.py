"""
Renders a chat markdown message file to markup.
The markup is printed to stdout, or written to a file with `--output`.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from .config import ConfigError, build_config
from .exceptions import InputTooLongError
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    normalize_filepath,
    write_output,
)
from .renderer import RenderFileError, render_file, render_text

__all__ = ["cli"]


@click.command()
@click.version_option(package_name="chat-markdown")
@click.option("--allow-links", is_flag=True, help="Request link syntax")
@click.option(
    "--language",
    "languages",
    multiple=True,
    help="Extra code block language name (repeatable)",
)
@click.option("--max-input-length", type=int, help="Maximum message length in characters")
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, writable=True),
    help="Write markup to this file instead of stdout",
)
@click.option("-v", "--verbose", is_flag=True, help="Log parser diagnostics to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
def cli(
    filepath: str,
    allow_links: bool = False,
    languages: tuple[str, ...] = (),
    max_input_length: int | None = None,
    output_path: str | None = None,
    verbose: bool = False,
):
    """
    Entry point for rendering a chat markdown message.

    Args:
        filepath: Path to the message file, or ``-`` to read stdin.
        allow_links: Override for the `allow_links` setting.
        languages: Extra fence language names added to the configuration.
        max_input_length: Override for the maximum message length.
        output_path: Destination file for the markup; stdout when omitted.
        verbose: Enable debug logging of soft parse failures.

    Returns:
        None.

    Raises:
        click.BadParameter: If the input path is invalid or the configuration
            contains unsupported values.
        click.ClickException: If the input cannot be read, exceeds limits, or
            the output cannot be written.

    Examples:
        chat-markdown message.md --language jinja --output message.html
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    base_dir = Path.cwd().resolve()
    from_stdin = filepath == "-"
    if not from_stdin:
        try:
            filepath = normalize_filepath(filepath, base_dir)
        except ValueError as error:
            raise click.BadParameter(str(error)) from error

    try:
        config = build_config(
            base_dir if from_stdin else filepath.parent,
            allow_links=allow_links or None,
            extra_languages=list(languages) or None,
            max_input_length=max_input_length,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    if from_stdin:
        try:
            with click.open_file("-", encoding="utf-8") as stream:
                markup = render_text(stream.read(), config)
        except InputTooLongError as error:
            raise click.ClickException(str(error)) from error
    else:
        try:
            max_file_size = get_max_file_size(default=config.max_file_size)
        except ValueError as error:
            raise click.ClickException(str(error)) from error

        try:
            enforce_file_size(collect_file_stat(filepath), max_file_size, filepath)
        except IOError as error:
            raise click.ClickException(str(error)) from error

        try:
            markup = render_file(filepath, config)
        except RenderFileError as error:
            raise click.ClickException(str(error)) from error

    if output_path is None:
        click.echo(markup, nl=False)
        return

    try:
        write_output(
            Path(output_path),
            markup,
            warn=lambda message: click.echo(message, err=True),
        )
    except IOError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
