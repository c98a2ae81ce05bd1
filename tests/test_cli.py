from __future__ import annotations

import os
import stat
import textwrap
from pathlib import Path

import pytest

from chat_markdown.cli import cli
from chat_markdown.filesystem import MAX_FILE_SIZE_ENV_VAR

BOLD_HI = '<b data-entity-type="MessageEntityBold">hi</b>'


def _write(tmp_path: Path, filename: str, content: str) -> Path:
    path = tmp_path / filename
    path.write_text(content, encoding="utf-8")
    return path


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_cli_prints_markup(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "message.md", "**hi**")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert result.output == BOLD_HI


def test_cli_reads_stdin(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["-"], input="_x_")

    assert result.exit_code == 0
    assert result.output == '<i data-entity-type="MessageEntityItalic">x</i>'


def test_cli_reads_stdin_with_escaped_code(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["-"], input="`\\<b>`")

    assert result.exit_code == 0
    assert result.output == "<code>&lt;b&gt;</code>"


def test_cli_writes_output_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "message.md", "**hi**")
    output = tmp_path / "message.html"

    result = cli_runner.invoke(cli, [str(target), "--output", str(output)])

    assert result.exit_code == 0
    assert result.output == ""
    assert output.read_text(encoding="utf-8") == BOLD_HI
    assert {path.name for path in tmp_path.iterdir()} == {"message.md", "message.html"}


@pytest.mark.skipif(os.name != "posix", reason="POSIX permissions required")
def test_cli_output_keeps_existing_permissions(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "message.md", "**hi**")
    output = _write(tmp_path, "message.html", "old")
    output.chmod(0o600)

    result = cli_runner.invoke(cli, [str(target), "--output", str(output)])

    assert result.exit_code == 0
    assert output.read_text(encoding="utf-8") == BOLD_HI
    assert stat.S_IMODE(output.stat().st_mode) == 0o600


def test_cli_language_option(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "message.md", "```jinja\nx\n```")

    result = cli_runner.invoke(cli, [str(target), "--language", "jinja"])

    assert result.exit_code == 0
    assert 'data-language="jinja"' in result.output


def test_cli_uses_pyproject_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.chat-markdown]
        extra_languages = ["hcl2"]
        """,
    )
    target = _write(tmp_path, "message.md", "```hcl2\nx\n```")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert 'class="language-hcl2"' in result.output


def test_cli_rejects_invalid_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.chat-markdown]
        max_input_length = 0
        """,
    )
    target = _write(tmp_path, "message.md", "hi")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 2
    assert "max_input_length" in result.output


def test_cli_enforces_input_length(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "message.md", "abcdef")

    result = cli_runner.invoke(cli, [str(target), "--max-input-length", "3"])

    assert result.exit_code == 1
    assert "exceeding the maximum allowed length of 3" in result.output


def test_cli_enforces_input_length_on_stdin(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["-", "--max-input-length", "3"], input="abcdef")

    assert result.exit_code == 1
    assert "exceeds maximum allowed length of 3" in result.output


def test_cli_enforces_file_size_from_env(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "4")
    target = _write(tmp_path, "message.md", "**hi**")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert "exceeds the maximum allowed size of 4 bytes" in result.output


def test_cli_rejects_invalid_env_file_size(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "lots")
    target = _write(tmp_path, "message.md", "hi")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert MAX_FILE_SIZE_ENV_VAR in result.output


def test_cli_rejects_unsupported_extension(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "message.html", "hi")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 2
    assert "Supported extensions" in result.output


def test_cli_rejects_path_outside_working_directory(cli_runner, tmp_path, monkeypatch):
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    target = _write(tmp_path, "outside.md", "hi")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 2
    assert "outside of the working directory" in result.output


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="Symlink support is required")
def test_cli_rejects_symlinked_input(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = _write(tmp_path, "source.md", "hi")
    link = tmp_path / "alias.md"
    try:
        os.symlink(source, link)
    except OSError as error:  # pragma: no cover - platform dependent
        pytest.skip(f"Unable to create symlink: {error}")

    result = cli_runner.invoke(cli, [str(link)])

    assert result.exit_code == 2
    assert "Symlinks" in result.output


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="Symlink support is required")
def test_cli_rejects_symlinked_output(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "message.md", "hi")
    real_output = _write(tmp_path, "real.html", "keep")
    link = tmp_path / "out.html"
    try:
        os.symlink(real_output, link)
    except OSError as error:  # pragma: no cover - platform dependent
        pytest.skip(f"Unable to create symlink: {error}")

    result = cli_runner.invoke(cli, [str(target), "--output", str(link)])

    assert result.exit_code == 1
    assert "Symlinks" in result.output
    assert real_output.read_text(encoding="utf-8") == "keep"


def test_cli_rejects_invalid_utf8(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "message.md"
    target.write_bytes(b"\xff\xfe\xfa")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert "Invalid UTF-8" in result.output
