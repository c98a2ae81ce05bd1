from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from chat_markdown.config import (
    ConfigError,
    RenderConfig,
    apply_overrides,
    build_config,
    load_config,
    normalize_config,
    validate_config,
)


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_dotfile(base: Path, body: str) -> Path:
    path = base / ".chat-markdown.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.chat-markdown]
        allow_links = true
        extra_languages = ["Jinja", " hcl2 "]
        max_input_length = 10
        max_file_size = 20
        """,
    )

    config = load_config(tmp_path)

    assert config == RenderConfig(
        allow_links=True,
        extra_languages=["jinja", "hcl2"],
        max_input_length=10,
        max_file_size=20,
    )


def test_loads_config_from_dotfile_in_parent(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [chat-markdown]
        extra_languages = ["jinja"]
        """,
    )
    nested = tmp_path / "child"
    nested.mkdir()

    config = load_config(nested)

    assert config.extra_languages == ["jinja"]
    assert config.allow_links is False


def test_dotfile_accepts_tool_table(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [tool.chat-markdown]
        max_input_length = 5
        """,
    )

    assert load_config(tmp_path).max_input_length == 5


def test_pyproject_without_table_falls_through_to_defaults(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.other]
        value = 1
        """,
    )

    assert load_config(tmp_path) == RenderConfig()


def test_empty_table_gives_defaults(tmp_path: Path):
    _write_pyproject(tmp_path, "[tool.chat-markdown]\n")

    assert load_config(tmp_path) == RenderConfig()


def test_invalid_toml_is_skipped(tmp_path: Path):
    _write_pyproject(tmp_path, "[tool.chat-markdown\n")

    assert load_config(tmp_path) == RenderConfig()


def test_unknown_keys_raise(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.chat-markdown]
        colour = "blue"
        """,
    )

    with pytest.raises(ConfigError, match="Invalid `\\[tool.chat-markdown\\]` settings"):
        load_config(tmp_path)


def test_non_table_raises(tmp_path: Path):
    _write_dotfile(tmp_path, 'chat-markdown = "yes"\n')

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_normalize_config_deduplicates_languages():
    config = normalize_config(RenderConfig(extra_languages=["Jinja", "jinja ", "HCL"]))
    assert config.extra_languages == ["jinja", "hcl"]


@pytest.mark.parametrize(
    ("config", "message"),
    [
        (RenderConfig(allow_links="yes"), "`allow_links` must be a boolean"),
        (RenderConfig(max_input_length=0), "`max_input_length` must be a positive integer"),
        (RenderConfig(max_file_size=-1), "`max_file_size` must be a positive integer"),
        (RenderConfig(max_input_length=True), "`max_input_length` must be an integer"),
        (RenderConfig(max_file_size="10"), "`max_file_size` must be an integer"),
        (RenderConfig(extra_languages="jinja"), "`extra_languages` must be a list of strings"),
        (RenderConfig(extra_languages=[1]), "`extra_languages` must be a list of strings"),
        (RenderConfig(extra_languages=[""]), "invalid language name"),
        (RenderConfig(extra_languages=['x"><script>']), "invalid language name"),
    ],
)
def test_validate_config_rejects_invalid_values(config, message):
    with pytest.raises(ConfigError, match=message):
        validate_config(config)


def test_validate_config_accepts_defaults():
    validate_config(RenderConfig())


def test_apply_overrides_ignores_none():
    config = RenderConfig()
    assert apply_overrides(config, allow_links=None) is config


def test_apply_overrides_appends_languages():
    config = RenderConfig(extra_languages=["jinja"])
    updated = apply_overrides(config, extra_languages=["hcl"], max_input_length=7)
    assert updated.extra_languages == ["jinja", "hcl"]
    assert updated.max_input_length == 7


def test_build_config_merges_file_and_overrides(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.chat-markdown]
        extra_languages = ["jinja"]
        """,
    )

    config = build_config(tmp_path, extra_languages=["HCL"], allow_links=True)

    assert config.extra_languages == ["jinja", "hcl"]
    assert config.allow_links is True


def test_build_config_rejects_invalid_override(tmp_path: Path):
    with pytest.raises(ConfigError):
        build_config(tmp_path, max_input_length=-5)


def test_build_config_rejects_unknown_override(tmp_path: Path):
    with pytest.raises(ConfigError):
        build_config(tmp_path, colour="blue")
