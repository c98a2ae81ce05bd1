"""Configuration loading and management."""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE, DEFAULT_MAX_INPUT_LENGTH

LANGUAGE_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9+#._-]*$")


@dataclass
class RenderConfig:
    """Configuration for rendering chat markdown.

    Attributes:
        allow_links: Whether link syntax is requested from the renderer.
        extra_languages: Additional fence language names recognized on top of
            the built-in registry.
        max_input_length: Maximum number of characters accepted for rendering.
        max_file_size: Maximum input file size in bytes that will be processed.

    Examples:
        RenderConfig(extra_languages=["jinja"], max_input_length=4096)
    """

    allow_links: bool = False
    extra_languages: list[str] = field(default_factory=list)

    # Limits
    max_input_length: int = DEFAULT_MAX_INPUT_LENGTH
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`max_input_length` must be a positive integer")
    """


def load_config(search_path: Path) -> RenderConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.chat-markdown]`` table from `pyproject.toml` and the
    ``[chat-markdown]`` or ``[tool.chat-markdown]`` table from
    `.chat-markdown.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        RenderConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("messages"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "chat-markdown")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".chat-markdown.toml",
            table_paths=[("chat-markdown",), ("tool", "chat-markdown")],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return RenderConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> RenderConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> RenderConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return RenderConfig()

    try:
        return RenderConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: RenderConfig) -> RenderConfig:
    """Return a copy with language names stripped, lower-cased and deduplicated.

    Values that are not strings are left for `validate_config` to reject.
    """
    if not isinstance(config.extra_languages, (list, tuple)):
        return config

    languages: list[object] = []
    for name in config.extra_languages:
        if isinstance(name, str):
            name = name.strip().lower()
        if name not in languages:
            languages.append(name)
    return replace(config, extra_languages=languages)


def validate_config(config: RenderConfig) -> None:
    """Validate a `RenderConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If a flag is not a boolean, a limit is not a positive
            integer, or a language name is empty or contains characters that
            are not allowed in a fence header.

    Examples:
        validate_config(RenderConfig(max_input_length=4096))
    """
    config = normalize_config(config)

    if not isinstance(config.allow_links, bool):
        raise ConfigError("`allow_links` must be a boolean")

    _ensure_integers(
        {
            "max_input_length": config.max_input_length,
            "max_file_size": config.max_file_size,
        }
    )
    _ensure_positive(
        {
            "max_input_length": config.max_input_length,
            "max_file_size": config.max_file_size,
        }
    )

    if not isinstance(config.extra_languages, (list, tuple)):
        raise ConfigError("`extra_languages` must be a list of strings")
    for name in config.extra_languages:
        if not isinstance(name, str):
            raise ConfigError("`extra_languages` must be a list of strings")
        if not LANGUAGE_NAME_PATTERN.match(name):
            raise ConfigError(f"`extra_languages` contains an invalid language name: {name!r}")


def apply_overrides(config: RenderConfig, **overrides: object) -> RenderConfig:
    """Apply override values to a `RenderConfig`.

    ``extra_languages`` overrides are appended to the configured languages
    rather than replacing them.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        RenderConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `RenderConfig`.

    Examples:
        updated = apply_overrides(config, allow_links=True, max_input_length=4096)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if "extra_languages" in changes:
        changes["extra_languages"] = [*config.extra_languages, *changes["extra_languages"]]
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> RenderConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        RenderConfig: Validated configuration ready for rendering.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), allow_links=True)
    """
    config = load_config(search_path)
    try:
        config = apply_overrides(config, **overrides)
    except TypeError as error:
        raise ConfigError(str(error)) from error
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
