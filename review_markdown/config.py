"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

from .constants import (
    DEFAULT_CODE_CLASS_PREFIX,
    DEFAULT_EMPTY_PLACEHOLDER,
    DEFAULT_EXPORT_PREFIX,
    DEFAULT_MAX_FILE_SIZE,
    OUTPUT_FORMATS,
)

CONFIG_TABLE = "review-markdown"
DOTFILE_NAME = ".review-markdown.toml"


@dataclass
class RenderConfig:
    """Configuration for rendering review text.

    Attributes:
        output_format: Default output format (``"html"``, ``"text"``, or
            ``"json"``).
        empty_placeholder: Text shown when a review produces no blocks.
        code_class_prefix: CSS class prefix prepended to a code block's
            language tag in HTML output.
        export_prefix: Leading component of exported file names.
        max_file_size: Maximum review file size in bytes that will be read.

    Examples:
        RenderConfig(output_format="text", empty_placeholder="Nothing yet.")
    """

    # Output
    output_format: str = "html"
    empty_placeholder: str = DEFAULT_EMPTY_PLACEHOLDER
    code_class_prefix: str = DEFAULT_CODE_CLASS_PREFIX

    # Export
    export_prefix: str = DEFAULT_EXPORT_PREFIX

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`output_format` must be one of: html, text, json")
    """


def load_config(search_path: Path) -> RenderConfig:
    """Load the nearest `[tool.review-markdown]` or `.review-markdown.toml` settings.

    `pyproject.toml` wins over the dotfile in the same directory; unreadable
    TOML is skipped. Falls back to defaults; raises ConfigError for a malformed
    table.
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", CONFIG_TABLE)]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / DOTFILE_NAME,
            table_paths=[(CONFIG_TABLE,), ("tool", CONFIG_TABLE)],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return RenderConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> RenderConfig | None:
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

    # TOML keys are conventionally kebab-case
    normalized = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return RenderConfig(**normalized)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: RenderConfig) -> None:
    """Validate a `RenderConfig` instance.

    Raises:
        ConfigError: If the output format is unsupported, a text field has the
            wrong type or is empty, or the size limit is not a positive integer.
    """
    if config.output_format not in OUTPUT_FORMATS:
        raise ConfigError(f"`output_format` must be one of: {', '.join(OUTPUT_FORMATS)}")

    for key in ("empty_placeholder", "code_class_prefix", "export_prefix"):
        if not isinstance(getattr(config, key), str):
            raise ConfigError(f"`{key}` must be a string")
    if not config.export_prefix:
        raise ConfigError("`export_prefix` must not be empty")

    max_file_size = config.max_file_size
    if isinstance(max_file_size, bool) or not isinstance(max_file_size, int):
        raise ConfigError("`max_file_size` must be an integer")
    if max_file_size <= 0:
        raise ConfigError("`max_file_size` must be a positive integer")


def apply_overrides(config: RenderConfig, **overrides: object) -> RenderConfig:
    """Apply override values to a `RenderConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        RenderConfig: New configuration with the overrides applied, or the
        original configuration when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `RenderConfig`.
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> RenderConfig:
    """Load, override, and validate configuration.

    Examples:
        config = build_config(Path.cwd(), output_format="text")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config
