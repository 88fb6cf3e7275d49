"""
TOML-based config file loading for outnum.

Searches for `.outnum.toml`, `outnum.toml`, or `pyproject.toml [tool.outnum]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

from outnum.errors import HeadingPatternError
from outnum.matching import DEFAULT_PRESET, DEFAULT_SEPARATOR, HeadingPattern

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

log = logging.getLogger(__name__)


@dataclass
class OutnumConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    so merging can tell "not configured" apart from "set to the default value".
    """

    # Headings
    preset: str | None = None
    pattern: str | None = None
    separator: str | None = None
    enabled: bool | None = None
    renumber_on_save: bool | None = None
    # File discovery
    extend_include: list[str] | None = None
    exclude: list[str] | None = None
    extend_exclude: list[str] | None = None
    respect_gitignore: bool | None = None


_CONFIG_FILENAMES = [".outnum.toml", "outnum.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(OutnumConfig)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Search order per
    directory: `.outnum.toml` > `outnum.toml` > `pyproject.toml` (only if it
    has `[tool.outnum]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename != "pyproject.toml" or _pyproject_has_outnum_section(candidate):
                    return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _pyproject_has_outnum_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text())
        return "outnum" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> OutnumConfig:
    """
    Load an `OutnumConfig` from a TOML file, reading `[tool.outnum]` from a
    `pyproject.toml`. Kebab-case keys map to snake_case fields.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except tomllib.TOMLDecodeError as e:
        log.warning("Ignoring malformed config file %s: %s", config_path, e)
        return OutnumConfig()

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("outnum", {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> OutnumConfig:
    """Parse a flat or sectioned TOML dict into OutnumConfig."""
    # Sections like [headings] and [file-discovery] merge into the top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            flat.update(cast(dict[str, Any], value))
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = value
        else:
            log.warning("Ignoring unrecognized config key: %s", key)

    return OutnumConfig(**mapped)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: OutnumConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Apply config values to CLI options that were not given explicitly.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(OutnumConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue
        if cfg_field.name in explicit_flags:
            continue
        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts


def heading_pattern(
    preset: str | None = None, pattern: str | None = None, separator: str | None = None
) -> HeadingPattern:
    """
    Build the heading pattern from settings. An explicit `pattern` wins over `preset`.
    """
    if pattern:
        return HeadingPattern.compile(pattern, separator or DEFAULT_SEPARATOR)
    base = HeadingPattern.from_preset(preset or DEFAULT_PRESET)
    if separator and separator != base.separator:
        raise HeadingPatternError(
            f"Separator {separator!r} needs a custom pattern; presets use {base.separator!r}"
        )
    return base

