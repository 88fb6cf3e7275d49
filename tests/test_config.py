"""Tests for config file loading and merging."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from outnum.cli import Options
from outnum.config import (
    OutnumConfig,
    find_config_file,
    heading_pattern,
    load_config,
    merge_cli_with_config,
)
from outnum.errors import HeadingPatternError


def test_find_config_outnum_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "outnum.toml"
    config_file.write_text('[headings]\npreset = "markdown"\n')
    assert find_config_file(tmp_path) == config_file


def test_find_config_dot_outnum_toml_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "outnum.toml").write_text('preset = "markdown"\n')
    dot_config = tmp_path / ".outnum.toml"
    dot_config.write_text('preset = "comment"\n')
    assert find_config_file(tmp_path) == dot_config


def test_find_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text('[tool.outnum]\npreset = "markdown"\n')
    assert find_config_file(tmp_path) == config_file


def test_find_config_pyproject_without_section_skipped(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.ruff]\nline-length = 100\n")
    assert find_config_file(tmp_path) is None


def test_find_config_walks_up(tmp_path: Path) -> None:
    config_file = tmp_path / "outnum.toml"
    config_file.write_text('preset = "markdown"\n')
    subdir = tmp_path / "sub" / "deep"
    subdir.mkdir(parents=True)
    assert find_config_file(subdir) == config_file


def test_find_config_none_when_missing(tmp_path: Path) -> None:
    assert find_config_file(tmp_path) is None


def test_load_config_sections_and_kebab_case(tmp_path: Path) -> None:
    config_file = tmp_path / "outnum.toml"
    config_file.write_text(
        "[headings]\n"
        'preset = "comment"\n'
        "renumber-on-save = true\n"
        "\n"
        "[file-discovery]\n"
        'extend-exclude = ["drafts/"]\n'
        "respect-gitignore = false\n"
    )
    config = load_config(config_file)
    assert config.preset == "comment"
    assert config.renumber_on_save is True
    assert config.extend_exclude == ["drafts/"]
    assert config.respect_gitignore is False
    # Unset fields stay None
    assert config.pattern is None
    assert config.enabled is None


def test_load_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text('[tool.outnum]\nseparator = "-"\nenabled = false\n')
    config = load_config(config_file)
    assert config.separator == "-"
    assert config.enabled is False


def test_load_config_malformed_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "outnum.toml"
    config_file.write_text("this is not valid toml [[[")
    config = load_config(config_file)
    assert config == OutnumConfig()


def test_load_config_warns_unknown_keys(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    config_file = tmp_path / "outnum.toml"
    config_file.write_text('unknown_key = true\npreset = "markdown"\n')
    with caplog.at_level(logging.WARNING):
        config = load_config(config_file)
    assert config.preset == "markdown"
    assert "unrecognized config key" in caplog.text


def _make_options(
    preset: str = "plain",
    enabled: bool = True,
    renumber_on_save: bool = False,
    extend_exclude: list[str] | None = None,
    respect_gitignore: bool = True,
) -> Options:
    """Create an Options with defaults for all required fields."""
    return Options(
        files=["."],
        output="-",
        inplace=False,
        nobackup=False,
        check=False,
        depth=None,
        promote=None,
        demote=None,
        preset=preset,
        pattern=None,
        separator=None,
        enabled=enabled,
        renumber_on_save=renumber_on_save,
        extend_include=[],
        exclude=None,
        extend_exclude=extend_exclude if extend_exclude is not None else [],
        respect_gitignore=respect_gitignore,
        list_files=False,
        verbose=False,
        version=False,
    )


def test_merge_no_config() -> None:
    opts = _make_options()
    result = merge_cli_with_config(opts, config=None, explicit_flags=set())
    assert result.preset == "plain"


def test_merge_config_overrides_defaults() -> None:
    opts = _make_options()
    config = OutnumConfig(preset="markdown", renumber_on_save=True, extend_exclude=["vendor/"])
    result = merge_cli_with_config(opts, config=config, explicit_flags=set())
    assert result.preset == "markdown"
    assert result.renumber_on_save is True
    assert result.extend_exclude == ["vendor/"]


def test_merge_explicit_cli_overrides_config() -> None:
    opts = _make_options(preset="comment")
    config = OutnumConfig(preset="markdown", respect_gitignore=False)
    result = merge_cli_with_config(opts, config=config, explicit_flags={"preset"})
    assert result.preset == "comment"
    assert result.respect_gitignore is False


class TestHeadingPatternFromSettings:
    def test_default_preset(self) -> None:
        pattern = heading_pattern()
        assert pattern.separator == "."
        assert pattern.has_last_group

    def test_custom_pattern_wins(self) -> None:
        pattern = heading_pattern(
            preset="markdown", pattern=r"^(?P<whole>\d+(?:-(?P<last>\d+))*) ", separator="-"
        )
        assert pattern.separator == "-"
        assert pattern.regex.pattern.startswith("^(?P<whole>")

    def test_separator_needs_custom_pattern(self) -> None:
        with pytest.raises(HeadingPatternError):
            heading_pattern(preset="plain", separator="-")
