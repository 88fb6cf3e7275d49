"""Tests for heading patterns and matching."""

from __future__ import annotations

import re

import pytest

from outnum.errors import HeadingPatternError
from outnum.matching import PRESETS, HeadingPattern, Span, find_heading


class TestHeadingPattern:
    def test_requires_whole_group(self) -> None:
        with pytest.raises(HeadingPatternError, match="whole"):
            HeadingPattern.compile(r"^\d+")

    def test_invalid_regex(self) -> None:
        with pytest.raises(HeadingPatternError, match="Invalid heading pattern"):
            HeadingPattern.compile(r"^(?P<whole>\d+")

    def test_empty_separator(self) -> None:
        with pytest.raises(HeadingPatternError):
            HeadingPattern.compile(r"^(?P<whole>\d+)", separator="")

    def test_unknown_preset(self) -> None:
        with pytest.raises(HeadingPatternError, match="choices"):
            HeadingPattern.from_preset("rst")

    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            HeadingPattern.from_preset("rst")

    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_presets_compile(self, name: str) -> None:
        pattern = HeadingPattern.from_preset(name)
        assert pattern.has_last_group
        assert pattern.separator == "."
        assert pattern.regex.flags & re.MULTILINE

    def test_has_last_group(self) -> None:
        assert not HeadingPattern.compile(r"^(?P<whole>\d+)").has_last_group


class TestFindHeading:
    def setup_method(self) -> None:
        self.pattern = HeadingPattern.from_preset("plain")

    def test_spans(self) -> None:
        text = "intro\n2.3.1 Title\n"
        match = find_heading(text, self.pattern, 0)
        assert match is not None
        assert match.text == "2.3.1"
        assert match.whole == Span(6, 11)
        assert match.last_component == Span(10, 11)
        assert text[match.whole.start : match.whole.end] == "2.3.1"

    def test_single_component_has_no_last(self) -> None:
        match = find_heading("4 Title\n", self.pattern, 0)
        assert match is not None
        assert match.text == "4"
        assert match.last_component is None

    def test_match_end_includes_trailing_dot(self) -> None:
        match = find_heading("4. Title\n", self.pattern, 0)
        assert match is not None
        assert match.whole == Span(0, 1)
        assert match.end == 2

    def test_start_mid_line_is_not_line_start(self) -> None:
        text = "1 A\n2 B\n"
        match = find_heading(text, self.pattern, 1)
        assert match is not None
        assert match.text == "2"

    def test_bare_markdown_number_before_crlf(self) -> None:
        match = find_heading("## 2.1\r\nbody\r\n", HeadingPattern.from_preset("markdown"), 0)
        assert match is not None
        assert match.text == "2.1"

    def test_end_bound(self) -> None:
        text = "prose\n12.5 Title\n"
        assert find_heading(text, self.pattern, 0, end=8) is None
        match = find_heading(text, self.pattern, 0, end=10)
        assert match is not None
        assert match.text == "12.5"

    def test_none_when_no_heading(self) -> None:
        assert find_heading("no headings here\n", self.pattern, 0) is None

    def test_number_needs_following_space(self) -> None:
        assert find_heading("1.5million\n", self.pattern, 0) is None

    def test_optional_whole_group_not_matched(self) -> None:
        pattern = HeadingPattern.compile(r"^Section(?: (?P<whole>\d+))?")
        with pytest.raises(HeadingPatternError):
            find_heading("Section\n", pattern, 0)
