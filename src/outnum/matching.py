"""
Heading pattern contract and matcher.

A heading pattern is a regular expression with named groups:

- `whole` (required): the entire dotted heading number, e.g. `2.3.1`.
- `last` (optional): the final component of the number, e.g. the `1` in
  `2.3.1`. It does not participate for single-component numbers.

Everything else about heading syntax (indentation, comment markers, Markdown
`#` prefixes, trailing punctuation) is up to the pattern.

Usage:
    from outnum.matching import HeadingPattern, find_heading

    pattern = HeadingPattern.from_preset("plain")
    match = find_heading(text, pattern, 0)
    while match is not None:
        print(match.text, match.whole)
        match = find_heading(text, pattern, match.end)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import NamedTuple

from outnum.errors import HeadingPatternError

WHOLE_GROUP = "whole"
LAST_GROUP = "last"

DEFAULT_SEPARATOR = "."

# Dotted decimal number; a repeated group keeps the span of its last repetition.
_NUMBER = rf"(?P<{WHOLE_GROUP}>\d+(?:\.(?P<{LAST_GROUP}>\d+))*)"

PRESETS: dict[str, str] = {
    # "1.2 Title" or "1. Title", optionally indented
    "plain": rf"^[ \t]*{_NUMBER}\.?(?=[ \t])",
    # "## 1.2 Title"
    "markdown": rf"^#{{1,6}}[ \t]+{_NUMBER}\.?(?=[ \t\r]|$)",
    # "# 1.2 Title", "// 1.2 Title", ";; 1.2 Title", "-- 1.2 Title"
    "comment": rf"^[ \t]*(?:#+|//+|;+|--+)[ \t]*{_NUMBER}\.?(?=[ \t\r]|$)",
}

DEFAULT_PRESET = "plain"


class Span(NamedTuple):
    """Half-open character range `[start, end)` within a document."""

    start: int
    end: int


@dataclass(frozen=True)
class HeadingMatch:
    """One heading occurrence located in a document."""

    text: str
    """The whole heading-number text, e.g. `"2.3.1"`."""

    whole: Span
    last_component: Span | None
    end: int
    """End offset of the full regex match (may extend past `whole`)."""


@dataclass(frozen=True)
class HeadingPattern:
    """
    A compiled heading pattern plus the separator used between number components.
    """

    regex: re.Pattern[str]
    separator: str = DEFAULT_SEPARATOR

    def __post_init__(self) -> None:
        if WHOLE_GROUP not in self.regex.groupindex:
            raise HeadingPatternError(
                f"Heading pattern must define a `(?P<{WHOLE_GROUP}>...)` group: {self.regex.pattern!r}"
            )
        if not self.separator:
            raise HeadingPatternError("Heading number separator must not be empty")

    @classmethod
    def compile(
        cls, pattern: str, separator: str = DEFAULT_SEPARATOR, flags: int = re.MULTILINE
    ) -> HeadingPattern:
        try:
            regex = re.compile(pattern, flags)
        except re.error as e:
            raise HeadingPatternError(f"Invalid heading pattern {pattern!r}: {e}") from e
        return cls(regex=regex, separator=separator)

    @classmethod
    def from_preset(cls, name: str = DEFAULT_PRESET) -> HeadingPattern:
        try:
            pattern = PRESETS[name]
        except KeyError:
            choices = ", ".join(sorted(PRESETS))
            raise HeadingPatternError(
                f"Unknown heading preset {name!r} (choices: {choices})"
            ) from None
        return cls.compile(pattern)

    @property
    def has_last_group(self) -> bool:
        return LAST_GROUP in self.regex.groupindex


def find_heading(
    text: str, pattern: HeadingPattern, start: int, end: int | None = None
) -> HeadingMatch | None:
    """
    Find the first heading whose match starts at or after `start`. If `end` is
    given, the heading number must also end at or before `end`; otherwise None
    is returned, as it is when there is no further heading.

    Anchors like `^` keep their meaning relative to the full text, so a search
    starting mid-line does not treat `start` as a line start. The pattern may
    look past `end` (e.g. for the space after a number). A heading whose match
    begins before `start`, such as an indented heading when `start` points at
    its number, is not found.
    """
    m = pattern.regex.search(text, start)
    if m is None:
        return None
    if m.group(WHOLE_GROUP) is None:
        raise HeadingPatternError(
            f"Heading pattern matched without its `{WHOLE_GROUP}` group at offset {m.start()}"
        )

    whole = Span(*m.span(WHOLE_GROUP))
    if end is not None and whole.end > end:
        return None

    last_component: Span | None = None
    if pattern.has_last_group and m.group(LAST_GROUP) is not None:
        last_component = Span(*m.span(LAST_GROUP))

    return HeadingMatch(
        text=m.group(WHOLE_GROUP),
        whole=whole,
        last_component=last_component,
        end=m.end(),
    )
