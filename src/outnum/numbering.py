"""
Depth calculation and canonical renumbering of dotted heading numbers.

Renumbering is a single left-to-right scan. Each heading's depth is taken from
its current number (separators + 1), and a stack of per-level counters turns
the sequence of depths into canonical numbers:

    depths   1    2      2      1    2      3        2
    numbers  1    1.1    1.2    2    2.1    2.1.1    2.2

Entering a deeper level without the intermediate ones starts the skipped levels
at zero, so depths `[1, 3]` renumber to `1, 1.0.1`.

Only nesting depth and order of appearance matter, so renumbering an already
renumbered document changes nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from outnum.document import Document
from outnum.errors import ScanStalledError
from outnum.matching import DEFAULT_SEPARATOR

log = logging.getLogger(__name__)


def depth(text: str, separator: str = DEFAULT_SEPARATOR) -> int:
    """
    Nesting depth of a heading number: the count of separators plus one.

    >>> depth("1.2.3")
    3
    >>> depth("")
    1
    """
    return text.count(separator) + 1


def render_number(counters: Iterable[int], separator: str = DEFAULT_SEPARATOR) -> str:
    """Render counters as a heading number, e.g. `[2, 0, 3]` -> `"2.0.3"`."""
    return separator.join(str(c) for c in counters)


class HeadingCounter:
    """
    The counter stack for one renumbering pass: one running counter per open
    nesting level, index 0 for depth 1.
    """

    def __init__(self) -> None:
        self.counters: list[int] = []

    def advance(self, level: int) -> list[int]:
        """
        Count one more heading at `level` and return the counters for its number.
        """
        if level < 1:
            raise ValueError(f"Heading level must be at least 1: {level}")
        while len(self.counters) > level:
            self.counters.pop()
        while len(self.counters) < level:
            self.counters.append(0)
        self.counters[-1] += 1
        return list(self.counters)


def advance_cursor(cursor: int, next_cursor: int) -> int:
    """
    Move a scan cursor to `next_cursor`, which must be strictly past `cursor`.
    """
    if next_cursor <= cursor:
        raise ScanStalledError(
            f"Heading scan made no progress at offset {cursor}; "
            "check that the heading pattern cannot match empty text"
        )
    return next_cursor


def renumber(document: Document) -> int:
    """
    Rewrite every heading number in `document` to its canonical value.

    Returns the number of headings whose text changed. The document is updated
    in place, and left unchanged if an error is raised.
    """
    pattern = document.pattern
    changed = 0
    with document.transaction() as scratch:
        counter = HeadingCounter()
        cursor = 0
        while cursor <= len(scratch):
            match = scratch.find_heading(cursor)
            if match is None:
                break
            level = depth(match.text, pattern.separator)
            new_number = render_number(counter.advance(level), pattern.separator)
            if new_number != match.text:
                log.debug(
                    "Renumbering heading at %d: %r -> %r", match.whole.start, match.text, new_number
                )
                changed += 1
            new_end = scratch.replace(match.whole, new_number)
            # Continue past the rest of the match, shifted by the length change.
            cursor = advance_cursor(cursor, max(match.end + (new_end - match.whole.end), new_end))

    if changed:
        log.info("Renumbered %d heading(s)", changed)
    return changed


def is_canonical(document: Document) -> bool:
    """Whether renumbering would leave the document text unchanged."""
    scratch = document.copy()
    renumber(scratch)
    return scratch.text == document.text
