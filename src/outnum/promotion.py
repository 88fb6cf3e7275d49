"""
Promote and demote headings within a range of a document.

Both operations only change how many components a heading number has, then
renumber the whole document so the actual values become canonical again:

- `promote` drops the last component (`2.3.1` -> `2.3`); top-level headings stay put.
- `demote` appends a component (`2.3` -> `2.3.1`); there is no depth limit.

A heading is inside `[start, end)` when its match starts at or after `start`
and its number ends at or before `end`; the match may look past `end`. Since
matches start at the line start for the presets, ranges should begin at a line
start (`Document.line_span` gives such ranges). The edit and the renumbering
that follows are committed together.
"""

from __future__ import annotations

import logging

from outnum.document import Document
from outnum.errors import HeadingPatternError
from outnum.matching import HeadingMatch, Span
from outnum.numbering import advance_cursor, depth, renumber

log = logging.getLogger(__name__)


def _check_range(document: Document, start: int, end: int) -> None:
    if not 0 <= start <= end <= len(document):
        raise ValueError(
            f"Invalid range [{start}, {end}) for document of length {len(document)}"
        )


def _last_component_span(document: Document, match: HeadingMatch) -> Span:
    """The last component of a multi-component number plus the separator before it."""
    separator = document.pattern.separator
    last = match.last_component
    if last is None:
        raise HeadingPatternError(
            f"Cannot promote heading {match.text!r} at offset {match.whole.start}: "
            "the heading pattern did not capture its `last` component"
        )
    span = Span(last.start - len(separator), last.end)
    if span.start < match.whole.start or document.read(Span(span.start, last.start)) != separator:
        raise HeadingPatternError(
            f"Cannot promote heading {match.text!r} at offset {match.whole.start}: "
            f"its `last` component is not preceded by {separator!r}"
        )
    return span


def promote(document: Document, start: int, end: int) -> int:
    """
    Move every heading within `[start, end)` one level up, then renumber.

    Returns the number of headings promoted.
    """
    _check_range(document, start, end)
    promoted = 0
    with document.transaction() as scratch:
        separator = scratch.pattern.separator
        cursor = start
        while cursor <= end:
            match = scratch.find_heading(cursor, end)
            if match is None:
                break
            next_cursor = match.end
            if depth(match.text, separator) > 1:
                span = _last_component_span(scratch, match)
                log.debug("Promoting heading at %d: %r", match.whole.start, match.text)
                scratch.delete(span)
                end -= span.end - span.start
                next_cursor -= span.end - span.start
                promoted += 1
            cursor = advance_cursor(cursor, next_cursor)
        renumber(scratch)

    log.info("Promoted %d heading(s)", promoted)
    return promoted


def demote(document: Document, start: int, end: int) -> int:
    """
    Move every heading within `[start, end)` one level down, then renumber.

    Returns the number of headings demoted.
    """
    _check_range(document, start, end)
    demoted = 0
    with document.transaction() as scratch:
        suffix = scratch.pattern.separator + "1"
        cursor = start
        while cursor <= end:
            match = scratch.find_heading(cursor, end)
            if match is None:
                break
            log.debug("Demoting heading at %d: %r", match.whole.start, match.text)
            scratch.insert(match.whole.end, suffix)
            end += len(suffix)
            demoted += 1
            cursor = advance_cursor(cursor, match.end + len(suffix))
        renumber(scratch)

    log.info("Demoted %d heading(s)", demoted)
    return demoted
