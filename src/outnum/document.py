"""
In-memory document buffer and per-document numbering settings.

A `Document` is the single source of truth for outline shape: headings are
located by pattern on every pass, never cached. Edits go through a
`transaction()` so a failing operation leaves the committed text untouched.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from outnum.matching import HeadingMatch, HeadingPattern, Span, find_heading


@dataclass
class DocumentSettings:
    """
    Numbering settings that travel with a single document.

    `enabled` turns numbering on for the document as a whole; `renumber_on_save`
    additionally renumbers right before the document is written out.
    """

    pattern: HeadingPattern = field(default_factory=HeadingPattern.from_preset)
    enabled: bool = True
    renumber_on_save: bool = False


class Document:
    """
    A mutable text buffer with the small editing interface the numbering
    operations need: find, read, replace, insert and delete.
    """

    def __init__(self, text: str = "", settings: DocumentSettings | None = None) -> None:
        self._text: str = text
        self.settings: DocumentSettings = settings if settings is not None else DocumentSettings()

    def __repr__(self) -> str:
        return f"Document({self._text!r})"

    def __len__(self) -> int:
        return len(self._text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def pattern(self) -> HeadingPattern:
        return self.settings.pattern

    def find_heading(self, start: int, end: int | None = None) -> HeadingMatch | None:
        return find_heading(self._text, self.settings.pattern, start, end)

    def read(self, span: Span) -> str:
        return self._text[span.start : span.end]

    def replace(self, span: Span, new_text: str) -> int:
        """Replace `span` with `new_text` and return the end offset of the new text."""
        self._check_span(span)
        self._text = self._text[: span.start] + new_text + self._text[span.end :]
        return span.start + len(new_text)

    def insert(self, offset: int, new_text: str) -> int:
        return self.replace(Span(offset, offset), new_text)

    def delete(self, span: Span) -> int:
        return self.replace(span, "")

    def copy(self) -> Document:
        return Document(self._text, self.settings)

    @contextmanager
    def transaction(self) -> Iterator[Document]:
        """
        Yield a scratch copy of this document. Its text is committed back only if
        the block exits without an exception.
        """
        scratch = self.copy()
        yield scratch
        self._text = scratch._text

    def line_span(self, first: int, last: int) -> Span:
        """
        Character span covering 1-based lines `first` through `last` inclusive,
        including the final line's newline if there is one.
        """
        lines = self._text.splitlines(keepends=True)
        if first < 1 or last < first or last > max(len(lines), 1):
            raise ValueError(
                f"Invalid line range {first}:{last} (document has {len(lines)} lines)"
            )
        start = sum(len(line) for line in lines[: first - 1])
        end = start + sum(len(line) for line in lines[first - 1 : last])
        return Span(start, end)

    def _check_span(self, span: Span) -> None:
        if not 0 <= span.start <= span.end <= len(self._text):
            raise ValueError(f"Span {tuple(span)} is outside document of length {len(self._text)}")
