"""
Hierarchical dot-separated numbering (`1`, `1.1`, `1.2.1`) for outline-style
headings in plain text.

Usage::

    from outnum import Document, demote, renumber

    doc = Document("1 Intro\n5 Design\n7.3 Goals\n")
    renumber(doc)
    doc.text  # "1 Intro\n2 Design\n2.1 Goals\n"
"""

from outnum.document import Document, DocumentSettings
from outnum.errors import HeadingPatternError, OutnumError, ScanStalledError
from outnum.matching import HeadingMatch, HeadingPattern, Span, find_heading
from outnum.numbering import depth, is_canonical, renumber
from outnum.promotion import demote, promote

__all__ = [
    "Document",
    "DocumentSettings",
    "HeadingMatch",
    "HeadingPattern",
    "HeadingPatternError",
    "OutnumError",
    "ScanStalledError",
    "Span",
    "demote",
    "depth",
    "find_heading",
    "is_canonical",
    "promote",
    "renumber",
]
