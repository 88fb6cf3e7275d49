"""
Renumber-on-save support.

Whether a document is renumbered before it is written is decided by its own
`DocumentSettings`, so different documents can opt in independently.
"""

from __future__ import annotations

import logging
from pathlib import Path

from strif import atomic_output_file

from outnum.document import Document
from outnum.numbering import renumber

log = logging.getLogger(__name__)

BACKUP_SUFFIX = ".orig"


def prepare_for_save(document: Document) -> bool:
    """
    Renumber `document` if its settings ask for it. Returns whether it was renumbered.
    """
    settings = document.settings
    if not (settings.enabled and settings.renumber_on_save):
        return False
    renumber(document)
    return True


def save_document(document: Document, path: str | Path, backup: bool = True) -> bool:
    """
    Write `document` to `path` atomically, renumbering first if configured.

    With `backup`, an existing file is kept alongside as `<name>.orig`.
    Returns whether the document was renumbered.
    """
    renumbered = prepare_for_save(document)
    backup_suffix = BACKUP_SUFFIX if backup else None
    with atomic_output_file(
        str(path), make_parents=True, backup_suffix=backup_suffix
    ) as tmp_path:
        Path(tmp_path).write_text(document.text, encoding="utf-8", newline="")
    log.debug("Saved %s (renumbered: %s)", path, renumbered)
    return renumbered
