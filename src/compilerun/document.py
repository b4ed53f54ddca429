"""The source document a command acts on."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from compilerun.utils import atomic_write_text


@dataclass
class SourceDocument:
    """A source file plus, optionally, unsaved buffer contents.

    ``text`` holds edits that are not on disk yet (an editor piping its
    buffer on stdin).  ``language_id`` overrides suffix-based detection.
    """

    path: Path
    language_id: str | None = None
    text: str | None = None

    @property
    def is_dirty(self) -> bool:
        return self.text is not None

    def save(self) -> bool:
        """Write pending text to disk.  Returns True if anything was written."""
        if self.text is None:
            return False
        atomic_write_text(self.path, self.text)
        self.text = None
        return True
