"""In-memory cook session: preamble, header order and timeline rows."""

from __future__ import annotations

import re
from typing import Iterator, List, Optional

from timeline_row import TimelineRow

# Characters that would break the unquoted CSV layout when written back.
_NOTE_UNSAFE_RE = re.compile(r"[,\r\n]")


def clean_note_text(text: Optional[str]) -> str:
    if not text:
        return ""
    return _NOTE_UNSAFE_RE.sub(" ", text)


class SessionDocument:
    """The unit that is loaded, annotated and saved.

    Rows keep their file order. Note edits replace the affected row with an
    updated copy, so a row object held by a caller never changes underneath it.
    """

    def __init__(
        self,
        preamble_text: str = "",
        column_headers: Optional[List[str]] = None,
        rows: Optional[List[TimelineRow]] = None,
    ) -> None:
        self.preamble_text = preamble_text
        self.column_headers: List[str] = list(column_headers or [])
        self.rows: List[TimelineRow] = list(rows or [])
        self.revision = 0

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[TimelineRow]:
        return iter(self.rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SessionDocument):
            return NotImplemented
        return (
            self.preamble_text == other.preamble_text
            and self.column_headers == other.column_headers
            and self.rows == other.rows
        )

    def __repr__(self) -> str:
        return (
            f"SessionDocument(columns={len(self.column_headers)}, rows={len(self.rows)}, "
            f"revision={self.revision})"
        )

    def _index_of(self, sequence_number: int) -> Optional[int]:
        for index, row in enumerate(self.rows):
            if row.sequence_number == sequence_number:
                return index
        return None

    def row_for(self, sequence_number: int) -> Optional[TimelineRow]:
        index = self._index_of(sequence_number)
        return None if index is None else self.rows[index]

    def _replace_note(self, sequence_number: int, note: Optional[str]) -> bool:
        index = self._index_of(sequence_number)
        if index is None:
            return False

        row = self.rows[index]
        if (row.note or None) == (note or None):
            return False

        self.rows[index] = row.with_note(note)
        self.revision += 1
        return True

    def add_or_update_note(self, sequence_number: int, text: str) -> bool:
        """Attach ``text`` to the row with ``sequence_number``.

        Unknown sequence numbers are ignored. Returns True when a row changed.
        """

        return self._replace_note(sequence_number, clean_note_text(text))

    def remove_note(self, sequence_number: int) -> bool:
        return self._replace_note(sequence_number, None)


__all__ = ["SessionDocument", "clean_note_text"]
