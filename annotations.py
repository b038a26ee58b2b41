"""Read-only views over the rows that carry a user note."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

import pandas as pd

from timeline_row import TimelineRow


@dataclass
class AnnotationRequest:
    """A note being created or edited for the row ``sequence_number``."""

    sequence_number: int
    note: str = ""

    @classmethod
    def for_row(cls, row: TimelineRow) -> "AnnotationRequest":
        return cls(sequence_number=row.sequence_number, note=row.note or "")


def annotated_rows(rows: Iterable[TimelineRow]) -> List[TimelineRow]:
    return [row for row in rows if row.has_note]


def hour_minute_format(seconds: float) -> str:
    """Return ``"05m"`` under one hour and ``"01h 05m"`` otherwise."""

    interval = int(seconds)
    minutes = (interval // 60) % 60
    hours = interval // 3600
    if hours == 0:
        return f"{minutes:02d}m"
    return f"{hours:02d}h {minutes:02d}m"


def notes_frame(rows: Iterable[TimelineRow]) -> pd.DataFrame:
    """Return the annotated rows as a table for the notes list."""

    columns = ["SequenceNumber", "Timestamp", "Time", "Note"]
    records = [
        {
            "SequenceNumber": row.sequence_number,
            "Timestamp": row.timestamp,
            "Time": hour_minute_format(row.timestamp),
            "Note": row.note,
        }
        for row in annotated_rows(rows)
    ]
    return pd.DataFrame(records, columns=columns)


__all__ = ["AnnotationRequest", "annotated_rows", "hour_minute_format", "notes_frame"]
