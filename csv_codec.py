"""Read and write cook timeline CSV exports.

An export is a free-text preamble (device and cook details), one blank line,
then a comma separated table whose first line holds the column headers:

    Probe: 1000ABCD
    Firmware: v1.2.3

    Timestamp,SessionID,SequenceNumber,T1,...,PredictionValueSeconds
    0,4F2A,0,21.5,...,0
    5,4F2A,1,21.6,...,0

Rows that fail to decode are skipped so that a partially corrupt export still
loads; only a missing preamble/table separator rejects the whole file.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from session_document import SessionDocument
from settings import dprint
from timeline_row import NOTES_HEADER, TimelineRow, decode_row

SECTION_SEPARATOR = "\n\n"
LINE_SEPARATOR = "\n"
FIELD_SEPARATOR = ","


class MalformedDocument(ValueError):
    """Raised when the text cannot be split into a preamble and a table."""


def normalize_line_endings(text: str) -> str:
    # Some exports use "\r\n" for every line, others just "\n".
    return text.replace("\r\n", "\n")


def split_sections(text: str):
    """Return ``(preamble_text, table_text)`` split at the first blank line."""

    preamble, separator, table = text.partition(SECTION_SEPARATOR)
    if not separator:
        raise MalformedDocument("CSV export has no blank line between the cook details and the table")
    if not table.strip():
        raise MalformedDocument("CSV export has no table after the cook details")
    return preamble, table.lstrip(LINE_SEPARATOR)


def parse_headers(line: str) -> List[str]:
    headers = line.split(FIELD_SEPARATOR)
    if NOTES_HEADER not in headers:
        headers.append(NOTES_HEADER)
    return headers


def _zip_fields(headers: List[str], line: str) -> Dict[str, Optional[str]]:
    values = line.split(FIELD_SEPARATOR)
    # Duplicate headers collide here and the later column wins.
    return {
        header: values[index] if index < len(values) else None
        for index, header in enumerate(headers)
    }


def parse_rows(headers: List[str], lines: List[str]) -> List[TimelineRow]:
    rows: List[TimelineRow] = []
    dropped = 0
    for line_number, line in enumerate(lines, start=2):
        if not line.strip():
            continue
        row, failure = decode_row(_zip_fields(headers, line))
        if row is None:
            dropped += 1
            dprint(f"[csv_codec] dropped table line {line_number}: bad {failure.header} value {failure.value!r}")
            continue
        rows.append(row)

    if dropped:
        dprint(f"[csv_codec] kept {len(rows)} rows, dropped {dropped}")
    return rows


def parse(text: str) -> SessionDocument:
    """Parse an export into a :class:`SessionDocument`.

    Raises
    ------
    MalformedDocument
        When no blank line separates the preamble from the table.
    """

    preamble, table = split_sections(normalize_line_endings(text))
    lines = table.split(LINE_SEPARATOR)
    headers = parse_headers(lines[0])
    rows = parse_rows(headers, lines[1:])
    return SessionDocument(preamble_text=preamble, column_headers=headers, rows=rows)


def serialize_row(headers: List[str], row: TimelineRow) -> str:
    values = row.to_fields()
    return FIELD_SEPARATOR.join(values.get(header, "") for header in headers)


def serialize(document: SessionDocument) -> str:
    """Write a document back out in the export layout, headers in file order."""

    header_line = FIELD_SEPARATOR.join(document.column_headers)
    head = SECTION_SEPARATOR.join([document.preamble_text, header_line])
    body = [serialize_row(document.column_headers, row) for row in document.rows]
    return LINE_SEPARATOR.join([head] + body)


__all__ = [
    "MalformedDocument",
    "normalize_line_endings",
    "parse",
    "serialize",
    "split_sections",
]
