"""Open sessions backed by a local file or by cloud storage.

A :class:`SessionFile` pairs a parsed :class:`SessionDocument` with the source
its bytes came from. Local and cloud sessions differ only in their source, so
the source is a small object with ``title``, ``read_text`` and ``write_text``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Protocol, Tuple, Union

import csv_codec
from cloud_record import CloudRecord
from session_document import SessionDocument
from settings import dprint


class CloudStore(Protocol):
    def download(self, record: CloudRecord) -> Tuple[CloudRecord, str]:
        ...

    def upload(self, record: CloudRecord, contents: str) -> CloudRecord:
        ...


class SessionSource(Protocol):
    @property
    def title(self) -> str:
        ...

    def read_text(self) -> str:
        ...

    def write_text(self, text: str) -> None:
        ...


class LocalSource:
    """A CSV export on the local filesystem."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    @property
    def title(self) -> str:
        return self.path.name

    def read_text(self) -> str:
        """Read the export handling BOMs and stray null bytes."""

        raw = self.path.read_bytes()
        cleaned = raw.replace(b"\x00", b"")
        return cleaned.decode("utf-8-sig", errors="replace")

    def write_text(self, text: str) -> None:
        self.path.write_text(text, encoding="utf-8")


class CloudSource:
    """A cook downloaded from cloud storage together with its record."""

    def __init__(self, record: CloudRecord, store: CloudStore, csv_text: str) -> None:
        self.record = record
        self.store = store
        self._csv_text = csv_text

    @property
    def title(self) -> str:
        return self.record.title

    def read_text(self) -> str:
        return self._csv_text

    def write_text(self, text: str) -> None:
        self.record = self.store.upload(self.record, text)
        self._csv_text = text


class SessionFile:
    """A loaded session and where it is saved to.

    With ``autosave`` enabled every note change that alters the document is
    written straight back to the source.
    """

    def __init__(
        self,
        source: SessionSource,
        autosave: bool = False,
        on_saved: Optional[Callable[["SessionFile"], None]] = None,
    ) -> None:
        self.source = source
        self.autosave = autosave
        self.on_saved = on_saved
        self.document: SessionDocument = csv_codec.parse(source.read_text())
        dprint(f"[session_files] opened {source.title!r}: {len(self.document)} rows")

    @property
    def title(self) -> str:
        return self.source.title

    @property
    def output(self) -> str:
        return csv_codec.serialize(self.document)

    def save(self) -> None:
        self.source.write_text(self.output)
        dprint(f"[session_files] saved {self.title!r} at revision {self.document.revision}")
        if self.on_saved is not None:
            self.on_saved(self)

    def _after_change(self, changed: bool) -> bool:
        if changed and self.autosave:
            self.save()
        return changed

    def add_or_update_note(self, sequence_number: int, text: str) -> bool:
        return self._after_change(self.document.add_or_update_note(sequence_number, text))

    def remove_note(self, sequence_number: int) -> bool:
        return self._after_change(self.document.remove_note(sequence_number))


def open_local_session(path: Union[str, Path], autosave: bool = False) -> SessionFile:
    return SessionFile(LocalSource(path), autosave=autosave)


def open_cloud_session(store: CloudStore, record: CloudRecord, autosave: bool = False) -> SessionFile:
    downloaded, csv_text = store.download(record)
    return SessionFile(CloudSource(downloaded, store, csv_text), autosave=autosave)


__all__ = [
    "CloudSource",
    "CloudStore",
    "LocalSource",
    "SessionFile",
    "open_cloud_session",
    "open_local_session",
]
