"""Forward-only reading of event archives.

Archives are zip files holding one serialized event per member. Members are
read one at a time, in storage order, so large archives never have to be
loaded in full.
"""

from __future__ import annotations

import logging
import zipfile
import zlib
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, List

from ideevents.errors import (
    ArchiveClosedError,
    CorruptArchiveError,
    EndOfArchiveError,
    OpenError,
)
from ideevents.models import EventRecord, RawEntry

if TYPE_CHECKING:
    from ideevents.ingestion.decoder import RecordDecoder

LOGGER = logging.getLogger(__name__)


class ReadingArchive:
    """Cursor over the entries of one archive file.

    Use it as a context manager so the file is released on every exit path::

        with ReadingArchive(path) as archive:
            while archive.has_next():
                record = archive.get_next(decoder)
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        try:
            self._zip = zipfile.ZipFile(self._path)
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
            raise OpenError(self._path, f"cannot open archive: {exc}") from exc

        self._members: List[zipfile.ZipInfo] = [
            info for info in self._zip.infolist() if not info.is_dir()
        ]
        self._cursor = 0
        self._closed = False
        LOGGER.debug("Opened %s (%d entries)", self._path, len(self._members))

    @classmethod
    def open(cls, path: Path | str) -> "ReadingArchive":
        return cls(path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def entry_count(self) -> int:
        return len(self._members)

    def _ensure_open(self) -> None:
        if self._closed:
            raise ArchiveClosedError(self._path, "archive is closed")

    def has_next(self) -> bool:
        """Return True if at least one more entry can be read."""
        self._ensure_open()
        return self._cursor < len(self._members)

    def next_entry(self) -> RawEntry:
        """Read the next entry and advance the cursor."""
        if not self.has_next():
            raise EndOfArchiveError(self._path, "no more entries")

        position = self._cursor
        info = self._members[position]
        self._cursor += 1
        try:
            data = self._zip.read(info)
        except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError) as exc:
            raise CorruptArchiveError(
                self._path, f"cannot read entry {position} ({info.filename}): {exc}"
            ) from exc
        return RawEntry(name=info.filename, position=position, data=data)

    def get_next(self, decoder: "RecordDecoder") -> EventRecord:
        """Read the next entry and decode it into a typed record."""
        return decoder.decode(self.next_entry())

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._zip.close()
        LOGGER.debug("Closed %s", self._path)

    def __enter__(self) -> "ReadingArchive":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[RawEntry]:
        try:
            while self.has_next():
                yield self.next_entry()
        finally:
            self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"{self._cursor}/{len(self._members)}"
        return f"ReadingArchive({str(self._path)!r}, {state})"
