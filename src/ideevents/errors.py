"""Exceptions raised while scanning, reading and decoding event archives."""

from __future__ import annotations

from pathlib import Path


class IDEEventsError(Exception):
    """Base class for all ideevents errors."""


class NotFoundError(IDEEventsError, FileNotFoundError):
    """The corpus root does not exist or is not a directory."""


class ArchiveError(IDEEventsError):
    """Base class for errors tied to a single archive file."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)


class OpenError(ArchiveError):
    """The archive is missing, unreadable or not a valid container."""


class EndOfArchiveError(ArchiveError):
    """An entry was requested after the last one."""


class CorruptArchiveError(ArchiveError):
    """The container structure is inconsistent."""


class ArchiveClosedError(ArchiveError):
    """The archive was used after being closed."""


class MalformedRecordError(IDEEventsError, ValueError):
    """An entry cannot be parsed even as the common event shape."""

    def __init__(self, entry_name: str, position: int, reason: str) -> None:
        super().__init__(f"entry {position} ({entry_name}): {reason}")
        self.entry_name = entry_name
        self.position = position
        self.reason = reason
