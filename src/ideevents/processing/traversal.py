"""Corpus traversal pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from ideevents.dispatch.router import HandlerTable
from ideevents.errors import CorruptArchiveError, MalformedRecordError, OpenError
from ideevents.ingestion.archive import ReadingArchive
from ideevents.ingestion.decoder import RecordDecoder
from ideevents.utils.files import ARCHIVE_SUFFIX, find_archives

LOGGER = logging.getLogger(__name__)

MALFORMED_POLICIES = ("skip", "abort")


@dataclass(slots=True)
class TraversalStats:
    archives: int = 0
    failed_archives: int = 0
    records: int = 0
    malformed: int = 0
    handler_errors: int = 0
    processed_archives: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def fail(self, archive: str, message: str) -> None:
        self.failed_archives += 1
        self.errors.append(f"{archive}: {message}")


class Traversal:
    """Scans a corpus and routes every decoded record to its handler.

    Malformed entries are skipped by default (``malformed_policy="skip"``);
    with ``"abort"`` the remainder of the archive is dropped instead. Handler
    errors abandon the current archive, or are re-raised when ``fail_fast``.
    """

    def __init__(
        self,
        decoder: RecordDecoder,
        handlers: HandlerTable,
        *,
        malformed_policy: str = "skip",
        fail_fast: bool = False,
        suffix: str = ARCHIVE_SUFFIX,
        on_archive: Optional[Callable[[str], None]] = None,
    ) -> None:
        if malformed_policy not in MALFORMED_POLICIES:
            raise ValueError(f"Unknown malformed policy: {malformed_policy!r}")
        self.decoder = decoder
        self.handlers = handlers
        self.malformed_policy = malformed_policy
        self.fail_fast = fail_fast
        self.suffix = suffix
        self.on_archive = on_archive

    def run(self, root: Path) -> TraversalStats:
        """Process every archive below ``root`` in path order."""
        archives = sorted(find_archives(root, suffix=self.suffix))
        stats = TraversalStats()
        if not archives:
            LOGGER.warning("No archives found in %s", root)
            return stats

        for archive in archives:
            if self.on_archive is not None:
                self.on_archive(archive)
            stats.archives += 1
            try:
                if self._process_archive(Path(root) / archive, archive, stats):
                    stats.processed_archives.append(archive)
            except (OpenError, CorruptArchiveError) as exc:
                LOGGER.error("Skipping archive %s: %s", archive, exc)
                stats.fail(archive, str(exc))

        return stats

    def _process_archive(self, path: Path, archive: str, stats: TraversalStats) -> bool:
        """Process one archive; return False when it was abandoned."""
        LOGGER.info("Processing: %s", archive)
        with ReadingArchive.open(path) as reader:
            while reader.has_next():
                try:
                    record = reader.get_next(self.decoder)
                except MalformedRecordError as exc:
                    stats.malformed += 1
                    LOGGER.warning("Malformed record in %s: %s", archive, exc)
                    if self.malformed_policy == "abort":
                        stats.fail(archive, str(exc))
                        return False
                    continue

                try:
                    self.handlers.route(record)
                except Exception as exc:
                    stats.handler_errors += 1
                    LOGGER.exception("Handler failed for %s in %s", record.event_type, archive)
                    if self.fail_fast:
                        raise
                    stats.fail(archive, f"handler error: {exc}")
                    return False
                stats.records += 1
        return True
