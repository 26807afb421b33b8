"""Utility helpers for locating event archives."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterator, Set

from ideevents.errors import NotFoundError

LOGGER = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".zip"


def _log_walk_error(exc: OSError) -> None:
    LOGGER.warning("Skipping unreadable directory %s: %s", exc.filename, exc.strerror or exc)


def iter_archive_paths(root: Path, *, suffix: str = ARCHIVE_SUFFIX) -> Iterator[Path]:
    """Yield archive files below ``root``, descending into subdirectories.

    Directories that cannot be listed are logged and skipped.
    """
    suffix = suffix.lower()
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        dirnames.sort()
        for filename in sorted(filenames):
            candidate = Path(dirpath) / filename
            if filename.lower().endswith(suffix) and candidate.is_file():
                yield candidate


def find_archives(root: Path, *, suffix: str = ARCHIVE_SUFFIX) -> Set[str]:
    """Return the archives below ``root`` as ``/``-separated relative paths.

    Symlinks that resolve to an archive already found are reported once,
    under the first path the walk reaches.
    """
    root = Path(root)
    if not root.is_dir():
        raise NotFoundError(f"Events directory not found: {root}")

    seen: Dict[Path, str] = {}
    for path in iter_archive_paths(root, suffix=suffix):
        seen.setdefault(path.resolve(), path.relative_to(root).as_posix())
    return set(seen.values())
