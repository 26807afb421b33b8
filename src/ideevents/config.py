"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ideevents.processing.traversal import MALFORMED_POLICIES
from ideevents.utils.files import ARCHIVE_SUFFIX


def _get_default_events_dir() -> Path:
    """Get the default events directory."""
    # A checkout with a local copy of the dataset
    local_dir = Path("data/events")
    if local_dir.exists():
        return local_dir

    return Path.home() / "KaVE" / "Events"


@dataclass(slots=True)
class AppConfig:
    events_dir: Path | None = None
    archive_suffix: str = ARCHIVE_SUFFIX
    malformed_policy: str = "skip"
    fail_fast: bool = False

    def __post_init__(self) -> None:
        if self.events_dir is None:
            self.events_dir = _get_default_events_dir()
        if self.malformed_policy not in MALFORMED_POLICIES:
            raise ValueError(
                f"malformed_policy must be one of {', '.join(MALFORMED_POLICIES)}, "
                f"got {self.malformed_policy!r}"
            )

    def resolve_events_dir(self, base_dir: Path | None = None) -> Path:
        if self.events_dir is None:
            self.events_dir = _get_default_events_dir()
        if Path(self.events_dir).is_absolute() or base_dir is None:
            return Path(self.events_dir)
        return base_dir / self.events_dir
