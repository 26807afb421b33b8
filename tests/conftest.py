"""Shared fixtures for building event archives."""

from __future__ import annotations

import json
import zipfile
from pathlib import Path
from typing import Any, Callable, Sequence, Union

import pytest

Entry = Union[bytes, str, dict]

COMMAND_TYPE = "KaVE.Commons.Model.Events.CommandEvent, KaVE.Commons"
COMPLETION_TYPE = "KaVE.Commons.Model.Events.CompletionEvents.CompletionEvent, KaVE.Commons"


def _encode(entry: Entry) -> bytes:
    if isinstance(entry, bytes):
        return entry
    if isinstance(entry, str):
        return entry.encode("utf-8")
    return json.dumps(entry).encode("utf-8")


@pytest.fixture
def make_archive() -> Callable[..., Path]:
    """Return a factory writing ``entries`` as members of a zip archive."""

    def _make(path: Path, entries: Sequence[Entry], *, compression: int = zipfile.ZIP_DEFLATED) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w", compression=compression) as archive:
            for index, entry in enumerate(entries):
                archive.writestr(f"{index}-Event.json", _encode(entry))
        return path

    return _make


@pytest.fixture
def command_event() -> Callable[..., dict[str, Any]]:
    def _make(command_id: str = "rename", **extra: Any) -> dict[str, Any]:
        return {"$type": COMMAND_TYPE, "CommandId": command_id, **extra}

    return _make


@pytest.fixture
def completion_event() -> Callable[..., dict[str, Any]]:
    def _make(enclosing_type: str | None = "0T:Foo.Bar, MyProject", **extra: Any) -> dict[str, Any]:
        return {
            "$type": COMPLETION_TYPE,
            "Context2": {
                "$type": "KaVE.Commons.Model.Events.CompletionEvents.Context, KaVE.Commons",
                "SST": {
                    "$type": "KaVE.Commons.Model.SSTs.Impl.SST, KaVE.Commons",
                    "EnclosingType": enclosing_type,
                },
            },
            **extra,
        }

    return _make
