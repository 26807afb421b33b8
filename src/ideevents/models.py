"""Core ideevents data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, ClassVar, Dict, Optional

from ideevents.utils.names import assembly_of, short_name, strip_assembly, strip_kind_prefix

KIND_COMMAND = "command"
KIND_COMPLETION = "completion"
KIND_GENERIC = "generic"


@dataclass(frozen=True, slots=True)
class RawEntry:
    """One archive member: its name, position among entries and raw bytes."""

    name: str
    position: int
    data: bytes


@dataclass(frozen=True, slots=True)
class TypeName:
    """Serialized type identifier such as ``0T:Foo.Bar, MyAssembly, 1.0.0.0``."""

    identifier: str

    @property
    def is_unknown(self) -> bool:
        return self.full_name in ("", "?")

    @property
    def full_name(self) -> str:
        return strip_kind_prefix(strip_assembly(self.identifier))

    @property
    def name(self) -> str:
        return short_name(self.full_name)

    @property
    def namespace(self) -> str:
        full_name = self.full_name
        if "." not in full_name:
            return ""
        return full_name[: len(full_name) - len(self.name) - 1]

    @property
    def assembly(self) -> Optional[str]:
        return assembly_of(self.identifier)


@dataclass(frozen=True, slots=True)
class SST:
    """Structural snapshot of the code surrounding an event."""

    enclosing_type: Optional[TypeName] = None


@dataclass(frozen=True, slots=True)
class Context:
    sst: SST = field(default_factory=SST)


@dataclass(slots=True)
class EventRecord:
    """Fields shared by every decoded event.

    ``kind`` is the variant tag used for dispatch. It is fixed per class and
    set once when the decoder picks the class for an entry.
    """

    kind: ClassVar[str] = KIND_GENERIC

    type_name: str
    triggered_at: Optional[datetime] = None
    triggered_by: Optional[str] = None
    duration: Optional[timedelta] = None
    session_id: Optional[str] = None
    kave_version: Optional[str] = None
    active_window: Optional[str] = None
    active_document: Optional[str] = None

    @property
    def event_type(self) -> str:
        return short_name(self.type_name)


@dataclass(slots=True)
class CommandEvent(EventRecord):
    kind: ClassVar[str] = KIND_COMMAND

    command_id: str = ""


@dataclass(slots=True)
class CompletionEvent(EventRecord):
    """Code completion session, with a snapshot of the enclosing code."""

    kind: ClassVar[str] = KIND_COMPLETION

    context: Context = field(default_factory=Context)
    terminated_state: Optional[str] = None
    selections_count: int = 0

    @property
    def enclosing_type_name(self) -> Optional[str]:
        enclosing = self.context.sst.enclosing_type
        if enclosing is None or enclosing.is_unknown:
            return None
        return enclosing.full_name


@dataclass(slots=True)
class GenericEvent(EventRecord):
    """Fallback for events without a registered decoder.

    ``fields`` keeps the variant-specific payload that was not interpreted.
    """

    kind: ClassVar[str] = KIND_GENERIC

    fields: Dict[str, Any] = field(default_factory=dict)
