"""Decoding of raw archive entries into typed event records.

Every entry is a JSON object whose ``$type`` member names the event class,
e.g. ``"KaVE.Commons.Model.Events.CommandEvent, KaVE.Commons"``. The decoder
validates the fields shared by all events, then looks the type name up in a
table of decode functions. Type names missing from the table, and known
types whose own fields do not validate, decode to
:class:`~ideevents.models.GenericEvent`, so archives written by newer
producers stay readable.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ideevents.errors import MalformedRecordError
from ideevents.models import (
    SST,
    CommandEvent,
    CompletionEvent,
    Context,
    EventRecord,
    GenericEvent,
    RawEntry,
    TypeName,
)
from ideevents.utils.names import strip_assembly

LOGGER = logging.getLogger(__name__)

COMMAND_EVENT = "KaVE.Commons.Model.Events.CommandEvent"
COMPLETION_EVENT = "KaVE.Commons.Model.Events.CompletionEvents.CompletionEvent"

_TRIGGERS = {0: "Unknown", 1: "Click", 2: "Shortcut", 3: "Typing", 4: "Automatic"}
_TERMINATION_STATES = {0: "Applied", 1: "Cancelled", 2: "Filtered", 3: "Unknown"}

# .NET round-trip timestamps carry seven fractional digits
_TIMESTAMP = re.compile(r"^(?P<base>[^.]*T\d{2}:\d{2}:\d{2})(?:\.(?P<frac>\d+))?(?P<zone>.*)$")
# .NET TimeSpan: [-][d.]hh:mm:ss[.fffffff]
_TIMESPAN = re.compile(
    r"^(?P<sign>-)?(?:(?P<days>\d+)\.)?(?P<hours>\d+):(?P<minutes>\d+):(?P<seconds>\d+)"
    r"(?:\.(?P<frac>\d+))?$"
)


def _enum_name(value: Any, names: Mapping[int, str]) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return names.get(value, str(value))
    return value


class CommonFields(BaseModel):
    """Fields every serialized event carries."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    type_id: str = Field(alias="$type")
    triggered_at: Optional[datetime] = Field(default=None, alias="TriggeredAt")
    triggered_by: Optional[str] = Field(default=None, alias="TriggeredBy")
    duration: Optional[timedelta] = Field(default=None, alias="Duration")
    session_id: Optional[str] = Field(default=None, alias="IDESessionUUID")
    kave_version: Optional[str] = Field(default=None, alias="KaVEVersion")
    active_window: Optional[str] = Field(default=None, alias="ActiveWindow")
    active_document: Optional[str] = Field(default=None, alias="ActiveDocument")

    @field_validator("type_id")
    @classmethod
    def _require_type_name(cls, value: str) -> str:
        if not strip_assembly(value):
            raise ValueError("type discriminator is empty")
        return value.strip()

    @field_validator("triggered_at", mode="before")
    @classmethod
    def _normalize_timestamp(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        match = _TIMESTAMP.match(value.strip())
        if match is None:
            return value
        frac = match.group("frac")
        zone = match.group("zone")
        if zone == "Z":
            zone = "+00:00"
        return match.group("base") + (f".{frac[:6]}" if frac else "") + zone

    @field_validator("triggered_by", mode="before")
    @classmethod
    def _trigger_name(cls, value: Any) -> Any:
        return _enum_name(value, _TRIGGERS)

    @field_validator("duration", mode="before")
    @classmethod
    def _parse_timespan(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        match = _TIMESPAN.match(value.strip())
        if match is None:
            return value
        frac = (match.group("frac") or "0")[:6].ljust(6, "0")
        span = timedelta(
            days=int(match.group("days") or 0),
            hours=int(match.group("hours")),
            minutes=int(match.group("minutes")),
            seconds=int(match.group("seconds")),
            microseconds=int(frac),
        )
        return -span if match.group("sign") else span

    @property
    def type_name(self) -> str:
        return strip_assembly(self.type_id)

    def record_kwargs(self) -> Dict[str, Any]:
        return {
            "type_name": self.type_name,
            "triggered_at": self.triggered_at,
            "triggered_by": self.triggered_by,
            "duration": self.duration,
            "session_id": self.session_id,
            "kave_version": self.kave_version,
            "active_window": self.active_window,
            "active_document": self.active_document,
        }


_COMMON_KEYS = frozenset(
    field.alias or name for name, field in CommonFields.model_fields.items()
)

DecodeFn = Callable[[CommonFields, Mapping[str, Any]], EventRecord]


class _CommandFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    command_id: str = Field(default="", alias="CommandId")


class _SSTFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enclosing_type: Optional[str] = Field(default=None, alias="EnclosingType")


class _ContextFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sst: Optional[_SSTFields] = Field(default=None, alias="SST")


class _CompletionFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    context: Optional[_ContextFields] = Field(default=None, alias="Context2")
    terminated_state: Optional[str] = Field(default=None, alias="TerminatedState")
    selections: Optional[List[Any]] = Field(default=None, alias="Selections")

    @field_validator("terminated_state", mode="before")
    @classmethod
    def _state_name(cls, value: Any) -> Any:
        return _enum_name(value, _TERMINATION_STATES)


def decode_command(common: CommonFields, payload: Mapping[str, Any]) -> CommandEvent:
    fields = _CommandFields.model_validate(payload)
    return CommandEvent(**common.record_kwargs(), command_id=fields.command_id)


def decode_completion(common: CommonFields, payload: Mapping[str, Any]) -> CompletionEvent:
    fields = _CompletionFields.model_validate(payload)
    enclosing = None
    if fields.context is not None and fields.context.sst is not None:
        enclosing = fields.context.sst.enclosing_type
    sst = SST(enclosing_type=TypeName(enclosing) if enclosing is not None else None)
    return CompletionEvent(
        **common.record_kwargs(),
        context=Context(sst=sst),
        terminated_state=fields.terminated_state,
        selections_count=len(fields.selections or ()),
    )


def decode_generic(common: CommonFields, payload: Mapping[str, Any]) -> GenericEvent:
    extra = {key: value for key, value in payload.items() if key not in _COMMON_KEYS}
    return GenericEvent(**common.record_kwargs(), fields=extra)


def default_registry() -> Dict[str, DecodeFn]:
    """Return the decode functions for the built-in event variants."""
    return {
        COMMAND_EVENT: decode_command,
        COMPLETION_EVENT: decode_completion,
    }


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
        for error in exc.errors()
    )


class RecordDecoder:
    """Turns raw entries into typed records using a table of decode functions."""

    def __init__(self, registry: Optional[Mapping[str, DecodeFn]] = None) -> None:
        self._registry: Dict[str, DecodeFn] = dict(
            default_registry() if registry is None else registry
        )

    def register(self, type_name: str, decode_fn: DecodeFn) -> None:
        """Add or replace the decode function for a type name."""
        self._registry[strip_assembly(type_name)] = decode_fn

    def is_registered(self, type_name: str) -> bool:
        return strip_assembly(type_name) in self._registry

    @property
    def type_names(self) -> tuple[str, ...]:
        return tuple(sorted(self._registry))

    def decode(self, entry: RawEntry) -> EventRecord:
        """Decode one entry into a typed record.

        Only entries that break the common shape raise ``MalformedRecordError``.
        Unknown type names, and known ones whose own fields do not validate,
        fall back to ``GenericEvent``.
        """
        try:
            text = entry.data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedRecordError(entry.name, entry.position, f"invalid UTF-8: {exc}") from exc

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedRecordError(entry.name, entry.position, f"invalid JSON: {exc}") from exc

        if not isinstance(payload, dict):
            raise MalformedRecordError(
                entry.name, entry.position, f"expected a JSON object, got {type(payload).__name__}"
            )

        try:
            common = CommonFields.model_validate(payload)
        except ValidationError as exc:
            raise MalformedRecordError(entry.name, entry.position, _describe(exc)) from exc

        decode_fn = self._registry.get(common.type_name)
        if decode_fn is None:
            LOGGER.debug("No decoder for %s, using generic event", common.type_name)
            return decode_generic(common, payload)

        try:
            return decode_fn(common, payload)
        except ValidationError as exc:
            LOGGER.debug(
                "Unexpected %s fields in entry %d (%s), using generic event: %s",
                common.type_name,
                entry.position,
                entry.name,
                _describe(exc),
            )
            return decode_generic(common, payload)
