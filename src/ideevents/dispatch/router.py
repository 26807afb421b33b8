"""Routing of decoded records to per-variant handlers.

A record's ``kind`` is fixed when the decoder builds it. Routing is a single
lookup of that tag in a handler table, with a default handler for every kind
that has no dedicated entry.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional

from ideevents.models import EventRecord

Handler = Callable[[Any], Any]


class HandlerTable:
    """Maps record kinds to handlers, falling back to ``default``."""

    def __init__(
        self,
        default: Callable[[EventRecord], Any],
        handlers: Optional[Mapping[str, Handler]] = None,
    ) -> None:
        self.default = default
        self._handlers: Dict[str, Handler] = dict(handlers or {})

    def register(self, kind: str, handler: Handler) -> None:
        self._handlers[kind] = handler

    def handler_for(self, kind: str) -> Handler:
        return self._handlers.get(kind, self.default)

    @property
    def kinds(self) -> tuple[str, ...]:
        return tuple(sorted(self._handlers))

    def route(self, record: EventRecord) -> Any:
        """Invoke exactly one handler for ``record`` and return its result."""
        return self.handler_for(record.kind)(record)


def route(record: EventRecord, handlers: HandlerTable) -> Any:
    return handlers.route(record)
