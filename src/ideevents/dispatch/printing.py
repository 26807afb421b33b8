"""Handlers that report each event on the console."""

from __future__ import annotations

from datetime import datetime

from rich.console import Console
from rich.markup import escape

from ideevents.dispatch.router import HandlerTable
from ideevents.models import KIND_COMMAND, KIND_COMPLETION, CommandEvent, CompletionEvent, EventRecord


def build_printing_handlers(console: Console) -> HandlerTable:
    """Return a handler table that prints one line per event."""

    def print_command(event: CommandEvent) -> None:
        console.print(f"found a CommandEvent (id: {escape(event.command_id)})")

    def print_completion(event: CompletionEvent) -> None:
        enclosing = event.enclosing_type_name or "?"
        console.print(f"found a CompletionEvent (was triggered in: {escape(enclosing)})")

    def print_basic(event: EventRecord) -> None:
        trigger_time = event.triggered_at or datetime.min
        console.print(f"found an {escape(event.event_type)} that has been triggered at: {trigger_time}")

    return HandlerTable(
        default=print_basic,
        handlers={KIND_COMMAND: print_command, KIND_COMPLETION: print_completion},
    )
