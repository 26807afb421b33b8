"""Tests for the console handlers."""

from __future__ import annotations

import io
from datetime import datetime

from rich.console import Console

from ideevents.dispatch.printing import build_printing_handlers
from ideevents.models import SST, CommandEvent, CompletionEvent, Context, GenericEvent, TypeName


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200, color_system=None, highlight=False), buffer


class TestPrintingHandlers:
    """Test build_printing_handlers."""

    def test_command(self) -> None:
        console, buffer = _console()

        build_printing_handlers(console).route(CommandEvent(type_name="A.CommandEvent", command_id="rename"))

        assert buffer.getvalue() == "found a CommandEvent (id: rename)\n"

    def test_completion(self) -> None:
        console, buffer = _console()
        event = CompletionEvent(
            type_name="A.CompletionEvent",
            context=Context(sst=SST(enclosing_type=TypeName("0T:Foo.Bar, MyProject"))),
        )

        build_printing_handlers(console).route(event)

        assert buffer.getvalue() == "found a CompletionEvent (was triggered in: Foo.Bar)\n"

    def test_basic_with_trigger_time(self) -> None:
        console, buffer = _console()
        event = GenericEvent(type_name="A.EditEvent", triggered_at=datetime(2016, 5, 4, 14, 22, 33))

        build_printing_handlers(console).route(event)

        assert buffer.getvalue() == "found an EditEvent that has been triggered at: 2016-05-04 14:22:33\n"

    def test_basic_without_trigger_time(self) -> None:
        """Should print the minimal datetime when no trigger time is known."""
        console, buffer = _console()

        build_printing_handlers(console).route(GenericEvent(type_name="A.ErrorEvent"))

        assert f"triggered at: {datetime.min}" in buffer.getvalue()

    def test_markup_is_escaped(self) -> None:
        """Should print command ids verbatim."""
        console, buffer = _console()

        build_printing_handlers(console).route(CommandEvent(type_name="A", command_id="[bold]x[/bold]"))

        assert "[bold]x[/bold]" in buffer.getvalue()
