"""Command line interface for ideevents."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ideevents.config import AppConfig
from ideevents.dispatch.printing import build_printing_handlers
from ideevents.errors import NotFoundError
from ideevents.ingestion.decoder import RecordDecoder
from ideevents.processing.traversal import Traversal
from ideevents.utils.files import find_archives


console = Console()
app = typer.Typer(help="ideevents - read archived IDE interaction events")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


@app.command()
def scan(
    root: Path = typer.Argument(None, help="Directory containing event archives."),
    suffix: str = typer.Option(AppConfig().archive_suffix, help="Archive file suffix"),
) -> None:
    """List the archives found below a directory."""
    config = AppConfig(events_dir=root, archive_suffix=suffix)
    events_dir = config.resolve_events_dir(Path.cwd())

    try:
        archives = sorted(find_archives(events_dir, suffix=config.archive_suffix))
    except NotFoundError as exc:
        raise typer.BadParameter(str(exc)) from exc

    if not archives:
        console.print("[yellow]No archives found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Archive")
    table.add_column("Size", justify="right")
    for archive in archives:
        table.add_row(escape(archive), str((events_dir / archive).stat().st_size))

    console.print(table)
    console.print(f"{len(archives)} archive(s) in [bold]{escape(str(events_dir))}[/bold]")


@app.command()
def process(
    root: Path = typer.Argument(None, help="Directory containing event archives."),
    suffix: str = typer.Option(AppConfig().archive_suffix, help="Archive file suffix"),
    strict: bool = typer.Option(
        False, "--strict", help="Abandon an archive at its first malformed entry"
    ),
    fail_fast: bool = typer.Option(False, "--fail-fast", help="Stop at the first handler error"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Decode every event in every archive and report it."""
    _setup_logging(verbose)
    config = AppConfig(
        events_dir=root,
        archive_suffix=suffix,
        malformed_policy="abort" if strict else "skip",
        fail_fast=fail_fast,
    )
    events_dir = config.resolve_events_dir(Path.cwd())

    console.print(f"looking (recursively) for events in folder {escape(str(events_dir.resolve()))}")

    def announce(archive: str) -> None:
        console.print(f"\n#### processing user zip: {escape(archive)} #####")

    traversal = Traversal(
        RecordDecoder(),
        build_printing_handlers(console),
        malformed_policy=config.malformed_policy,
        fail_fast=config.fail_fast,
        suffix=config.archive_suffix,
        on_archive=announce,
    )

    try:
        stats = traversal.run(events_dir)
    except NotFoundError as exc:
        raise typer.BadParameter(str(exc)) from exc

    if not stats.archives:
        console.print("[yellow]No archives found.[/yellow]")
        return

    console.print(
        f"\nArchives: {stats.archives}, failed: {stats.failed_archives}, "
        f"records: {stats.records}, malformed: {stats.malformed}, "
        f"handler errors: {stats.handler_errors}"
    )
