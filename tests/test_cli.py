"""Tests for CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from ideevents.cli import _setup_logging, app


runner = CliRunner()


class TestSetupLogging:
    """Tests for _setup_logging helper."""

    def test_setup_logging_verbose(self) -> None:
        """Verbose mode sets DEBUG level."""
        with patch("ideevents.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=True)
            mock_config.assert_called_once()
            assert mock_config.call_args[1]["level"] == logging.DEBUG

    def test_setup_logging_normal(self) -> None:
        """Normal mode sets INFO level."""
        with patch("ideevents.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=False)
            mock_config.assert_called_once()
            assert mock_config.call_args[1]["level"] == logging.INFO


class TestScanCommand:
    """Tests for the scan command."""

    def test_scan_lists_archives(self, tmp_path: Path, make_archive) -> None:
        """Lists every archive with its relative path."""
        make_archive(tmp_path / "2016" / "u1.zip", [])
        make_archive(tmp_path / "u2.zip", [])

        result = runner.invoke(app, ["scan", str(tmp_path)])

        assert result.exit_code == 0
        assert "2016/u1.zip" in result.stdout
        assert "u2.zip" in result.stdout
        assert "2 archive(s)" in result.stdout

    def test_scan_no_archives(self, tmp_path: Path) -> None:
        """Shows a notice when nothing is found."""
        result = runner.invoke(app, ["scan", str(tmp_path)])

        assert result.exit_code == 0
        assert "No archives found" in result.stdout

    def test_scan_missing_root(self, tmp_path: Path) -> None:
        """Fails for a missing directory."""
        result = runner.invoke(app, ["scan", str(tmp_path / "missing")])

        assert result.exit_code != 0


class TestProcessCommand:
    """Tests for the process command."""

    def test_process_prints_events(
        self, tmp_path: Path, make_archive, command_event, completion_event
    ) -> None:
        """Prints one line per event."""
        make_archive(
            tmp_path / "user.zip",
            [
                command_event("rename"),
                completion_event("0T:Foo.Bar, P"),
                {"$type": "KaVE.Commons.Model.Events.ErrorEvent, KaVE.Commons"},
            ],
        )

        result = runner.invoke(app, ["process", str(tmp_path)])

        assert result.exit_code == 0
        assert "looking (recursively) for events in folder" in result.stdout
        assert "#### processing user zip: user.zip #####" in result.stdout
        assert "found a CommandEvent (id: rename)" in result.stdout
        assert "found a CompletionEvent (was triggered in: Foo.Bar)" in result.stdout
        assert "found an ErrorEvent that has been triggered at:" in result.stdout
        assert "records: 3" in result.stdout

    def test_process_skips_malformed(self, tmp_path: Path, make_archive, command_event) -> None:
        """Continues after a malformed entry by default."""
        make_archive(tmp_path / "user.zip", [b"{oops", command_event("after")])

        result = runner.invoke(app, ["process", str(tmp_path)])

        assert result.exit_code == 0
        assert "found a CommandEvent (id: after)" in result.stdout
        assert "malformed: 1" in result.stdout

    def test_process_strict(self, tmp_path: Path, make_archive, command_event) -> None:
        """Abandons the archive at the first malformed entry with --strict."""
        make_archive(tmp_path / "user.zip", [b"{oops", command_event("after")])

        result = runner.invoke(app, ["process", str(tmp_path), "--strict"])

        assert result.exit_code == 0
        assert "found a CommandEvent (id: after)" not in result.stdout
        assert "failed: 1" in result.stdout

    def test_process_no_archives(self, tmp_path: Path) -> None:
        """Shows a notice when nothing is found."""
        result = runner.invoke(app, ["process", str(tmp_path)])

        assert result.exit_code == 0
        assert "No archives found" in result.stdout

    def test_process_missing_root(self, tmp_path: Path) -> None:
        """Fails for a missing directory."""
        result = runner.invoke(app, ["process", str(tmp_path / "missing")])

        assert result.exit_code != 0
