"""Tests for the command line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

import longpath.cli as cli
from longpath.cli import EXIT_CANCELLED, main
from longpath.core.exporter import DEFAULT_REPORT_NAME, read_csv
from longpath.models.scan_result import ScanResult, ScanStatus
from longpath.settings import Settings


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestScanCommand:
    def test_summary(self, runner, tree):
        threshold = len(str(tree)) + 12
        result = runner.invoke(main, ["scan", str(tree), "--threshold", str(threshold)])

        assert result.exit_code == 0, result.output
        assert "Completed" in result.output
        assert "7 entries" in result.output
        assert f"2 over {threshold} characters" in result.output
        assert str(tree / "docs" / "nested" / "deep.txt") in result.output

    def test_nothing_over_limit(self, runner, tree):
        result = runner.invoke(main, ["scan", str(tree)])
        assert result.exit_code == 0, result.output
        assert "no paths over 240 characters" in result.output

    def test_json(self, runner, tree):
        result = runner.invoke(main, ["scan", str(tree), "--json", "--files-only"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["status"] == "completed"
        assert data["total_scanned"] == 7
        assert len(data["records"]) == 4
        assert data["report"] is None

    def test_csv_export(self, runner, tree, tmp_path):
        report = tmp_path / "out.csv"
        result = runner.invoke(main, ["scan", str(tree), "--csv", str(report)])

        assert result.exit_code == 0, result.output
        assert "Report written to" in result.output
        assert len(read_csv(report)) == 7

    def test_csv_export_to_directory(self, runner, tree, tmp_path):
        out_dir = tmp_path / "reports"
        out_dir.mkdir()
        result = runner.invoke(main, ["scan", str(tree), "-o", str(out_dir), "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["report"] == str(out_dir / DEFAULT_REPORT_NAME)

    def test_export_failure(self, runner, tree, tmp_path):
        report = tmp_path / "missing" / "out.csv"
        result = runner.invoke(main, ["scan", str(tree), "--csv", str(report)])

        assert result.exit_code == 1
        assert "Completed" in result.output
        assert "Failed to write report" in result.output

    def test_missing_root(self, runner, tmp_path):
        result = runner.invoke(main, ["scan", str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "Root directory not found" in result.output

    def test_invalid_threshold(self, runner, tree):
        result = runner.invoke(main, ["scan", str(tree), "--threshold", "0"])
        assert result.exit_code == 2

    def test_uses_persisted_threshold(self, runner, tree):
        Settings().set("scan.threshold", len(str(tree)) + 12)
        result = runner.invoke(main, ["scan", str(tree), "--json"])

        data = json.loads(result.output)
        assert data["threshold"] == len(str(tree)) + 12
        assert data["over_limit_count"] == 2

    def test_filters(self, runner, tree):
        result = runner.invoke(
            main,
            ["scan", str(tree), "--json", "--exclude", "src", "--include", "*.md", "--max-depth", "2"],
        )
        data = json.loads(result.output)
        assert [Path(r["path"]).name for r in data["records"]] == ["readme.md"]

    def test_show_limits_listing(self, runner, tree):
        result = runner.invoke(main, ["scan", str(tree), "--threshold", "1", "--show", "2"])
        assert result.exit_code == 0, result.output
        assert "... and 5 more" in result.output
        listed = result.output.split(" over 1 characters")[1]
        assert str(tree / "docs" / "nested" / "deep.txt") in listed
        assert str(tree / "docs" / "readme.md") in listed
        assert str(tree / "a.txt") not in listed

    def test_ctrl_c_cancels(self, runner, tree, monkeypatch):
        cancelled = ScanResult(root=tree, threshold=240, status=ScanStatus.CANCELLED, total_scanned=3)

        class InterruptedJob:
            def __init__(self):
                self.cancel_called = False

            def wait(self, timeout=None):
                if timeout is not None:
                    raise KeyboardInterrupt
                return cancelled

            def cancel(self):
                self.cancel_called = True

        job = InterruptedJob()
        monkeypatch.setattr(cli, "start_scan", lambda config, sink: job)
        result = runner.invoke(main, ["scan", str(tree)])

        assert job.cancel_called
        assert result.exit_code == EXIT_CANCELLED
        assert "Cancelling" in result.output
        assert "Cancelled" in result.output


class TestConfigCommands:
    def test_show_defaults(self, runner):
        result = runner.invoke(main, ["config", "show", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"threshold": 240, "include_dirs": True}

    def test_set_and_show(self, runner, isolate_settings):
        result = runner.invoke(main, ["config", "set", "threshold", "180"])
        assert result.exit_code == 0, result.output
        assert "threshold = 180" in result.output

        shown = runner.invoke(main, ["config", "show"])
        assert str(isolate_settings) in shown.output
        assert "180" in shown.output

    def test_set_invalid(self, runner):
        result = runner.invoke(main, ["config", "set", "threshold", "zero"])
        assert result.exit_code == 1
        assert "Invalid value" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "longpath" in result.output
