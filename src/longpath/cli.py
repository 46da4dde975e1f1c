"""CLI interface for longpath."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from longpath import __version__
from longpath.core.errors import ConfigError, ExportWriteError, RootError
from longpath.core.exporter import CsvExporter
from longpath.core.progress import ProgressSink, ScanProgress
from longpath.core.worker import start_scan
from longpath.models.scan_config import ScanConfig
from longpath.models.scan_result import ScanResult
from longpath.settings import Settings
from longpath.utils import format_elapsed, truncate_middle

# Exit status when the user interrupts a scan with Ctrl-C.
EXIT_CANCELLED = 130

_PATH_WIDTH = 100


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


class _TerminalProgress(ProgressSink):
    """Redraws a single status line on stderr while scanning."""

    def __init__(self) -> None:
        self._drawn = False

    def on_progress(self, event: ScanProgress) -> None:
        line = f"  Scanned {event.entries_scanned:,} entries  {truncate_middle(event.current_path, 60)}"
        click.echo(f"\r\033[K{line}", nl=False, err=True)
        self._drawn = True

    def clear(self) -> None:
        if self._drawn:
            click.echo("\r\033[K", nl=False, err=True)
            self._drawn = False


def _run_scan(config: ScanConfig, sink: ProgressSink | None) -> ScanResult:
    """Scan in a worker thread so Ctrl-C can cancel cooperatively."""
    job = start_scan(config, sink)
    result = None
    try:
        while result is None:
            result = job.wait(0.2)
    except KeyboardInterrupt:
        click.echo("\nCancelling...", err=True)
        job.cancel()
        result = job.wait()
    return result


@click.group()
@click.version_option(__version__, prog_name="longpath")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
def main(verbose: int) -> None:
    """longpath — find filesystem paths that are too long."""
    _setup_logging(verbose)


# ── scan ─────────────────────────────────────────────────────────────────

@main.command()
@click.argument("root", type=click.Path(path_type=Path))
@click.option("--threshold", "-t", type=click.IntRange(min=1), default=None,
              help="Maximum acceptable path length (default from settings, 240)")
@click.option("--files-only", is_flag=True, help="Do not record directories as paths")
@click.option("--follow-symlinks", is_flag=True, help="Descend into symlinked directories")
@click.option("--include", multiple=True, metavar="PATTERN", help="Only record entries matching this glob")
@click.option("--exclude", multiple=True, metavar="PATTERN", help="Skip entries matching this glob")
@click.option("--max-depth", type=click.IntRange(min=1), default=None, help="Do not descend deeper than this")
@click.option("--over-limit-only", is_flag=True, help="Keep only paths over the threshold")
@click.option("--csv", "-o", "csv_path", type=click.Path(path_type=Path), default=None,
              help="Write a CSV report to this file or directory")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--show", default=20, show_default=True, type=click.IntRange(min=0),
              help="How many over-limit paths and errors to list")
def scan(
    root: Path,
    threshold: int | None,
    files_only: bool,
    follow_symlinks: bool,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    max_depth: int | None,
    over_limit_only: bool,
    csv_path: Path | None,
    as_json: bool,
    show: int,
) -> None:
    """Scan ROOT recursively and report paths longer than the threshold."""
    try:
        config = ScanConfig.from_settings(
            root,
            Settings(),
            threshold=threshold,
            include_dirs=False if files_only else None,
            follow_symlinks=follow_symlinks,
            include=include,
            exclude=exclude,
            max_depth=max_depth,
            over_limit_only=over_limit_only,
        )
    except ConfigError as exc:
        raise click.BadParameter(str(exc))

    progress = None if as_json or not sys.stderr.isatty() else _TerminalProgress()
    if not as_json:
        click.echo(
            f"\n{click.style('🔍', bold=True)} Scanning {root} "
            f"(threshold {config.threshold})...\n"
        )

    try:
        result = _run_scan(config, progress)
    except RootError as exc:
        if progress:
            progress.clear()
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    if progress:
        progress.clear()

    report: Path | None = None
    export_error: ExportWriteError | None = None
    if csv_path is not None:
        try:
            report = CsvExporter().export(result, csv_path)
        except ExportWriteError as exc:
            export_error = exc

    if as_json:
        data = result.to_dict()
        data["report"] = str(report) if report else None
        click.echo(json.dumps(data, indent=2))
    else:
        _print_summary(result, show)
        if report:
            click.echo(f"Report written to {click.style(str(report), bold=True)}\n")

    if export_error:
        click.echo(f"Error: {export_error}", err=True)
        sys.exit(1)
    if result.is_cancelled:
        sys.exit(EXIT_CANCELLED)


def _print_summary(result: ScanResult, show: int) -> None:
    if result.is_complete:
        status = click.style("✓ Completed", fg="green")
    else:
        status = click.style("✗ Cancelled", fg="yellow")
    click.echo(f"  {status} — {result.total_scanned:,} entries in {format_elapsed(result.elapsed)}")

    over = result.over_limit()
    if over:
        click.echo(
            f"  {click.style('!', fg='red')} "
            f"{click.style(f'{len(over):,}', fg='red', bold=True)} over {result.threshold} characters"
        )
        # Over-limit paths are strictly longer than all others.
        longest = result.longest(min(show, len(over)))
        for record in longest:
            click.echo(f"    {record.length:>5}  {truncate_middle(record.path, _PATH_WIDTH)}")
        if len(over) > len(longest):
            click.echo(f"    ... and {len(over) - len(longest):,} more")
    else:
        click.echo(f"  {click.style('·', fg='bright_black')} no paths over {result.threshold} characters")

    if result.errors:
        click.echo(f"  {click.style('!', fg='yellow')} {result.error_count:,} error(s) while scanning")
        for message in result.errors[:show]:
            click.echo(f"    {message}")
        if result.error_count > show:
            click.echo(f"    ... and {result.error_count - show:,} more")
    click.echo()


# ── config ───────────────────────────────────────────────────────────────

@main.group()
def config() -> None:
    """Show or change persisted defaults."""


@config.command("show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def config_show(as_json: bool) -> None:
    """Show the current defaults and where they are stored."""
    settings = Settings()
    if as_json:
        click.echo(json.dumps(settings.as_dict(), indent=2))
        return
    click.echo(f"  {click.style('File:', bold=True)}         {settings.path}")
    for key, value in settings.as_dict().items():
        click.echo(f"  {click.style(key + ':', bold=True):25s} {value}")


@config.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Persist a default (threshold, include_dirs)."""
    settings = Settings()
    try:
        stored = settings.update(key, value)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(f"{key} = {stored}")
