"""CSV export of scan results."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from longpath.core.errors import ExportWriteError
from longpath.models.path_record import PathRecord
from longpath.models.scan_result import ScanResult

log = logging.getLogger(__name__)

DEFAULT_REPORT_NAME = "path_length_report.csv"
CSV_HEADER = ("path", "length", "over_limit")

# Filenames that are not valid UTF-8 arrive from os.scandir as lone
# surrogates; this error handler writes their original bytes back out.
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class CsvExporter:
    """Writes one row per PathRecord, preceded by a header row."""

    def __init__(self, delimiter: str = ",", over_limit_only: bool = False) -> None:
        self.delimiter = delimiter
        self.over_limit_only = over_limit_only

    def export(self, result: ScanResult, destination: Path | str) -> Path:
        """Write *result* to *destination*, replacing any existing file.

        If *destination* is an existing directory the report is written
        inside it as ``path_length_report.csv``.

        Returns:
            The path of the written file.

        Raises:
            ExportWriteError: The file could not be created or written.
        """
        target = Path(destination).expanduser()
        if target.is_dir():
            target = target / DEFAULT_REPORT_NAME

        records = result.over_limit() if self.over_limit_only else result.records
        try:
            with open(target, "w", encoding=_ENCODING, errors=_ERRORS, newline="") as f:
                writer = csv.writer(f, delimiter=self.delimiter)
                writer.writerow(CSV_HEADER)
                writer.writerows(_row(r) for r in records)
        except OSError as exc:
            log.warning("Export to %s failed: %s", target, exc)
            raise ExportWriteError(target, exc) from exc

        log.info("Exported %d paths to %s", len(records), target)
        return target


def _row(record: PathRecord) -> tuple[str, int, str]:
    return record.path, record.length, "true" if record.is_over_limit else "false"


def read_csv(source: Path | str, delimiter: str = ",") -> list[tuple[str, int, bool]]:
    """Parse a report written by :class:`CsvExporter`.

    Returns:
        ``(path, length, over_limit)`` tuples in file order.
    """
    rows: list[tuple[str, int, bool]] = []
    with open(source, encoding=_ENCODING, errors=_ERRORS, newline="") as f:
        reader = csv.DictReader(f, delimiter=delimiter)
        for row in reader:
            rows.append((row["path"], int(row["length"]), row["over_limit"] == "true"))
    return rows
