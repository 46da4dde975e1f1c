"""Scan result dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from longpath.models.path_record import PathRecord


class ScanStatus(str, Enum):
    """Lifecycle of a scan: IDLE -> SCANNING -> COMPLETED | CANCELLED | FAILED."""

    IDLE = "idle"
    SCANNING = "scanning"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ScanStatus.COMPLETED, ScanStatus.CANCELLED, ScanStatus.FAILED)


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Read-only outcome of one scan.

    ``over_limit_count`` is derived from ``records`` rather than stored,
    so it can never disagree with them.
    """

    root: Path
    threshold: int
    status: ScanStatus
    records: tuple[PathRecord, ...] = ()
    total_scanned: int = 0
    errors: tuple[str, ...] = ()
    elapsed: float = 0.0

    @property
    def over_limit_count(self) -> int:
        return sum(1 for r in self.records if r.is_over_limit)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def is_complete(self) -> bool:
        return self.status is ScanStatus.COMPLETED

    @property
    def is_cancelled(self) -> bool:
        return self.status is ScanStatus.CANCELLED

    def over_limit(self) -> list[PathRecord]:
        """Return the records whose path exceeds the threshold, in traversal order."""
        return [r for r in self.records if r.is_over_limit]

    def longest(self, count: int = 10) -> list[PathRecord]:
        """Return up to *count* records with the longest paths."""
        return sorted(self.records, key=lambda r: (-r.length, r.path))[:count]

    def to_dict(self) -> dict:
        return {
            "root": str(self.root),
            "threshold": self.threshold,
            "status": self.status.value,
            "total_scanned": self.total_scanned,
            "over_limit_count": self.over_limit_count,
            "error_count": self.error_count,
            "elapsed": round(self.elapsed, 3),
            "records": [
                {
                    "path": r.path,
                    "length": r.length,
                    "over_limit": r.is_over_limit,
                    "is_dir": r.is_dir,
                }
                for r in self.records
            ],
            "errors": list(self.errors),
        }
