"""Longpath data models."""

from longpath.models.path_record import PathRecord
from longpath.models.scan_config import DEFAULT_THRESHOLD, ScanConfig
from longpath.models.scan_result import ScanResult, ScanStatus

__all__ = [
    "DEFAULT_THRESHOLD",
    "PathRecord",
    "ScanConfig",
    "ScanResult",
    "ScanStatus",
]
