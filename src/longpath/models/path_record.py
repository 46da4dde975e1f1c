"""Path record dataclass."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PathRecord:
    """Single filesystem entry discovered during a scan.

    ``length`` is the character count of ``path`` exactly as it was
    built during traversal, separators included.
    """

    path: str
    length: int
    is_over_limit: bool
    is_dir: bool = False

    @classmethod
    def from_path(cls, path: str, threshold: int, is_dir: bool = False) -> PathRecord:
        """Build a record, deriving the length metrics from *path*."""
        length = len(path)
        return cls(path=path, length=length, is_over_limit=length > threshold, is_dir=is_dir)
