"""Scan configuration dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING, Any

from longpath.core.errors import ConfigError

if TYPE_CHECKING:
    from longpath.settings import Settings

# Windows MAX_PATH (260) minus room for a drive prefix and a file name.
DEFAULT_THRESHOLD = 240


@dataclass(frozen=True, slots=True)
class ScanConfig:
    """Everything a Scanner needs to know before it starts.

    Patterns in ``include`` and ``exclude`` are shell globs matched
    against entry names, not full paths. Excluded entries are neither
    counted nor descended into; ``include`` only decides which visited
    entries become records.
    """

    root: Path
    threshold: int = DEFAULT_THRESHOLD
    include_dirs: bool = True
    follow_symlinks: bool = False
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    over_limit_only: bool = False
    max_depth: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", Path(self.root))
        object.__setattr__(self, "include", tuple(self.include))
        object.__setattr__(self, "exclude", tuple(self.exclude))
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, int):
            raise ConfigError(f"Threshold must be an integer, got {self.threshold!r}")
        if self.threshold < 1:
            raise ConfigError(f"Threshold must be a positive integer, got {self.threshold}")
        if self.max_depth is not None and self.max_depth < 1:
            raise ConfigError(f"max_depth must be >= 1, got {self.max_depth}")

    @classmethod
    def from_settings(cls, root: Path | str, settings: Settings, **overrides: Any) -> ScanConfig:
        """Build a config from persisted defaults; explicit overrides win."""
        values: dict[str, Any] = {
            "threshold": settings.threshold,
            "include_dirs": settings.include_dirs,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(root=Path(root), **values)

    def is_excluded(self, name: str) -> bool:
        return any(fnmatch(name, pattern) for pattern in self.exclude)

    def is_included(self, name: str) -> bool:
        if not self.include:
            return True
        return any(fnmatch(name, pattern) for pattern in self.include)
