"""Error types raised by scanning and exporting."""

from __future__ import annotations

from pathlib import Path


class ConfigError(ValueError):
    """Raised when a scan configuration or setting value is invalid."""


class FilesystemError(Exception):
    """Base class for filesystem failures tied to a specific path."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(message)
        self.path = str(path)
        self.message = message


class RootError(FilesystemError):
    """Raised before traversal when the scan root cannot be used."""


class RootNotFound(RootError):
    """The scan root does not exist."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(path, f"Root directory not found: {path}")


class RootNotADirectory(RootNotFound):
    """The scan root exists but is not a directory."""

    def __init__(self, path: Path | str) -> None:
        FilesystemError.__init__(self, path, f"Root path is not a directory: {path}")


class RootNotReadable(RootError):
    """The scan root exists but its contents cannot be listed."""

    def __init__(self, path: Path | str, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(path, f"Root directory is not readable: {path}{detail}")


class EntryAccessError(FilesystemError):
    """A single entry could not be read. Recorded by the scanner, never raised out of it."""

    def __init__(self, path: Path | str, action: str, error: OSError) -> None:
        reason = error.strerror or str(error)
        super().__init__(path, f"Error {action} {path}: {reason}")
        self.errno = error.errno


class ExportWriteError(FilesystemError):
    """Writing a report failed. The scan result stays intact."""

    def __init__(self, path: Path | str, error: OSError) -> None:
        reason = error.strerror or str(error)
        super().__init__(path, f"Failed to write report to {path}: {reason}")
        self.errno = error.errno
