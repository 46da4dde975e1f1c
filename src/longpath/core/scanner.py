"""Directory traversal that measures path lengths."""

from __future__ import annotations

import logging
import os
import stat
import threading
import time
from pathlib import Path
from typing import Callable

from longpath.core.errors import (
    EntryAccessError,
    RootError,
    RootNotADirectory,
    RootNotFound,
    RootNotReadable,
)
from longpath.core.progress import ProgressSink, ScanFinished, ScanProgress
from longpath.models.path_record import PathRecord
from longpath.models.scan_config import ScanConfig
from longpath.models.scan_result import ScanResult, ScanStatus

log = logging.getLogger(__name__)

# Minimum seconds between two progress updates.
DEFAULT_PROGRESS_INTERVAL = 0.1

# (directory path, depth of that directory, pre-read listing or None)
_Pending = tuple[str, int, "list[os.DirEntry[str]] | None"]


class Scanner:
    """Walks one directory tree and collects a PathRecord per entry.

    The walk is iterative over an explicit stack of pending directories,
    so tree depth is bounded by memory rather than the recursion limit.
    A Scanner runs once; create a new one for every scan.
    """

    def __init__(
        self,
        config: ScanConfig,
        sink: ProgressSink | None = None,
        *,
        progress_interval: float = DEFAULT_PROGRESS_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.sink = sink or ProgressSink()
        self.progress_interval = progress_interval
        self._clock = clock
        self._cancel_event = threading.Event()
        self._state = ScanStatus.IDLE
        self._records: list[PathRecord] = []
        self._errors: list[str] = []
        self._scanned = 0
        self._last_update = 0.0
        self._visited_dirs: set[tuple[int, int]] = set()

    @property
    def state(self) -> ScanStatus:
        return self._state

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def entries_scanned(self) -> int:
        return self._scanned

    def cancel(self) -> None:
        """Ask the scan to stop. Safe to call from any thread, at any time."""
        self._cancel_event.set()

    def scan(self) -> ScanResult:
        """Run the scan and return its result.

        Raises:
            RootNotFound: The root is missing or not a directory.
            RootNotReadable: The root cannot be listed.
            RuntimeError: This scanner has already been used.

        Anything raised during traversal (by a sink, or a KeyboardInterrupt)
        leaves the scanner FAILED, is reported through ``on_finished`` and
        propagates.
        """
        if self._state is not ScanStatus.IDLE:
            raise RuntimeError(f"Scanner already used (state: {self._state.value})")

        root = os.path.abspath(os.path.expanduser(os.fspath(self.config.root)))
        try:
            listing = self._open_root(root)
        except RootError as exc:
            self._state = ScanStatus.FAILED
            log.warning("Scan of %s failed: %s", root, exc)
            self.sink.on_finished(ScanFinished(ScanStatus.FAILED, error=exc))
            raise

        self._state = ScanStatus.SCANNING
        log.info("Scanning %s (threshold %d)", root, self.config.threshold)
        started = self._clock()
        self._last_update = started

        try:
            finished = self._walk(root, listing)
        except BaseException as exc:
            self._state = ScanStatus.FAILED
            log.warning("Scan of %s aborted: %r", root, exc)
            self.sink.on_finished(ScanFinished(ScanStatus.FAILED, error=exc))
            raise

        self._state = ScanStatus.COMPLETED if finished else ScanStatus.CANCELLED
        result = ScanResult(
            root=Path(root),
            threshold=self.config.threshold,
            status=self._state,
            records=tuple(self._records),
            total_scanned=self._scanned,
            errors=tuple(self._errors),
            elapsed=self._clock() - started,
        )
        log.info(
            "Scan %s: %d entries, %d over limit, %d error(s)",
            self._state.value,
            result.total_scanned,
            result.over_limit_count,
            result.error_count,
        )
        self.sink.on_progress(ScanProgress(self._scanned, root))
        self.sink.on_finished(ScanFinished(self._state, result))
        return result

    def _open_root(self, root: str) -> list[os.DirEntry[str]]:
        if not os.path.exists(root):
            raise RootNotFound(root)
        if not os.path.isdir(root):
            raise RootNotADirectory(root)
        try:
            with os.scandir(root) as it:
                listing = list(it)
            if self.config.follow_symlinks:
                st = os.stat(root)
                self._visited_dirs.add((st.st_dev, st.st_ino))
        except OSError as exc:
            raise RootNotReadable(root, exc.strerror or str(exc)) from exc
        return listing

    def _walk(self, root: str, listing: list[os.DirEntry[str]]) -> bool:
        """Drain the directory stack. Returns False if cancelled midway."""
        stack: list[_Pending] = [(root, 0, listing)]
        while stack:
            if self._cancel_event.is_set():
                return False
            path, depth, entries = stack.pop()
            if entries is None:
                entries = self._list_dir(path)
                if entries is None:
                    continue
            for entry in entries:
                if self._cancel_event.is_set():
                    return False
                if self.config.is_excluded(entry.name):
                    continue
                self._visit(entry, depth + 1, stack)
        return True

    def _list_dir(self, path: str) -> list[os.DirEntry[str]] | None:
        try:
            with os.scandir(path) as it:
                return list(it)
        except OSError as exc:
            self._record_error(EntryAccessError(path, "reading directory", exc))
            return None

    def _visit(self, entry: os.DirEntry[str], depth: int, stack: list[_Pending]) -> None:
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            link_target = None
            if not is_dir and self.config.follow_symlinks and entry.is_symlink():
                # Raises for dangling links.
                link_target = entry.stat()
                is_dir = stat.S_ISDIR(link_target.st_mode)
        except OSError as exc:
            self._record_error(EntryAccessError(entry.path, "reading metadata for", exc))
            return

        self._scanned += 1
        config = self.config
        if (config.include_dirs or not is_dir) and config.is_included(entry.name):
            record = PathRecord.from_path(entry.path, config.threshold, is_dir=is_dir)
            if record.is_over_limit or not config.over_limit_only:
                self._records.append(record)

        if is_dir and (config.max_depth is None or depth < config.max_depth):
            if config.follow_symlinks and not self._first_visit(entry, link_target):
                log.debug("Skipping already visited directory %s", entry.path)
            else:
                stack.append((entry.path, depth, None))

        self._maybe_report(entry.path)

    def _first_visit(self, entry: os.DirEntry[str], st: os.stat_result | None) -> bool:
        """Mark a directory as entered; False if it was entered before."""
        try:
            st = st or entry.stat()
        except OSError as exc:
            self._record_error(EntryAccessError(entry.path, "reading metadata for", exc))
            return False
        key = (st.st_dev, st.st_ino)
        if key in self._visited_dirs:
            return False
        self._visited_dirs.add(key)
        return True

    def _record_error(self, error: EntryAccessError) -> None:
        log.debug("%s", error)
        self._errors.append(error.message)
        self.sink.on_error(error.message)

    def _maybe_report(self, current_path: str) -> None:
        now = self._clock()
        if now - self._last_update >= self.progress_interval:
            self._last_update = now
            self.sink.on_progress(ScanProgress(self._scanned, current_path))


def scan(config: ScanConfig, sink: ProgressSink | None = None, **kwargs) -> ScanResult:
    """Scan ``config.root`` once and return the result.

    Keyword arguments are passed to :class:`Scanner`.
    """
    return Scanner(config, sink, **kwargs).scan()
