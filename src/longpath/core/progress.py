"""Progress events and the sinks that receive them."""

from __future__ import annotations

import logging
import queue
from dataclasses import dataclass
from typing import Callable, Union

from longpath.models.scan_result import ScanResult, ScanStatus

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanProgress:
    """Periodic update: how many entries have been visited and where we are."""

    entries_scanned: int
    current_path: str


@dataclass(frozen=True, slots=True)
class ScanEntryError:
    """A non-fatal per-entry failure, as delivered through a channel."""

    message: str


@dataclass(frozen=True, slots=True)
class ScanFinished:
    """Terminal event. ``result`` is None only when the scan failed."""

    status: ScanStatus
    result: ScanResult | None = None
    error: BaseException | None = None


ScanEvent = Union[ScanProgress, ScanEntryError, ScanFinished]


class ProgressSink:
    """Observer passed to a Scanner.

    All methods are no-ops; subclasses override what they need. Methods
    are called on the scanning thread, so implementations must hand work
    over to their own thread themselves (see ``QueueSink``).
    """

    def on_progress(self, event: ScanProgress) -> None:
        """Called periodically while entries are being visited."""

    def on_error(self, message: str) -> None:
        """Called for every entry that could not be read."""

    def on_finished(self, event: ScanFinished) -> None:
        """Called exactly once when the scan ends, whatever the outcome."""


class QueueSink(ProgressSink):
    """Pushes every event onto a queue that another thread drains."""

    def __init__(self, channel: queue.Queue[ScanEvent] | None = None) -> None:
        self.channel: queue.Queue[ScanEvent] = channel if channel is not None else queue.Queue()

    def on_progress(self, event: ScanProgress) -> None:
        self.channel.put(event)

    def on_error(self, message: str) -> None:
        self.channel.put(ScanEntryError(message))

    def on_finished(self, event: ScanFinished) -> None:
        self.channel.put(event)

    def drain(self) -> list[ScanEvent]:
        """Return all events queued so far without blocking."""
        events: list[ScanEvent] = []
        while True:
            try:
                events.append(self.channel.get_nowait())
            except queue.Empty:
                return events


class LoggingSink(ProgressSink):
    """Reports scan activity through the standard logging module."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.log = logger or log

    def on_progress(self, event: ScanProgress) -> None:
        self.log.debug("Scanned %d entries (at %s)", event.entries_scanned, event.current_path)

    def on_error(self, message: str) -> None:
        self.log.warning("%s", message)

    def on_finished(self, event: ScanFinished) -> None:
        if event.result is None:
            self.log.info("Scan %s: %s", event.status.value, event.error)
            return
        result = event.result
        self.log.info(
            "Scan %s: %d entries, %d over limit, %d error(s)",
            event.status.value,
            result.total_scanned,
            result.over_limit_count,
            result.error_count,
        )


class CallbackSink(ProgressSink):
    """Adapts plain callables to the sink interface."""

    def __init__(
        self,
        on_progress: Callable[[ScanProgress], None] | None = None,
        on_error: Callable[[str], None] | None = None,
        on_finished: Callable[[ScanFinished], None] | None = None,
    ) -> None:
        self._on_progress = on_progress
        self._on_error = on_error
        self._on_finished = on_finished

    def on_progress(self, event: ScanProgress) -> None:
        if self._on_progress:
            self._on_progress(event)

    def on_error(self, message: str) -> None:
        if self._on_error:
            self._on_error(message)

    def on_finished(self, event: ScanFinished) -> None:
        if self._on_finished:
            self._on_finished(event)
