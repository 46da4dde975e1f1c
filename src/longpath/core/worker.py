"""Run a scan on a background thread."""

from __future__ import annotations

import logging
import threading

from longpath.core.errors import RootError
from longpath.core.progress import ProgressSink
from longpath.core.scanner import Scanner
from longpath.models.scan_config import ScanConfig
from longpath.models.scan_result import ScanResult, ScanStatus

log = logging.getLogger(__name__)


class ScanJob:
    """Handle on a scan running in a daemon thread.

    Progress reaches the caller through the sink the job was started
    with; pair it with a ``QueueSink`` to consume events on another
    thread.
    """

    def __init__(self, scanner: Scanner) -> None:
        self.scanner = scanner
        self.result: ScanResult | None = None
        self.error: Exception | None = None
        self._done = threading.Event()
        self._thread = threading.Thread(target=self._run, name="longpath-scan", daemon=True)

    def start(self) -> ScanJob:
        self._thread.start()
        return self

    @property
    def done(self) -> bool:
        return self._done.is_set()

    @property
    def state(self) -> ScanStatus:
        return self.scanner.state

    def cancel(self) -> None:
        """Request cooperative cancellation. Returns immediately."""
        self.scanner.cancel()

    def wait(self, timeout: float | None = None) -> ScanResult | None:
        """Block until the scan ends or *timeout* elapses.

        Returns:
            The result, or None if the timeout elapsed first.

        Raises:
            RootError: The scan failed before traversal started.
            Exception: Whatever else ended the scan thread.
        """
        if not self._done.wait(timeout):
            return None
        if self.error is not None:
            raise self.error
        return self.result

    def _run(self) -> None:
        try:
            self.result = self.scanner.scan()
        except RootError as exc:
            self.error = exc
        except Exception as exc:
            log.exception("Scan thread crashed")
            self.error = exc
        finally:
            self._done.set()


def start_scan(config: ScanConfig, sink: ProgressSink | None = None, **kwargs) -> ScanJob:
    """Start scanning ``config.root`` in the background.

    Keyword arguments are passed to :class:`Scanner`.
    """
    return ScanJob(Scanner(config, sink, **kwargs)).start()
