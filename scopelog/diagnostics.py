"""Last-resort diagnostic channel for failures inside the logging pipeline.

Sink and rendering failures must never reach the instrumented application.
They are written here instead: to the configured library log file, or to
stderr when no file is configured.
"""

import os
import sys
import threading
import time
from typing import Any

from .levels import LogLevel
from .mechanism import ScopeLogError
from .utils import acquire_file_lock, safe_str


class DiagnosticItem:
    """
    One diagnostic line about the library itself.
    """

    def __init__(self, msg: Any, level: LogLevel = LogLevel.ERROR, source: str = "Unknown"):
        self.level = level
        self.timestamp_str = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        self.source = source
        self.msg = msg

    def __str__(self) -> str:
        return f"[{self.level.label.upper()}] {self.timestamp_str} {self.source}\t: {self.msg}\n"


class DiagnosticLog:
    """
    Records DiagnosticItem entries for the library's own failures.

    Behavior
    - Writes to ``logfile`` when provided; the file is lazily opened in append
      mode on the first item. Otherwise writes to ``sys.stderr``.
    - Items below ``min_level`` are dropped.
    - Never raises: a diagnostic that cannot be written is lost.
    - After :meth:`close` the file is never reopened; later items go to
      ``sys.stderr``.

    Concurrency and file locking
    - Several processes may share one diagnostic file. Writes hold an
      exclusive cross-process lock:
        * ``fcntl.flock`` on POSIX platforms when available.
        * Otherwise a ``.lock`` file created with ``O_EXCL``, retried until
          acquired or ``lock_timeout`` elapses.
    - Threads of one process are serialized by an in-process lock.

    Parameters
    - logfile: Optional[str]
        Diagnostic file path. ``None`` or ``""`` writes to stderr.
    - min_level: LogLevel, default ERROR
        Lowest level that is written.
    - lock_timeout: float, default 10.0
        Maximum time to wait when acquiring the lock in the fallback mode.
    - lock_poll_interval: float, default 0.05
        Sleep interval between retries when waiting for the lock.
    """

    def __init__(
        self,
        logfile: str | None = None,
        *,
        min_level: LogLevel = LogLevel.ERROR,
        lock_timeout: float = 10.0,
        lock_poll_interval: float = 0.05,
    ):
        self.logfile = logfile or None
        self.min_level = min_level

        self.pfile = None
        self._closed = False
        self._lock_timeout = lock_timeout
        self._lock_poll_interval = lock_poll_interval
        self._thread_lock = threading.Lock()

    def _lock_path(self) -> str | None:
        if self.logfile is None:
            return None
        return f"{self.logfile}.lock"

    def write(self, item: DiagnosticItem) -> None:
        if item.level < self.min_level:
            return
        try:
            with self._thread_lock:
                if self.logfile is None or self._closed:
                    sys.stderr.write(str(item))
                    sys.stderr.flush()
                    return

                with acquire_file_lock(self._lock_path(), self._lock_timeout, self._lock_poll_interval):
                    if self.pfile is None or self.pfile.closed:
                        dir = os.path.dirname(self.logfile)
                        if dir:
                            os.makedirs(dir, exist_ok=True)
                        self.pfile = open(self.logfile, "a", encoding="utf-8")

                    self.pfile.write(str(item))
                    self.pfile.flush()
        except Exception:
            # nowhere left to report to
            pass

    def log(self, msg: Any, level: LogLevel = LogLevel.ERROR, source: str = "scopelog") -> None:
        self.write(DiagnosticItem(msg, level, source))

    def report(self, error: Exception, source: str = "scopelog", note: str = "") -> None:
        """Record an error caught at the pipeline boundary."""
        if not isinstance(error, ScopeLogError):
            error = ScopeLogError(error, source=source, note=note)
        self.write(DiagnosticItem(safe_str(error), LogLevel.ERROR, error.source))

    def close(self) -> None:
        """Close the file handle. Later items are written to stderr."""
        with self._thread_lock:
            self._closed = True
            if self.pfile is not None and not self.pfile.closed:
                self.pfile.close()
            self.pfile = None
