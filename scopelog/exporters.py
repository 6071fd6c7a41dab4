"""OTel log-record exporters that deliver rendered records.

Records reaching these exporters carry the rendered string as their body.
:class:`ConsoleLogRecordExporter` writes bodies to stderr;
:class:`FileLogRecordExporter` appends them to a per-stream file inside a
log-group directory.
"""

import os
import sys
from collections.abc import Sequence
from datetime import UTC, datetime
from io import TextIOWrapper

from opentelemetry.sdk._logs._internal import ReadableLogRecord
from opentelemetry.sdk._logs.export import (
    LogRecordExporter,
    LogRecordExportResult,
)

from .options import SinkConfig
from .utils import acquire_file_lock


def log_stream_name(config: SinkConfig, now: datetime | None = None) -> str:
    """Name of the log stream: prefix, UTC timestamp and suffix joined by ``-``."""
    now = now or datetime.now(UTC)
    parts = (
        config.log_stream_name_prefix,
        now.strftime("%Y-%m-%dT%H-%M-%S"),
        config.log_stream_name_suffix,
    )
    return "-".join(p for p in parts if p)


def _body_text(readable_record: ReadableLogRecord) -> str:
    body = readable_record.log_record.body
    return body if isinstance(body, str) else str(body)


# =============================================================================
# Console Log Record Exporter
# =============================================================================


class ConsoleLogRecordExporter(LogRecordExporter):
    """OTel LogRecordExporter that writes rendered records to stderr.

    Bodies are written exactly as received; line termination is decided by the
    sink (``include_newline``).
    """

    def export(self, batch: Sequence[ReadableLogRecord]) -> LogRecordExportResult:
        """Export log records to stderr.

        Args:
            batch: Sequence of ReadableLogRecord objects to export.

        Returns:
            LogRecordExportResult.SUCCESS on success.
        """
        try:
            for readable_record in batch:
                sys.stderr.write(_body_text(readable_record))
            sys.stderr.flush()
            return LogRecordExportResult.SUCCESS
        except Exception:
            return LogRecordExportResult.FAILURE

    def shutdown(self) -> None:
        """Shutdown the exporter (no-op for console)."""
        pass

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        sys.stderr.flush()
        return True


# =============================================================================
# File Log Record Exporter
# =============================================================================


class FileLogRecordExporter(LogRecordExporter):
    """
    OpenTelemetry LogRecordExporter that appends rendered records to a file.

    The file is ``<directory>/<log_group>/<stream>.log`` where ``stream`` comes
    from :func:`log_stream_name`. It is created lazily on the first export.

    Features:
    - Flushes every time ``batch_size_in_bytes`` have been written since the
      last flush, and at the end of every exported batch
    - Cross-process file locking for concurrent writes

    Parameters:
        config: Sink settings naming the log group and stream.
        directory: Root folder holding the log-group folders.
        lock_timeout: Maximum time to wait for file lock.
        lock_poll_interval: Sleep interval when waiting for lock.

    Example:
        >>> from opentelemetry.sdk._logs import LoggerProvider
        >>> from opentelemetry.sdk._logs.export import SimpleLogRecordProcessor
        >>>
        >>> exporter = FileLogRecordExporter(SinkConfig(log_group="my-app"), directory="logs")
        >>> provider = LoggerProvider()
        >>> provider.add_log_record_processor(SimpleLogRecordProcessor(exporter))
    """

    def __init__(
        self,
        config: SinkConfig,
        directory: str = ".",
        *,
        lock_timeout: float = 10.0,
        lock_poll_interval: float = 0.05,
    ):
        self._config = config
        self._directory = directory
        self._lock_timeout = lock_timeout
        self._lock_poll_interval = lock_poll_interval

        self._logfile: str | None = None
        self._file: TextIOWrapper | None = None
        self._pending_bytes = 0

    @property
    def logfile(self) -> str | None:
        """Return the active log file path, once the first export opened it."""
        return self._logfile

    def _ensure_file_open(self) -> None:
        if self._logfile is None:
            group = self._config.log_group or "default"
            self._logfile = os.path.join(
                self._directory, group, f"{log_stream_name(self._config)}.log"
            )

        if self._file is None or self._file.closed:
            dir_name = os.path.dirname(self._logfile)
            if dir_name:
                os.makedirs(dir_name, exist_ok=True)
            self._file = open(self._logfile, "a", encoding="utf-8")

    def _lock_path(self) -> str | None:
        if self._logfile is None:
            return None
        return f"{self._logfile}.lock"

    def export(self, batch: Sequence[ReadableLogRecord]) -> LogRecordExportResult:
        """
        Export a batch of log records to the file.

        Args:
            batch: Sequence of ReadableLogRecord objects to export.

        Returns:
            LogRecordExportResult.SUCCESS on success,
            LogRecordExportResult.FAILURE on error.
        """
        try:
            self._ensure_file_open()

            with acquire_file_lock(
                self._lock_path(), self._lock_timeout, self._lock_poll_interval
            ):
                if self._file is not None:
                    for readable_record in batch:
                        text = _body_text(readable_record)
                        self._file.write(text)
                        self._pending_bytes += len(text.encode("utf-8"))
                        if self._pending_bytes >= self._config.batch_size_in_bytes:
                            self._file.flush()
                            self._pending_bytes = 0
                    self._file.flush()
                    self._pending_bytes = 0

            return LogRecordExportResult.SUCCESS

        except Exception:
            return LogRecordExportResult.FAILURE

    def shutdown(self) -> None:
        """
        Shutdown the exporter, closing any open file handles.
        """
        if self._file is not None and not self._file.closed:
            self._file.close()
        self._file = None

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        if self._file is not None and not self._file.closed:
            self._file.flush()
        return True
