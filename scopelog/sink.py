"""Sinks receiving rendered records, and the lazy cell that owns one.

A sink accepts rendered strings through :meth:`LogSink.add_message` without
blocking on delivery, and flushes and shuts down on :meth:`LogSink.close`.
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Callable

from opentelemetry._logs import LogRecord
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import (
    BatchLogRecordProcessor,
    LogRecordExporter,
    SimpleLogRecordProcessor,
)
from opentelemetry.sdk.resources import Resource
from reactivex import Subject

from .exporters import ConsoleLogRecordExporter, log_stream_name
from .options import LoggerOptions, SinkConfig

# The OTel batch processor refuses batches larger than its queue.
_MAX_EXPORT_BATCH_SIZE = 512


class LogSink(ABC):
    """
    The abstract class for sinks, the write-only consumers of rendered records.
    """

    def __init__(self, include_newline: bool = True):
        self.include_newline = include_newline

    def _terminate(self, message: str) -> str:
        return message + "\n" if self.include_newline else message

    @abstractmethod
    def add_message(self, message: str) -> None: ...

    @abstractmethod
    def close(self) -> None: ...


class OTelSink(LogSink):
    """Sink delivering rendered records through an OTel SDK log pipeline.

    Each message becomes the body of one OTel ``LogRecord``. A
    ``BatchLogRecordProcessor`` queues records and hands them to the exporter
    every ``batch_push_interval``; the queue holds at most
    ``max_queued_messages`` records.

    Args:
        config: Sink settings (log group, stream naming, batching).
        exporter: Where batches go. Defaults to the console exporter.
        include_newline: Append ``"\\n"`` to every message.
        batch: If False, export every record immediately
            (``SimpleLogRecordProcessor``).

    Example:
        >>> config = SinkConfig(log_group="my-app")
        >>> sink = OTelSink(config, FileLogRecordExporter(config, directory="logs"))
        >>> sink.add_message('{"message":"hello"}')
        >>> sink.close()
    """

    def __init__(
        self,
        config: SinkConfig,
        exporter: LogRecordExporter | None = None,
        *,
        include_newline: bool = True,
        batch: bool = True,
    ):
        super().__init__(include_newline)
        self.config = config
        self.stream_name = log_stream_name(config)

        resource = Resource.create(
            {
                "service.name": config.log_group or "scopelog",
                "log.group": config.log_group,
                "log.stream": self.stream_name,
            }
        )
        self._provider = LoggerProvider(resource=resource)
        exporter = exporter if exporter is not None else ConsoleLogRecordExporter()
        if batch:
            queue_size = max(1, config.max_queued_messages)
            self._provider.add_log_record_processor(
                BatchLogRecordProcessor(
                    exporter,
                    schedule_delay_millis=max(1.0, config.batch_push_interval.total_seconds() * 1000),
                    max_queue_size=queue_size,
                    max_export_batch_size=min(queue_size, _MAX_EXPORT_BATCH_SIZE),
                )
            )
        else:
            self._provider.add_log_record_processor(SimpleLogRecordProcessor(exporter))
        self._logger = self._provider.get_logger("scopelog")

    @classmethod
    def from_options(cls, options: LoggerOptions) -> "OTelSink":
        return cls(options.sink, include_newline=options.include_newline)

    def add_message(self, message: str) -> None:
        record = LogRecord(
            timestamp=time.time_ns(),
            body=self._terminate(message),
        )
        self._logger.emit(record)

    def close(self) -> None:
        """Flush queued records and shut the pipeline down."""
        self._provider.shutdown()


class SubjectSink(LogSink):
    """Sink forwarding rendered records to a reactivex ``Subject``.

    Subscribers receive every message as it is added; ``close`` completes the
    subject.

    Example:
        >>> sink = SubjectSink()
        >>> sink.subject.subscribe(print)
        >>> sink.add_message('{"message":"hello"}')
    """

    def __init__(self, subject: Subject | None = None, *, include_newline: bool = False):
        super().__init__(include_newline)
        self.subject = subject if subject is not None else Subject()

    def add_message(self, message: str) -> None:
        self.subject.on_next(self._terminate(message))

    def close(self) -> None:
        self.subject.on_completed()


class LazySink:
    """Single-assignment cell creating its sink on first use.

    States: uninitialized, initialized, closed. Creation happens at most once
    even under concurrent first use; a failed creation leaves the cell
    uninitialized so a later call may retry. Once closed, the cell never
    creates a sink again.
    """

    def __init__(self, factory: Callable[[], LogSink]):
        self._factory = factory
        self._sink: LogSink | None = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def is_created(self) -> bool:
        return self._sink is not None

    def get(self) -> LogSink | None:
        """Return the sink, creating it if needed. ``None`` once closed."""
        if self._closed:
            return None
        sink = self._sink
        if sink is not None:
            return sink
        with self._lock:
            if self._closed:
                return None
            if self._sink is None:
                self._sink = self._factory()
            return self._sink

    def close(self) -> bool:
        """Close the sink if it was ever created. Returns False on repeated calls."""
        with self._lock:
            if self._closed:
                return False
            self._closed = True
            sink = self._sink
        if sink is not None:
            sink.close()
        return True
