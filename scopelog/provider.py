"""Provider creating category loggers that share one sink and scope chain."""

import threading
from typing import Callable

from .diagnostics import DiagnosticLog
from .logger import ScopeLogger
from .options import LoggerOptions
from .populator import PropertyPopulator
from .renderer import LogRenderer
from .scope import ScopeProvider, ScopeRef
from .sink import LazySink, LogSink, OTelSink


class ScopeLoggerProvider:
    """
    Creates :class:`ScopeLogger` instances per category.

    The sink is created by ``sink_factory`` on the first record actually
    written, so its setup cost and any setup failure are deferred until then.
    All loggers of one provider share the sink and the scope provider set by
    :meth:`set_scope_provider`, including loggers created before that call.

    Parameters
    - renderer: LogRenderer
        Renders populated records.
    - options: LoggerOptions
        Inclusion toggles and sink settings.
    - sink_factory: Optional[Callable[[LoggerOptions], LogSink]]
        Builds the sink. Defaults to :meth:`OTelSink.from_options`.
    - diagnostics: Optional[DiagnosticLog]
        Where pipeline failures are reported. Defaults to the library log
        file named in the sink settings.
    """

    def __init__(
        self,
        renderer: LogRenderer,
        options: LoggerOptions,
        sink_factory: Callable[[LoggerOptions], LogSink] | None = None,
        *,
        diagnostics: DiagnosticLog | None = None,
    ):
        if renderer is None:
            raise ValueError("renderer must not be None")
        if options is None:
            raise ValueError("options must not be None")

        self._renderer = renderer
        self._options = options
        factory = sink_factory or OTelSink.from_options
        self._sink = LazySink(lambda: factory(self._options))
        self._scope_ref = ScopeRef()
        self._populator = PropertyPopulator()
        self._diagnostics = diagnostics or DiagnosticLog(
            options.sink.library_log_file_name,
            min_level=options.sink.log_level,
        )
        self._disposed = False
        self._dispose_lock = threading.Lock()

    @property
    def options(self) -> LoggerOptions:
        return self._options

    @property
    def sink_created(self) -> bool:
        return self._sink.is_created

    def create_logger(self, category: str) -> ScopeLogger:
        return ScopeLogger(
            category,
            self._sink,
            self._renderer,
            self._options,
            scope_ref=self._scope_ref,
            populator=self._populator,
            diagnostics=self._diagnostics,
        )

    def set_scope_provider(self, scope_provider: ScopeProvider | None) -> None:
        """Attach the scope provider consulted by every logger of this provider."""
        self._scope_ref.value = scope_provider

    def dispose(self) -> None:
        """Close the sink if it was ever created. Repeated calls do nothing."""
        with self._dispose_lock:
            if self._disposed:
                return
            self._disposed = True
        try:
            self._sink.close()
        except Exception as e:
            self._diagnostics.report(e, source="ScopeLoggerProvider", note="Failed to close sink")
        finally:
            self._diagnostics.close()

    close = dispose

    def __enter__(self) -> "ScopeLoggerProvider":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()
