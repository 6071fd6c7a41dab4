"""Per-category logger façade.

:class:`ScopeLogger` receives log calls, builds the record with a
:class:`~scopelog.populator.PropertyPopulator`, renders it and hands the
string to the provider's sink.
"""

from typing import Any, Callable

from .diagnostics import DiagnosticLog
from .levels import EventId, LogLevel
from .options import LoggerOptions
from .populator import PropertyPopulator
from .renderer import LogRenderer
from .scope import NULL_SCOPE, NullScope, ScopeHandle, ScopeProvider, ScopeRef
from .sink import LazySink
from .state import FormattedState

Formatter = Callable[[Any, BaseException | None], str]


class ScopeLogger:
    """Logger bound to one category.

    Example:
        >>> logger = provider.create_logger("Task1")
        >>> with logger.begin_scope({"guid": "abc"}):
        ...     logger.info("Log in scope, {step}", 2)
    """

    def __init__(
        self,
        category: str,
        sink: LazySink,
        renderer: LogRenderer,
        options: LoggerOptions,
        *,
        scope_ref: ScopeRef | None = None,
        populator: PropertyPopulator | None = None,
        diagnostics: DiagnosticLog | None = None,
    ):
        if options is None:
            raise ValueError("options must not be None")
        self._category = category
        self._sink = sink
        self._renderer = renderer
        self._options = options
        self._scope_ref = scope_ref if scope_ref is not None else ScopeRef()
        self._populator = populator if populator is not None else PropertyPopulator()
        self._diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

    @property
    def category(self) -> str:
        return self._category

    @property
    def scope_provider(self) -> ScopeProvider | None:
        """The scope provider currently shared by this logger's provider."""
        return self._scope_ref.value

    def is_enabled(self, level: LogLevel) -> bool:
        return level != LogLevel.NONE

    def begin_scope(self, state: Any, *args: Any) -> ScopeHandle | NullScope:
        """Push ``state`` onto the active scope chain until the handle is closed.

        With ``args``, ``state`` is a message template and the pushed frame is
        a :class:`FormattedState`.
        """
        scope_provider = self.scope_provider
        if scope_provider is None:
            return NULL_SCOPE
        if args:
            state = FormattedState(state, *args)
        return scope_provider.push(state)

    def log(
        self,
        level: LogLevel,
        event_id: EventId | None,
        state: Any,
        exception: BaseException | None,
        formatter: Formatter | None,
    ) -> None:
        """Write one log record.

        Raises:
            ValueError: ``formatter`` is None.
        """
        if not self.is_enabled(level):
            return
        if formatter is None:
            raise ValueError("formatter must not be None")

        message = formatter(state, exception)
        try:
            record = self._populator.populate(
                level,
                self._category,
                "" if message is None else str(message),
                state,
                exception,
                event_id,
                self._options,
                self.scope_provider,
            )
            rendered = self._renderer.render(record, self._options)
            sink = self._sink.get()
            if sink is not None:
                sink.add_message(rendered)
        except Exception as e:
            self._diagnostics.report(e, source=self._category, note="Failed to write log record")

    def _log_template(
        self,
        level: LogLevel,
        template: str,
        args: tuple,
        event_id: EventId | None,
        exception: BaseException | None,
    ) -> None:
        if not self.is_enabled(level):
            return
        state = FormattedState(template, *args)
        self.log(level, event_id, state, exception, FormattedState.formatter)

    def trace(self, template: str, *args: Any, event_id: EventId | None = None, exception: BaseException | None = None) -> None:
        self._log_template(LogLevel.TRACE, template, args, event_id, exception)

    def debug(self, template: str, *args: Any, event_id: EventId | None = None, exception: BaseException | None = None) -> None:
        self._log_template(LogLevel.DEBUG, template, args, event_id, exception)

    def info(self, template: str, *args: Any, event_id: EventId | None = None, exception: BaseException | None = None) -> None:
        """Write an INFORMATION record from a message template.

        Args:
            template: Message template, e.g. ``"Log in scope, {step}"``.
            *args: Values bound to the template holes in order.
            event_id: Optional event identity.
            exception: Optional exception attached to the record.
        """
        self._log_template(LogLevel.INFORMATION, template, args, event_id, exception)

    def warning(self, template: str, *args: Any, event_id: EventId | None = None, exception: BaseException | None = None) -> None:
        self._log_template(LogLevel.WARNING, template, args, event_id, exception)

    def error(self, template: str, *args: Any, event_id: EventId | None = None, exception: BaseException | None = None) -> None:
        self._log_template(LogLevel.ERROR, template, args, event_id, exception)

    def critical(self, template: str, *args: Any, event_id: EventId | None = None, exception: BaseException | None = None) -> None:
        self._log_template(LogLevel.CRITICAL, template, args, event_id, exception)
