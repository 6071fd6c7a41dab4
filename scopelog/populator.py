"""Builds the structured record for a single log call."""

from typing import Any

from .levels import EventId, LogLevel
from .options import LoggerOptions
from .scope import ScopeProvider
from .state import is_structured
from .utils import get_error_message, safe_str

LOG_LEVEL_KEY = "logLevel"
CATEGORY_NAME_KEY = "categoryName"
EVENT_ID_KEY = "eventId"
EVENT_NAME_KEY = "eventName"
MESSAGE_KEY = "message"
EXCEPTION_MESSAGE_KEY = "exceptionMessage"
EXCEPTION_KEY = "exception"
SEMANTICS_KEY = "semantics"
SCOPE_KEY = "scope"
SCOPE_APPENDED_TEXT_KEY = "{Appended}"

SCOPE_SEPARATOR = " => "


class PropertyPopulator:
    """
    Turn the inputs of a log call into an ordered record.

    Field order is fixed so rendered output is stable: level, category,
    event id and name, message, exception message and exception, semantics,
    scope. Optional fields are omitted, never set to ``None``.
    """

    def populate(
        self,
        level: LogLevel,
        category: str,
        message: str,
        state: Any,
        exception: BaseException | None,
        event_id: EventId | None,
        options: LoggerOptions,
        scope_provider: ScopeProvider | None = None,
    ) -> dict[str, Any]:
        record: dict[str, Any] = {}

        if options.include_log_level:
            record[LOG_LEVEL_KEY] = level
        if options.include_category:
            record[CATEGORY_NAME_KEY] = category
        if options.include_event_id and event_id is not None:
            if event_id.id != 0:
                record[EVENT_ID_KEY] = str(event_id.id)
            if options.include_event_name and event_id.name:
                record[EVENT_NAME_KEY] = event_id.name

        record[MESSAGE_KEY] = message

        if options.include_exception and exception is not None:
            if options.include_exception_message:
                record[EXCEPTION_MESSAGE_KEY] = get_error_message(exception)
            record[EXCEPTION_KEY] = exception

        if options.include_semantics and is_structured(state):
            record[SEMANTICS_KEY] = {safe_str(key): value for key, value in state.items()}

        if options.include_scopes:
            record[SCOPE_KEY] = self.collect_scopes(scope_provider)

        return record

    def collect_scopes(self, scope_provider: ScopeProvider | None) -> dict[str, Any]:
        """Merge the active scope chain into one mapping.

        Frames are visited innermost first. Structured frames contribute their
        pairs unless an inner frame already set the key; other frames are
        appended to a ``" => "`` separated trail kept under ``{Appended}``.
        """
        scope: dict[str, Any] = {}
        if scope_provider is None:
            return scope

        trail: list[str] = []

        def visit(value: Any, acc: dict[str, Any]) -> None:
            if is_structured(value):
                for key, item in value.items():
                    acc.setdefault(safe_str(key), item)
            else:
                trail.append(SCOPE_SEPARATOR)
                trail.append(safe_str(value))

        scope_provider.for_each_scope(visit, scope)

        if trail:
            scope[SCOPE_APPENDED_TEXT_KEY] = "".join(trail)
        return scope

