"""Logger options and their loading from configuration mappings.

:class:`LoggerOptions` holds the inclusion toggles consumed by the pipeline;
:class:`SinkConfig` holds the delivery settings passed through to the sink.
Both are frozen: derive modified copies with :func:`dataclasses.replace`.

Configuration is read from string key/value pairs, the way an
``appsettings.json`` ``Logging:AWS`` block looks once loaded::

    {
        "Logging": {
            "AWS": {
                "LogGroup": "my-app",
                "IncludeScopes": "true",
                "BatchPushInterval": "5000"
            }
        }
    }
"""

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import timedelta
from typing import Any, Callable

from .levels import LogLevel
from .mechanism import ConfigurationError

# Default configuration block; the sink settings are fetched from here.
DEFAULT_BLOCK = "Logging:AWS"

LOG_GROUP = "LogGroup"
DISABLE_LOG_GROUP_CREATION = "DisableLogGroupCreation"
REGION = "Region"
SERVICE_URL = "ServiceUrl"
PROFILE = "Profile"
PROFILES_LOCATION = "ProfilesLocation"
BATCH_PUSH_INTERVAL = "BatchPushInterval"
BATCH_PUSH_SIZE_IN_BYTES = "BatchPushSizeInBytes"
LOG_LEVEL = "LogLevel"
MAX_QUEUED_MESSAGES = "MaxQueuedMessages"
LOG_STREAM_NAME_SUFFIX = "LogStreamNameSuffix"
LOG_STREAM_NAME_PREFIX = "LogStreamNamePrefix"
LIBRARY_LOG_FILE_NAME = "LibraryLogFileName"

# inclusion toggle key -> LoggerOptions field
_TOGGLE_KEYS = {
    "IncludeLogLevel": "include_log_level",
    "IncludeCategory": "include_category",
    "IncludeEventId": "include_event_id",
    "IncludeEventName": "include_event_name",
    "IncludeException": "include_exception",
    "IncludeExceptionMessage": "include_exception_message",
    "IncludeSemantics": "include_semantics",
    "IncludeScopes": "include_scopes",
    "IncludeNewline": "include_newline",
}


@dataclass(frozen=True)
class SinkConfig:
    """Delivery settings for the sink. Opaque to the rendering pipeline."""

    log_group: str = ""
    disable_log_group_creation: bool = False
    region: str | None = None
    service_url: str | None = None
    profile: str | None = None
    profiles_location: str | None = None
    batch_push_interval: timedelta = timedelta(milliseconds=3000)
    batch_size_in_bytes: int = 102400
    log_level: LogLevel = LogLevel.ERROR
    max_queued_messages: int = 10000
    log_stream_name_prefix: str = ""
    log_stream_name_suffix: str = field(default_factory=lambda: str(uuid.uuid4()))
    library_log_file_name: str = "aws-logger-errors.txt"


@dataclass(frozen=True)
class LoggerOptions:
    """Defines which fields are attached to every rendered log record.

    All toggles default to ``True``. ``include_newline`` is honored by the
    sink, not by the renderer.
    """

    include_log_level: bool = True
    include_category: bool = True
    include_event_id: bool = True
    include_event_name: bool = True
    include_exception: bool = True
    include_exception_message: bool = True
    include_semantics: bool = True
    include_scopes: bool = True
    include_newline: bool = True
    sink: SinkConfig = field(default_factory=SinkConfig)

    @classmethod
    def from_config(cls, section: Mapping[str, Any]) -> "LoggerOptions":
        """Build options from a configuration section.

        Absent keys keep their defaults; malformed values raise
        :class:`ConfigurationError`.
        """
        section = _fold_keys(section)

        def get(key: str) -> Any:
            return section.get(key.lower())

        sink = SinkConfig()
        sink_changes: dict[str, Any] = {}

        if get(LOG_GROUP) is not None:
            sink_changes["log_group"] = str(get(LOG_GROUP))
        if get(DISABLE_LOG_GROUP_CREATION) is not None:
            sink_changes["disable_log_group_creation"] = parse_bool(
                DISABLE_LOG_GROUP_CREATION, get(DISABLE_LOG_GROUP_CREATION)
            )
        for key, name in (
            (REGION, "region"),
            (SERVICE_URL, "service_url"),
            (PROFILE, "profile"),
            (PROFILES_LOCATION, "profiles_location"),
            (LOG_STREAM_NAME_SUFFIX, "log_stream_name_suffix"),
            (LOG_STREAM_NAME_PREFIX, "log_stream_name_prefix"),
            (LIBRARY_LOG_FILE_NAME, "library_log_file_name"),
        ):
            if get(key) is not None:
                sink_changes[name] = str(get(key))
        if get(BATCH_PUSH_INTERVAL) is not None:
            sink_changes["batch_push_interval"] = timedelta(
                milliseconds=parse_int(BATCH_PUSH_INTERVAL, get(BATCH_PUSH_INTERVAL))
            )
        if get(BATCH_PUSH_SIZE_IN_BYTES) is not None:
            sink_changes["batch_size_in_bytes"] = parse_int(
                BATCH_PUSH_SIZE_IN_BYTES, get(BATCH_PUSH_SIZE_IN_BYTES)
            )
        if get(MAX_QUEUED_MESSAGES) is not None:
            sink_changes["max_queued_messages"] = parse_int(
                MAX_QUEUED_MESSAGES, get(MAX_QUEUED_MESSAGES)
            )
        if get(LOG_LEVEL) is not None:
            sink_changes["log_level"] = parse_level(LOG_LEVEL, get(LOG_LEVEL))

        toggles = {
            name: parse_bool(key, get(key))
            for key, name in _TOGGLE_KEYS.items()
            if get(key) is not None
        }
        return cls(sink=replace(sink, **sink_changes), **toggles)

    def with_sink(self, configure: Callable[[SinkConfig], SinkConfig]) -> "LoggerOptions":
        """Return a copy whose sink config was passed through ``configure``."""
        return replace(self, sink=configure(self.sink))


def parse_bool(key: str, value: Any) -> bool:
    """Parse a boolean the way configuration files spell it (``"True"``, ``"false"``)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text == "true":
            return True
        if text == "false":
            return False
    raise ConfigurationError(key, value, "boolean")


def parse_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(key, value, "integer")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise ConfigurationError(key, value, "integer") from None


def parse_level(key: str, value: Any) -> LogLevel:
    if isinstance(value, LogLevel):
        return value
    try:
        return LogLevel.parse(str(value))
    except KeyError:
        raise ConfigurationError(key, value, "log level") from None


def _fold_keys(section: Mapping[str, Any]) -> dict[str, Any]:
    """Copy ``section`` with lower-cased keys. Configuration keys ignore case."""
    return {str(key).lower(): value for key, value in section.items()}


def _lookup(configuration: Mapping[str, Any], path: str) -> dict[str, Any]:
    """Resolve a colon-separated path in nested mappings, ignoring case.

    Flat keys spelling the full path (``"Logging:AWS:LogGroup"``) are merged
    into the section as well. Keys of the returned section are lower-cased.
    """
    node: Any = configuration
    for part in path.lower().split(":"):
        if not isinstance(node, Mapping):
            node = None
            break
        node = _fold_keys(node).get(part)

    section = _fold_keys(node) if isinstance(node, Mapping) else {}
    prefix = path.lower() + ":"
    for key, value in configuration.items():
        if isinstance(key, str) and key.lower().startswith(prefix):
            section[key[len(prefix):].lower()] = value
    return section


def get_logging_config_section(
    configuration: Mapping[str, Any], block: str = DEFAULT_BLOCK
) -> LoggerOptions | None:
    """
    Load the logger options from a configuration mapping.

    Args:
        configuration: Loaded configuration, nested or with flat colon keys.
        block: Colon-separated path of the section to read.

    Returns:
        The parsed options, or ``None`` when the section names no log group.
    """
    section = _lookup(configuration, block)
    if section.get(LOG_GROUP.lower()) is None:
        return None
    return LoggerOptions.from_config(section)
