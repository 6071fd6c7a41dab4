"""Convenience exports for the :mod:`scopelog` package."""

from .config import configure_logging, get_default_provider  # noqa: F401
from .diagnostics import DiagnosticItem, DiagnosticLog  # noqa: F401
from .exporters import (  # noqa: F401
    ConsoleLogRecordExporter,
    FileLogRecordExporter,
    log_stream_name,
)
from .levels import EventId, LogLevel  # noqa: F401
from .logger import ScopeLogger  # noqa: F401
from .mechanism import ConfigurationError, ScopeLogError  # noqa: F401
from .options import LoggerOptions, SinkConfig, get_logging_config_section  # noqa: F401
from .populator import PropertyPopulator  # noqa: F401
from .provider import ScopeLoggerProvider  # noqa: F401
from .renderer import JsonRenderer, LogRenderer  # noqa: F401
from .scope import NULL_SCOPE, ScopeHandle, ScopeProvider  # noqa: F401
from .sink import LazySink, LogSink, OTelSink, SubjectSink  # noqa: F401
from .state import FormattedState  # noqa: F401

__all__ = [
    "ScopeLogError",
    "ConfigurationError",

    "LogLevel",
    "EventId",
    "FormattedState",

    # options
    "LoggerOptions",
    "SinkConfig",
    "get_logging_config_section",

    # pipeline
    "ScopeProvider",
    "ScopeHandle",
    "NULL_SCOPE",
    "PropertyPopulator",
    "LogRenderer",
    "JsonRenderer",
    "ScopeLogger",
    "ScopeLoggerProvider",

    # sinks
    "LogSink",
    "LazySink",
    "OTelSink",
    "SubjectSink",
    "ConsoleLogRecordExporter",
    "FileLogRecordExporter",
    "log_stream_name",

    # diagnostics
    "DiagnosticItem",
    "DiagnosticLog",

    # wiring
    "configure_logging",
    "get_default_provider",
]
