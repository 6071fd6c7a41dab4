"""Wiring helpers building a ready-to-use logger provider.

Provides :func:`configure_logging` (provider from options) and
:func:`get_default_provider` (lazy singleton writing to the console).
"""

import threading
from typing import Callable

from .options import LoggerOptions, SinkConfig
from .provider import ScopeLoggerProvider
from .renderer import JsonRenderer, LogRenderer
from .scope import ScopeProvider
from .sink import LogSink, OTelSink

_shared_renderer: JsonRenderer | None = None
_shared_renderer_lock = threading.Lock()


def _get_shared_renderer() -> JsonRenderer:
    global _shared_renderer
    with _shared_renderer_lock:
        if _shared_renderer is None:
            _shared_renderer = JsonRenderer()
        return _shared_renderer


def configure_logging(
    options: LoggerOptions,
    renderer: LogRenderer | None = None,
    sink_factory: Callable[[LoggerOptions], LogSink] | None = None,
    configure_sink: Callable[[SinkConfig], SinkConfig] | None = None,
    scope_provider: ScopeProvider | None = None,
) -> ScopeLoggerProvider:
    """
    Build a logger provider from options.

    Args:
        options: Inclusion toggles and sink settings, e.g. from
            :func:`~scopelog.options.get_logging_config_section`.
        renderer: Record renderer. Defaults to a shared single-line
            :class:`JsonRenderer`.
        sink_factory: Builds the sink on first use. Defaults to
            :meth:`OTelSink.from_options`.
        configure_sink: Receives the sink settings and returns the settings to
            use instead, e.g. ``lambda c: replace(c, region="eu-west-1")``.
        scope_provider: Scope chain shared by all loggers. A fresh
            :class:`ScopeProvider` when omitted.

    Returns:
        The configured :class:`ScopeLoggerProvider`.

    Example:
        >>> options = get_logging_config_section(settings)
        >>> provider = configure_logging(options)
        >>> logger = provider.create_logger("Task1")
        >>> logger.info("Log before scope. {step}", 1)
    """
    if options is None:
        raise ValueError("options must not be None")

    if configure_sink is not None:
        options = options.with_sink(configure_sink)

    provider = ScopeLoggerProvider(
        renderer if renderer is not None else _get_shared_renderer(),
        options,
        sink_factory,
    )
    provider.set_scope_provider(scope_provider if scope_provider is not None else ScopeProvider())
    return provider


# =============================================================================
# Default Provider
# =============================================================================


_default_provider: ScopeLoggerProvider | None = None
_default_provider_lock = threading.Lock()


def get_default_provider() -> ScopeLoggerProvider:
    """Get or create the process-wide default provider.

    Lazily initializes a provider on first call and returns the same provider
    on subsequent calls. It writes every record to stderr immediately
    (no batching) and reports its own failures to stderr.
    """
    global _default_provider

    with _default_provider_lock:
        if _default_provider is None:
            options = LoggerOptions(sink=SinkConfig(library_log_file_name=""))
            _default_provider = configure_logging(
                options,
                sink_factory=lambda opts: OTelSink(
                    opts.sink, include_newline=opts.include_newline, batch=False
                ),
            )
        return _default_provider
