"""Tests for ScopeLoggerProvider and configure_logging."""

import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from scopelog import (
    JsonRenderer,
    LoggerOptions,
    LogLevel,
    ScopeLoggerProvider,
    ScopeProvider,
    SinkConfig,
    configure_logging,
    get_default_provider,
)
from scopelog.diagnostics import DiagnosticLog


def plain(state, exception):
    return str(state)


def make_provider(factory, **kwargs):
    return ScopeLoggerProvider(
        JsonRenderer(),
        LoggerOptions(),
        factory,
        diagnostics=kwargs.pop("diagnostics", MagicMock(spec=DiagnosticLog)),
    )


class TestLazySink:
    def test_sink_not_created_until_first_write(self, new_sink):
        factory = MagicMock(return_value=new_sink())
        provider = make_provider(factory)
        logger = provider.create_logger("Task1")

        assert factory.call_count == 0
        assert not provider.sink_created

        logger.log(LogLevel.NONE, None, "x", None, plain)
        assert factory.call_count == 0

        logger.log(LogLevel.INFORMATION, None, "x", None, plain)
        assert factory.call_count == 1
        assert provider.sink_created

    def test_factory_receives_options(self, new_sink):
        factory = MagicMock(return_value=new_sink())
        provider = make_provider(factory)
        provider.create_logger("c").log(LogLevel.INFORMATION, None, "x", None, plain)
        factory.assert_called_once_with(provider.options)

    def test_loggers_share_one_sink(self, new_sink):
        sink = new_sink()
        factory = MagicMock(return_value=sink)
        provider = make_provider(factory)

        provider.create_logger("A").log(LogLevel.INFORMATION, None, "a", None, plain)
        provider.create_logger("B").log(LogLevel.INFORMATION, None, "b", None, plain)

        assert factory.call_count == 1
        assert [json.loads(m)["categoryName"] for m in sink.messages] == ["A", "B"]

    def test_concurrent_first_use_creates_once(self, new_sink):
        sink = new_sink()
        calls = []
        lock = threading.Lock()

        def factory(options):
            with lock:
                calls.append(1)
            time.sleep(0.05)
            return sink

        provider = make_provider(factory)
        loggers = [provider.create_logger(f"c{i}") for i in range(16)]
        barrier = threading.Barrier(len(loggers))

        def write(logger):
            barrier.wait()
            logger.log(LogLevel.INFORMATION, None, "x", None, plain)

        with ThreadPoolExecutor(max_workers=len(loggers)) as pool:
            list(pool.map(write, loggers))

        assert len(calls) == 1
        assert len(sink.messages) == len(loggers)


class TestDispose:
    def test_closes_created_sink_once(self, new_sink):
        sink = new_sink()
        provider = make_provider(lambda options: sink)
        provider.create_logger("c").log(LogLevel.INFORMATION, None, "x", None, plain)

        provider.dispose()
        provider.dispose()
        provider.close()

        assert sink.close_count == 1

    def test_never_created_sink_is_untouched(self):
        factory = MagicMock()
        provider = make_provider(factory)
        provider.dispose()
        provider.dispose()
        factory.assert_not_called()

    def test_writes_after_dispose_are_dropped(self, new_sink):
        factory = MagicMock(return_value=new_sink())
        provider = make_provider(factory)
        logger = provider.create_logger("c")
        provider.dispose()

        logger.log(LogLevel.INFORMATION, None, "x", None, plain)
        factory.assert_not_called()

    def test_close_failure_is_reported(self):
        sink = MagicMock()
        sink.close.side_effect = OSError("flush failed")
        diagnostics = MagicMock(spec=DiagnosticLog)
        provider = make_provider(lambda options: sink, diagnostics=diagnostics)
        provider.create_logger("c").log(LogLevel.INFORMATION, None, "x", None, plain)

        provider.dispose()

        diagnostics.report.assert_called_once()

    def test_context_manager(self, new_sink):
        sink = new_sink()
        with make_provider(lambda options: sink) as provider:
            provider.create_logger("c").log(LogLevel.INFORMATION, None, "x", None, plain)
        assert sink.close_count == 1


class TestScopeProvider:
    def test_loggers_created_before_and_after_see_latest(self, new_sink):
        sink = new_sink()
        provider = make_provider(lambda options: sink)
        before = provider.create_logger("before")

        scopes = ScopeProvider()
        provider.set_scope_provider(scopes)
        after = provider.create_logger("after")

        with before.begin_scope({"k": "v"}):
            before.log(LogLevel.INFORMATION, None, "x", None, plain)
            after.log(LogLevel.INFORMATION, None, "x", None, plain)

        assert [json.loads(m)["scope"] for m in sink.messages] == [{"k": "v"}, {"k": "v"}]
        assert before.scope_provider is scopes
        assert after.scope_provider is scopes

    def test_replacing_scope_provider(self, new_sink):
        provider = make_provider(lambda options: new_sink())
        logger = provider.create_logger("c")
        first, second = ScopeProvider(), ScopeProvider()

        provider.set_scope_provider(first)
        provider.set_scope_provider(second)
        assert logger.scope_provider is second


class TestConstruction:
    def test_requires_renderer_and_options(self):
        with pytest.raises(ValueError):
            ScopeLoggerProvider(None, LoggerOptions())  # type: ignore
        with pytest.raises(ValueError):
            ScopeLoggerProvider(JsonRenderer(), None)  # type: ignore


class TestConfigureLogging:
    def test_builds_provider_with_scopes(self, new_sink):
        sink = new_sink()
        provider = configure_logging(LoggerOptions(), sink_factory=lambda options: sink)
        logger = provider.create_logger("Task1")

        with logger.begin_scope({"guid": "abc"}):
            logger.info("hello")

        assert json.loads(sink.messages[0])["scope"] == {"guid": "abc"}
        provider.dispose()

    def test_configure_sink_replaces_settings(self, new_sink):
        received = []
        provider = configure_logging(
            LoggerOptions(),
            sink_factory=lambda options: received.append(options) or new_sink(),
            configure_sink=lambda config: SinkConfig(log_group="override", library_log_file_name=""),
        )
        provider.create_logger("c").info("x")
        assert received[0].sink.log_group == "override"
        assert provider.options.sink.log_group == "override"

    def test_requires_options(self):
        with pytest.raises(ValueError):
            configure_logging(None)  # type: ignore

    def test_uses_given_renderer(self, new_sink):
        renderer = MagicMock()
        renderer.render.return_value = "rendered"
        sink = new_sink()
        provider = configure_logging(LoggerOptions(), renderer=renderer, sink_factory=lambda o: sink)
        provider.create_logger("c").info("x")
        assert sink.messages == ["rendered"]


class TestDefaultProvider:
    def test_singleton(self):
        assert get_default_provider() is get_default_provider()

    def test_reports_to_stderr(self):
        provider = get_default_provider()
        assert provider.options.sink.library_log_file_name == ""
