"""Shared test fixtures for scopelog tests."""

from unittest.mock import MagicMock

import pytest

from scopelog import (
    JsonRenderer,
    LazySink,
    LoggerOptions,
    ScopeLogger,
    ScopeProvider,
)
from scopelog.diagnostics import DiagnosticLog
from scopelog.scope import ScopeRef


class RecordingSink:
    """Sink double keeping every message it receives."""

    def __init__(self):
        self.messages = []
        self.close_count = 0

    def add_message(self, message):
        self.messages.append(message)

    def close(self):
        self.close_count += 1


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def scopes():
    return ScopeProvider()


@pytest.fixture
def diagnostics():
    return MagicMock(spec=DiagnosticLog)


@pytest.fixture
def make_logger(sink, scopes, diagnostics):
    """Build a ScopeLogger writing to the recording sink."""

    def _make(category="Task1", options=None, with_scopes=True, **kwargs):
        return ScopeLogger(
            category,
            LazySink(lambda: sink),
            kwargs.pop("renderer", JsonRenderer()),
            options or LoggerOptions(),
            scope_ref=ScopeRef(scopes if with_scopes else None),
            diagnostics=diagnostics,
            **kwargs,
        )

    return _make


@pytest.fixture
def new_sink():
    """Factory for fresh recording sinks."""
    return RecordingSink
