"""Fixtures for logshape unit tests."""

from __future__ import annotations

from typing import Any, Callable, Dict

import pytest

from logshape import create_destination, create_logger
from logshape.config import reset_settings
from logshape.context import clear_context
from logshape.destination import DEFAULT_MOCK_OPTIONS, MockOptions, StdoutMock
from logshape.logger import Logger, reset_loggers


def pytest_collection_modifyitems(config, items):  # pragma: no cover - Pytest hook
    """Tag every test in this directory with the `logging` marker."""

    for item in items:
        item.add_marker(pytest.mark.logging)


@pytest.fixture(autouse=True)
def _reset_logging_state():
    """Reset logging globals (settings, default logger, context) around each test."""

    reset_loggers()
    reset_settings()
    clear_context()
    yield
    clear_context()
    reset_settings()
    reset_loggers()


@pytest.fixture
def test_env() -> Dict[str, str]:
    """Deterministic environment for base attribute resolution."""

    return {
        "DD_ENV": "test",
        "DD_SERVICE": "logshape-unit-tests",
        "DD_VERSION": "abcdefa.123",
    }


@pytest.fixture
def stdout_mock() -> StdoutMock:
    """Recording destination that also drops per-process attributes."""

    options = MockOptions(remove=(*DEFAULT_MOCK_OPTIONS.remove, "pid", "hostname"))
    return create_destination(mock=options).stdout_mock


@pytest.fixture
def logger_factory(stdout_mock) -> Callable[..., Logger]:
    """Build loggers writing to the recording destination."""

    def _factory(**overrides: Any) -> Logger:
        overrides.setdefault("env", {})
        return create_logger(destination=stdout_mock, **overrides)

    return _factory


@pytest.fixture
def logger(logger_factory) -> Logger:
    """Convenience fixture for a default logger bound to the recording destination."""

    return logger_factory()
