"""Tests for the recording destination and the destination factory."""

from __future__ import annotations

import io
import json

import pytest

from logshape.destination import (
    DEFAULT_MOCK_OPTIONS,
    MockOptions,
    StdoutDestination,
    StdoutMock,
    create_destination,
)
from logshape.errors import RedactionError, StdoutMockError

MESSAGE = json.dumps(
    {
        "key": {"1": "a", "2": "b"},
        "name": "test",
        "timestamp": 1234567890,
        "latency": 123,
        "level": 30,
        "msg": "hello world",
        "~": {"c": "3", "d": "4"},
    }
)


def test_mock_can_be_enabled():
    """With ``mock=True`` the destination is the recording mock."""

    created = create_destination(mock=True)

    assert created.destination is created.stdout_mock


def test_mock_can_be_disabled():
    """Without ``mock`` records go to stdout and the mock stays unused."""

    created = create_destination(mock=False)

    assert created.destination is not created.stdout_mock
    assert isinstance(created.destination, StdoutDestination)
    assert created.stdout_mock.calls == []


def test_mock_options_enable_the_mock():
    """Passing options both enables the mock and configures it."""

    created = create_destination(mock=MockOptions(redact=(), remove=()))

    assert created.destination is created.stdout_mock


def test_malformed_json_is_rejected(stdout_mock):
    """Lines that are not JSON fail loudly."""

    with pytest.raises(StdoutMockError) as excinfo:
        stdout_mock.write("}")

    assert "failed to parse a log message as JSON" in str(excinfo.value)


@pytest.mark.parametrize("line", ["null", "42", "\"text\""])
def test_json_primitives_are_rejected(stdout_mock, line):
    """Primitive payloads fail with a message naming the line."""

    with pytest.raises(StdoutMockError) as excinfo:
        stdout_mock.write(line)

    assert str(excinfo.value) == f"logshape mocking failed to process a log message: {line}"
    assert isinstance(excinfo.value.__cause__, RedactionError)


def test_non_object_json_is_rejected(stdout_mock):
    """Arrays are not log messages."""

    with pytest.raises(StdoutMockError) as excinfo:
        stdout_mock.write("[]")

    assert str(excinfo.value) == "logshape mocking failed to process a log message: []"


def test_default_normalization(stdout_mock):
    """Defaults remove common properties and redact non-deterministic ones."""

    stdout_mock.write(MESSAGE)

    assert stdout_mock.only_call() == {
        "key": {"1": "a", "2": "b"},
        "latency": "-",
        "level": 30,
        "msg": "hello world",
        "~": {"c": "3", "d": "4"},
    }


def test_normalization_can_be_disabled():
    """Empty lists keep every property verbatim."""

    mock = StdoutMock(MockOptions(redact=(), remove=()))

    mock.write(MESSAGE)

    assert mock.only_call() == json.loads(MESSAGE)


def test_normalization_can_be_overwritten():
    """Custom lists replace the defaults."""

    mock = StdoutMock(MockOptions(redact=("name", "timestamp"), remove=("latency", "level", "msg")))

    mock.write(MESSAGE)

    assert mock.only_call() == {
        "key": {"1": "a", "2": "b"},
        "name": "-",
        "timestamp": "-",
        "~": {"c": "3", "d": "4"},
    }


def test_normalization_can_be_extended():
    """Defaults can be extended, including with paths that never match."""

    mock = StdoutMock(
        MockOptions(
            redact=(*DEFAULT_MOCK_OPTIONS.redact, "key", "tryToRedactPropertyThatDoesNotExist"),
            remove=(*DEFAULT_MOCK_OPTIONS.remove, "['~']", "tryToRemovePropertyThatDoesNotExist"),
        )
    )

    mock.write(MESSAGE)

    assert mock.only_call() == {"key": "-", "latency": "-", "level": 30, "msg": "hello world"}


def test_normalization_supports_nested_paths():
    """Nested paths redact and remove individual properties."""

    mock = StdoutMock(
        MockOptions(
            redact=(*DEFAULT_MOCK_OPTIONS.redact, "key['1']"),
            remove=(*DEFAULT_MOCK_OPTIONS.remove, "['~'].d"),
        )
    )

    mock.write(MESSAGE)

    assert mock.only_call() == {
        "key": {"1": "-", "2": "b"},
        "latency": "-",
        "level": 30,
        "msg": "hello world",
        "~": {"c": "3"},
    }


def test_redact_list_can_be_overwritten_alone():
    """Overriding only ``redact`` keeps the default removals."""

    mock = StdoutMock(MockOptions(redact=()))

    mock.write(json.dumps({"latency": 123, "name": "test"}))

    assert mock.only_call() == {"latency": 123}


def test_remove_list_can_be_overwritten_alone():
    """Overriding only ``remove`` keeps the default redactions."""

    mock = StdoutMock(MockOptions(remove=()))

    mock.write(json.dumps({"latency": 123, "name": "test"}))

    assert mock.only_call() == {"latency": "-", "name": "test"}


def test_request_id_headers_are_redacted(stdout_mock):
    """Request IDs are normalized wherever they are commonly logged."""

    stdout_mock.write(
        json.dumps(
            {
                "headers": {"host": "example.com", "x-request-id": "abc", "accept": "*/*"},
                "x-request-id": "abc",
            }
        )
    )

    assert stdout_mock.only_call() == {
        "headers": {"host": "-", "x-request-id": "-", "accept": "*/*"},
        "x-request-id": "-",
    }


@pytest.mark.parametrize("count", [0, 2])
def test_only_call_requires_exactly_one_call(stdout_mock, count):
    """``only_call`` fails unless exactly one call was recorded."""

    for _ in range(count):
        stdout_mock.write("{}")

    with pytest.raises(StdoutMockError) as excinfo:
        stdout_mock.only_call()

    assert str(excinfo.value) == (
        f"stdout_mock.only_call() found {count} calls; expected exactly 1"
    )


def test_calls_accumulate_and_clear(stdout_mock):
    """Calls are recorded in order and can be cleared."""

    stdout_mock.write("{}")
    assert stdout_mock.calls == [{}]
    assert stdout_mock.only_call() == {}

    stdout_mock.write('{"n": 2}')
    assert stdout_mock.calls == [{}, {"n": 2}]

    stdout_mock.clear()
    assert stdout_mock.calls == []


def test_stdout_destination_writes_lines():
    """The stdout destination appends a newline and flushes."""

    stream = io.StringIO()
    destination = StdoutDestination(stream)

    destination.write('{"a":1}')
    destination.write('{"b":2}\n')

    assert stream.getvalue() == '{"a":1}\n{"b":2}\n'


def test_stdout_destination_resolves_stdout_lazily(capsys):
    """Without a stream the current ``sys.stdout`` is used at write time."""

    StdoutDestination().write('{"a":1}')

    assert capsys.readouterr().out == '{"a":1}\n'
