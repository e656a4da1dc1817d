"""Destination factory."""

from __future__ import annotations

from typing import NamedTuple, Union

from .mock import DEFAULT_MOCK_OPTIONS, MockOptions, StdoutMock
from .redact import Destination
from .stdout import StdoutDestination


class CreatedDestination(NamedTuple):
    destination: Destination
    stdout_mock: StdoutMock


def create_destination(mock: Union[bool, MockOptions] = False) -> CreatedDestination:
    """Create a logging destination.

    With a truthy ``mock`` the destination is the returned ``stdout_mock``,
    which records every logging call for later inspection. Otherwise records
    go to stdout and the mock stays empty.
    """

    options = mock if isinstance(mock, MockOptions) else DEFAULT_MOCK_OPTIONS
    stdout_mock = StdoutMock(options)
    destination: Destination = stdout_mock if mock else StdoutDestination()

    return CreatedDestination(destination=destination, stdout_mock=stdout_mock)


__all__ = ["CreatedDestination", "create_destination"]
