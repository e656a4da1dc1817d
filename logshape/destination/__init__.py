"""Destinations receiving serialized log lines."""

from .create import CreatedDestination, create_destination
from .mock import DEFAULT_MOCK_OPTIONS, MockOptions, StdoutMock
from .redact import (
    REDACTED_PLACEHOLDER,
    RedactingDestination,
    TextRedactor,
    with_redaction,
)
from .stdout import StdoutDestination

__all__ = [
    "CreatedDestination",
    "DEFAULT_MOCK_OPTIONS",
    "MockOptions",
    "REDACTED_PLACEHOLDER",
    "RedactingDestination",
    "StdoutDestination",
    "StdoutMock",
    "TextRedactor",
    "create_destination",
    "with_redaction",
]
