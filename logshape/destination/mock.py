"""Recording destination for asserting on logging calls in tests."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..errors import RedactionError, StdoutMockError
from ..redact import RedactionRule, Redactor

MOCK_CENSOR = "-"


@dataclass(frozen=True)
class MockOptions:
    """Paths normalized before a logging call is recorded.

    ``redact`` paths are replaced with a static ``-``; list non-deterministic
    properties such as ``latency`` to stabilise assertions. ``remove`` paths
    are deleted; list common properties such as ``timestamp`` to declutter
    them. ``None`` keeps the defaults for that list.
    """

    redact: Optional[Tuple[str, ...]] = None
    remove: Optional[Tuple[str, ...]] = None


DEFAULT_MOCK_OPTIONS = MockOptions(
    redact=(
        'headers["host"]',
        'headers["x-request-id"]',
        "latency",
        '["x-request-id"]',
    ),
    remove=("environment", "name", "timestamp", "version", "eeeoh", "ddsource"),
)


class StdoutMock:
    """Destination that parses, normalizes and records every line written."""

    def __init__(self, options: MockOptions = DEFAULT_MOCK_OPTIONS) -> None:
        redact = DEFAULT_MOCK_OPTIONS.redact if options.redact is None else options.redact
        remove = DEFAULT_MOCK_OPTIONS.remove if options.remove is None else options.remove

        self._remove = Redactor([RedactionRule(tuple(remove), remove=True)], strict=True)
        self._redact = Redactor([RedactionRule(tuple(redact), censor=MOCK_CENSOR)], strict=True)
        self.calls: List[Dict[str, Any]] = [] # Logging calls recorded to date

    def clear(self) -> None:
        """Clear the logging calls recorded to date."""

        self.calls.clear()

    def only_call(self) -> Dict[str, Any]:
        """Return the solitary logging call, failing unless exactly one was recorded."""

        count = len(self.calls)
        if count != 1:
            raise StdoutMockError(
                f"stdout_mock.only_call() found {count} calls; expected exactly 1"
            )
        return self.calls[0]

    def write(self, line: str) -> None:
        """Parse and record a serialized logging call."""

        try:
            call: Any = json.loads(line)
        except ValueError as exc:
            raise StdoutMockError(
                f"logshape mocking failed to parse a log message as JSON: {line}"
            ) from exc

        try:
            call = self._remove.apply(call)
        except RedactionError as exc:
            raise StdoutMockError(
                f"logshape mocking failed to process a log message: {line}"
            ) from exc

        if not isinstance(call, Mapping):
            raise StdoutMockError(
                f"logshape mocking failed to process a log message: {line}"
            )

        self.calls.append(self._redact.apply(call))


__all__ = ["DEFAULT_MOCK_OPTIONS", "MOCK_CENSOR", "MockOptions", "StdoutMock"]
