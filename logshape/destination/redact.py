"""Text-level scrubbing of serialized log lines."""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional, Protocol, Sequence, Union

REDACTED_PLACEHOLDER = "[Redacted]"

BEARER_MATCHER = re.compile(r"\bbearer\s[\w.\-]{25,}", re.IGNORECASE | re.ASCII)

TextRule = Callable[[str, str], str]


class Destination(Protocol):
    def write(self, line: str) -> object: ...


class TextRedactor:
    """Scrub bearer tokens, then apply custom rules in order."""

    def __init__(self, rules: Iterable[TextRule] = ()) -> None:
        self._rules = tuple(rules)

    def scrub(self, line: str) -> str:
        scrubbed = BEARER_MATCHER.sub(REDACTED_PLACEHOLDER, line)
        for rule in self._rules:
            result = rule(scrubbed, REDACTED_PLACEHOLDER)
            if result is not None:
                scrubbed = result
        return scrubbed


class RedactingDestination:
    """Destination wrapper scrubbing every line before it is written."""

    def __init__(self, destination: Destination, redactor: TextRedactor) -> None:
        self._destination = destination
        self._redactor = redactor

    @property
    def wrapped(self) -> Destination:
        return self._destination

    def write(self, line: str) -> object:
        return self._destination.write(self._redactor.scrub(line))


def with_redaction(
    destination: Destination,
    redact_text: Union[None, TextRule, Sequence[TextRule]] = None,
) -> RedactingDestination:
    if redact_text is None:
        rules: Sequence[TextRule] = ()
    elif callable(redact_text):
        rules = (redact_text,)
    else:
        rules = tuple(redact_text)
    return RedactingDestination(destination, TextRedactor(rules))


__all__ = [
    "BEARER_MATCHER",
    "REDACTED_PLACEHOLDER",
    "RedactingDestination",
    "TextRedactor",
    "with_redaction",
]
