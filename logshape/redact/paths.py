"""Compilation of declarative redaction paths.

Supported syntax::

    a.b.c                 dotted identifiers
    headers["x-request-id"]
    ['~'].d               bracket-quoted keys, single or double quotes
    items[0]              list indices
    a.*  a[*]  *.b        wildcards matching every key or element

Paths are compiled once into tuples of segments and evaluated per record.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Tuple, Union

from ..errors import ConfigurationError


@dataclass(frozen=True)
class Literal:
    name: str


@dataclass(frozen=True)
class Index:
    position: int


@dataclass(frozen=True)
class Wildcard:
    pass


Segment = Union[Literal, Index, Wildcard]
Path = Tuple[Segment, ...]

_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*\Z")
_BARE_CHARS = re.compile(r"[^.\[\]]+")


def _invalid(text: str, reason: str) -> ConfigurationError:
    return ConfigurationError(f"Invalid redaction path {text!r}: {reason}")


def _parse_bracket(text: str, start: int) -> Tuple[Segment, int]:
    """Parse a ``[...]`` segment beginning at ``start``; return it and the next offset."""

    cursor = start + 1
    if cursor >= len(text):
        raise _invalid(text, "unterminated bracket")

    quote = text[cursor]
    if quote in ("'", '"'):
        end = text.find(quote, cursor + 1)
        if end == -1:
            raise _invalid(text, "unterminated quoted key")
        if end + 1 >= len(text) or text[end + 1] != "]":
            raise _invalid(text, "expected ']' after quoted key")
        return Literal(text[cursor + 1 : end]), end + 2

    end = text.find("]", cursor)
    if end == -1:
        raise _invalid(text, "unterminated bracket")

    content = text[cursor:end].strip()
    if content == "*":
        return Wildcard(), end + 1
    if content.isdigit():
        return Index(int(content)), end + 1

    raise _invalid(text, f"bracket content {content!r} must be quoted, an index or '*'")


def compile_path(text: str) -> Path:
    """Compile a path string into segments.

    Raises :class:`ConfigurationError` when the syntax is invalid.
    """

    if not isinstance(text, str) or not text.strip():
        raise _invalid(str(text), "path must be a non-empty string")

    text = text.strip()
    segments: List[Segment] = []
    cursor = 0
    expect_name = True

    while cursor < len(text):
        char = text[cursor]

        if char == "[":
            segment, cursor = _parse_bracket(text, cursor)
            segments.append(segment)
            expect_name = False
            continue

        if char == ".":
            if expect_name:
                raise _invalid(text, "empty segment")
            cursor += 1
            if cursor >= len(text):
                raise _invalid(text, "trailing '.'")
            if text[cursor] == "[":
                raise _invalid(text, "'.' followed by '['")
            expect_name = True
            continue

        if char == "]":
            raise _invalid(text, "unexpected ']'")

        if not expect_name:
            raise _invalid(text, "missing '.' between segments")

        match = _BARE_CHARS.match(text, cursor)
        assert match is not None
        name = match.group(0)
        segments.append(Wildcard() if name == "*" else Literal(name))
        cursor = match.end()
        expect_name = False

    if not segments:
        raise _invalid(text, "no segments")

    return tuple(segments)


def compile_paths(texts: Iterable[str]) -> Tuple[Path, ...]:
    return tuple(compile_path(text) for text in texts)


def key_from_path(names: Iterable[str]) -> str:
    """Render key names as path text, bracket-quoting non-identifier keys."""

    rendered: List[str] = []
    for name in names:
        if _IDENTIFIER.match(name):
            rendered.append(f".{name}" if rendered else name)
        else:
            rendered.append(f'["{name}"]')
    return "".join(rendered)


__all__ = [
    "Index",
    "Literal",
    "Path",
    "Segment",
    "Wildcard",
    "compile_path",
    "compile_paths",
    "key_from_path",
]
