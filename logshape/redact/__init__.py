"""Deterministic path-based redaction and removal for structured records."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Sequence, Tuple, Union

from ..errors import RedactionError
from .paths import Index, Literal, Path, Wildcard, compile_paths, key_from_path


LOGGER = logging.getLogger("logshape.redact")

REDACTED_CENSOR = "[Redacted]"

Censor = Union[Any, Callable[[Any, List[str]], Any]]

DEFAULT_REDACT_PATHS: Tuple[str, ...] = (
    "header['user-email']",
    "headers['user-email']",
    "req.headers['user-email']",
)


@dataclass(frozen=True)
class RedactionRule:
    """A set of paths to censor, or to remove when ``remove`` is set."""

    paths: Tuple[str, ...]
    censor: Censor = REDACTED_CENSOR
    remove: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.paths, str):
            object.__setattr__(self, "paths", (self.paths,))
        else:
            object.__setattr__(self, "paths", tuple(self.paths))


@dataclass(frozen=True)
class _CompiledRule:
    rule: RedactionRule
    paths: Tuple[Path, ...]


class Redactor:
    """Apply removal rules, then redaction rules, to a record.

    Only containers along matched paths are copied; the input is never
    mutated. Paths that do not resolve against a record are skipped.
    """

    def __init__(self, rules: Iterable[RedactionRule], *, strict: bool = False) -> None:
        compiled = [_CompiledRule(rule, compile_paths(rule.paths)) for rule in rules]
        # Removal first so a key targeted by both rule kinds disappears.
        self._rules = tuple(
            sorted(compiled, key=lambda entry: 0 if entry.rule.remove else 1)
        )
        self.strict = strict

    @property
    def rules(self) -> Tuple[RedactionRule, ...]:
        return tuple(entry.rule for entry in self._rules)

    def __bool__(self) -> bool:
        return any(entry.paths for entry in self._rules)

    def apply(self, record: Any) -> Any:
        """Return a redacted copy of ``record``."""

        if not isinstance(record, (Mapping, list)):
            if self.strict:
                raise RedactionError("primitives cannot be redacted")
            return record

        result = record
        for entry in self._rules:
            for path in entry.paths:
                result = self._rewrite(result, path, 0, [], entry.rule)
        return result

    # --------------------- internal helpers ---------------------
    def _rewrite(
        self,
        node: Any,
        path: Path,
        depth: int,
        trail: List[str],
        rule: RedactionRule,
    ) -> Any:
        if isinstance(node, Mapping):
            keys = _mapping_keys(node, path[depth])
            copy: Any = dict(node)
        elif isinstance(node, list):
            keys = _list_keys(node, path[depth])
            copy = list(node)
        else:
            return node

        if not keys:
            return node

        last = depth == len(path) - 1
        changed = False
        removals = []

        for key in keys:
            child = node[key]
            child_trail = trail + [str(key)]

            if not last:
                rewritten = self._rewrite(child, path, depth + 1, child_trail, rule)
                if rewritten is not child:
                    copy[key] = rewritten
                    changed = True
                continue

            if rule.remove:
                removals.append(key)
            else:
                censor = rule.censor
                copy[key] = censor(child, child_trail) if callable(censor) else censor
            changed = True

        if isinstance(copy, list):
            removals.sort(reverse=True)
        for key in removals:
            del copy[key]

        if changed:
            LOGGER.debug("Rewrote %s", key_from_path(trail) or "<root>")

        return copy if changed else node


def _mapping_keys(node: Mapping[Any, Any], segment: Any) -> Sequence[Any]:
    if isinstance(segment, Wildcard):
        return list(node.keys())
    name = segment.name if isinstance(segment, Literal) else str(segment.position)
    return [name] if name in node else []


def _list_keys(node: List[Any], segment: Any) -> Sequence[int]:
    if isinstance(segment, Wildcard):
        return list(range(len(node)))
    if isinstance(segment, Index):
        position = segment.position
    elif segment.name.isdigit():
        position = int(segment.name)
    else:
        return []
    return [position] if position < len(node) else []


def normalize_redact(
    redact: Union[None, str, Sequence[str], RedactionRule, Sequence[RedactionRule]],
) -> Tuple[RedactionRule, ...]:
    """Coerce a user ``redact`` option into rules with the default paths appended."""

    if redact is None:
        return (RedactionRule(DEFAULT_REDACT_PATHS),)

    if isinstance(redact, RedactionRule):
        return (
            RedactionRule(
                paths=redact.paths + DEFAULT_REDACT_PATHS,
                censor=redact.censor,
                remove=redact.remove,
            ),
        )

    if isinstance(redact, str):
        redact = (redact,)

    rules = [item for item in redact if isinstance(item, RedactionRule)]
    paths = tuple(item for item in redact if isinstance(item, str))
    return (RedactionRule(paths + DEFAULT_REDACT_PATHS), *rules)


def build_redactor(rules: Iterable[RedactionRule], *, strict: bool = False) -> Redactor:
    """Construct a redactor; invalid paths raise :class:`ConfigurationError`."""

    return Redactor(rules, strict=strict)


__all__ = [
    "DEFAULT_REDACT_PATHS",
    "REDACTED_CENSOR",
    "RedactionRule",
    "Redactor",
    "build_redactor",
    "compile_paths",
    "key_from_path",
    "normalize_redact",
]
