"""Size, depth and length bounds for arbitrary log payloads."""

from __future__ import annotations

import datetime as _dt
import enum
import re
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import PurePath
from typing import Any, Dict, FrozenSet, List
from uuid import UUID

from .errors import ConfigurationError
from .serializers.errors import serialize_error

TRUNCATION_SUFFIX = "..."
OBJECT_PLACEHOLDER = "[Object]"
ARRAY_PLACEHOLDER = "[Array]"
FUNCTION_PLACEHOLDER = "[Function]"

# Strings emitted for bounded values; never truncated again.
_PLACEHOLDER = re.compile(r"\[(?:Object|Array|Function)\]|(?:Array|Object|Buffer)\(\d+\)")

_SEQUENCE_TYPES = (list, tuple, set, frozenset, deque)
_BUFFER_TYPES = (bytes, bytearray, memoryview)
_PRIMITIVE_TYPES = (bool, int, float, type(None))

# Sentinel for values dropped from their container.
_OMIT = object()


@dataclass(frozen=True)
class TrimPolicy:
    """Bounds applied to a value tree before it is serialized."""

    max_depth: int = 4
    max_string_length: int = 512
    max_array_length: int = 64
    max_object_keys: int = 64
    retained_keys: FrozenSet[str] = field(default_factory=lambda: frozenset({"stack"}))
    include_functions: bool = False

    def __post_init__(self) -> None:
        problems = []
        if self.max_depth < 0:
            problems.append(f"max_depth: expected >= 0, received {self.max_depth}")
        for name in ("max_string_length", "max_array_length", "max_object_keys"):
            value = getattr(self, name)
            if value <= 0:
                problems.append(f"{name}: expected > 0, received {value}")
        if problems:
            raise ConfigurationError("\n".join(["Invalid trim policy", *problems]))

        object.__setattr__(self, "retained_keys", frozenset(self.retained_keys))


DEFAULT_TRIM_POLICY = TrimPolicy()


class Trimmer:
    """Recursively bound a value according to a :class:`TrimPolicy`."""

    def __init__(self, policy: TrimPolicy = DEFAULT_TRIM_POLICY) -> None:
        self._policy = policy

    @property
    def policy(self) -> TrimPolicy:
        return self._policy

    def trim(self, value: Any) -> Any:
        """Trim ``value`` treating it as depth 0."""

        result = self._walk(value, 0)
        return None if result is _OMIT else result

    def trim_fields(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Trim every value of a record without capping the record's own key count."""

        return self._walk_mapping(fields, 0)

    # --------------------- internal helpers ---------------------
    def _walk(self, value: Any, depth: int) -> Any:
        policy = self._policy

        if isinstance(value, _PRIMITIVE_TYPES):
            return value

        if isinstance(value, str):
            return self._trim_string(value)

        if isinstance(value, _BUFFER_TYPES):
            return f"Buffer({memoryview(value).nbytes})"

        if isinstance(value, Mapping):
            if depth >= policy.max_depth:
                return OBJECT_PLACEHOLDER
            if len(value) > policy.max_object_keys:
                return f"Object({len(value)})"
            return self._walk_mapping(value, depth)

        if isinstance(value, _SEQUENCE_TYPES):
            if depth >= policy.max_depth:
                return ARRAY_PLACEHOLDER
            if len(value) > policy.max_array_length:
                return f"Array({len(value)})"
            items: List[Any] = []
            for item in value:
                walked = self._walk(item, depth + 1)
                items.append(None if walked is _OMIT else walked)
            return items

        if isinstance(value, BaseException):
            return self._walk(serialize_error(value), depth)

        if isinstance(value, (_dt.datetime, _dt.date, _dt.time)):
            return self._trim_string(value.isoformat())

        if isinstance(value, enum.Enum):
            return self._walk(value.value, depth)

        if isinstance(value, (Decimal, UUID, PurePath)):
            return self._trim_string(str(value))

        if callable(value):
            return FUNCTION_PLACEHOLDER if policy.include_functions else _OMIT

        attributes = getattr(value, "__dict__", None)
        if isinstance(attributes, dict):
            public = {k: v for k, v in attributes.items() if not k.startswith("_")}
            return self._walk(public, depth)

        return self._trim_string(str(value))

    def _walk_mapping(self, value: Mapping[Any, Any], depth: int) -> Dict[str, Any]:
        retained = self._policy.retained_keys
        output: Dict[str, Any] = {}

        for key, item in value.items():
            name = key if isinstance(key, str) else str(key)
            if name in retained:
                output[name] = item
                continue
            walked = self._walk(item, depth + 1)
            if walked is not _OMIT:
                output[name] = walked

        return output

    def _trim_string(self, value: str) -> str:
        limit = self._policy.max_string_length
        if len(value) <= limit or _PLACEHOLDER.fullmatch(value):
            return value
        return value[:limit] + TRUNCATION_SUFFIX


def trim(value: Any, policy: TrimPolicy = DEFAULT_TRIM_POLICY) -> Any:
    """Return ``value`` bounded by ``policy``."""

    return Trimmer(policy).trim(value)


__all__ = [
    "DEFAULT_TRIM_POLICY",
    "TrimPolicy",
    "Trimmer",
    "trim",
]
