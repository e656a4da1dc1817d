"""Numeric log levels."""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from .errors import ConfigurationError

LEVELS: Mapping[str, int] = MappingProxyType(
    {
        "trace": 10,
        "debug": 20,
        "info": 30,
        "warn": 40,
        "error": 50,
        "fatal": 60,
    }
)

_ALIASES = {"warning": "warn", "critical": "fatal"}

SILENT = "silent"


class LevelTable:
    """Built-in levels plus the custom levels registered on a logger."""

    def __init__(self, custom_levels: Optional[Mapping[str, int]] = None) -> None:
        custom = dict(custom_levels or {})
        problems = [
            f"{name}: expected a positive integer, received {value!r}"
            for name, value in custom.items()
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0
        ]
        if problems:
            raise ConfigurationError("\n".join(["Invalid custom levels", *problems]))

        self._custom: Dict[str, int] = custom
        self._values: Dict[str, int] = {**LEVELS, **custom}

    @property
    def custom(self) -> Mapping[str, int]:
        return dict(self._custom)

    @property
    def values(self) -> Mapping[str, int]:
        return dict(self._values)

    def value_of(self, name: str) -> Optional[int]:
        """Return the numeric value of a level name, custom levels first."""

        if name in self._custom:
            return self._custom[name]
        name = _ALIASES.get(name, name)
        return LEVELS.get(name)

    def threshold(self, name: str) -> float:
        """Return the numeric threshold for a configured logger level."""

        if name == SILENT:
            return math.inf
        value = self.value_of(name)
        if value is None:
            raise ConfigurationError(f"Unknown log level: {name}")
        return value

    def extend(self, custom_levels: Optional[Mapping[str, int]]) -> "LevelTable":
        if not custom_levels:
            return self
        return LevelTable({**self._custom, **custom_levels})


__all__ = ["LEVELS", "LevelTable", "SILENT"]
