"""Configuration utilities for logshape."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Tuple, Union

from .eeeoh.tiers import EeeohConfig
from .redact import REDACTED_CENSOR, RedactionRule, normalize_redact
from .serializers import DEFAULT_OMIT_HEADER_NAMES
from .trim import TrimPolicy

TextRule = Callable[[str, str], str]
Mixin = Callable[[Mapping[str, Any], int, Any], Mapping[str, Any]]


def _comma_tuple(value: str | None, *, default: tuple[str, ...]) -> tuple[str, ...]:
    """Convert a comma-separated string to a tuple."""

    if value is None:
        return default

    return tuple(filter(None, (part.strip() for part in value.split(","))))


def _bool_env(value: str | None, default: bool) -> bool:
    """Convert a string to a boolean."""

    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


def _int_env(value: str | None, default: int) -> int:
    if value is None:
        return default

    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class TrimSettings:
    """Bounds applied to every logged field."""

    max_object_depth: int = 4
    max_string_length: int = 512
    max_array_length: int = 64
    max_object_keys: int = 64
    retained_keys: tuple[str, ...] = ("stack",)
    include_functions: bool = False

    def policy(self) -> TrimPolicy:
        return TrimPolicy(
            max_depth=self.max_object_depth,
            max_string_length=self.max_string_length,
            max_array_length=self.max_array_length,
            max_object_keys=self.max_object_keys,
            retained_keys=frozenset(self.retained_keys),
            include_functions=self.include_functions,
        )


@dataclass(frozen=True)
class LoggerSettings:
    """Immutable logger configuration."""

    level: str = "info"
    custom_levels: Mapping[str, int] = field(default_factory=dict)
    base: Optional[Mapping[str, Any]] = None
    eeeoh: Optional[EeeohConfig] = None
    redact: Tuple[RedactionRule, ...] = field(default_factory=lambda: normalize_redact(None))
    redact_strict: bool = False
    serializers: Mapping[str, Callable[[Any], Any]] = field(default_factory=dict)
    omit_header_names: Tuple[str, ...] = DEFAULT_OMIT_HEADER_NAMES
    trim: TrimSettings = field(default_factory=TrimSettings)
    redact_text: Tuple[TextRule, ...] = ()
    mixin: Optional[Mixin] = None
    timestamp: Union[bool, Callable[[], str]] = True
    message_key: str = "msg"
    env: Optional[Mapping[str, str]] = None # Source of DD_ variables; os.environ when unset

    def with_overrides(self, **kwargs: Any) -> "LoggerSettings":
        return replace(self, **kwargs)

    @property
    def error_key(self) -> str:
        return "error" if self.eeeoh is not None else "err"


_SETTINGS_LOCK = threading.RLock()
_SETTINGS: LoggerSettings | None = None


def load_settings(env: Mapping[str, str] | None = None) -> LoggerSettings:
    """Build settings from an environment mapping (``os.environ`` by default)."""

    source = os.environ if env is None else env

    trim = TrimSettings(
        max_object_depth=_int_env(source.get("LOG_MAX_OBJECT_DEPTH"), 4),
        max_string_length=_int_env(source.get("LOG_MAX_STRING_LENGTH"), 512),
        max_array_length=_int_env(source.get("LOG_MAX_ARRAY_LENGTH"), 64),
        max_object_keys=_int_env(source.get("LOG_MAX_OBJECT_KEYS"), 64),
        retained_keys=_comma_tuple(source.get("LOG_RETAINED_KEYS"), default=("stack",)),
    )

    censor = source.get("LOG_REDACT_CENSOR", REDACTED_CENSOR)
    redact = list(
        normalize_redact(
            RedactionRule(
                _comma_tuple(source.get("LOG_REDACT_PATHS"), default=()),
                censor=censor,
            )
        )
    )
    remove_paths = _comma_tuple(source.get("LOG_REMOVE_PATHS"), default=())
    if remove_paths:
        redact.append(RedactionRule(remove_paths, remove=True))

    return LoggerSettings(
        level=source.get("LOG_LEVEL", "info").lower(),
        redact=tuple(redact),
        redact_strict=_bool_env(source.get("LOG_REDACT_STRICT"), False),
        omit_header_names=_comma_tuple(
            source.get("LOG_OMIT_HEADER_NAMES"), default=DEFAULT_OMIT_HEADER_NAMES
        ),
        trim=trim,
        timestamp=_bool_env(source.get("LOG_TIMESTAMP"), True),
        env=MappingProxyType(dict(source)),
    )


def configure_settings(
    settings: LoggerSettings | None = None, **overrides: Any
) -> LoggerSettings:
    with _SETTINGS_LOCK:
        resolved = settings or load_settings()
        if overrides:
            resolved = resolved.with_overrides(**overrides)
        global _SETTINGS
        _SETTINGS = resolved
        return _SETTINGS


def get_settings() -> LoggerSettings:
    with _SETTINGS_LOCK:
        if _SETTINGS is None:
            return configure_settings()
        return _SETTINGS


def reset_settings() -> None:
    global _SETTINGS
    with _SETTINGS_LOCK:
        _SETTINGS = None


__all__ = [
    "LoggerSettings",
    "TrimSettings",
    "configure_settings",
    "get_settings",
    "load_settings",
    "reset_settings",
]
