"""Structured logging facade."""

from __future__ import annotations

import datetime as _dt
import json
import os
from collections.abc import Mapping
from functools import partial
from threading import RLock
from typing import Any, Callable, Dict, Optional, Tuple

from .base import process_base
from .config import LoggerSettings, TrimSettings, get_settings
from .context import get_context
from .destination.create import create_destination
from .destination.redact import Destination, RedactingDestination, with_redaction
from .eeeoh import EeeohConfig, TierRouter, format_output, parse_config, resolve_base
from .errors import ConfigurationError, EeeohParseError
from .levels import LEVELS, LevelTable
from .redact import Redactor, RedactionRule, normalize_redact
from .serializers import create_serializers
from .trim import Trimmer


def _utc_now() -> str:
    return (
        _dt.datetime.now(tz=_dt.timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _format_message(message: Any, args: Tuple[Any, ...]) -> Any:
    if not args:
        return message
    try:
        return str(message) % args
    except (TypeError, ValueError):
        return " ".join([str(message), *(str(arg) for arg in args)])


class LogPipeline:
    """Shared shaping pipeline for a root logger and all of its children."""

    def __init__(self, settings: LoggerSettings, destination: Destination) -> None:
        """Initialize the pipeline with settings and a destination."""

        env = os.environ if settings.env is None else settings.env

        eeeoh_base = resolve_base(settings.eeeoh, settings.base, env) if settings.eeeoh else None

        self.settings = settings # The settings for the pipeline
        self.base: Dict[str, Any] = {
            **process_base(env),
            **(eeeoh_base or {}),
            **(settings.base or {}),
        } # Attributes written on every record
        self.router = TierRouter(settings.eeeoh, {**(settings.base or {}), **(eeeoh_base or {})})
        self.serializers = create_serializers(settings.omit_header_names, settings.serializers)
        self.redactor = Redactor(settings.redact, strict=settings.redact_strict)
        self.trimmer = Trimmer(settings.trim.policy())
        self.destination: RedactingDestination = with_redaction(destination, settings.redact_text)
        self.error_key = settings.error_key

    def routes(self, bindings: Mapping[str, Any]) -> bool:
        return self.router.enabled or "eeeoh" in bindings

    def emit(
        self,
        logger: "Logger",
        level: int,
        fields: Dict[str, Any],
        message: Any,
    ) -> None:
        """Shape a logging call and write it to the destination."""

        settings = self.settings

        merged: Dict[str, Any] = dict(logger.bindings())
        merged.update(get_context())
        if settings.mixin is not None:
            merged.update(settings.mixin(fields, level, logger))
        merged.update(fields)

        routing = self.router.resolve(fields, level, logger)
        routed = format_output(routing.tier, routing.tags)

        if "eeeoh" in routed and "err" in merged and "error" not in merged:
            merged["error"] = merged.pop("err")

        shaped = self.trimmer.trim_fields(self.redactor.apply(self._serialize(merged)))

        record: Dict[str, Any] = {"level": level}
        timestamp = settings.timestamp
        if timestamp:
            record["timestamp"] = timestamp() if callable(timestamp) else _utc_now()
        record.update(self.base)
        record.update(shaped)
        # Routing metadata takes precedence over same-named fields.
        record.update(routed)
        if message is not None:
            record[settings.message_key] = message

        line = json.dumps(record, separators=(",", ":"), default=str)
        self.destination.write(line + "\n")

    # --------------------- internal helpers ---------------------
    def _serialize(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        serializers = self.serializers
        output: Dict[str, Any] = {}

        for key, value in fields.items():
            serializer = serializers.get(key)
            if serializer is None and key == self.error_key:
                serializer = serializers.get("err")
            output[key] = serializer(value) if serializer is not None else value

        return output


class Logger:
    """Structured logger bound to a pipeline, a level table and bindings."""

    def __init__(
        self,
        pipeline: LogPipeline,
        *,
        levels: LevelTable,
        level: str,
        bindings: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Initialize the logger; raises :class:`ConfigurationError` for bad levels."""

        self._pipeline = pipeline # The shared shaping pipeline
        self.levels = levels # Level names known to this logger
        self._bindings: Dict[str, Any] = dict(bindings or {}) # Fields added to every record
        self._level = level
        self._threshold = levels.threshold(level)

        if pipeline.routes(self._bindings):
            # Fail fast on tier tables naming unknown levels.
            pipeline.router.routing_for(self)

    # ---------------------------- levels ----------------------------
    @property
    def level(self) -> str:
        return self._level

    @level.setter
    def level(self, name: str) -> None:
        self._threshold = self.levels.threshold(name)
        self._level = name

    def is_level_enabled(self, name: str) -> bool:
        value = self.levels.value_of(name)
        return value is not None and value >= self._threshold

    def trace(self, message: Any = None, *args: Any, **fields: Any) -> None:
        self._log(LEVELS["trace"], message, args, fields)

    def debug(self, message: Any = None, *args: Any, **fields: Any) -> None:
        self._log(LEVELS["debug"], message, args, fields)

    def info(self, message: Any = None, *args: Any, **fields: Any) -> None:
        self._log(LEVELS["info"], message, args, fields)

    def warn(self, message: Any = None, *args: Any, **fields: Any) -> None:
        self._log(LEVELS["warn"], message, args, fields)

    warning = warn

    def error(self, message: Any = None, *args: Any, **fields: Any) -> None:
        self._log(LEVELS["error"], message, args, fields)

    def fatal(self, message: Any = None, *args: Any, **fields: Any) -> None:
        self._log(LEVELS["fatal"], message, args, fields)

    def log(self, level: str, message: Any = None, *args: Any, **fields: Any) -> None:
        """Log at a named level, including custom levels."""

        value = self.levels.value_of(level)
        if value is None:
            raise ConfigurationError(f"Unknown log level: {level}")
        self._log(value, message, args, fields)

    def __getattr__(self, name: str) -> Callable[..., None]:
        levels = self.__dict__.get("levels")
        if levels is not None and name in levels.custom:
            return partial(self.log, name)
        raise AttributeError(f"{type(self).__name__!s} has no attribute {name!r}")

    # --------------------------- bindings ---------------------------
    def bindings(self) -> Dict[str, Any]:
        return dict(self._bindings)

    def child(
        self,
        bindings: Optional[Mapping[str, Any]] = None,
        *,
        custom_levels: Optional[Mapping[str, int]] = None,
        **fields: Any,
    ) -> "Logger":
        """Create a child logger with additional bindings.

        An ``eeeoh`` binding replaces the routing configuration for the child.
        """

        merged = {**self._bindings, **(bindings or {}), **fields}
        return Logger(
            self._pipeline,
            levels=self.levels.extend(custom_levels),
            level=self._level,
            bindings=merged,
        )

    # --------------------- internal helpers ---------------------
    def _log(
        self,
        level: int,
        message: Any,
        args: Tuple[Any, ...],
        fields: Dict[str, Any],
    ) -> None:
        if level < self._threshold:
            return

        merge: Dict[str, Any] = {}
        if isinstance(message, Mapping):
            merge.update(message)
            message, args = (args[0], args[1:]) if args else (None, ())
        elif isinstance(message, BaseException):
            merge[self._pipeline.error_key] = message
            message, args = (args[0], args[1:]) if args else (str(message), ())

        merge.update(fields)
        self._pipeline.emit(self, level, merge, _format_message(message, args))


def _coerce_eeeoh(value: Any) -> Optional[EeeohConfig]:
    if value is None:
        return None
    try:
        return parse_config(value)
    except EeeohParseError as exc:
        raise ConfigurationError(f"Invalid eeeoh configuration: {exc}") from exc


def _coerce_overrides(settings: LoggerSettings, overrides: Dict[str, Any]) -> Dict[str, Any]:
    coerced = dict(overrides)

    if "redact" in coerced and not (
        isinstance(coerced["redact"], tuple)
        and all(isinstance(rule, RedactionRule) for rule in coerced["redact"])
    ):
        coerced["redact"] = normalize_redact(coerced["redact"])

    if "redact_text" in coerced:
        rules = coerced["redact_text"]
        coerced["redact_text"] = () if rules is None else (rules,) if callable(rules) else tuple(rules)

    depth = coerced.pop("max_object_depth", None)
    if depth is not None:
        trim: TrimSettings = coerced.get("trim", settings.trim)
        coerced["trim"] = TrimSettings(**{**vars(trim), "max_object_depth": depth})

    return coerced


def create_logger(
    settings: LoggerSettings | None = None,
    destination: Destination | None = None,
    **overrides: Any,
) -> Logger:
    """Create a root logger.

    ``overrides`` replace fields of ``settings``; ``redact`` accepts a list of
    paths or a :class:`RedactionRule`, ``eeeoh`` a mapping or
    :class:`EeeohConfig`, and ``max_object_depth`` adjusts trimming depth.
    Configuration problems raise :class:`ConfigurationError`.
    """

    resolved = settings or LoggerSettings()
    if overrides:
        resolved = resolved.with_overrides(**_coerce_overrides(resolved, overrides))
    resolved = resolved.with_overrides(eeeoh=_coerce_eeeoh(resolved.eeeoh))

    if destination is None:
        destination = create_destination(mock=False).destination

    levels = LevelTable(resolved.custom_levels)
    return Logger(LogPipeline(resolved, destination), levels=levels, level=resolved.level)


_LOCK = RLock()
_DEFAULT_LOGGER: Logger | None = None


def get_logger(name: str | None = None) -> Logger:
    """Return the process-wide logger, or a child bound with ``name``."""

    global _DEFAULT_LOGGER
    with _LOCK:
        if _DEFAULT_LOGGER is None:
            _DEFAULT_LOGGER = create_logger(get_settings())
        root = _DEFAULT_LOGGER

    return root.child(name=name) if name else root


def reset_loggers() -> None:
    """Drop the process-wide logger so the next lookup rebuilds it."""

    global _DEFAULT_LOGGER
    with _LOCK:
        _DEFAULT_LOGGER = None


__all__ = [
    "LogPipeline",
    "Logger",
    "create_logger",
    "get_logger",
    "reset_loggers",
]
