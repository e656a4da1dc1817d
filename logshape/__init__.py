"""Structured JSON logging with trimming, redaction and eeeoh routing."""

from __future__ import annotations

from .config import (
    LoggerSettings,
    TrimSettings,
    configure_settings,
    get_settings,
    load_settings,
    reset_settings,
)
from .context import (
    clear_context,
    create_lambda_context_capture,
    get_context,
    logger_context,
    pop_context,
    push_context,
    run_with_context,
)
from .destination import (
    DEFAULT_MOCK_OPTIONS,
    CreatedDestination,
    MockOptions,
    StdoutMock,
    create_destination,
    with_redaction,
)
from .eeeoh import DATADOG_TIERS, ENVS, EeeohConfig, EeeohField
from .errors import (
    ConfigurationError,
    EeeohParseError,
    LogshapeError,
    RedactionError,
    StdoutMockError,
)
from .levels import LEVELS
from .logger import Logger, create_logger, get_logger, reset_loggers
from .redact import DEFAULT_REDACT_PATHS, RedactionRule, Redactor
from .serializers import (
    DEFAULT_OMIT_HEADER_NAMES,
    create_omit_properties_serializer,
    create_serializers,
)
from .trim import TrimPolicy, Trimmer, trim

__all__ = [
    "ConfigurationError",
    "CreatedDestination",
    "DATADOG_TIERS",
    "DEFAULT_MOCK_OPTIONS",
    "DEFAULT_OMIT_HEADER_NAMES",
    "DEFAULT_REDACT_PATHS",
    "ENVS",
    "EeeohConfig",
    "EeeohField",
    "EeeohParseError",
    "LEVELS",
    "Logger",
    "LoggerSettings",
    "LogshapeError",
    "MockOptions",
    "RedactionError",
    "RedactionRule",
    "Redactor",
    "StdoutMock",
    "StdoutMockError",
    "TrimPolicy",
    "TrimSettings",
    "Trimmer",
    "clear_context",
    "configure_settings",
    "create_destination",
    "create_lambda_context_capture",
    "create_logger",
    "create_omit_properties_serializer",
    "create_serializers",
    "get_context",
    "get_logger",
    "get_settings",
    "load_settings",
    "logger_context",
    "pop_context",
    "push_context",
    "reset_loggers",
    "reset_settings",
    "run_with_context",
    "trim",
    "with_redaction",
]
