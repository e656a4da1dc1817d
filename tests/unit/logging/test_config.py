"""Tests for logshape configuration loading."""

from __future__ import annotations

from logshape.config import (
    LoggerSettings,
    configure_settings,
    get_settings,
    load_settings,
)
from logshape.redact import DEFAULT_REDACT_PATHS, REDACTED_CENSOR, RedactionRule
from logshape.serializers import DEFAULT_OMIT_HEADER_NAMES
from logshape.trim import TrimPolicy


def test_defaults_from_empty_environment():
    """An empty environment yields the documented defaults."""

    settings = load_settings({})

    assert settings.level == "info"
    assert settings.timestamp is True
    assert settings.omit_header_names == DEFAULT_OMIT_HEADER_NAMES
    assert settings.redact == (RedactionRule(DEFAULT_REDACT_PATHS),)
    assert settings.trim.policy() == TrimPolicy()
    assert settings.error_key == "err"


def test_environment_overrides():
    """Environment variables populate trimming, redaction and output options."""

    settings = load_settings(
        {
            "LOG_LEVEL": "DEBUG",
            "LOG_MAX_OBJECT_DEPTH": "6",
            "LOG_MAX_STRING_LENGTH": "128",
            "LOG_MAX_ARRAY_LENGTH": "10",
            "LOG_MAX_OBJECT_KEYS": "20",
            "LOG_OMIT_HEADER_NAMES": "x-secret, x-other",
            "LOG_REDACT_PATHS": "password,req.headers.authorization",
            "LOG_REDACT_CENSOR": "***",
            "LOG_REMOVE_PATHS": "debug",
            "LOG_TIMESTAMP": "0",
            "LOG_REDACT_STRICT": "true",
        }
    )

    assert settings.level == "debug"
    assert settings.trim.policy() == TrimPolicy(
        max_depth=6, max_string_length=128, max_array_length=10, max_object_keys=20
    )
    assert settings.omit_header_names == ("x-secret", "x-other")
    assert settings.redact == (
        RedactionRule(
            ("password", "req.headers.authorization", *DEFAULT_REDACT_PATHS),
            censor="***",
        ),
        RedactionRule(("debug",), remove=True),
    )
    assert settings.timestamp is False
    assert settings.redact_strict is True


def test_malformed_integers_fall_back_to_defaults():
    """Unparseable numbers keep the default bound."""

    settings = load_settings({"LOG_MAX_OBJECT_DEPTH": "deep"})

    assert settings.trim.max_object_depth == 4


def test_empty_omit_header_list_disables_omission():
    """An empty header list is honoured rather than replaced by defaults."""

    assert load_settings({"LOG_OMIT_HEADER_NAMES": ""}).omit_header_names == ()


def test_default_censor():
    """Redaction uses the standard placeholder unless configured."""

    (rule,) = load_settings({"LOG_REDACT_PATHS": "password"}).redact

    assert rule.censor == REDACTED_CENSOR


def test_settings_are_immutable_values():
    """Overrides return a new settings object."""

    settings = LoggerSettings()
    debug = settings.with_overrides(level="debug")

    assert settings.level == "info"
    assert debug.level == "debug"


def test_configure_and_get_settings(monkeypatch):
    """Process-wide settings are loaded once and can be replaced."""

    monkeypatch.setenv("LOG_LEVEL", "warn")

    assert get_settings().level == "warn"

    configured = configure_settings(LoggerSettings(), level="error")

    assert get_settings() is configured
    assert configured.level == "error"
