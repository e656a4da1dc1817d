"""Mandatory ``env``/``service``/``version`` base attributes for eeeoh."""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

from ..errors import ConfigurationError
from .tiers import USE_ENVIRONMENT, EeeohConfig

_ENV_PREAMBLE = (
    "logshape found invalid values in environment variables. Review the "
    "documentation and ensure your deployment configures these correctly."
)
_BASE_PREAMBLE = (
    "logshape found invalid values in base attributes. Review the "
    "documentation and ensure your deployment configures these correctly."
)

_BASE_KEYS = ("env", "service", "version")
_ENV_KEYS = {"env": "DD_ENV", "service": "DD_SERVICE", "version": "DD_VERSION"}


def _non_empty_issue(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return None
    return f"expected non-empty string, received {json.dumps(value, default=repr)}"


def _source_values(
    config: EeeohConfig, base: Optional[Mapping[str, Any]], env: Mapping[str, str]
) -> Optional[Dict[str, Any]]:
    if config.use != USE_ENVIRONMENT:
        return {key: (base or {}).get(key) for key in _BASE_KEYS}

    if all(env.get(name) is None for name in _ENV_KEYS.values()):
        # The hosting platform's telemetry agent adds these attributes.
        return None

    return {
        "env": env.get("DD_ENV"),
        "service": env.get("DD_SERVICE"),
        # Some platforms only set VERSION.
        "version": env.get("DD_VERSION", env.get("VERSION")),
    }


def resolve_base(
    config: EeeohConfig,
    base: Optional[Mapping[str, Any]],
    env: Mapping[str, str],
) -> Optional[Dict[str, str]]:
    """Return validated base attributes, or ``None`` when none are sourced.

    Raises :class:`ConfigurationError` listing every invalid attribute.
    """

    values = _source_values(config, base, env)
    if values is None:
        return None

    issues = {key: _non_empty_issue(value) for key, value in values.items()}
    if not any(issues.values()):
        return {key: value.strip() for key, value in values.items()}

    from_env = config.use == USE_ENVIRONMENT
    lines = [_ENV_PREAMBLE if from_env else _BASE_PREAMBLE]
    for key, issue in issues.items():
        if issue:
            lines.append(f"{_ENV_KEYS[key] if from_env else key}: {issue}")

    raise ConfigurationError("\n".join(lines))


__all__ = ["resolve_base"]
