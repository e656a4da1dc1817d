"""Datadog tiers and eeeoh configuration parsing."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Optional, Tuple, Union

from ..errors import EeeohParseError

DATADOG_TIERS: Tuple[str, ...] = (
    "zero",
    "tin",
    "tin-plus",
    "tin-plus-plus",
    "bronze",
    "bronze-plus",
    "bronze-plus-plus",
    "silver",
    "silver-plus",
    "silver-plus-plus",
)

USE_ENVIRONMENT = "environment"

# A tier name, False (routing disabled) or (default tier, {level name: tier}).
DatadogConfig = Union[str, bool, Tuple[str, Mapping[str, str]]]


@dataclass(frozen=True)
class EeeohConfig:
    """Routing configuration for a logger.

    ``datadog`` accepts three forms::

        "tin"                          static tier
        ("tin", {"warn": "silver"})    level-based tiering
        False                          routing disabled

    ``use="environment"`` sources ``env``/``service``/``version`` from the
    ``DD_ENV``, ``DD_SERVICE`` and ``DD_VERSION`` environment variables.
    """

    datadog: DatadogConfig
    team: Optional[str] = None
    use: Optional[str] = None


@dataclass(frozen=True)
class EeeohField:
    """Routing configuration supplied on a single log call."""

    datadog: Union[str, bool]
    team: Optional[str] = None


def parse_tier(value: Any) -> str:
    if isinstance(value, str) and value in DATADOG_TIERS:
        return value
    raise EeeohParseError(f"expected one of {', '.join(DATADOG_TIERS)}; received {value!r}")


def _parse_team(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str) and value.strip():
        return value.strip()
    raise EeeohParseError(f"team: expected non-empty string, received {value!r}")


def _parse_tier_by_level(value: Any) -> Tuple[str, Mapping[str, str]]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise EeeohParseError(f"expected [tier, {{level: tier}}]; received {value!r}")

    default, table = value
    if not isinstance(table, Mapping):
        raise EeeohParseError(f"expected a level-to-tier mapping; received {table!r}")

    parsed = {}
    for level, tier in table.items():
        if not isinstance(level, str):
            raise EeeohParseError(f"expected level name, received {level!r}")
        parsed[level] = parse_tier(tier)

    return parse_tier(default), MappingProxyType(parsed)


def _parse_datadog(value: Any, *, allow_levels: bool) -> DatadogConfig:
    if value is False:
        return False
    if isinstance(value, str):
        return parse_tier(value)
    if allow_levels and isinstance(value, (list, tuple)):
        return _parse_tier_by_level(value)
    raise EeeohParseError(f"datadog: unsupported value {value!r}")


def _fields_of(value: Any) -> Mapping[str, Any]:
    if isinstance(value, (EeeohConfig, EeeohField)):
        return vars(value)
    if isinstance(value, Mapping):
        return value
    raise EeeohParseError(f"expected eeeoh mapping; received {value!r}")


def parse_config(value: Any) -> EeeohConfig:
    """Parse a logger-level eeeoh configuration."""

    fields = _fields_of(value)
    if "datadog" not in fields:
        raise EeeohParseError("datadog: required")

    use = fields.get("use")
    if use is not None and use != USE_ENVIRONMENT:
        raise EeeohParseError(f"use: expected {USE_ENVIRONMENT!r}, received {use!r}")

    return EeeohConfig(
        datadog=_parse_datadog(fields["datadog"], allow_levels=True),
        team=_parse_team(fields.get("team")),
        use=use,
    )


def parse_field(value: Any) -> EeeohField:
    """Parse the eeeoh configuration attached to a single log call."""

    fields = _fields_of(value)
    if "datadog" not in fields:
        raise EeeohParseError("datadog: required")

    return EeeohField(
        datadog=_parse_datadog(fields["datadog"], allow_levels=False),
        team=_parse_team(fields.get("team")),
    )


__all__ = [
    "DATADOG_TIERS",
    "DatadogConfig",
    "EeeohConfig",
    "EeeohField",
    "USE_ENVIRONMENT",
    "parse_config",
    "parse_field",
    "parse_tier",
]
