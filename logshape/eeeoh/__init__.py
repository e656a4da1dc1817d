"""eeeoh log routing: Datadog tiers, tags and base attributes."""

from __future__ import annotations

from .base import resolve_base
from .ddtags import ddtags
from .router import DDSOURCE, CachedRouting, Routing, TierRouter, format_output
from .tiers import (
    DATADOG_TIERS,
    USE_ENVIRONMENT,
    DatadogConfig,
    EeeohConfig,
    EeeohField,
    parse_config,
    parse_field,
    parse_tier,
)

ENVS = ("development", "production", "sandbox", "test")

__all__ = [
    "CachedRouting",
    "DATADOG_TIERS",
    "DDSOURCE",
    "DatadogConfig",
    "ENVS",
    "EeeohConfig",
    "EeeohField",
    "Routing",
    "TierRouter",
    "USE_ENVIRONMENT",
    "ddtags",
    "format_output",
    "parse_config",
    "parse_field",
    "parse_tier",
    "resolve_base",
]
