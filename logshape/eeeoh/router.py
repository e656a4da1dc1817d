"""Level-sensitive Datadog tier routing."""

from __future__ import annotations

import logging
import weakref
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Tuple, Union

from ..errors import ConfigurationError, EeeohParseError
from ..levels import LevelTable
from .ddtags import ddtags
from .tiers import EeeohConfig, parse_config, parse_field


LOGGER = logging.getLogger("logshape.eeeoh")

DDSOURCE = "python"

# A tier name, False when routing is disabled, None when unset.
Tier = Union[str, bool, None]
LevelToTier = Callable[[int], Tier]


class RoutableLogger(Protocol):
    levels: LevelTable

    def bindings(self) -> Mapping[str, Any]: ...


@dataclass(frozen=True)
class Routing:
    tier: Tier
    tags: Optional[str]


@dataclass(frozen=True)
class CachedRouting:
    level_to_tier: LevelToTier
    tags: Optional[str]


class _ConstantTier:
    def __init__(self, tier: Tier) -> None:
        self._tier = tier

    def __call__(self, level: int) -> Tier:
        return self._tier


class _SteppedTier:
    """Tier lookup precomputed for every level known to a logger."""

    def __init__(
        self,
        entries: List[Tuple[int, str]],
        default: str,
        known_levels: Mapping[str, int],
    ) -> None:
        self._entries = entries
        self._default = default
        self._precomputed: Dict[int, str] = {
            value: self._step(value) for value in known_levels.values()
        }

    def _step(self, level: int) -> str:
        for level_value, tier in self._entries:
            if level_value <= level:
                return tier
        return self._default

    def __call__(self, level: int) -> Tier:
        tier = self._precomputed.get(level)
        return tier if tier is not None else self._step(level)


def format_output(tier: Tier, tags: Optional[str]) -> Dict[str, Any]:
    """Render routing metadata merged into a record."""

    output: Dict[str, Any] = {}

    # ddsource helps workloads that rely on external routing configuration.
    if tier is not False:
        output["ddsource"] = DDSOURCE

    if tier and tags:
        output["ddtags"] = tags

    if tier is not None:
        datadog = {"enabled": True, "tier": tier} if tier else {"enabled": False}
        output["eeeoh"] = {"logs": {"datadog": datadog}}

    return output


class TierRouter:
    """Resolve the routing tier of a log call.

    Logger-level resolution is memoized per logger instance and is not
    invalidated if the logger's bindings are replaced afterwards.
    """

    def __init__(
        self,
        config: Optional[EeeohConfig],
        base: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._config = config
        self._base = dict(base or {})
        self._cache: "weakref.WeakKeyDictionary[Any, CachedRouting]" = weakref.WeakKeyDictionary()
        self._lock = Lock()

    @property
    def enabled(self) -> bool:
        return self._config is not None

    def tags_for(self, team: Optional[str]) -> Optional[str]:
        return ddtags(
            {
                "env": self._base.get("env"),
                "team": team,
                "version": self._base.get("version"),
            }
        )

    def routing_for(self, logger: RoutableLogger) -> CachedRouting:
        """Return the memoized routing of ``logger``, building it on first use."""

        with self._lock:
            cached = self._cache.get(logger)
        if cached is not None:
            return cached

        routing = self._build(logger)

        with self._lock:
            # Concurrent builders produce equal values; keep the first stored.
            return self._cache.setdefault(logger, routing)

    def is_cached(self, logger: RoutableLogger) -> bool:
        with self._lock:
            return logger in self._cache

    def resolve(
        self, fields: Mapping[str, Any], level: int, logger: RoutableLogger
    ) -> Routing:
        """Resolve the tier and tags of a single log call."""

        tier: Tier = None
        inline = "eeeoh" in fields

        if inline:
            try:
                parsed = parse_field(fields["eeeoh"])
            except EeeohParseError:
                inline = False
            else:
                tier = parsed.datadog
                if parsed.team:
                    return Routing(tier=tier, tags=self.tags_for(parsed.team))

        cached = self.routing_for(logger)
        if not inline:
            tier = cached.level_to_tier(level)

        return Routing(tier=tier, tags=cached.tags)

    # --------------------- internal helpers ---------------------
    def _bound_config(self, logger: RoutableLogger) -> Optional[EeeohConfig]:
        bound = logger.bindings().get("eeeoh")
        if not bound:
            return None
        try:
            return parse_config(bound)
        except EeeohParseError:
            return None

    def _effective_config(self, logger: RoutableLogger) -> Optional[EeeohConfig]:
        sources: List[Callable[[], Optional[EeeohConfig]]] = [
            lambda: self._bound_config(logger),
            lambda: self._config,
        ]
        for source in sources:
            config = source()
            if config is not None:
                return config
        return None

    def _build(self, logger: RoutableLogger) -> CachedRouting:
        config = self._effective_config(logger)
        if config is None:
            return CachedRouting(_ConstantTier(None), self.tags_for(None))

        tags = self.tags_for(config.team)
        datadog = config.datadog

        if datadog is False:
            return CachedRouting(_ConstantTier(False), tags)

        if isinstance(datadog, str):
            return CachedRouting(_ConstantTier(datadog), tags)

        default, table = datadog
        entries = []
        for level_name, tier in table.items():
            level_value = logger.levels.value_of(level_name)
            if not level_value:
                raise ConfigurationError(
                    f"No numeric value associated with log level: {level_name}. "
                    "Ensure custom levels listed in `eeeoh.datadog` are configured "
                    "as `custom_levels` of the logger instance."
                )
            entries.append((level_value, tier))

        entries.sort(key=lambda entry: entry[0], reverse=True)
        LOGGER.debug("Precomputed level tiers %s default=%s", entries, default)

        return CachedRouting(_SteppedTier(entries, default, logger.levels.values), tags)


__all__ = [
    "CachedRouting",
    "DDSOURCE",
    "Routing",
    "TierRouter",
    "format_output",
]
