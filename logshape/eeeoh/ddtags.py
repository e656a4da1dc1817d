"""Datadog tag formatting.

See https://docs.datadoghq.com/getting_started/tagging/#define-tags
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional

_DISALLOWED = re.compile(r"[^a-zA-Z0-9_\-:./]")


def _process_tag(value: Any) -> str:
    text = "" if value is None else str(value)
    return _DISALLOWED.sub("_", text.strip())


def ddtags(tags: Mapping[str, Any]) -> Optional[str]:
    """Join ``key:value`` pairs, dropping entries with an empty key or value."""

    entries = []
    for key, value in tags.items():
        key, value = _process_tag(key), _process_tag(value)
        if key and value:
            entries.append(f"{key}:{value}")

    return ",".join(entries) if entries else None


__all__ = ["ddtags"]
