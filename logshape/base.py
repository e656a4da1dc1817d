"""Process attributes attached to every record."""

from __future__ import annotations

import os
import socket
from typing import Any, Dict, Mapping, Optional


def process_base(env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    source = os.environ if env is None else env
    base: Dict[str, Any] = {
        "pid": os.getpid(),
        "hostname": socket.gethostname(),
    }
    build = source.get("BUILD_NUMBER")
    commit = source.get("COMMIT_SHA")
    if build is not None:
        base["build"] = build
    if commit is not None:
        base["commit"] = commit
    return base


__all__ = ["process_base"]
