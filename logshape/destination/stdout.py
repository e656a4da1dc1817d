"""Stdout destination emitting NDJSON."""

from __future__ import annotations

import sys
import threading
from typing import IO, Optional


class StdoutDestination:
    """Write serialized records to a text stream, one per line."""

    def __init__(self, stream: Optional[IO[str]] = None) -> None:
        self._stream = stream # The stream to write to; stdout when unset
        self._lock = threading.Lock() # Keeps lines from concurrent writers whole

    @property
    def stream(self) -> IO[str]:
        # Falls back to the current sys.stdout at write time.
        return self._stream or sys.stdout

    def write(self, line: str) -> None:
        """Write a line to the stream."""

        if not line.endswith("\n"):
            line += "\n"

        stream = self.stream
        with self._lock:
            stream.write(line)
            stream.flush()


__all__ = ["StdoutDestination"]
