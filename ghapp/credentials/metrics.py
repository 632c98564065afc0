"""Selection metrics for the token pool.

``MetricsSink`` matches the ``incr`` shape of common statsd clients so a
real client can be passed straight to ``TokenPool``.  ``SelectionMetrics``
is a thread-safe in-process implementation.
"""

from __future__ import annotations

import threading
from collections import Counter
from typing import Protocol

TOKEN_APP_SELECTED = "token_app_selected"


class MetricsSink(Protocol):
    def incr(self, name: str, tags: list[str] | None = None, rate: float = 1) -> None: ...


class SelectionMetrics:
    """Simple counters keyed by ``(name, tag)``, extensible to statsd later."""

    def __init__(self) -> None:
        self._counts: Counter[tuple[str, str]] = Counter()
        self._lock = threading.Lock()

    def incr(self, name: str, tags: list[str] | None = None, rate: float = 1) -> None:
        with self._lock:
            for tag in tags or [""]:
                self._counts[(name, tag)] += 1

    def count(self, name: str, tag: str = "") -> int:
        with self._lock:
            return self._counts[(name, tag)]

    def snapshot(self) -> dict[str, int]:
        """Return a JSON-serializable snapshot, keys formatted ``name|tag``."""
        with self._lock:
            return {f"{name}|{tag}": n for (name, tag), n in self._counts.items()}

    def reset(self) -> None:
        """Reset all counters (useful for testing)."""
        with self._lock:
            self._counts.clear()
