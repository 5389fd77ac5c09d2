"""
@file stats.py
@brief Counters for calls made to the tree collaborator.
"""

from __future__ import annotations

import threading
from collections import Counter
from typing import Dict


class CallStatistics:
    """Thread-safe counters keyed by collaborator operation name."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stats: Counter = Counter()

    def increment(self, key: str, amount: int = 1) -> None:
        with self._lock:
            self._stats[key] += amount

    def get(self, key: str) -> int:
        with self._lock:
            return self._stats.get(key, 0)

    def snapshot(self) -> Dict[str, int]:
        """Copy of the current counters."""
        with self._lock:
            return dict(self._stats)

    def total(self) -> int:
        with self._lock:
            return sum(self._stats.values())

    def reset(self) -> None:
        with self._lock:
            self._stats.clear()

    def __str__(self) -> str:
        stats = self.snapshot()
        title = "# Tree Call Statistics #"
        header = "\n".join(["#" * len(title), title, "#" * len(title)])
        if not stats:
            return header + "\n"
        key_len = max(len(k) for k in stats)
        val_len = max(len(str(v)) for v in stats.values())
        lines = [header]
        for key in sorted(stats):
            val = stats[key]
            dots = "." * (4 + key_len - len(key) + val_len - len(str(val)))
            lines.append(f"{key}{dots}{val}")
        return "\n".join(lines) + "\n"


STATS = CallStatistics()
