"""
@file searchlogger.py
@brief One line per search event: start, each match, and a visited/matches/elapsed summary.

Lines look like::

    [warn] [search] 12:01:07.215 done query=Button(title: "Save") visited=14 matches=0 elapsed_ms=3.120

Match lines are logged at DEBUG, start and done lines at INFO, so a
``level`` of INFO keeps only the per-search summary.
"""

from __future__ import annotations

import logging
import os
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

from .exceptions import ConfigError

log = logging.getLogger("uiauto_search.search")

EVENT_LEVELS: Dict[str, int] = {
    "search_start": logging.INFO,
    "search_match": logging.DEBUG,
    "search_done": logging.INFO,
}


def parse_level(level: Any) -> int:
    """Map a level name ("debug", "INFO") or number to a logging level."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ConfigError(f"Unknown search log level: {level!r}")
    return value


class SearchLogger:
    """
    Search event sink. Emits when enabled globally or when the caller
    forces it for a single search (``log_searches`` in the active config).
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._console = True
        self._file_path: Optional[str] = None
        self._threshold = logging.DEBUG

    def configure(self, *, console: bool = True, file_path: Optional[str] = None, level: Any = "DEBUG") -> None:
        threshold = parse_level(level)
        with self._lock:
            self._console = bool(console)
            self._file_path = file_path
            self._threshold = threshold

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def wants(self, event: str, forced: bool = False) -> bool:
        """Whether a line for ``event`` would be written."""
        if not (forced or self._enabled):
            return False
        return EVENT_LEVELS.get(event, logging.INFO) >= self._threshold

    # -------------------------
    # Search events
    # -------------------------

    def search_started(self, query: str, cardinality: str, *, forced: bool = False) -> None:
        self.log(event="search_start", query=query, fields={"cardinality": cardinality}, forced=forced)

    def search_matched(self, query: str, type_name: str, ordinal: int, *, forced: bool = False) -> None:
        self.log(event="search_match", query=query, fields={"type": type_name, "match": ordinal}, forced=forced)

    def search_finished(
        self,
        query: str,
        *,
        visited: int,
        matches: int,
        elapsed_ms: float,
        forced: bool = False,
    ) -> None:
        self.log(
            event="search_done",
            query=query,
            status="info" if matches else "warn",
            fields={"visited": visited, "matches": matches, "elapsed_ms": f"{elapsed_ms:.3f}"},
            forced=forced,
        )

    def log(
        self,
        *,
        event: str,
        query: Optional[str] = None,
        status: str = "info",
        fields: Optional[Dict[str, Any]] = None,
        forced: bool = False,
    ) -> None:
        fields = fields or {}
        log.debug("%s %s %s", event, query or "", fields)
        if not self.wants(event, forced):
            return
        self._emit(self._format(event, query, status, fields))

    @staticmethod
    def _format(event: str, query: Optional[str], status: str, fields: Dict[str, Any]) -> str:
        short = event[len("search_"):] if event.startswith("search_") else event
        parts: List[str] = [f"[{status.lower()}]", "[search]", datetime.now().strftime("%H:%M:%S.%f")[:-3], short]
        if query:
            parts.append(f"query={query}")
        parts.extend(f"{k}={v}" for k, v in fields.items())
        return " ".join(parts)

    def _emit(self, line: str) -> None:
        with self._lock:
            console, file_path = self._console, self._file_path
        if console:
            print(line, flush=True)
        if not file_path:
            return
        try:
            os.makedirs(os.path.dirname(os.path.abspath(file_path)), exist_ok=True)
            with open(file_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            log.warning("Could not append to search log %s: %s", file_path, e)


SEARCH_LOGGER = SearchLogger()
