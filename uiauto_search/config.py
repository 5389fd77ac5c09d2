# uiauto_search/config.py
"""
@file config.py
@brief Search engine settings: YAML loading, environment overrides and
       per-thread overrides.

Precedence for the effective config:
  thread override (``use_config``) -> process default (``set_config``)
  -> environment -> built-in defaults
"""

from __future__ import annotations

import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Generator, Optional

import yaml

from .exceptions import ConfigError

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SearchConfig:
    debug: bool = False
    artifacts_dir: str = "artifacts"
    capture_artifacts: bool = False
    dump_max_depth: Optional[int] = None
    strict_filter_keys: bool = False
    log_searches: bool = False

    def with_overrides(self, **overrides: Any) -> SearchConfig:
        """Create a new config with overrides applied."""
        unknown = set(overrides) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigError(f"Unknown search settings: {sorted(unknown)}")
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def parse_settings(d: Optional[Dict[str, Any]]) -> SearchConfig:
    """Build a SearchConfig from a ``settings:`` mapping."""
    d = d or {}
    if not isinstance(d, dict):
        raise ConfigError("'settings' must be a mapping")
    unknown = set(d) - {f.name for f in fields(SearchConfig)}
    if unknown:
        raise ConfigError(f"settings: unknown keys: {sorted(unknown)}")
    depth = d.get("dump_max_depth")
    return SearchConfig(
        debug=bool(d.get("debug", False)),
        artifacts_dir=str(d.get("artifacts_dir", "artifacts")),
        capture_artifacts=bool(d.get("capture_artifacts", False)),
        dump_max_depth=int(depth) if depth is not None else None,
        strict_filter_keys=bool(d.get("strict_filter_keys", False)),
        log_searches=bool(d.get("log_searches", False)),
    )


def load_yaml(path: str) -> Dict[str, Any]:
    """Load a YAML mapping, raising ConfigError on any problem."""
    if not os.path.exists(path):
        raise ConfigError(f"YAML file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("YAML must be a mapping at root.")
    return data


def load_config(path: str) -> SearchConfig:
    """Read the ``settings:`` block of a YAML file."""
    return parse_settings(load_yaml(os.path.abspath(path)).get("settings"))


def from_env(base: Optional[SearchConfig] = None) -> SearchConfig:
    """Apply UIAUTO_SEARCH_* environment variables on top of ``base``."""
    cfg = base or SearchConfig()
    debug = os.getenv("UIAUTO_SEARCH_DEBUG")
    if debug is not None:
        cfg = replace(cfg, debug=debug.lower() in _TRUTHY)
    artifacts_dir = os.getenv("UIAUTO_SEARCH_ARTIFACTS_DIR")
    if artifacts_dir:
        cfg = replace(cfg, artifacts_dir=artifacts_dir, capture_artifacts=True)
    logging_on = os.getenv("UIAUTO_SEARCH_LOGGING")
    if logging_on is not None:
        cfg = replace(cfg, log_searches=logging_on.lower() in _TRUTHY)
    return cfg


_lock = threading.Lock()
_local = threading.local()
_default: Optional[SearchConfig] = None


def get_config() -> SearchConfig:
    """Get the current effective configuration."""
    global _default
    override = getattr(_local, "override", None)
    if override is not None:
        return override
    if _default is None:
        with _lock:
            if _default is None:
                _default = from_env()
    return _default


def set_config(config: Optional[SearchConfig]) -> None:
    """Install the process default. ``None`` re-reads the environment on next use."""
    global _default
    with _lock:
        _default = config


@contextmanager
def use_config(config: Optional[SearchConfig] = None, **overrides: Any) -> Generator[SearchConfig, None, None]:
    """Context manager for a temporary per-thread configuration."""
    previous = getattr(_local, "override", None)
    new_config = (config or get_config()).with_overrides(**overrides)
    _local.override = new_config
    try:
        yield new_config
    finally:
        _local.override = previous
