# uiauto_search/repository.py
from __future__ import annotations
import json
import os
import re
from typing import Any, Dict, List, Optional, Union

from jsonschema import Draft202012Validator

from .config import SearchConfig, load_yaml, parse_settings, use_config
from .exceptions import ConfigError
from .node import Node, NodeList
from .qualifier import Qualifier
from .search import Cardinality, search

REGEX_SUFFIX = "_re"

_SCHEMA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "schemas", "queries.schema.json")


def _load_schema(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def compile_yaml_filters(filters: Optional[Dict[str, Any]], where: str = "filters") -> Dict[str, Any]:
    """
    Turn YAML filters into search filters: ``title_re: "^Save"`` becomes
    ``{"title": re.compile("^Save")}``; nested mappings stay sub-searches.
    """
    out: Dict[str, Any] = {}
    for key, value in (filters or {}).items():
        if isinstance(value, dict):
            out[key] = compile_yaml_filters(value, f"{where}.{key}")
        elif key.endswith(REGEX_SUFFIX) and len(key) > len(REGEX_SUFFIX) and isinstance(value, str):
            try:
                out[key[: -len(REGEX_SUFFIX)]] = re.compile(value)
            except re.error as e:
                raise ConfigError(f"{where}.{key}: invalid regex {value!r}: {e}") from e
        else:
            out[key] = value
    return out


class QueryRepository:
    """
    Loads queries.yaml (named search map). Provides compiled qualifiers and
    runs named queries against a search root.
    """

    def __init__(self, data: Dict[str, Any], path: Optional[str] = None):
        self.path = path
        self._validator = Draft202012Validator(_load_schema(_SCHEMA_PATH))
        self._validate_schema(data)
        declared = data.get("settings") or {}
        parsed = parse_settings(declared)
        # only keys the map names override the active config
        self._overrides: Dict[str, Any] = {key: getattr(parsed, key) for key in declared}
        self._settings = parsed
        self._queries: Dict[str, Dict[str, Any]] = data.get("queries", {}) or {}
        self._filters: Dict[str, Dict[str, Any]] = {
            name: compile_yaml_filters(spec.get("filters"), f"queries.{name}.filters")
            for name, spec in self._queries.items()
        }
        self._validate_within()

    @classmethod
    def load(cls, path: str) -> QueryRepository:
        path = os.path.abspath(path)
        return cls(load_yaml(path), path=path)

    def _validate_schema(self, data: Dict[str, Any]) -> None:
        errors = sorted(self._validator.iter_errors(data), key=lambda e: list(e.path))
        if errors:
            lines = ["Query map schema validation failed:"]
            for e in errors:
                lines.append(f"- {list(e.path)}: {e.message}")
            raise ConfigError("\n".join(lines))

    def _validate_within(self) -> None:
        for name in self._queries:
            seen = [name]
            current = self._queries[name].get("within")
            while current is not None:
                if current not in self._queries:
                    raise ConfigError(f"queries.{seen[-1]}.within references unknown query '{current}'")
                if current in seen:
                    raise ConfigError(f"queries.{name}: 'within' cycle: {' -> '.join(seen + [current])}")
                if self.cardinality(current) is Cardinality.ALL:
                    raise ConfigError(f"queries.{seen[-1]}.within must reference a single-result query, '{current}' has cardinality 'all'")
                seen.append(current)
                current = self._queries[current].get("within")

    @property
    def settings(self) -> SearchConfig:
        """Map settings over the built-in defaults."""
        return self._settings

    def list_queries(self) -> List[str]:
        return sorted(self._queries.keys())

    def get_query_spec(self, name: str) -> Dict[str, Any]:
        if name not in self._queries:
            raise ConfigError(f"Unknown query: {name}")
        return self._queries[name]

    def cardinality(self, name: str) -> Cardinality:
        return Cardinality.parse(self.get_query_spec(name).get("cardinality", "one"))

    def qualifier(self, name: str) -> Qualifier:
        spec = self.get_query_spec(name)
        return Qualifier(spec["type"], self._filters[name])

    def run(self, root: Node, name: str) -> Union[Optional[Node], NodeList]:
        """
        Run a named query below ``root``. A ``within`` query is run first
        and its result becomes the search root. Settings of the map apply
        for the duration of the call.
        """
        spec = self.get_query_spec(name)
        cardinality = self.cardinality(name)
        with use_config(**self._overrides):
            base: Optional[Node] = root
            if spec.get("within"):
                base = self.run(root, spec["within"])
            if base is None:
                return NodeList() if cardinality is Cardinality.ALL else None
            return search(base, spec["type"], self._filters[name], cardinality=cardinality)
