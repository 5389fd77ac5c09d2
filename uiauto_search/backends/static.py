# uiauto_search/backends/static.py
"""
@file static.py
@brief In-memory tree collaborator built from nested mappings.

Used for offline searches over recorded snapshots and as the test double
for the search engine. Node mapping format:

    role: Window                 # required
    subrole: Dialog              # optional
    id: main                     # optional, target of {"$ref": "main"}
    attributes: {title: Main}    # values may be {"$ref": id} or lists of refs
    parameterized:               # name -> {param key: value}
      string_for_range: {"0,3": "Mai"}
    actions: [press]
    children: [...]              # presence means a children relation
"""

from __future__ import annotations

import json
import logging
import os
from collections import Counter
from typing import Any, Callable, Dict, List, Mapping, Optional

import yaml

from ..exceptions import ConfigError
from ..interfaces import ITreeBackend
from ..registry import TypeRegistry

log = logging.getLogger("uiauto_search.backends.static")

REF_KEY = "$ref"


class StaticElement:
    """One element of a static tree. Identity is object identity."""

    def __init__(
        self,
        role: Optional[str],
        subrole: Optional[str] = None,
        attributes: Optional[Dict[str, Any]] = None,
        parameterized: Optional[Dict[str, Any]] = None,
        actions: Optional[List[str]] = None,
        children: Any = None,
        element_id: Optional[str] = None,
    ):
        self.role = role
        self.subrole = subrole
        self.attributes: Dict[str, Any] = dict(attributes or {})
        self.parameterized: Dict[str, Any] = dict(parameterized or {})
        self.actions: List[str] = list(actions or [])
        # None means no children relation at all
        self.children = children
        self.element_id = element_id
        self.parent: Optional[StaticElement] = None
        self.destroyed = False

    def add(self, child: StaticElement) -> StaticElement:
        if self.children is None:
            self.children = []
        self.children.append(child)
        child.parent = self
        return child

    def __repr__(self) -> str:
        title = self.attributes.get("title")
        return f"<StaticElement {self.role}{' ' + repr(title) if title else ''}>"


def param_key(param: Any) -> str:
    """Key a parameterized value is stored under: ``(0, 3)`` -> ``"0,3"``."""
    if isinstance(param, (list, tuple)):
        return ",".join(str(p) for p in param)
    return str(param)


class StaticTreeBackend(ITreeBackend):
    """
    Tree collaborator over StaticElement handles.

    ``calls`` counts every collaborator operation by name so callers can
    observe how much of the tree a search touched.
    """

    def __init__(self) -> None:
        self.calls: Counter = Counter()
        self.performed: List[tuple] = []

    # -------------------------
    # ITreeBackend
    # -------------------------

    def attribute_names(self, handle: StaticElement) -> List[str]:
        self.calls["attribute_names"] += 1
        if handle.destroyed:
            return []
        return list(handle.attributes)

    def attribute(self, handle: StaticElement, name: str) -> Any:
        self.calls["attribute"] += 1
        if handle.destroyed:
            return None
        return handle.attributes.get(name)

    def parameterized_attribute_names(self, handle: StaticElement) -> List[str]:
        self.calls["parameterized_attribute_names"] += 1
        if handle.destroyed:
            return []
        return list(handle.parameterized)

    def parameterized_attribute(self, handle: StaticElement, name: str, param: Any) -> Any:
        self.calls["parameterized_attribute"] += 1
        if handle.destroyed:
            return None
        table = handle.parameterized.get(name)
        if callable(table):
            return table(param)
        if isinstance(table, Mapping):
            return table.get(param_key(param))
        return None

    def action_names(self, handle: StaticElement) -> List[str]:
        self.calls["action_names"] += 1
        if handle.destroyed:
            return []
        return list(handle.actions)

    def perform(self, handle: StaticElement, action: str) -> bool:
        self.calls["perform"] += 1
        if handle.destroyed or action not in handle.actions:
            return False
        self.performed.append((handle, action))
        return True

    def children(self, handle: StaticElement) -> Any:
        self.calls["children"] += 1
        if handle.destroyed or handle.children is None:
            return []
        return handle.children

    def has_children(self, handle: StaticElement) -> bool:
        self.calls["has_children"] += 1
        return not handle.destroyed and handle.children is not None

    def role(self, handle: StaticElement) -> Optional[str]:
        self.calls["role"] += 1
        return None if handle.destroyed else handle.role

    def subrole(self, handle: StaticElement) -> Optional[str]:
        self.calls["subrole"] += 1
        return None if handle.destroyed else handle.subrole

    def parent(self, handle: StaticElement) -> Optional[StaticElement]:
        self.calls["parent"] += 1
        return handle.parent

    def is_element(self, value: Any) -> bool:
        return isinstance(value, StaticElement)

    # -------------------------
    # Helpers
    # -------------------------

    def destroy(self, handle: StaticElement) -> None:
        """Mark an element stale: it answers as an empty node from now on."""
        handle.destroyed = True

    def reset_calls(self) -> None:
        self.calls.clear()

    def root(self, element: StaticElement, registry: Optional[TypeRegistry] = None):
        from ..node import Node
        return Node(element, self, registry)


def build_tree(data: Mapping[str, Any]) -> StaticElement:
    """
    Build a StaticElement tree from a node mapping.

    Child entries that are not mappings are kept as-is so malformed trees
    can be reproduced.
    """
    by_id: Dict[str, StaticElement] = {}
    pending: List[Callable[[], None]] = []

    def build(d: Mapping[str, Any]) -> StaticElement:
        if not isinstance(d, Mapping):
            raise ConfigError(f"Tree node must be a mapping, got {type(d).__name__}")
        el = StaticElement(
            role=d.get("role"),
            subrole=d.get("subrole"),
            attributes=d.get("attributes"),
            parameterized=d.get("parameterized"),
            actions=d.get("actions"),
            element_id=d.get("id"),
        )
        if el.element_id is not None:
            if el.element_id in by_id:
                raise ConfigError(f"Duplicate element id: {el.element_id}")
            by_id[el.element_id] = el
        for name, value in el.attributes.items():
            if _is_ref(value) or (isinstance(value, list) and value and all(_is_ref(v) for v in value)):
                pending.append(_linker(el, name, value, by_id))
        if "children" in d:
            raw = d.get("children")
            if raw is None:
                el.children = []
            elif not isinstance(raw, list):
                el.children = raw
            else:
                el.children = []
                for child in raw:
                    if isinstance(child, Mapping):
                        el.add(build(child))
                    else:
                        el.children.append(child)
        return el

    root = build(data)
    for link in pending:
        link()
    return root


def _is_ref(value: Any) -> bool:
    return isinstance(value, Mapping) and set(value) == {REF_KEY}


def _linker(el: StaticElement, name: str, value: Any, by_id: Dict[str, StaticElement]) -> Callable[[], None]:
    def resolve(ref: Mapping[str, Any]) -> StaticElement:
        target = by_id.get(ref[REF_KEY])
        if target is None:
            raise ConfigError(f"Attribute '{name}' references unknown id: {ref[REF_KEY]}")
        return target

    def link() -> None:
        if isinstance(value, list):
            el.attributes[name] = [resolve(v) for v in value]
        else:
            el.attributes[name] = resolve(value)
    return link


def read_document(path: str) -> Any:
    """Read a YAML or JSON document (by extension)."""
    if not os.path.exists(path):
        raise ConfigError(f"Snapshot file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.lower().endswith(".json"):
                return json.load(f)
            return yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Invalid snapshot {path}: {e}") from e


def load_snapshot(path: str, registry: Optional[TypeRegistry] = None):
    """
    Load a snapshot file and return the root Node over a fresh backend.

    The document is either a node mapping or ``{"root": <node mapping>}``.
    """
    data = read_document(os.path.abspath(path))
    if isinstance(data, Mapping) and "root" in data and "role" not in data:
        data = data["root"]
    if not isinstance(data, Mapping):
        raise ConfigError("Snapshot must be a mapping at root.")
    backend = StaticTreeBackend()
    log.debug("Loaded snapshot %s", path)
    return backend.root(build_tree(data), registry)


def tree_from_dict(data: Mapping[str, Any], registry: Optional[TypeRegistry] = None):
    """Build a root Node from an in-memory node mapping."""
    backend = StaticTreeBackend()
    return backend.root(build_tree(data), registry)
