# uiauto_search/snapshot.py
"""
@file snapshot.py
@brief Serialize a live subtree into the static node mapping format.

A snapshot taken from the desktop can be reloaded with
``backends.static.load_snapshot`` and searched offline.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

import yaml

from .enumerators import DepthFirst
from .node import Node
from .backends.static import REF_KEY

_SCALARS = (str, int, float, bool, type(None))


def _plain(value: Any, ids: Dict[Node, str]) -> Any:
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, Node):
        ref = ids.get(value)
        return {REF_KEY: ref} if ref is not None else None
    if isinstance(value, (list, tuple)):
        return [_plain(v, ids) for v in value]
    if isinstance(value, dict):
        return {str(k): _plain(v, ids) for k, v in value.items()}
    if all(hasattr(value, k) for k in ("left", "top", "right", "bottom")):
        return [int(value.left), int(value.top), int(value.right), int(value.bottom)]
    return str(value)


def snapshot(node: Node, max_depth: Optional[int] = None) -> Dict[str, Any]:
    """
    Dump ``node`` and its descendants (down to ``max_depth`` levels) as a
    nested mapping. Element-valued attributes pointing inside the dump
    become ``{"$ref": id}``; those pointing outside are dropped to None.
    """
    ids: Dict[Node, str] = {node: "n0"}
    for i, (child, _) in enumerate(DepthFirst(node).each_with_level(max_depth=max_depth), start=1):
        ids[child] = f"n{i}"

    def dump(current: Node, depth: int) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": ids[current],
            "role": current.backend.role(current.handle),
        }
        subrole = current.backend.subrole(current.handle)
        if subrole:
            out["subrole"] = subrole
        attrs = {}
        for name in sorted(current.attribute_names()):
            attrs[name] = _plain(current.attribute(name), ids)
        if attrs:
            out["attributes"] = attrs
        actions = sorted(current.action_names())
        if actions:
            out["actions"] = actions
        if current.has_children():
            kids: List[Dict[str, Any]] = []
            if max_depth is None or depth < max_depth:
                kids = [dump(c, depth + 1) for c in current.children()]
            out["children"] = kids
        return out

    return dump(node, 0)


def write_snapshot(node: Node, path: str, max_depth: Optional[int] = None) -> str:
    """Write a snapshot as JSON (``.json``) or YAML (anything else)."""
    data = snapshot(node, max_depth=max_depth)
    path = os.path.abspath(path)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        if path.lower().endswith(".json"):
            json.dump(data, f, indent=2, ensure_ascii=False)
        else:
            yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
    return path
