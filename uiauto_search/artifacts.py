# uiauto_search/artifacts.py
from __future__ import annotations
import logging
import os
import time
from typing import Any, Dict, Optional

from PIL import ImageGrab

from .debug import graph_subtree, text_subtree
from .node import Node

log = logging.getLogger("uiauto_search.artifacts")


def _ts() -> str:
    return time.strftime("%Y%m%d_%H%M%S")


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def _bbox(rect: Any) -> Optional[tuple]:
    """Accept a (left, top, right, bottom) sequence or an object with those fields."""
    if rect is None:
        return None
    if isinstance(rect, (list, tuple)) and len(rect) == 4:
        return tuple(int(v) for v in rect)
    if isinstance(rect, dict):
        try:
            return (int(rect["left"]), int(rect["top"]), int(rect["right"]), int(rect["bottom"]))
        except (KeyError, TypeError, ValueError):
            return None
    try:
        return (int(rect.left), int(rect.top), int(rect.right), int(rect.bottom))
    except (AttributeError, TypeError, ValueError):
        return None


def capture_node_image(node: Node, out_dir: str, name_prefix: str) -> Optional[str]:
    """
    Grab the screen area covered by the node's ``rectangle`` attribute.
    Returns file path or None if the node has no usable rectangle or
    capture fails (headless session, unsupported platform).
    """
    if "rectangle" not in node.attribute_names():
        return None
    bbox = _bbox(node.attribute("rectangle"))
    if bbox is None or bbox[2] <= bbox[0] or bbox[3] <= bbox[1]:
        return None
    ensure_dir(out_dir)
    path = os.path.join(out_dir, f"{name_prefix}_{_ts()}.png")
    try:
        img = ImageGrab.grab(bbox=bbox)
        img.save(path)
        return path
    except Exception as e:
        log.debug("Screenshot of %s failed: %s", bbox, e)
        return None


def _write(out_dir: str, name: str, text: str) -> Optional[str]:
    ensure_dir(out_dir)
    path = os.path.join(out_dir, name)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path
    except OSError as e:
        log.warning("Could not write artifact %s: %s", path, e)
        return None


def dump_tree(node: Node, out_dir: str, name_prefix: str, max_depth: Optional[int] = None) -> Optional[str]:
    return _write(out_dir, f"{name_prefix}_{_ts()}.txt", text_subtree(node, max_depth=max_depth))


def dump_graph(node: Node, out_dir: str, name_prefix: str) -> Optional[str]:
    return _write(out_dir, f"{name_prefix}_{_ts()}.dot", graph_subtree(node))


def make_artifacts(node: Node, out_dir: str, prefix: str) -> Dict[str, str]:
    """
    Returns dict like {"tree": "...", "graph": "...", "screenshot": "..."}
    (only those that succeed).
    """
    artifacts: Dict[str, str] = {}
    tree = dump_tree(node, out_dir, prefix + "_tree")
    if tree:
        artifacts["tree"] = tree
    graph = dump_graph(node, out_dir, prefix + "_graph")
    if graph:
        artifacts["graph"] = graph
    img = capture_node_image(node, out_dir, prefix + "_screenshot")
    if img:
        artifacts["screenshot"] = img
    return artifacts
