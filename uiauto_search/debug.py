# uiauto_search/debug.py
"""
Diagnostics for failed or surprising searches: ancestry paths, indented
text dumps and Graphviz DOT graphs of a subtree.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional

from .enumerators import DepthFirst
from .node import Node

OVAL = "oval"
BOX = "box"
OCTAGON = "doubleoctagon"

_LABEL_LIMIT = 12


def path(node: Node) -> List[Node]:
    """``node`` and its ancestors, ascending to the top of the tree."""
    return node.ancestry()


def text_subtree(node: Node, max_depth: Optional[int] = None) -> str:
    """
    Dump a subtree, one element per line, tab-indented by depth.

    @param max_depth Deepest level to print (None for the whole subtree)
    """
    lines = [repr(node)]
    for child, depth in DepthFirst(node).each_with_level(max_depth=max_depth):
        lines.append("\t" * depth + repr(child))
    return "\n".join(lines) + "\n"


def _flag(node: Node, name: str) -> Optional[bool]:
    if name not in node.attribute_names():
        return None
    return bool(node.attribute(name))


class _GraphNode:

    def __init__(self, node: Node, index: int):
        self.node = node
        self.id = f"element_{index}"

    def _label(self) -> str:
        ident = self.node.identifier()
        if len(ident) > _LABEL_LIMIT:
            ident = ident[:_LABEL_LIMIT] + "..."
        ident = ident.replace("\\", "\\\\").replace('"', '\\"')
        return f"{self.node.type_name}{ident}"

    def to_dot(self) -> str:
        focused = _flag(self.node, "focused")
        enabled = _flag(self.node, "enabled")
        if focused:
            shape = OCTAGON
        elif not self.node.action_names():
            shape = OVAL
        else:
            shape = BOX
        if enabled is False:
            style, colour = "filled", "grey"
        elif focused and not self.node.has_children():
            style, colour = "bold", "black"
        else:
            style, colour = "solid", "black"
        return f'{self.id} [label = "{self._label()}"] [shape={shape}] [style={style}] [color={colour}]'


def graph_subtree(root: Node) -> str:
    """
    Build Graphviz DOT source for the subtree under ``root``.

    Nodes are numbered in breadth-first order. Each node's children are
    fetched once and the edges come from that same list.
    """
    top = _GraphNode(root, 0)
    nodes = [top]
    edges: List[str] = []
    queue: Deque[_GraphNode] = deque([top])
    while queue:
        parent = queue.popleft()
        for child in parent.node.children():
            gnode = _GraphNode(child, len(nodes))
            nodes.append(gnode)
            edges.append(f"{parent.id} -> {gnode.id} [arrowhead = normal]")
            if child.has_children():
                queue.append(gnode)
    out = ["digraph {"]
    out.append(";\n".join(n.to_dot() for n in nodes))
    out.append("")
    out.append(";\n".join(edges))
    out.append("}")
    return "\n".join(out) + "\n"
