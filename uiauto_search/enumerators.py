"""
@file enumerators.py
@brief Lazy enumerators over the descendants of a Node.

Every pull may round-trip to the native layer, so enumerators expand
children only on demand and never yield the root itself. The children
relation is assumed to be acyclic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Callable, Deque, Iterator, List, Optional, Tuple

from .node import Node, NodeList


class _Enumerator(ABC):
    """Walks the descendants of a root Node, excluding the root."""

    def __init__(self, root: Node):
        self.root = root

    @abstractmethod
    def __iter__(self) -> Iterator[Node]:
        """Yield descendants, fetching children lazily."""
        pass

    def find(self, predicate: Callable[[Node], Any]) -> Optional[Node]:
        """
        Return the first node accepted by ``predicate``.

        Traversal stops at the match: no further children are fetched.
        """
        for node in self:
            if predicate(node):
                return node
        return None

    def find_all(self, predicate: Callable[[Node], Any]) -> NodeList:
        """Return every node accepted by ``predicate``, in enumeration order."""
        return NodeList(node for node in self if predicate(node))


class BreadthFirst(_Enumerator):
    """
    Level-order, left-to-right enumeration.

    Every child is yielded; only children that expose a children relation
    are queued for expansion.
    """

    def __iter__(self) -> Iterator[Node]:
        queue: Deque[Node] = deque([self.root])
        while queue:
            for child in queue.popleft().children():
                yield child
                if child.has_children():
                    queue.append(child)


class DepthFirst(_Enumerator):
    """
    Pre-order enumeration in document order.
    """

    def __iter__(self) -> Iterator[Node]:
        stack: List[Node] = list(reversed(self.root.children()))
        while stack:
            current = stack.pop()
            yield current
            # pushed reversed so pops follow document order
            stack.extend(reversed(current.children()))

    def each_with_level(self, max_depth: Optional[int] = None) -> Iterator[Tuple[Node, int]]:
        """
        Yield ``(node, depth)`` pairs, depth 1 being the root's children.

        Only used for diagnostic dumps.
        """
        for child in self.root.children():
            yield from self._recursive_each_with_level(child, 1, max_depth)

    def _recursive_each_with_level(self, node: Node, depth: int, max_depth: Optional[int]) -> Iterator[Tuple[Node, int]]:
        yield node, depth
        if max_depth is not None and depth >= max_depth:
            return
        for child in node.children():
            yield from self._recursive_each_with_level(child, depth + 1, max_depth)
