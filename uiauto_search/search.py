# uiauto_search/search.py
"""
@file search.py
@brief Descendant and ancestor search over a Node tree.

Searches compile one Qualifier and drive a breadth-first enumeration with
it. ``find`` stops fetching at the first match, ``find_all`` walks the
whole subtree.
"""

from __future__ import annotations

import time
import warnings
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

from .config import get_config
from .enumerators import BreadthFirst
from .exceptions import SearchFailure
from .node import Node, NodeList
from .qualifier import Qualifier
from .searchlogger import SEARCH_LOGGER
from .translator import is_plural

Predicate = Optional[Callable[[Node], Any]]


class Cardinality(Enum):
    ONE = "one"
    ALL = "all"

    @classmethod
    def parse(cls, value: Union[str, Cardinality]) -> Cardinality:
        if isinstance(value, Cardinality):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"cardinality must be 'one' or 'all', got {value!r}") from None


def _counting(qualifier: Qualifier, stats: Dict[str, int], forced: bool) -> Callable[[Node], bool]:
    def check(node: Node) -> bool:
        stats["visited"] += 1
        ok = qualifier.qualifies(node)
        if ok:
            stats["matches"] += 1
            if SEARCH_LOGGER.wants("search_match", forced):
                SEARCH_LOGGER.search_matched(qualifier.describe(), node.type_name, stats["matches"], forced=forced)
        return ok
    return check


def _run(root: Node, qualifier: Qualifier, cardinality: Cardinality) -> Union[Optional[Node], NodeList]:
    # log_searches turns logging on for this search only
    forced = get_config().log_searches
    stats = {"visited": 0, "matches": 0}
    description = qualifier.describe()
    SEARCH_LOGGER.search_started(description, cardinality.value, forced=forced)
    start = time.perf_counter()
    enum = BreadthFirst(root)
    check = _counting(qualifier, stats, forced)
    if cardinality is Cardinality.ONE:
        result: Union[Optional[Node], NodeList] = enum.find(check)
    else:
        result = enum.find_all(check)
    SEARCH_LOGGER.search_finished(
        description,
        visited=stats["visited"],
        matches=stats["matches"],
        elapsed_ms=(time.perf_counter() - start) * 1000.0,
        forced=forced,
    )
    return result


def find_all(root: Node, kind: str, filters: Optional[Dict[Any, Any]] = None, predicate: Predicate = None) -> NodeList:
    """
    Every descendant of ``root`` of type ``kind`` that satisfies the
    filters and predicate, in breadth-first order. The root itself is
    never a candidate.
    """
    return _run(root, Qualifier(kind, filters, predicate), Cardinality.ALL)


def find(root: Node, kind: str, filters: Optional[Dict[Any, Any]] = None, predicate: Predicate = None) -> Optional[Node]:
    """First qualifying descendant in breadth-first order, or None."""
    return _run(root, Qualifier(kind, filters, predicate), Cardinality.ONE)


def search(
    root: Node,
    kind: str,
    filters: Optional[Dict[Any, Any]] = None,
    predicate: Predicate = None,
    cardinality: Union[None, str, Cardinality] = None,
) -> Union[Optional[Node], NodeList]:
    """
    Dispatch to ``find`` or ``find_all``.

    Without an explicit ``cardinality`` the grammatical number of ``kind``
    decides ("buttons" -> all, "button" -> one). That inference is
    deprecated.
    """
    if cardinality is None:
        warnings.warn(
            "Inferring cardinality from the plural form of the search kind is deprecated; "
            "pass cardinality=Cardinality.ONE or Cardinality.ALL",
            DeprecationWarning,
            stacklevel=3,
        )
        chosen = Cardinality.ALL if is_plural(str(kind)) else Cardinality.ONE
    else:
        chosen = Cardinality.parse(cardinality)
    return _run(root, Qualifier(kind, filters, predicate), chosen)


def ancestor(node: Node, kind: str, filters: Optional[Dict[Any, Any]] = None, predicate: Predicate = None) -> Optional[Node]:
    """Closest ancestor of ``node`` that qualifies, or None at the top."""
    qualifier = Qualifier(kind, filters, predicate)
    current = node.parent()
    while current is not None:
        if qualifier.qualifies(current):
            return current
        current = current.parent()
    return None


def search_failure(root: Node, kind: str, filters: Optional[Dict[Any, Any]] = None, predicate: Predicate = None) -> SearchFailure:
    """
    Build (not raise) the failure for an implicit search rooted at ``root``.

    With ``debug`` on, the searched subtree is dumped into the message.
    With ``capture_artifacts`` on, tree/graph/screenshot files are written.
    """
    from .debug import path, text_subtree

    cfg = get_config()
    description = Qualifier(kind, filters, predicate).describe()
    subtree = text_subtree(root, max_depth=cfg.dump_max_depth) if cfg.debug else None
    artifacts: Dict[str, str] = {}
    if cfg.capture_artifacts:
        from .artifacts import make_artifacts
        artifacts = make_artifacts(root, cfg.artifacts_dir, f"search_failure_{kind}")
    return SearchFailure(
        description=description,
        searcher=repr(root),
        path=[repr(n) for n in path(root)],
        subtree=subtree,
        artifacts=artifacts,
    )
