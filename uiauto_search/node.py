"""
@file node.py
@brief Element wrapper around one native handle of the tree collaborator.

A Node exposes attribute, children and action lookups, resolves its own
type through the TypeRegistry, and is the entry point for searches rooted
at it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, List, Optional

from .exceptions import InvalidTreeError, MemberNotFoundError
from .interfaces import ITreeBackend
from .registry import REGISTRY, TypeDescriptor, TypeRegistry
from .stats import STATS
from .translator import unprefix

log = logging.getLogger("uiauto_search.node")


class MemberKind(Enum):
    ATTRIBUTE = "attribute"
    PARAMETERIZED = "parameterized"
    ACTION = "action"
    SEARCH = "search"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Member:
    """
    @brief Outcome of resolving a member name against a node.

    The lookup chain is ordered: attribute, parameterized attribute,
    action, then search (only for nodes with a children relation).
    """
    kind: MemberKind
    name: str

    @property
    def found(self) -> bool:
        return self.kind is not MemberKind.NOT_FOUND


class NodeList(list):
    """
    @brief List of Nodes with tree-aware helpers.
    """

    @property
    def blank(self) -> bool:
        return len(self) == 0

    def attribute(self, name: str) -> List[Any]:
        """Read one attribute from every node, in order."""
        return [node.attribute(name) for node in self]

    def of_type(self, descriptor: TypeDescriptor) -> NodeList:
        return NodeList(node for node in self if node.type_matches(descriptor))

    def __repr__(self) -> str:
        return f"NodeList({list.__repr__(self)})"


class Node:
    """
    @brief Wrapper around one native element handle.

    Attribute, parameterized attribute and action names are fetched once
    and cached on the instance. Values are never cached: the live tree
    mutates between calls.
    """

    def __init__(
        self,
        handle: Any,
        backend: ITreeBackend,
        registry: Optional[TypeRegistry] = None,
    ):
        """
        @param handle Native element handle owned by the collaborator
        @param backend Tree collaborator that understands ``handle``
        @param registry Type registry (process default if None)
        """
        self.handle = handle
        self.backend = backend
        self.registry = registry if registry is not None else REGISTRY
        self._type: Optional[TypeDescriptor] = None
        self._attrs: Optional[FrozenSet[str]] = None
        self._param_attrs: Optional[FrozenSet[str]] = None
        self._actions: Optional[FrozenSet[str]] = None

    # -------------------------
    # Attributes
    # -------------------------

    def attribute_names(self) -> FrozenSet[str]:
        if self._attrs is None:
            STATS.increment("attribute_names")
            self._attrs = frozenset(self.backend.attribute_names(self.handle) or ())
        return self._attrs

    def attribute(self, name: str) -> Any:
        """
        @brief Read an attribute value.
        @return Scalars unchanged, element handles wrapped as Node, lists of
                element handles wrapped as NodeList, None when absent
        """
        STATS.increment("attribute")
        return self._wrap(self.backend.attribute(self.handle, name))

    def parameterized_attribute_names(self) -> FrozenSet[str]:
        if self._param_attrs is None:
            STATS.increment("parameterized_attribute_names")
            self._param_attrs = frozenset(self.backend.parameterized_attribute_names(self.handle) or ())
        return self._param_attrs

    def parameterized_attribute(self, name: str, param: Any) -> Any:
        STATS.increment("parameterized_attribute")
        return self._wrap(self.backend.parameterized_attribute(self.handle, name, param))

    # -------------------------
    # Actions
    # -------------------------

    def action_names(self) -> FrozenSet[str]:
        if self._actions is None:
            STATS.increment("action_names")
            self._actions = frozenset(self.backend.action_names(self.handle) or ())
        return self._actions

    def perform(self, action: str) -> bool:
        STATS.increment("perform")
        log.debug("Performing %s on %r", action, self)
        return bool(self.backend.perform(self.handle, action))

    # -------------------------
    # Hierarchy
    # -------------------------

    def has_children(self) -> bool:
        STATS.increment("has_children")
        return bool(self.backend.has_children(self.handle))

    def children(self) -> NodeList:
        """
        @brief Child nodes in document order.
        @return Empty NodeList for a leaf or a node whose handle expired
        @throws InvalidTreeError if the collaborator returns malformed data
        """
        STATS.increment("children")
        raw = self.backend.children(self.handle)
        if raw is None:
            return NodeList()
        if not isinstance(raw, (list, tuple)):
            raise InvalidTreeError(
                f"children of {self.type_name} must be a sequence, got {type(raw).__name__}",
                handle=self.handle,
            )
        nodes = NodeList()
        for child in raw:
            if not self.backend.is_element(child):
                raise InvalidTreeError(
                    f"children of {self.type_name} contain a non-element value: {child!r}",
                    handle=self.handle,
                )
            nodes.append(self._spawn(child))
        return nodes

    def parent(self) -> Optional[Node]:
        STATS.increment("parent")
        raw = self.backend.parent(self.handle)
        if raw is None or not self.backend.is_element(raw):
            return None
        return self._spawn(raw)

    def ancestry(self) -> List[Node]:
        """Nodes from this one up to the top of the tree."""
        chain: List[Node] = [self]
        current = self.parent()
        while current is not None:
            chain.append(current)
            current = current.parent()
        return chain

    # -------------------------
    # Typing
    # -------------------------

    @property
    def type_descriptor(self) -> TypeDescriptor:
        if self._type is None:
            self._type = self._resolve_type()
        return self._type

    @property
    def type_name(self) -> str:
        return self.type_descriptor.label

    def type_matches(self, descriptor: TypeDescriptor) -> bool:
        """True if this node is a ``descriptor`` or one of its subtypes."""
        return self.type_descriptor.is_a(descriptor)

    def _resolve_type(self) -> TypeDescriptor:
        STATS.increment("role")
        role = self.backend.role(self.handle)
        if not role:
            return self.registry.base
        role = unprefix(role)
        STATS.increment("subrole")
        subrole = self.backend.subrole(self.handle)
        # some elements claim a subrole but report nothing for it
        if subrole:
            return self.registry.resolve_pair(unprefix(subrole), role)
        return self.registry.resolve(role)

    # -------------------------
    # Search
    # -------------------------

    def search(
        self,
        kind: str,
        filters: Optional[Dict[Any, Any]] = None,
        predicate: Optional[Callable[[Node], Any]] = None,
        cardinality: Any = None,
    ):
        from .search import search
        return search(self, kind, filters, predicate, cardinality=cardinality)

    def find(self, kind: str, filters: Optional[Dict[Any, Any]] = None, predicate: Optional[Callable[[Node], Any]] = None) -> Optional[Node]:
        from .search import find
        return find(self, kind, filters, predicate)

    def find_all(self, kind: str, filters: Optional[Dict[Any, Any]] = None, predicate: Optional[Callable[[Node], Any]] = None) -> NodeList:
        from .search import find_all
        return find_all(self, kind, filters, predicate)

    def ancestor(self, kind: str, filters: Optional[Dict[Any, Any]] = None, predicate: Optional[Callable[[Node], Any]] = None) -> Optional[Node]:
        from .search import ancestor
        return ancestor(self, kind, filters, predicate)

    # -------------------------
    # Member resolution
    # -------------------------

    def resolve_member(self, name: str) -> Member:
        if name in self.attribute_names():
            return Member(MemberKind.ATTRIBUTE, name)
        if name in self.parameterized_attribute_names():
            return Member(MemberKind.PARAMETERIZED, name)
        if name in self.action_names():
            return Member(MemberKind.ACTION, name)
        if self.has_children():
            return Member(MemberKind.SEARCH, name)
        return Member(MemberKind.NOT_FOUND, name)

    def lookup(
        self,
        name: str,
        *args: Any,
        predicate: Optional[Callable[[Node], Any]] = None,
        cardinality: Any = None,
        **filters: Any,
    ) -> Any:
        """
        @brief Resolve ``name`` and act on it.

        Attributes are read, parameterized attributes are read with
        ``args[0]`` as the parameter, actions are performed, and anything
        else is searched for below this node.

        @throws SearchFailure if the implicit search finds nothing
        @throws MemberNotFoundError if nothing can handle ``name``
        """
        member = self.resolve_member(name)
        if member.kind is MemberKind.ATTRIBUTE:
            return self.attribute(name)
        if member.kind is MemberKind.PARAMETERIZED:
            if not args:
                raise TypeError(f"parameterized attribute '{name}' requires a parameter")
            return self.parameterized_attribute(name, args[0])
        if member.kind is MemberKind.ACTION:
            return self.perform(name)
        if member.kind is MemberKind.SEARCH:
            from .search import search_failure
            if args and isinstance(args[0], dict):
                filters = {**args[0], **filters}
            result = self.search(name, filters, predicate, cardinality=cardinality)
            if result is None or (isinstance(result, NodeList) and result.blank):
                raise search_failure(self, name, filters, predicate)
            return result
        raise MemberNotFoundError(name, repr(self))

    # -------------------------
    # Identity / display
    # -------------------------

    def _spawn(self, handle: Any) -> Node:
        return Node(handle, self.backend, self.registry)

    def _wrap(self, value: Any) -> Any:
        if value is None:
            return None
        if self.backend.is_element(value):
            return self._spawn(value)
        if isinstance(value, (list, tuple)) and value and self.backend.is_element(value[0]):
            # homogeneous element arrays only
            return NodeList(self._spawn(v) for v in value)
        return value

    def identifier(self) -> str:
        """Short human readable identification built from common attributes."""
        names = self.attribute_names()
        if "value" in names:
            val = self.attribute("value")
            if isinstance(val, str):
                if val:
                    return f" {val!r}"
            elif val is not None:
                return f" value={val!r}"
        for key in ("title", "name"):
            if key in names:
                val = self.attribute(key)
                if val:
                    return f" {val!r}"
        if "title_ui_element" in names:
            val = self.attribute("title_ui_element")
            if val is not None:
                return f" {val!r}"
        if "description" in names:
            val = self.attribute("description")
            if val:
                return f" {val}"
        for key in ("identifier", "automation_id"):
            if key in names:
                val = self.attribute(key)
                if val:
                    return f" id={val}"
        return ""

    def describe(self) -> str:
        msg = f"<{self.type_name}{self.identifier()}"
        names = self.attribute_names()
        if self.has_children():
            msg += f" children={len(self.children())}"
        for flag in ("enabled", "focused"):
            if flag in names:
                msg += f" {flag}[{'✔' if self.attribute(flag) else '✘'}]"
        return msg + ">"

    def __repr__(self) -> str:
        return self.describe()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.backend is other.backend and self.handle == other.handle

    def __hash__(self) -> int:
        return hash(self.handle)
