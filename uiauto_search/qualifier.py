# uiauto_search/qualifier.py
"""
@file qualifier.py
@brief Compiles a (type token, filters, predicate) triple into a reusable
       acceptance test over Nodes.

Filter shapes:

    {"title": "Yes"}                     equality
    {"title": re.compile("^Y")}          regex match on str(value)
    {"row": {"title": "Price"}}          a Row descendant with that title
    {("string_for_range", (0, 3)): "Y"}  parameterized attribute equality
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Mapping, Optional, Union

from .config import get_config
from .exceptions import ConfigError
from .node import Node
from .registry import TypeDescriptor, TypeRegistry
from .translator import classify

log = logging.getLogger("uiauto_search.qualifier")

Pattern = type(re.compile(""))


class RuleKind(Enum):
    EQUALITY = "equality"
    REGEX = "regex"
    HAS_DESCENDANT = "has_descendant"
    PARAM_EQUALITY = "param_equality"
    PARAM_REGEX = "param_regex"
    PREDICATE = "predicate"


def _node_text(node: Node) -> Optional[str]:
    names = node.attribute_names()
    for key in ("value", "title", "name"):
        if key in names:
            val = node.attribute(key)
            if isinstance(val, str):
                return val
    return None


def values_equal(actual: Any, expected: Any) -> bool:
    """
    Strict comparison of an attribute value against a filter value.

    No truthiness coercion: booleans only equal booleans, and an absent
    value only equals an absent filter.
    """
    if expected is None:
        return actual is None
    if actual is None:
        return False
    if isinstance(expected, bool) or isinstance(actual, bool):
        return isinstance(actual, bool) and isinstance(expected, bool) and actual is expected
    if isinstance(actual, Node):
        if isinstance(expected, Node):
            return actual == expected
        if isinstance(expected, str):
            # an element-valued attribute filtered by the text it shows
            return _node_text(actual) == expected
        return False
    if isinstance(expected, Node):
        return False
    return actual == expected


def _text_for_match(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Node):
        return _node_text(value)
    return str(value)


@dataclass(frozen=True)
class Equality:
    attr: Any
    value: Any
    kind: ClassVar[RuleKind] = RuleKind.EQUALITY

    def matches(self, node: Node) -> bool:
        if self.attr not in node.attribute_names():
            return False
        return values_equal(node.attribute(self.attr), self.value)


@dataclass(frozen=True)
class RegexMatch:
    attr: str
    pattern: Any
    kind: ClassVar[RuleKind] = RuleKind.REGEX

    def matches(self, node: Node) -> bool:
        if self.attr not in node.attribute_names():
            return False
        text = _text_for_match(node.attribute(self.attr))
        return text is not None and self.pattern.search(text) is not None


@dataclass(frozen=True)
class HasDescendant:
    """
    Satisfied when a search rooted at the candidate, for kind ``attr`` and
    the nested filters, yields at least one node.
    """
    attr: str
    qualifier: Qualifier
    kind: ClassVar[RuleKind] = RuleKind.HAS_DESCENDANT

    def matches(self, node: Node) -> bool:
        if not node.has_children():
            return False
        from .enumerators import BreadthFirst
        return BreadthFirst(node).find(self.qualifier.qualifies) is not None


@dataclass(frozen=True)
class ParamEquality:
    attr: str
    param: Any
    value: Any
    kind: ClassVar[RuleKind] = RuleKind.PARAM_EQUALITY

    def matches(self, node: Node) -> bool:
        if self.attr not in node.parameterized_attribute_names():
            return False
        return values_equal(node.parameterized_attribute(self.attr, self.param), self.value)


@dataclass(frozen=True)
class ParamRegexMatch:
    attr: str
    param: Any
    pattern: Any
    kind: ClassVar[RuleKind] = RuleKind.PARAM_REGEX

    def matches(self, node: Node) -> bool:
        if self.attr not in node.parameterized_attribute_names():
            return False
        text = _text_for_match(node.parameterized_attribute(self.attr, self.param))
        return text is not None and self.pattern.search(text) is not None


@dataclass(frozen=True)
class PredicateCheck:
    predicate: Callable[[Node], Any] = field(compare=False)
    kind: ClassVar[RuleKind] = RuleKind.PREDICATE

    def matches(self, node: Node) -> bool:
        return bool(self.predicate(node))


Rule = Union[Equality, RegexMatch, HasDescendant, ParamEquality, ParamRegexMatch, PredicateCheck]


def compile_filters(filters: Optional[Mapping[Any, Any]]) -> List[Rule]:
    """Turn a raw filter mapping into an ordered list of rules."""
    rules: List[Rule] = []
    for key, value in (filters or {}).items():
        if isinstance(value, Mapping):
            rules.append(HasDescendant(str(key), Qualifier(str(key), value)))
        elif isinstance(key, tuple) and len(key) == 2:
            attr, param = key
            if isinstance(value, Pattern):
                rules.append(ParamRegexMatch(attr, param, value))
            else:
                rules.append(ParamEquality(attr, param, value))
        else:
            if not isinstance(key, str):
                if get_config().strict_filter_keys:
                    raise ConfigError(f"Filter key {key!r} is not an attribute name")
                log.warning("Filter key %r is not an attribute name; it will never match", key)
            if isinstance(value, Pattern):
                rules.append(RegexMatch(key, value))
            else:
                rules.append(Equality(key, value))
    return rules


def _pp_value(value: Any) -> str:
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, Pattern):
        return f"/{value.pattern}/"
    return repr(value)


def _pp_key(key: Any) -> str:
    if isinstance(key, tuple) and len(key) == 2:
        return f"{key[0]}[{key[1]!r}]"
    return str(key)


def pp_filters(filters: Optional[Mapping[Any, Any]]) -> str:
    """Render filters as ``(key: value, nested(key: value))``."""
    if not filters:
        return ""
    parts = []
    for key, value in filters.items():
        if isinstance(value, Mapping):
            parts.append(f"{_pp_key(key)}{pp_filters(value)}")
        else:
            parts.append(f"{_pp_key(key)}: {_pp_value(value)}")
    return "(" + ", ".join(parts) + ")"


class Qualifier:
    """
    Answers whether a candidate Node is of the wanted type and satisfies
    every filter. Built once per search and immutable afterwards.
    """

    def __init__(
        self,
        kind: str,
        filters: Optional[Mapping[Any, Any]] = None,
        predicate: Optional[Callable[[Node], Any]] = None,
    ):
        """
        @param kind Type token, e.g. "Button", "text_field" or "buttons"
        @param filters Filter mapping (see module docstring)
        @param predicate Optional callable run last with the candidate
        """
        self.kind = str(kind)
        self.label = classify(self.kind)
        self.filters: Dict[Any, Any] = dict(filters or {})
        self.predicate = predicate
        rules = compile_filters(self.filters)
        if predicate is not None:
            rules.append(PredicateCheck(predicate))
        self.rules = tuple(rules)
        self._targets: Dict[int, TypeDescriptor] = {}

    def target(self, registry: TypeRegistry) -> Optional[TypeDescriptor]:
        """Descriptor wanted in ``registry``, or None if never observed."""
        found = self._targets.get(id(registry))
        if found is None:
            found = registry.get(self.label)
            if found is not None:
                self._targets[id(registry)] = found
        return found

    def right_type(self, node: Node) -> bool:
        # resolving the candidate first may register the wanted type
        descriptor = node.type_descriptor
        target = self.target(node.registry)
        if target is None:
            return False
        return descriptor.is_a(target)

    def meets_criteria(self, node: Node) -> bool:
        return all(rule.matches(node) for rule in self.rules)

    def qualifies(self, node: Node) -> bool:
        return self.right_type(node) and self.meets_criteria(node)

    def describe(self) -> str:
        """Compact description, e.g. ``Button(title: "Yes")``."""
        return f"{self.label}{pp_filters(self.filters)}{'[✔]' if self.predicate else ''}"

    def __repr__(self) -> str:
        return f"<Qualifier {self.describe()}>"
