# uiauto_search/exceptions.py
"""
@file exceptions.py
@brief Custom exception classes for the element search engine.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional


class UIAutoError(Exception):
    """Base exception for the framework."""
    pass


class ConfigError(UIAutoError):
    """Raised when YAML/JSON configuration is invalid."""
    pass


class InvalidTreeError(UIAutoError):
    """
    Raised when the tree collaborator returns malformed data.

    A node that claims a children relation must hand back a sequence of
    element handles. Anything else is an invariant violation and is
    propagated to the caller, never retried.
    """

    def __init__(self, message: str, handle: Any = None):
        self.handle = handle
        super().__init__(message)


class MemberNotFoundError(UIAutoError, AttributeError):
    """
    Raised when a member name is neither an attribute, a parameterized
    attribute, an action, nor a searchable kind of the node.
    """

    def __init__(self, name: str, node_description: str):
        super().__init__(f"{node_description} has no attribute, action or searchable kind '{name}'")
        # AttributeError.__init__ resets .name on 3.10+
        self.name = name
        self.node_description = node_description


class SearchFailure(UIAutoError):
    """
    Raised when an implicit search (a member lookup) yields nothing.

    The message embeds the qualifier description and the element path of
    the search root so the failing search can be reproduced.

    Attributes:
        description: Rendered qualifier, e.g. ``Button(title: "Yes")``
        searcher: Description of the search root
        path: Ancestry of the search root, from the root up to the top
        subtree: Optional text dump of the searched subtree
        artifacts: Optional mapping of artifact kind to file path
    """

    def __init__(
        self,
        description: str,
        searcher: str,
        path: List[str],
        subtree: Optional[str] = None,
        artifacts: Optional[Dict[str, str]] = None,
    ):
        self.description = description
        self.searcher = searcher
        self.path = path
        self.subtree = subtree
        self.artifacts = artifacts or {}
        super().__init__(self.__str__())

    def __str__(self) -> str:
        lines = [
            f"SearchFailure: could not find `{self.description}` as a descendant of {self.searcher}",
            "Element Path:",
        ]
        for entry in self.path:
            lines.append(f"\t{entry}")
        if self.subtree:
            lines.append("Subtree:")
            for entry in self.subtree.rstrip("\n").split("\n"):
                lines.append(f"\t{entry}")
        if self.artifacts:
            lines.append(f"Artifacts: {self.artifacts}")
        return "\n".join(lines)
