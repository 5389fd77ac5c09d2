"""
@file interfaces.py
@brief Abstract base class for the live UI tree collaborator.

The search engine never talks to a platform accessibility layer directly.
It consumes the operations below, which a backend implements for one
platform (pywinauto UIA, an in-memory snapshot, ...).
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional


class ITreeBackend(ABC):
    """
    Abstract tree interface over opaque, externally owned element handles.

    Every call may be an expensive out-of-process round trip. A handle may
    become invalid at any time; implementations report a stale handle as an
    empty node (no attributes, no children) instead of raising.
    """

    @abstractmethod
    def attribute_names(self, handle: Any) -> List[str]:
        """
        List attribute names exposed by the element.

        Args:
            handle: Native element handle

        Returns:
            Attribute names, empty if the handle is no longer valid
        """
        pass

    @abstractmethod
    def attribute(self, handle: Any, name: str) -> Any:
        """
        Read an attribute value.

        Args:
            handle: Native element handle
            name: Attribute name

        Returns:
            Attribute value, or None if absent
        """
        pass

    @abstractmethod
    def children(self, handle: Any) -> List[Any]:
        """
        List child handles in document order.

        Returns:
            Child handles, empty if there is no children relation or the
            handle is no longer valid
        """
        pass

    @abstractmethod
    def has_children(self, handle: Any) -> bool:
        """Return True if the element exposes a children relation."""
        pass

    @abstractmethod
    def role(self, handle: Any) -> str:
        """Return the platform role label of the element."""
        pass

    @abstractmethod
    def subrole(self, handle: Any) -> Optional[str]:
        """Return the platform subrole label, or None."""
        pass

    @abstractmethod
    def parent(self, handle: Any) -> Optional[Any]:
        """Return the parent handle, or None at the top of the tree."""
        pass

    @abstractmethod
    def is_element(self, value: Any) -> bool:
        """Return True if value is a native element handle of this backend."""
        pass

    def parameterized_attribute_names(self, handle: Any) -> List[str]:
        """List parameterized attribute names. Most elements have none."""
        return []

    def parameterized_attribute(self, handle: Any, name: str, param: Any) -> Any:
        """Read a parameterized attribute computed from ``param``."""
        return None

    def action_names(self, handle: Any) -> List[str]:
        """List actions the element can perform."""
        return []

    def perform(self, handle: Any, action: str) -> bool:
        """
        Ask the element to perform an action.

        Returns:
            True if the collaborator reports success
        """
        return False
