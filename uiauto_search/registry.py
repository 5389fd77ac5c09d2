# uiauto_search/registry.py
"""
@file registry.py
@brief Lazily populated, inheritance-aware registry of element types.

Element kinds are not known up front; they are discovered from the
role/subrole labels reported by the tree collaborator and registered on
first observation. A subrole type is always parented to its role type.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

log = logging.getLogger("uiauto_search.registry")

BASE_LABEL = "Element"


@dataclass(frozen=True)
class TypeDescriptor:
    """A type label plus an optional parent type."""
    label: str
    parent: Optional[TypeDescriptor] = None

    def is_a(self, other: TypeDescriptor) -> bool:
        """True if this type is ``other`` or one of its subtypes."""
        current: Optional[TypeDescriptor] = self
        while current is not None:
            if current == other:
                return True
            current = current.parent
        return False

    def ancestry(self) -> List[TypeDescriptor]:
        """Chain from this type up to the base type."""
        chain: List[TypeDescriptor] = []
        current: Optional[TypeDescriptor] = self
        while current is not None:
            chain.append(current)
            current = current.parent
        return chain

    def __str__(self) -> str:
        return self.label


class TypeRegistry:
    """
    Append-only mapping from label to TypeDescriptor.

    Lookups take no lock. Creation is serialized so two threads observing
    the same new label end up sharing one descriptor.
    """

    def __init__(self, base_label: str = BASE_LABEL):
        self._lock = threading.Lock()
        self._base = TypeDescriptor(base_label)
        self._types: Dict[str, TypeDescriptor] = {base_label: self._base}

    @property
    def base(self) -> TypeDescriptor:
        return self._base

    def exists(self, label: str) -> bool:
        return label in self._types

    def get(self, label: str) -> Optional[TypeDescriptor]:
        return self._types.get(label)

    def labels(self) -> List[str]:
        return sorted(self._types.keys())

    def resolve(self, label: str) -> TypeDescriptor:
        """Return the descriptor for a role label, creating it under the base type."""
        found = self._types.get(label)
        if found is not None:
            return found
        return self._create(label, self._base)

    def resolve_pair(self, subrole: str, role: str) -> TypeDescriptor:
        """
        Return the descriptor for a subrole label.

        The role descriptor is resolved first so the new subrole type can
        be parented to it.
        """
        found = self._types.get(subrole)
        if found is not None:
            return found
        parent = self.resolve(role)
        if subrole == role:
            return parent
        return self._create(subrole, parent)

    def _create(self, label: str, parent: TypeDescriptor) -> TypeDescriptor:
        with self._lock:
            found = self._types.get(label)
            if found is not None:
                return found
            descriptor = TypeDescriptor(label, parent)
            self._types[label] = descriptor
        log.debug("Registered type %s < %s", label, parent.label)
        return descriptor

    def __contains__(self, label: str) -> bool:
        return self.exists(label)

    def __len__(self) -> int:
        return len(self._types)


REGISTRY = TypeRegistry()
