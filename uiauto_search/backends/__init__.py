"""
Tree collaborators: an in-memory static tree and the pywinauto UIA adapter.
"""

from .static import StaticElement, StaticTreeBackend, build_tree, load_snapshot, tree_from_dict
from .uia import UIABackend, uia_root

__all__ = [
    "StaticElement",
    "StaticTreeBackend",
    "build_tree",
    "load_snapshot",
    "tree_from_dict",
    "UIABackend",
    "uia_root",
]
