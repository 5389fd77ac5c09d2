# uiauto_search/backends/uia.py
"""
@file uia.py
@brief pywinauto UIA tree collaborator.

Handles are pywinauto wrappers (``UIAWrapper``). Roles come from
``element_info.control_type``. UIA has no subrole concept; a subrole can
be taken from another element_info field (``class_name`` is the usual
choice) when finer types are wanted.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, List, Optional

from ..interfaces import ITreeBackend
from ..registry import TypeRegistry

log = logging.getLogger("uiauto_search.backends.uia")


def _safe(fn: Callable[[], Any], default: Any = None) -> Any:
    # UIA raises COM errors for elements that went away mid-call
    try:
        return fn()
    except Exception:
        return default


def _rect_to_list(rect: Any) -> Optional[List[int]]:
    try:
        return [int(rect.left), int(rect.top), int(rect.right), int(rect.bottom)]
    except Exception:
        return None


_ATTRIBUTES: Dict[str, Callable[[Any], Any]] = {
    "name": lambda w: w.element_info.name,
    # QtQuick exposes Accessible.name only; window_text is the fallback
    "title": lambda w: w.element_info.name or w.window_text(),
    "automation_id": lambda w: w.element_info.automation_id,
    "class_name": lambda w: w.element_info.class_name,
    "enabled": lambda w: bool(w.is_enabled()),
    "visible": lambda w: bool(w.is_visible()),
    "rectangle": lambda w: _rect_to_list(w.rectangle()),
    "process_id": lambda w: w.element_info.process_id,
    "framework_id": lambda w: w.element_info.framework_id,
    "rich_text": lambda w: w.element_info.rich_text,
    "handle": lambda w: w.element_info.handle,
}

_ACTIONS: Dict[str, str] = {
    "click": "click_input",
    "invoke": "invoke",
    "focus": "set_focus",
    "select": "select",
    "toggle": "toggle",
    "expand": "expand",
    "collapse": "collapse",
}


class UIABackend(ITreeBackend):
    """
    Tree collaborator over live pywinauto UIA wrappers.

    Every call is an out-of-process round trip. Failures of a stale element
    are reported as an empty node, never raised.
    """

    def __init__(self, subrole_attribute: Optional[str] = None):
        """
        @param subrole_attribute element_info field used as the subrole
        """
        self.subrole_attribute = subrole_attribute

    def attribute_names(self, handle: Any) -> List[str]:
        if _safe(lambda: handle.element_info, None) is None:
            return []
        return list(_ATTRIBUTES)

    def attribute(self, handle: Any, name: str) -> Any:
        getter = _ATTRIBUTES.get(name)
        if getter is None:
            return None
        return _safe(lambda: getter(handle), None)

    def action_names(self, handle: Any) -> List[str]:
        return [a for a, method in _ACTIONS.items() if callable(getattr(handle, method, None))]

    def perform(self, handle: Any, action: str) -> bool:
        method = _ACTIONS.get(action)
        if method is None or not callable(getattr(handle, method, None)):
            return False
        try:
            getattr(handle, method)()
            return True
        except Exception as e:
            log.debug("UIA action %s failed: %s", action, e)
            return False

    def children(self, handle: Any) -> List[Any]:
        return list(_safe(handle.children, []) or [])

    def has_children(self, handle: Any) -> bool:
        # UIA always exposes the children relation; leaves report none
        return _safe(lambda: handle.element_info, None) is not None

    def role(self, handle: Any) -> Optional[str]:
        return _safe(lambda: handle.element_info.control_type, None)

    def subrole(self, handle: Any) -> Optional[str]:
        if not self.subrole_attribute:
            return None
        value = _safe(lambda: getattr(handle.element_info, self.subrole_attribute), None)
        return str(value) if value else None

    def parent(self, handle: Any) -> Optional[Any]:
        return _safe(handle.parent, None)

    def is_element(self, value: Any) -> bool:
        return hasattr(value, "element_info") and hasattr(value, "children")


def _select_window(desktop: Any, title_re: Optional[str]) -> Any:
    windows = _safe(desktop.windows, []) or []
    visible = [w for w in windows if _safe(w.is_visible, False)]
    if not visible:
        raise RuntimeError("No visible window found on the desktop")
    if title_re:
        rx = re.compile(title_re)
        for w in visible:
            if rx.search(_safe(w.window_text, "") or ""):
                return w
        raise RuntimeError(f"No visible window matches title_re={title_re!r}")
    return visible[0]


def uia_root(
    title_re: Optional[str] = None,
    subrole_attribute: Optional[str] = None,
    registry: Optional[TypeRegistry] = None,
):
    """
    Return a Node for a top-level desktop window.

    pywinauto is imported here so the rest of the package works on
    platforms without UI Automation.
    """
    from pywinauto import Desktop

    from ..node import Node

    window = _select_window(Desktop(backend="uia"), title_re)
    log.debug("Search root window: %s", _safe(window.window_text, ""))
    return Node(window, UIABackend(subrole_attribute=subrole_attribute), registry)
