# tests/test_registry.py
"""
Tests for the type registry and label translation.
"""

import threading

import pytest

from uiauto_search.registry import BASE_LABEL, TypeDescriptor, TypeRegistry
from uiauto_search.translator import attribute_key, classify, is_plural, unprefix


class TestTypeRegistry:
    """Tests for lazy, inheritance-aware type registration."""

    def test_starts_with_base_only(self):
        """A new registry knows only the base type."""
        reg = TypeRegistry()
        assert reg.labels() == [BASE_LABEL]
        assert reg.exists(BASE_LABEL)
        assert not reg.exists("Button")

    def test_resolve_creates_under_base(self):
        """A role label is registered on first resolution, parented to base."""
        reg = TypeRegistry()
        button = reg.resolve("Button")
        assert button.label == "Button"
        assert button.parent == reg.base
        assert "Button" in reg

    def test_resolve_is_idempotent(self):
        """Resolving the same label twice returns the same descriptor."""
        reg = TypeRegistry()
        assert reg.resolve("Button") is reg.resolve("Button")
        assert len(reg) == 2

    def test_resolve_pair_parents_subrole_to_role(self):
        """A subrole type is a subtype of its role type."""
        reg = TypeRegistry()
        close = reg.resolve_pair("CloseButton", "Button")
        assert close.parent is reg.get("Button")
        assert close.is_a(reg.get("Button"))
        assert close.is_a(reg.base)

    def test_resolve_pair_existing_subrole_wins(self):
        """An already known subrole is returned without touching the role."""
        reg = TypeRegistry()
        first = reg.resolve_pair("CloseButton", "Button")
        again = reg.resolve_pair("CloseButton", "Window")
        assert again is first
        assert not reg.exists("Window")

    def test_resolve_pair_same_label(self):
        """A subrole equal to its role does not create a self-parented type."""
        reg = TypeRegistry()
        t = reg.resolve_pair("Button", "Button")
        assert t.parent == reg.base

    def test_is_a_is_not_symmetric(self):
        """A supertype is not a subtype of its subtype."""
        reg = TypeRegistry()
        close = reg.resolve_pair("CloseButton", "Button")
        button = reg.get("Button")
        assert close.is_a(button)
        assert not button.is_a(close)

    def test_ancestry(self):
        """Ancestry runs from the type up to the base."""
        reg = TypeRegistry()
        close = reg.resolve_pair("CloseButton", "Button")
        assert [t.label for t in close.ancestry()] == ["CloseButton", "Button", BASE_LABEL]

    def test_registries_are_independent(self):
        """Types registered in one registry are invisible to another."""
        a, b = TypeRegistry(), TypeRegistry()
        a.resolve("Button")
        assert not b.exists("Button")

    def test_concurrent_creation_shares_descriptor(self):
        """Threads racing on a new label end up with one descriptor."""
        reg = TypeRegistry()
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(reg.resolve_pair("CloseButton", "Button"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len({id(r) for r in results}) == 1
        assert len(reg) == 3

    def test_descriptor_str(self):
        assert str(TypeDescriptor("Row")) == "Row"


class TestTranslator:
    """Tests for label and token translation."""

    @pytest.mark.parametrize("token,expected", [
        ("Button", "Button"),
        ("button", "Button"),
        ("buttons", "Button"),
        ("text_field", "TextField"),
        ("text_fields", "TextField"),
        ("TextField", "TextField"),
        ("AXButton", "Button"),
        ("rows", "Row"),
    ])
    def test_classify(self, token, expected):
        assert classify(token) == expected

    def test_unprefix(self):
        """Platform prefixes and whitespace are stripped."""
        assert unprefix("AXButton") == "Button"
        assert unprefix("MCAXDiagram") == "Diagram"
        assert unprefix("Button") == "Button"
        assert unprefix("Push Button") == "PushButton"

    def test_is_plural(self):
        assert is_plural("buttons")
        assert is_plural("text_fields")
        assert not is_plural("button")
        assert not is_plural("Window")

    def test_attribute_key(self):
        assert attribute_key("AXTitle") == "title"
        assert attribute_key("AXTitleUIElement") == "title_ui_element"
