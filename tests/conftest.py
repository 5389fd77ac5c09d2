# tests/conftest.py
"""
Shared fixtures: static trees over a fresh type registry per test.
"""

import pytest

from uiauto_search.backends.static import StaticTreeBackend, build_tree
from uiauto_search.config import SearchConfig, set_config
from uiauto_search.node import Node
from uiauto_search.registry import TypeRegistry
from uiauto_search.searchlogger import SEARCH_LOGGER
from uiauto_search.stats import STATS

# Application
#   Button A
#   Button B
#   Window C
#     Button D
SCENARIO_TREE = {
    "role": "Application",
    "attributes": {"title": "App"},
    "children": [
        {"role": "Button", "attributes": {"title": "A"}},
        {"role": "Button", "attributes": {"title": "B"}},
        {
            "role": "Window",
            "attributes": {"title": "C"},
            "children": [
                {"role": "Button", "attributes": {"title": "D"}},
            ],
        },
    ],
}

APP_TREE = {
    "role": "AXApplication",
    "attributes": {"title": "Demo"},
    "children": [
        {
            "role": "AXWindow",
            "subrole": "AXStandardWindow",
            "attributes": {"title": "Main", "focused": True},
            "children": [
                {
                    "role": "AXToolbar",
                    "children": [
                        {
                            "role": "AXButton",
                            "attributes": {"title": "Save", "enabled": True},
                            "actions": ["press"],
                        },
                        {
                            "role": "AXButton",
                            "attributes": {"title": "Open", "enabled": False},
                            "actions": ["press"],
                        },
                    ],
                },
                {
                    "role": "AXTable",
                    "attributes": {"title": "Prices"},
                    "children": [
                        {
                            "role": "AXRow",
                            "attributes": {"index": 0},
                            "children": [
                                {"role": "AXStaticText", "attributes": {"value": "Price", "title": "Price"}},
                            ],
                        },
                        {
                            "role": "AXRow",
                            "attributes": {"index": 1},
                            "children": [
                                {"role": "AXStaticText", "attributes": {"value": "Total", "title": "Total"}},
                            ],
                        },
                    ],
                },
                {
                    "id": "label",
                    "role": "AXStaticText",
                    "attributes": {"value": "Name:"},
                },
                {
                    "role": "AXTextField",
                    "attributes": {
                        "value": "hello",
                        "placeholder": None,
                        "title_ui_element": {"$ref": "label"},
                    },
                    "parameterized": {
                        "string_for_range": {"0,3": "hel", "1,2": "el"},
                    },
                },
                {"role": "AXCheckBox", "attributes": {"title": "Numeric", "value": 1}},
                {"role": "AXCheckBox", "attributes": {"title": "Boolean", "value": True}},
                {
                    "role": "AXButton",
                    "subrole": "AXCloseButton",
                    "attributes": {"title": "Close", "enabled": True},
                    "actions": ["press"],
                },
            ],
        },
        {
            "role": "AXWindow",
            "subrole": "AXDialog",
            "attributes": {"title": "Preferences"},
            "children": [],
        },
    ],
}


@pytest.fixture(autouse=True)
def _isolated_state():
    """Reset process-wide config, logger and statistics around each test."""
    set_config(SearchConfig())
    SEARCH_LOGGER.disable()
    SEARCH_LOGGER.configure()
    STATS.reset()
    yield
    set_config(None)
    SEARCH_LOGGER.disable()
    SEARCH_LOGGER.configure()
    STATS.reset()


@pytest.fixture
def registry():
    return TypeRegistry()


@pytest.fixture
def backend():
    return StaticTreeBackend()


@pytest.fixture
def scenario(registry, backend):
    """Root of the A/B/C/D tree."""
    return Node(build_tree(SCENARIO_TREE), backend, registry)


@pytest.fixture
def app(registry, backend):
    """Root of the richer application tree."""
    return Node(build_tree(APP_TREE), backend, registry)
