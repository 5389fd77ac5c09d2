# uiauto_search/translator.py
"""
Translation rules between platform labels and search tokens.

    classify("text_field")       -> "TextField"
    classify("buttons")          -> "Button"
    unprefix("AXButton")         -> "Button"
    attribute_key("AXTitleUIElement") -> "title_ui_element"
"""

from __future__ import annotations

import re
from functools import lru_cache

import inflection

# Segments kept upper case when a token is camelized.
ACRONYMS = {"UI", "RTF", "URL", "ID"}

_PREFIX = re.compile(r"^[A-Z]*?AX(?=[A-Z])|\s+")


@lru_cache(maxsize=1024)
def unprefix(label: str) -> str:
    """Strip the platform namespace prefix (``AX``, ``MCAX``) from a label."""
    return _PREFIX.sub("", label)


@lru_cache(maxsize=1024)
def singularize(token: str) -> str:
    return inflection.singularize(token)


@lru_cache(maxsize=1024)
def is_plural(token: str) -> bool:
    """
    Grammatical-number test used by the deprecated implicit cardinality.

    A token is plural when singularizing it changes it.
    """
    return singularize(token) != token


@lru_cache(maxsize=1024)
def classify(token: str) -> str:
    """Turn a search token into a type label: singular, CamelCase."""
    token = unprefix(str(token))
    singular = singularize(token)
    if "_" not in singular and singular[:1].isupper():
        return singular
    words = [w for w in inflection.underscore(singular).split("_") if w]
    return "".join(w.upper() if w.upper() in ACRONYMS else w.capitalize() for w in words)


@lru_cache(maxsize=4096)
def attribute_key(name: str) -> str:
    """Turn a native CamelCase attribute name into a snake_case key."""
    return inflection.underscore(unprefix(name))
