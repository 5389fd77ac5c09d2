"""
uiauto-search: type-aware search over live accessibility trees.

Example:
    from uiauto_search import Cardinality
    from uiauto_search.backends import uia_root

    window = uia_root(title_re="Calculator")
    window.find("Button", {"title": "Equals"})
    window.search("buttons", cardinality=Cardinality.ALL)
"""

from .config import SearchConfig, get_config, load_config, set_config, use_config
from .enumerators import BreadthFirst, DepthFirst
from .exceptions import ConfigError, InvalidTreeError, MemberNotFoundError, SearchFailure, UIAutoError
from .interfaces import ITreeBackend
from .node import Member, MemberKind, Node, NodeList
from .qualifier import Qualifier
from .registry import REGISTRY, TypeDescriptor, TypeRegistry
from .repository import QueryRepository
from .search import Cardinality, ancestor, find, find_all, search
from .searchlogger import SEARCH_LOGGER
from .stats import STATS

__all__ = [
    "SearchConfig",
    "get_config",
    "load_config",
    "set_config",
    "use_config",
    "BreadthFirst",
    "DepthFirst",
    "ConfigError",
    "InvalidTreeError",
    "MemberNotFoundError",
    "SearchFailure",
    "UIAutoError",
    "ITreeBackend",
    "Member",
    "MemberKind",
    "Node",
    "NodeList",
    "Qualifier",
    "REGISTRY",
    "TypeDescriptor",
    "TypeRegistry",
    "QueryRepository",
    "Cardinality",
    "ancestor",
    "find",
    "find_all",
    "search",
    "SEARCH_LOGGER",
    "STATS",
]
