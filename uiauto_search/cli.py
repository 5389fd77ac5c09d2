# uiauto_search/cli.py
"""
@file cli.py
@brief Command-line interface for uiauto-search.
"""

from __future__ import annotations

import argparse
import json
import os
import re
import sys
from typing import Any, Dict, List, Optional

import yaml

from .config import from_env, load_config, set_config
from .debug import graph_subtree, text_subtree
from .exceptions import ConfigError, UIAutoError
from .node import Node, NodeList
from .qualifier import Qualifier
from .repository import QueryRepository
from .search import Cardinality, search
from .searchlogger import SEARCH_LOGGER
from .snapshot import write_snapshot
from .stats import STATS

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NO_MATCH = 2

_YAML11_WORDS = {"yes", "no", "on", "off", "y", "n"}


def _configure_search_logger_from_env() -> None:
    """Configure search logging from environment variables."""
    enabled = os.getenv("UIAUTO_SEARCH_LOGGING", "").lower() in {"1", "true", "yes", "on"}
    if not enabled:
        SEARCH_LOGGER.disable()
        return

    log_file = os.getenv("UIAUTO_SEARCH_LOG_FILE")
    # INFO drops per-match lines and keeps start/done
    level = os.getenv("UIAUTO_SEARCH_LOG_LEVEL", "DEBUG")
    SEARCH_LOGGER.configure(console=True, file_path=log_file, level=level)
    SEARCH_LOGGER.enable()


def _parse_pairs(pairs: Optional[List[str]], what: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for item in pairs or []:
        if "=" not in item:
            raise ConfigError(f"Invalid {what} format: {item}. Expected KEY=VALUE")
        key, value = item.split("=", 1)
        out[key.strip()] = value
    return out


def _scalar(raw: str) -> Any:
    # YAML 1.1 would turn a "Yes" title into True
    if raw.lower() in _YAML11_WORDS:
        return raw
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    if value is None or isinstance(value, (bool, int, float)):
        return value if raw else raw
    return raw


def build_filters(filter_pairs: Optional[List[str]], regex_pairs: Optional[List[str]]) -> Dict[str, Any]:
    """
    ``--filter enabled=true`` values are read as YAML scalars (so ``true``
    is a boolean and ``3`` an int); ``--regex title=^Sa`` compiles a regex.
    """
    filters: Dict[str, Any] = {}
    for key, raw in _parse_pairs(filter_pairs, "--filter").items():
        filters[key] = _scalar(raw)
    for key, pattern in _parse_pairs(regex_pairs, "--regex").items():
        try:
            filters[key] = re.compile(pattern)
        except re.error as e:
            raise ConfigError(f"Invalid regex for {key}: {e}") from e
    return filters


def _load_root(args: argparse.Namespace) -> Node:
    if getattr(args, "uia", False):
        from .backends.uia import uia_root
        return uia_root(title_re=args.title_re, subrole_attribute=args.subrole_attribute)
    if not getattr(args, "snapshot", None):
        raise ConfigError("one of --snapshot or --uia is required")
    from .backends.static import load_snapshot
    return load_snapshot(args.snapshot)


def _add_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--snapshot", default=None, help="Path to a YAML/JSON tree snapshot")
    p.add_argument("--uia", action="store_true", help="Search the live desktop through pywinauto UIA")
    p.add_argument("--title-re", default=None, help="With --uia: top-level window title regex")
    p.add_argument("--subrole-attribute", default=None, help="With --uia: element_info field used as subrole (e.g. class_name)")


def _emit_result(result: Any, description: str) -> int:
    if isinstance(result, NodeList):
        matches = [repr(n) for n in result]
    else:
        matches = [repr(result)] if result is not None else []
    print(json.dumps({
        "status": "ok" if matches else "no_match",
        "query": description,
        "count": len(matches),
        "matches": matches,
    }, indent=2, ensure_ascii=False))
    return EXIT_OK if matches else EXIT_NO_MATCH


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    argv = argv if argv is not None else sys.argv[1:]

    p = argparse.ArgumentParser(
        prog="uiauto-search",
        description="uiauto-search - accessibility tree search",
    )
    p.add_argument("--config", default=None, help="YAML file with a settings: block")
    p.add_argument("--stats", action="store_true", help="Print tree call statistics to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    # -------------------------
    # find
    # -------------------------
    findp = sub.add_parser("find", help="Search descendants of the root by type and filters")
    _add_source_args(findp)
    findp.add_argument("--type", "-t", required=True, help="Type token, e.g. Button or text_field")
    findp.add_argument("--filter", "-f", action="append", help="Equality filter KEY=VALUE (repeatable)")
    findp.add_argument("--regex", "-r", action="append", help="Regex filter KEY=PATTERN (repeatable)")
    findp.add_argument("--all", action="store_true", help="Return every match instead of the first")

    # -------------------------
    # query
    # -------------------------
    queryp = sub.add_parser("query", help="Run a named query from a queries.yaml map")
    _add_source_args(queryp)
    queryp.add_argument("--queries", "-q", required=True, help="Path to queries.yaml")
    queryp.add_argument("name", help="Query name")

    listp = sub.add_parser("list-queries", help="List queries defined in a queries.yaml map")
    listp.add_argument("--queries", "-q", required=True, help="Path to queries.yaml")

    # -------------------------
    # dump / graph / snapshot
    # -------------------------
    dumpp = sub.add_parser("dump", help="Print an indented text dump of the tree")
    _add_source_args(dumpp)
    dumpp.add_argument("--max-depth", type=int, default=None, help="Deepest level to print")

    graphp = sub.add_parser("graph", help="Print a Graphviz DOT graph of the tree")
    _add_source_args(graphp)
    graphp.add_argument("--out", "-o", default=None, help="Write DOT to this file instead of stdout")

    snapp = sub.add_parser("snapshot", help="Save the tree as a YAML/JSON snapshot")
    _add_source_args(snapp)
    snapp.add_argument("--out", "-o", required=True, help="Output path (.json for JSON, YAML otherwise)")
    snapp.add_argument("--max-depth", type=int, default=None, help="Deepest level to save")

    args = p.parse_args(argv)

    try:
        cfg = load_config(args.config) if args.config else None
        set_config(from_env(cfg))
        _configure_search_logger_from_env()

        if args.cmd == "list-queries":
            repo = QueryRepository.load(args.queries)
            names = repo.list_queries()
            print(f"Queries ({len(names)}):")
            for name in names:
                spec = repo.get_query_spec(name)
                print(f"  - {name}: {repo.qualifier(name).describe()} [{repo.cardinality(name).value}]"
                      + (f" within {spec['within']}" if spec.get("within") else ""))
            return EXIT_OK

        root = _load_root(args)

        if args.cmd == "find":
            filters = build_filters(args.filter, args.regex)
            cardinality = Cardinality.ALL if args.all else Cardinality.ONE
            result = search(root, args.type, filters, cardinality=cardinality)
            return _emit_result(result, Qualifier(args.type, filters).describe())

        if args.cmd == "query":
            repo = QueryRepository.load(args.queries)
            result = repo.run(root, args.name)
            return _emit_result(result, repo.qualifier(args.name).describe())

        if args.cmd == "dump":
            sys.stdout.write(text_subtree(root, max_depth=args.max_depth))
            return EXIT_OK

        if args.cmd == "graph":
            dot = graph_subtree(root)
            if args.out:
                with open(args.out, "w", encoding="utf-8") as f:
                    f.write(dot)
                print(json.dumps({"status": "ok", "outputs": {"graph": os.path.abspath(args.out)}}, indent=2))
            else:
                sys.stdout.write(dot)
            return EXIT_OK

        if args.cmd == "snapshot":
            path = write_snapshot(root, args.out, max_depth=args.max_depth)
            print(json.dumps({"status": "ok", "outputs": {"snapshot": path}}, indent=2))
            return EXIT_OK

    except (UIAutoError, RuntimeError, ImportError, OSError) as e:
        print(json.dumps({
            "status": "error",
            "error": f"{type(e).__name__}: {e}",
        }, indent=2), file=sys.stderr)
        return EXIT_ERROR
    finally:
        if args.stats:
            print(STATS, file=sys.stderr)

    return EXIT_ERROR
