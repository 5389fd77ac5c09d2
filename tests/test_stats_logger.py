# tests/test_stats_logger.py
"""
Tests for call statistics and the search event logger.
"""

import pytest

from uiauto_search.exceptions import ConfigError
from uiauto_search.search import find_all
from uiauto_search.searchlogger import SearchLogger
from uiauto_search.stats import STATS, CallStatistics


class TestCallStatistics:
    """Tests for collaborator call counters."""

    def test_increment_and_reset(self):
        stats = CallStatistics()
        stats.increment("children")
        stats.increment("children", 2)
        assert stats.get("children") == 3
        assert stats.total() == 3
        stats.reset()
        assert stats.snapshot() == {}

    def test_table(self):
        stats = CallStatistics()
        stats.increment("attribute", 12)
        stats.increment("children", 3)
        lines = str(stats).splitlines()
        assert lines[1] == "# Tree Call Statistics #"
        assert lines[3] == "attribute....12"
        assert lines[4] == "children......3"

    def test_nodes_count_calls(self, scenario):
        find_all(scenario, "Button")
        assert STATS.get("children") == 2
        assert STATS.get("role") == 4


class TestSearchLogger:
    """Tests for the search event lines."""

    def test_disabled_by_default(self, capsys):
        logger = SearchLogger()
        logger.search_started('Button(title: "Save")', "one")
        assert capsys.readouterr().out == ""

    def test_done_line(self, capsys):
        logger = SearchLogger()
        logger.enable()
        logger.search_finished("Button", visited=14, matches=0, elapsed_ms=3.1204)
        line = capsys.readouterr().out.strip()
        assert line.startswith("[warn] [search] ")
        assert line.endswith(" done query=Button visited=14 matches=0 elapsed_ms=3.120")

    def test_match_line_counts_matches(self, capsys):
        logger = SearchLogger()
        logger.enable()
        logger.search_matched("Row", "Row", 2)
        assert capsys.readouterr().out.strip().endswith("match query=Row type=Row match=2")

    def test_info_level_drops_match_lines(self, capsys):
        logger = SearchLogger()
        logger.configure(level="info")
        logger.enable()
        assert not logger.wants("search_match")
        logger.search_started("Row", "all")
        logger.search_matched("Row", "Row", 1)
        logger.search_finished("Row", visited=3, matches=1, elapsed_ms=0.5)
        lines = capsys.readouterr().out.splitlines()
        assert [line.split(" ")[3] for line in lines] == ["start", "done"]

    def test_unknown_level(self):
        with pytest.raises(ConfigError):
            SearchLogger().configure(level="chatty")

    def test_forced_writes_while_disabled(self, capsys):
        logger = SearchLogger()
        logger.search_started("Row", "one", forced=True)
        assert "start query=Row cardinality=one" in capsys.readouterr().out
        assert not logger.is_enabled()

    def test_file_output(self, tmp_path, capsys):
        path = tmp_path / "logs" / "search.log"
        logger = SearchLogger()
        logger.configure(console=False, file_path=str(path))
        logger.enable()
        logger.search_started("Row", "all")
        assert capsys.readouterr().out == ""
        assert "start query=Row cardinality=all" in path.read_text(encoding="utf-8")
