# tests/test_repository.py
"""
Tests for the YAML query map.
"""

import re
import textwrap

import pytest

from uiauto_search.config import SearchConfig, get_config, set_config
from uiauto_search.exceptions import ConfigError
from uiauto_search.repository import QueryRepository, compile_yaml_filters
from uiauto_search.search import Cardinality, find
from uiauto_search.searchlogger import SEARCH_LOGGER

QUERIES_YAML = textwrap.dedent("""
    settings:
      debug: true
    queries:
      main_window:
        type: Window
        filters:
          title: Main
      save_button:
        type: Button
        filters:
          title: Save
        within: main_window
      all_buttons:
        type: Button
        cardinality: all
      price_table:
        type: Table
        filters:
          static_text:
            value_re: "^Tot"
        within: main_window
      checked:
        type: CheckBox
        filters:
          value: true
          title_re: "^Bo"
        cardinality: all
""")


@pytest.fixture
def repo(tmp_path):
    path = tmp_path / "queries.yaml"
    path.write_text(QUERIES_YAML, encoding="utf-8")
    return QueryRepository.load(str(path))


class TestCompileFilters:
    """Tests for YAML filter translation."""

    def test_regex_suffix(self):
        out = compile_yaml_filters({"title_re": "^Sa", "value": "x"})
        assert out["title"].pattern == "^Sa"
        assert isinstance(out["title"], re.Pattern)
        assert out["value"] == "x"

    def test_nested(self):
        out = compile_yaml_filters({"row": {"title_re": "Price"}})
        assert out["row"]["title"].pattern == "Price"

    def test_bad_regex(self):
        with pytest.raises(ConfigError):
            compile_yaml_filters({"title_re": "("})


class TestQueryRepository:
    """Tests for loading and running named queries."""

    def test_list_queries(self, repo):
        assert repo.list_queries() == ["all_buttons", "checked", "main_window", "price_table", "save_button"]

    def test_settings(self, repo):
        assert repo.settings.debug is True

    def test_cardinality(self, repo):
        assert repo.cardinality("all_buttons") is Cardinality.ALL
        assert repo.cardinality("save_button") is Cardinality.ONE

    def test_qualifier_description(self, repo):
        assert repo.qualifier("price_table").describe() == "Table(static_text(value: /^Tot/))"

    def test_run_single(self, app, repo):
        assert repo.run(app, "save_button").attribute("title") == "Save"

    def test_run_all(self, app, repo):
        found = repo.run(app, "all_buttons")
        assert [n.attribute("title") for n in found] == ["Close", "Save", "Open"]

    def test_run_nested_filter(self, app, repo):
        assert repo.run(app, "price_table").attribute("title") == "Prices"

    def test_run_bool_and_regex(self, app, repo):
        found = repo.run(app, "checked")
        assert [n.attribute("title") for n in found] == ["Boolean"]

    def test_settings_apply_during_run_only(self, app, repo, monkeypatch):
        import uiauto_search.repository as repository

        seen = []
        real = repository.search

        def spy(*args, **kwargs):
            seen.append(get_config().debug)
            return real(*args, **kwargs)

        monkeypatch.setattr(repository, "search", spy)
        repo.run(app, "main_window")
        assert seen == [True]
        assert get_config().debug is False

    def test_active_config_kept_without_settings(self, scenario, monkeypatch):
        import uiauto_search.repository as repository

        set_config(SearchConfig(debug=True, capture_artifacts=True, artifacts_dir="out"))
        seen = []
        real = repository.search

        def spy(*args, **kwargs):
            seen.append(get_config())
            return real(*args, **kwargs)

        monkeypatch.setattr(repository, "search", spy)
        repo = QueryRepository({"queries": {"b": {"type": "Button"}}})
        repo.run(scenario, "b")
        assert seen[0].debug is True
        assert seen[0].capture_artifacts is True
        assert seen[0].artifacts_dir == "out"

    def test_declared_settings_layer_on_active_config(self, scenario, monkeypatch):
        import uiauto_search.repository as repository

        set_config(SearchConfig(capture_artifacts=True))
        seen = []
        real = repository.search

        def spy(*args, **kwargs):
            seen.append(get_config())
            return real(*args, **kwargs)

        monkeypatch.setattr(repository, "search", spy)
        repo = QueryRepository({"settings": {"debug": True}, "queries": {"b": {"type": "Button"}}})
        repo.run(scenario, "b")
        assert seen[0].debug is True
        assert seen[0].capture_artifacts is True

    def test_log_searches_ends_with_run(self, scenario, capsys):
        repo = QueryRepository({"settings": {"log_searches": True}, "queries": {"b": {"type": "Button"}}})
        repo.run(scenario, "b")
        assert "done query=Button" in capsys.readouterr().out
        assert get_config().log_searches is False
        assert not SEARCH_LOGGER.is_enabled()
        find(scenario, "Button")
        assert capsys.readouterr().out == ""

    def test_within_missing_returns_empty(self, scenario, repo):
        assert repo.run(scenario, "save_button") is None

    def test_unknown_query(self, repo, app):
        with pytest.raises(ConfigError):
            repo.run(app, "nope")


class TestValidation:
    """Tests for schema and reference validation."""

    def test_schema_violation(self):
        with pytest.raises(ConfigError) as exc_info:
            QueryRepository({"queries": {"x": {"filters": {}}}})
        assert "schema validation failed" in str(exc_info.value)
        assert "'type' is a required property" in str(exc_info.value)

    def test_bad_cardinality(self):
        with pytest.raises(ConfigError):
            QueryRepository({"queries": {"x": {"type": "Button", "cardinality": "many"}}})

    def test_unknown_settings_key(self):
        with pytest.raises(ConfigError):
            QueryRepository({"settings": {"speed": 1}, "queries": {}})

    def test_unknown_within(self):
        with pytest.raises(ConfigError) as exc_info:
            QueryRepository({"queries": {"x": {"type": "Button", "within": "ghost"}}})
        assert "ghost" in str(exc_info.value)

    def test_within_cycle(self):
        with pytest.raises(ConfigError) as exc_info:
            QueryRepository({"queries": {
                "a": {"type": "Window", "within": "b"},
                "b": {"type": "Window", "within": "a"},
            }})
        assert "cycle" in str(exc_info.value)

    def test_within_plural_rejected(self):
        with pytest.raises(ConfigError):
            QueryRepository({"queries": {
                "windows": {"type": "Window", "cardinality": "all"},
                "x": {"type": "Button", "within": "windows"},
            }})
