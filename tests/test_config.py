# tests/test_config.py
"""
Tests for search settings: YAML loading, environment and overrides.
"""

import threading

import pytest

from uiauto_search.config import (
    SearchConfig,
    from_env,
    get_config,
    load_config,
    parse_settings,
    set_config,
    use_config,
)
from uiauto_search.exceptions import ConfigError


class TestSearchConfig:
    """Tests for the settings dataclass."""

    def test_defaults(self):
        cfg = SearchConfig()
        assert cfg.debug is False
        assert cfg.artifacts_dir == "artifacts"
        assert cfg.capture_artifacts is False
        assert cfg.dump_max_depth is None

    def test_with_overrides(self):
        cfg = SearchConfig().with_overrides(debug=True)
        assert cfg.debug is True
        assert SearchConfig().debug is False

    def test_unknown_override(self):
        with pytest.raises(ConfigError):
            SearchConfig().with_overrides(verbose=True)

    def test_to_dict(self):
        assert SearchConfig().to_dict()["artifacts_dir"] == "artifacts"


class TestLoading:
    """Tests for reading settings from YAML."""

    def test_parse_settings(self):
        cfg = parse_settings({"debug": True, "dump_max_depth": "3"})
        assert cfg.debug is True
        assert cfg.dump_max_depth == 3

    def test_parse_settings_unknown_key(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_settings({"timeout": 3})
        assert "timeout" in str(exc_info.value)

    def test_load_config(self, tmp_path):
        path = tmp_path / "queries.yaml"
        path.write_text("settings:\n  debug: true\n  artifacts_dir: out\nqueries: {}\n", encoding="utf-8")
        cfg = load_config(str(path))
        assert cfg.debug is True
        assert cfg.artifacts_dir == "out"

    def test_load_config_without_settings(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(str(path)) == SearchConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("settings: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(str(path))


class TestEnvironment:
    """Tests for UIAUTO_SEARCH_* variables."""

    def test_debug(self, monkeypatch):
        monkeypatch.setenv("UIAUTO_SEARCH_DEBUG", "true")
        assert from_env().debug is True

    def test_artifacts_dir_enables_capture(self, monkeypatch, tmp_path):
        monkeypatch.setenv("UIAUTO_SEARCH_ARTIFACTS_DIR", str(tmp_path))
        cfg = from_env()
        assert cfg.artifacts_dir == str(tmp_path)
        assert cfg.capture_artifacts is True

    def test_base_is_kept(self, monkeypatch):
        monkeypatch.delenv("UIAUTO_SEARCH_DEBUG", raising=False)
        monkeypatch.delenv("UIAUTO_SEARCH_ARTIFACTS_DIR", raising=False)
        monkeypatch.delenv("UIAUTO_SEARCH_LOGGING", raising=False)
        base = SearchConfig(dump_max_depth=2)
        assert from_env(base) == base

    def test_default_reads_environment(self, monkeypatch):
        monkeypatch.setenv("UIAUTO_SEARCH_DEBUG", "1")
        set_config(None)
        assert get_config().debug is True


class TestOverrides:
    """Tests for process default and per-thread overrides."""

    def test_set_config(self):
        set_config(SearchConfig(debug=True))
        assert get_config().debug is True

    def test_use_config_restores(self):
        with use_config(debug=True) as cfg:
            assert cfg.debug is True
            assert get_config() is cfg
        assert get_config().debug is False

    def test_use_config_nested(self):
        with use_config(debug=True):
            with use_config(dump_max_depth=2):
                cfg = get_config()
                assert cfg.debug is True
                assert cfg.dump_max_depth == 2
            assert get_config().dump_max_depth is None

    def test_override_is_per_thread(self):
        seen = []
        with use_config(debug=True):
            t = threading.Thread(target=lambda: seen.append(get_config().debug))
            t.start()
            t.join()
        assert seen == [False]
