"""Tests for configuration sources."""

from __future__ import annotations

from pathlib import Path

import pytest

from trackmyexts.config.sources import EnvironmentSource, JsonFileSource, YamlFileSource
from trackmyexts.core import ConfigError


class TestJsonFileSource:
    """Tests for JsonFileSource."""

    def test_load_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text('{"repo_path": "/repo", "sync": {"push": false}}')
        assert JsonFileSource(path).load() == {"repo_path": "/repo", "sync": {"push": False}}

    def test_missing_file(self, tmp_path: Path) -> None:
        source = JsonFileSource(tmp_path / "nope.json")
        assert source.exists() is False
        assert source.load() == {}

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text("  \n")
        assert JsonFileSource(path).load() == {}

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            JsonFileSource(path).load()

    def test_non_object_root(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError, match="must be object"):
            JsonFileSource(path).load()


class TestYamlFileSource:
    """Tests for YamlFileSource."""

    def test_load_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("repo_path: /repo\neditor:\n  cli: codium\n")
        assert YamlFileSource(path).load() == {"repo_path": "/repo", "editor": {"cli": "codium"}}

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("")
        assert YamlFileSource(path).load() == {}

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("key: [unclosed")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            YamlFileSource(path).load()

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="must be mapping"):
            YamlFileSource(path).load()


class TestEnvironmentSource:
    """Tests for EnvironmentSource."""

    def test_empty_environment(self) -> None:
        assert EnvironmentSource({}).load() == {}

    def test_top_level_and_nested(self) -> None:
        source = EnvironmentSource(
            {
                "TRACKMYEXTS_REPO_PATH": "/repo",
                "TRACKMYEXTS_EDITOR_CLI": "codium",
                "TRACKMYEXTS_EDITOR_FALLBACK_CLI": "code-insiders",
            }
        )
        assert source.load() == {
            "repo_path": "/repo",
            "editor": {"cli": "codium", "fallback_cli": "code-insiders"},
        }

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("true", True), ("1", True), ("YES", True), ("false", False), ("0", False)],
    )
    def test_boolean_conversion(self, raw: str, expected: bool) -> None:
        config = EnvironmentSource({"TRACKMYEXTS_PUSH": raw}).load()
        assert config["sync"]["push"] is expected

    def test_float_conversion(self) -> None:
        config = EnvironmentSource({"TRACKMYEXTS_SYNC_INTERVAL": "15"}).load()
        assert config["sync"]["interval_minutes"] == 15.0

    def test_invalid_float_kept_as_string(self) -> None:
        config = EnvironmentSource({"TRACKMYEXTS_SYNC_INTERVAL": "often"}).load()
        assert config["sync"]["interval_minutes"] == "often"

    def test_unrelated_variables_ignored(self) -> None:
        assert EnvironmentSource({"PATH": "/usr/bin", "TRACKMYEXTS_OTHER": "x"}).load() == {}
