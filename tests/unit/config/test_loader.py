"""Tests for the configuration loader."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from trackmyexts.config import ConfigLoader
from trackmyexts.core import ConfigError


@pytest.fixture
def user_dir(tmp_path: Path) -> Path:
    return tmp_path / "user"


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    return tmp_path / "project"


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_defaults_when_nothing_configured(self, user_dir: Path, project_dir: Path) -> None:
        loader = ConfigLoader(user_dir, project_dir, environ={})
        config = loader.load_all()
        assert config.repo_path is None
        assert config.editor.cli == "code"

    def test_precedence(self, user_dir: Path, project_dir: Path) -> None:
        _write(user_dir / "settings.json", json.dumps({"repo_path": "/user", "editor": {"cli": "codium"}}))
        _write(project_dir / "settings.json", json.dumps({"repo_path": "/project"}))
        loader = ConfigLoader(user_dir, project_dir, environ={"TRACKMYEXTS_PUSH": "false"})

        config = loader.load_all()

        assert config.repo_path == "/project"
        assert config.editor.cli == "codium"
        assert config.sync.push is False

    def test_environment_wins(self, user_dir: Path, project_dir: Path) -> None:
        _write(project_dir / "settings.json", json.dumps({"repo_path": "/project"}))
        loader = ConfigLoader(user_dir, project_dir, environ={"TRACKMYEXTS_REPO_PATH": "/env"})
        assert loader.load_all().repo_path == "/env"

    def test_json_preferred_over_yaml(self, user_dir: Path, project_dir: Path) -> None:
        _write(user_dir / "settings.json", json.dumps({"repo_path": "/json"}))
        _write(user_dir / "settings.yaml", "repo_path: /yaml\n")
        assert ConfigLoader(user_dir, project_dir, environ={}).load_all().repo_path == "/json"

    def test_yaml_used_without_json(self, user_dir: Path, project_dir: Path) -> None:
        _write(user_dir / "settings.yaml", "sync:\n  interval_minutes: 30\n")
        config = ConfigLoader(user_dir, project_dir, environ={}).load_all()
        assert config.sync.interval_minutes == 30

    def test_corrupt_source_is_skipped(self, user_dir: Path, project_dir: Path) -> None:
        _write(user_dir / "settings.json", "{broken")
        _write(project_dir / "settings.json", json.dumps({"repo_path": "/project"}))
        config = ConfigLoader(user_dir, project_dir, environ={}).load_all()
        assert config.repo_path == "/project"

    def test_invalid_values_raise_config_error(self, user_dir: Path, project_dir: Path) -> None:
        _write(user_dir / "settings.json", json.dumps({"restore": {"history_limit": -3}}))
        with pytest.raises(ConfigError, match="validation failed"):
            ConfigLoader(user_dir, project_dir, environ={}).load_all()

    def test_config_property_is_cached(self, user_dir: Path, project_dir: Path) -> None:
        loader = ConfigLoader(user_dir, project_dir, environ={})
        assert loader.config is loader.config

    def test_merge_is_deep_and_copies(self) -> None:
        loader = ConfigLoader(environ={})
        base = {"sync": {"push": True, "interval_minutes": 0}, "repo_path": None}
        override = {"sync": {"push": False}}

        merged = loader.merge(base, override)

        assert merged == {"sync": {"push": False, "interval_minutes": 0}, "repo_path": None}
        merged["sync"]["interval_minutes"] = 5
        assert base["sync"]["interval_minutes"] == 0

    def test_load_rejects_unknown_format(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.toml"
        path.write_text("")
        with pytest.raises(ConfigError, match="Unsupported"):
            ConfigLoader(environ={}).load(path)

    def test_validate(self) -> None:
        loader = ConfigLoader(environ={})
        assert loader.validate({"editor": {"cli": "code"}}) == (True, [])
        ok, errors = loader.validate({"editor": {"cli": ""}})
        assert ok is False
        assert errors


class TestSaveUserSetting:
    """Tests for persisting settings chosen at runtime."""

    def test_creates_file(self, user_dir: Path, project_dir: Path) -> None:
        loader = ConfigLoader(user_dir, project_dir, environ={})
        path = loader.save_user_setting("repo_path", "/data/history")

        assert path == user_dir / "settings.json"
        assert json.loads(path.read_text()) == {"repo_path": "/data/history"}

    def test_preserves_existing_keys(self, user_dir: Path, project_dir: Path) -> None:
        _write(user_dir / "settings.json", json.dumps({"editor": {"cli": "codium"}}))
        loader = ConfigLoader(user_dir, project_dir, environ={})

        loader.save_user_setting("repo_path", "/repo")

        data = json.loads((user_dir / "settings.json").read_text())
        assert data == {"editor": {"cli": "codium"}, "repo_path": "/repo"}

    def test_replaces_corrupt_file(self, user_dir: Path, project_dir: Path) -> None:
        _write(user_dir / "settings.json", "{broken")
        loader = ConfigLoader(user_dir, project_dir, environ={})
        loader.save_user_setting("repo_path", "/repo")
        assert json.loads((user_dir / "settings.json").read_text()) == {"repo_path": "/repo"}

    def test_unknown_key(self, user_dir: Path, project_dir: Path) -> None:
        loader = ConfigLoader(user_dir, project_dir, environ={})
        with pytest.raises(ConfigError, match="Unknown setting"):
            loader.save_user_setting("api_key", "x")

    def test_invalid_value(self, user_dir: Path, project_dir: Path) -> None:
        loader = ConfigLoader(user_dir, project_dir, environ={})
        with pytest.raises(ConfigError, match="Invalid value"):
            loader.save_user_setting("snapshot_file", "a/b.json")
        assert not (user_dir / "settings.json").exists()

    def test_reload_after_save(self, user_dir: Path, project_dir: Path) -> None:
        loader = ConfigLoader(user_dir, project_dir, environ={})
        assert loader.config.repo_path is None

        loader.save_user_setting("repo_path", "/repo")

        assert loader.config.repo_path == "/repo"
