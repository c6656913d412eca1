"""Configuration loader for TrackMyExts.

This module implements the ConfigLoader class that handles hierarchical
configuration loading, merging, validation, and persisting settings
chosen interactively (the repository path).
"""

from __future__ import annotations

import copy
import json
import threading
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from trackmyexts.config.models import TrackMyExtsConfig
from trackmyexts.config.sources import (
    EnvironmentSource,
    IConfigSource,
    JsonFileSource,
    YamlFileSource,
)
from trackmyexts.core import ConfigError, IConfigLoader, get_logger
from trackmyexts.core.constants import (
    PROJECT_CONFIG_DIRNAME,
    SETTINGS_FILENAME,
    SETTINGS_YAML_FILENAME,
    USER_CONFIG_DIRNAME,
)

logger = get_logger("config.loader")


class ConfigLoader(IConfigLoader):
    """Configuration loader with hierarchical merging.

    Load order (later overrides earlier):
    1. Defaults (from TrackMyExtsConfig)
    2. User settings (~/.trackmyexts/settings.json or .yaml)
    3. Project settings (./.trackmyexts/settings.json or .yaml)
    4. Environment variables (TRACKMYEXTS_*)
    """

    def __init__(
        self,
        user_dir: Path | None = None,
        project_dir: Path | None = None,
        environ: dict[str, str] | None = None,
    ) -> None:
        """Initialize configuration loader.

        Args:
            user_dir: User configuration directory. Defaults to ~/.trackmyexts
            project_dir: Project configuration directory. Defaults to ./.trackmyexts
            environ: Environment mapping. Defaults to os.environ.
        """
        self._user_dir = user_dir or Path.home() / USER_CONFIG_DIRNAME
        self._project_dir = project_dir or Path.cwd() / PROJECT_CONFIG_DIRNAME
        self._environ = environ
        self._config: TrackMyExtsConfig | None = None
        self._lock = threading.Lock()

    @property
    def config(self) -> TrackMyExtsConfig:
        """Get current configuration, loading if necessary."""
        with self._lock:
            if self._config is None:
                self._config = self.load_all()
            return self._config

    @property
    def user_dir(self) -> Path:
        """Get user configuration directory."""
        return self._user_dir

    @property
    def project_dir(self) -> Path:
        """Get project configuration directory."""
        return self._project_dir

    @property
    def user_settings_file(self) -> Path:
        """Get the user JSON settings file (written by save_user_setting)."""
        return self._user_dir / SETTINGS_FILENAME

    def load_all(self) -> TrackMyExtsConfig:
        """Load and merge all configuration sources.

        Returns:
            Validated TrackMyExtsConfig with all sources merged.

        Raises:
            ConfigError: If the merged configuration fails validation.
        """
        config: dict[str, Any] = TrackMyExtsConfig().model_dump()

        for directory in (self._user_dir, self._project_dir):
            json_file = directory / SETTINGS_FILENAME
            yaml_file = directory / SETTINGS_YAML_FILENAME
            if json_file.exists():
                config = self._load_and_merge(config, JsonFileSource(json_file))
            elif yaml_file.exists():
                config = self._load_and_merge(config, YamlFileSource(yaml_file))

        config = self._load_and_merge(config, EnvironmentSource(self._environ))

        try:
            return TrackMyExtsConfig.model_validate(config)
        except ValidationError as e:
            logger.error("Configuration validation failed: %s", e)
            raise ConfigError(f"Configuration validation failed: {e}") from e

    def _load_and_merge(
        self,
        base: dict[str, Any],
        source: IConfigSource,
    ) -> dict[str, Any]:
        """Load from source and merge into base config.

        A source that cannot be parsed is skipped; the base is returned.
        """
        try:
            if source.exists():
                override = source.load()
                if override:
                    logger.debug("Loaded config from %s", source)
                    return self.merge(base, override)
        except ConfigError as e:
            logger.warning("Skipped config source %s: %s", source, e)
        except FileNotFoundError:
            logger.debug("Config source %s disappeared before load", source)
        return base

    def load(self, path: Path) -> dict[str, Any]:
        """Load single configuration file.

        Raises:
            ConfigError: If file format is not supported or file is invalid.
        """
        suffix = path.suffix.lower()
        if suffix == ".json":
            return JsonFileSource(path).load()
        elif suffix in (".yaml", ".yml"):
            return YamlFileSource(path).load()
        else:
            raise ConfigError(f"Unsupported configuration format: {suffix}")

    def merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two configuration dictionaries.

        Nested dictionaries are merged recursively, other values are
        replaced. The result shares no references with the inputs.
        """
        result = copy.deepcopy(base)

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self.merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)

        return result

    def validate(self, config: dict[str, Any]) -> tuple[bool, list[str]]:
        """Validate configuration against schema."""
        try:
            TrackMyExtsConfig.model_validate(config)
            return True, []
        except ValidationError as e:
            return False, [str(e)]

    def save_user_setting(self, key: str, value: Any) -> Path:
        """Persist one top-level setting to the user settings file.

        Existing content is preserved; a corrupted file is replaced.
        The cached configuration is dropped so the next access reloads.

        Raises:
            ConfigError: If the value is invalid or the file cannot be written.
        """
        if key not in TrackMyExtsConfig.model_fields:
            raise ConfigError(f"Unknown setting: {key}")

        config_file = self.user_settings_file
        data: dict[str, Any] = {}
        if config_file.exists():
            try:
                with config_file.open(encoding="utf-8") as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    data = loaded
            except (json.JSONDecodeError, OSError):
                logger.warning("Replacing unreadable settings file %s", config_file)

        data[key] = value
        ok, errors = self.validate(self.merge(TrackMyExtsConfig().model_dump(), data))
        if not ok:
            raise ConfigError(f"Invalid value for {key}: {errors[0]}")

        try:
            config_file.parent.mkdir(parents=True, exist_ok=True)
            with config_file.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise ConfigError(f"Cannot write {config_file}: {e}") from e

        with self._lock:
            self._config = None

        logger.info("Saved setting %s to %s", key, config_file)
        return config_file

    def reload(self) -> TrackMyExtsConfig:
        """Reload configuration from all sources."""
        new_config = self.load_all()
        with self._lock:
            self._config = new_config
        return new_config
