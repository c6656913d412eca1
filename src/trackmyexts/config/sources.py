"""Configuration sources for TrackMyExts.

This module implements the Strategy pattern for loading configuration
from different sources (JSON files, YAML files, environment variables).
"""

from __future__ import annotations

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar

import yaml

from trackmyexts.core import ConfigError, get_logger

logger = get_logger("config.sources")


class IConfigSource(ABC):
    """Interface for configuration sources."""

    @abstractmethod
    def load(self) -> dict[str, Any]:
        """Load configuration from source.

        Returns:
            Dictionary containing configuration data.
            Returns empty dict if source doesn't exist.

        Raises:
            ConfigError: If source exists but cannot be parsed.
        """
        ...

    @abstractmethod
    def exists(self) -> bool:
        """Check if source exists."""
        ...


class JsonFileSource(IConfigSource):
    """Load configuration from JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> dict[str, Any]:
        """Load configuration from JSON file.

        Raises:
            ConfigError: If file exists but contains invalid JSON.
        """
        if not self.exists():
            return {}

        try:
            with self._path.open(encoding="utf-8") as f:
                content = f.read()
                if not content.strip():
                    return {}
                data = json.loads(content)
                if not isinstance(data, dict):
                    raise ConfigError(f"JSON root must be object, got {type(data).__name__}")
                return data
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in %s: %s", self._path, e)
            raise ConfigError(f"Invalid JSON in {self._path}: {e}") from e
        except OSError as e:
            logger.warning("Cannot read %s: %s", self._path, e)
            raise ConfigError(f"Cannot read {self._path}: {e}") from e

    def exists(self) -> bool:
        """Check if JSON file exists."""
        return self._path.exists() and self._path.is_file()

    @property
    def path(self) -> Path:
        """Get the file path."""
        return self._path

    def __repr__(self) -> str:
        return f"JsonFileSource({self._path})"


class YamlFileSource(IConfigSource):
    """Load configuration from YAML file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> dict[str, Any]:
        """Load configuration from YAML file.

        Raises:
            ConfigError: If file exists but contains invalid YAML.
        """
        if not self.exists():
            return {}

        try:
            with self._path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
                if data is None:
                    return {}
                if not isinstance(data, dict):
                    raise ConfigError(f"YAML root must be mapping, got {type(data).__name__}")
                return data
        except yaml.YAMLError as e:
            logger.warning("Invalid YAML in %s: %s", self._path, e)
            raise ConfigError(f"Invalid YAML in {self._path}: {e}") from e
        except OSError as e:
            logger.warning("Cannot read %s: %s", self._path, e)
            raise ConfigError(f"Cannot read {self._path}: {e}") from e

    def exists(self) -> bool:
        """Check if YAML file exists."""
        return self._path.exists() and self._path.is_file()

    @property
    def path(self) -> Path:
        """Get the file path."""
        return self._path

    def __repr__(self) -> str:
        return f"YamlFileSource({self._path})"


class EnvironmentSource(IConfigSource):
    """Load configuration from environment variables.

    Environment variables are mapped to configuration paths:
    - TRACKMYEXTS_REPO_PATH -> repo_path
    - TRACKMYEXTS_EDITOR_CLI -> editor.cli
    - TRACKMYEXTS_SYNC_INTERVAL -> sync.interval_minutes
    - TRACKMYEXTS_PUSH -> sync.push
    """

    PREFIX: ClassVar[str] = "TRACKMYEXTS_"

    MAPPINGS: ClassVar[dict[str, str | tuple[str, str]]] = {
        "TRACKMYEXTS_REPO_PATH": "repo_path",
        "TRACKMYEXTS_SNAPSHOT_FILE": "snapshot_file",
        "TRACKMYEXTS_EDITOR_CLI": ("editor", "cli"),
        "TRACKMYEXTS_EDITOR_FALLBACK_CLI": ("editor", "fallback_cli"),
        "TRACKMYEXTS_EXTENSIONS_DIR": ("editor", "extensions_dir"),
        "TRACKMYEXTS_SYNC_INTERVAL": ("sync", "interval_minutes"),
        "TRACKMYEXTS_PUSH": ("sync", "push"),
    }

    BOOLEAN_KEYS: ClassVar[frozenset[str]] = frozenset({"push"})
    FLOAT_KEYS: ClassVar[frozenset[str]] = frozenset({"interval_minutes"})

    def __init__(self, environ: dict[str, str] | None = None) -> None:
        """Initialize environment source.

        Args:
            environ: Environment dictionary. Defaults to os.environ.
        """
        self._environ = environ if environ is not None else dict(os.environ)

    def load(self) -> dict[str, Any]:
        """Load configuration from environment variables."""
        config: dict[str, Any] = {}

        for env_var, path in self.MAPPINGS.items():
            value = self._environ.get(env_var)
            if value is not None:
                self._set_nested(config, path, self._convert_value(value, path))

        return config

    def exists(self) -> bool:
        """Environment always exists."""
        return True

    def _set_nested(
        self,
        d: dict[str, Any],
        path: str | tuple[str, str],
        value: Any,
    ) -> None:
        if isinstance(path, str):
            d[path] = value
        else:
            section, key = path
            d.setdefault(section, {})[key] = value

    def _convert_value(self, value: str, path: str | tuple[str, str]) -> Any:
        """Convert string value to the type the model expects."""
        key = path[1] if isinstance(path, tuple) else path

        if key in self.BOOLEAN_KEYS:
            return value.lower() in ("true", "1", "yes", "on")

        if key in self.FLOAT_KEYS:
            try:
                return float(value)
            except ValueError:
                logger.warning("Invalid number for %s: %s", key, value)
                return value

        return value

    def __repr__(self) -> str:
        return "EnvironmentSource()"
