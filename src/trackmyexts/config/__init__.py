"""Configuration system for TrackMyExts."""

from trackmyexts.config.loader import ConfigLoader
from trackmyexts.config.models import (
    EditorConfig,
    GitConfig,
    RestoreConfig,
    SyncConfig,
    TrackMyExtsConfig,
)
from trackmyexts.config.sources import (
    EnvironmentSource,
    IConfigSource,
    JsonFileSource,
    YamlFileSource,
)

__all__ = [
    "ConfigLoader",
    "EditorConfig",
    "EnvironmentSource",
    "GitConfig",
    "IConfigSource",
    "JsonFileSource",
    "RestoreConfig",
    "SyncConfig",
    "TrackMyExtsConfig",
    "YamlFileSource",
]
