"""Core package containing interfaces, errors, logging and process helpers."""

from trackmyexts.core.errors import (
    ConfigError,
    ExtensionManagerError,
    SnapshotParseError,
    TrackMyExtsError,
)
from trackmyexts.core.interfaces import (
    IConfigLoader,
    IExtensionManager,
    IUserInterface,
)
from trackmyexts.core.logging import get_logger, setup_logging

__all__ = [
    "ConfigError",
    "ExtensionManagerError",
    "IConfigLoader",
    "IExtensionManager",
    "IUserInterface",
    "SnapshotParseError",
    "TrackMyExtsError",
    "get_logger",
    "setup_logging",
]
