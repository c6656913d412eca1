"""Abstract base classes defining core interfaces for TrackMyExts.

These interfaces are the seams between the snapshot logic and the
outside world (editor CLI, terminal, settings files). They let the
writer and reconciler be exercised with mocks instead of real processes
or an interactive terminal.

Interface Implementation Status:
- IConfigLoader: Implemented by config.loader.ConfigLoader
- IExtensionManager: Implemented by extensions.manager.EditorExtensionManager
- IUserInterface: Implemented by cli.prompts.ConsoleInterface
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from trackmyexts.git.history import Revision
    from trackmyexts.snapshot.models import RestorePlan


class IExtensionManager(ABC):
    """Abstract base class for the editor's extension manager."""

    @abstractmethod
    async def list_installed(self) -> list[str]:
        """Return identifiers of installed, non-built-in extensions."""
        ...

    @abstractmethod
    async def install(self, extension_id: str) -> None:
        """Install one extension.

        Raises:
            ExtensionManagerError: If the request failed.
        """
        ...

    @abstractmethod
    async def uninstall(self, extension_id: str) -> None:
        """Uninstall one extension.

        Raises:
            ExtensionManagerError: If the request failed.
        """
        ...


class IUserInterface(ABC):
    """Abstract base class for user interaction.

    Covers the prompts, pickers and notifications used by the sync and
    restore flows. Methods returning ``None`` mean the user cancelled.
    """

    @abstractmethod
    def ask_repository(self) -> str | None:
        """Ask for a repository URL or local path."""
        ...

    @abstractmethod
    def ask_clone_parent(self) -> Path | None:
        """Ask for the folder a remote repository should be cloned into."""
        ...

    @abstractmethod
    def choose_revision(self, revisions: list[Revision]) -> Revision | None:
        """Let the user pick one revision to restore."""
        ...

    @abstractmethod
    def confirm_restore(self, plan: RestorePlan) -> bool:
        """Ask for explicit confirmation before mutating anything."""
        ...

    @abstractmethod
    def progress(self, current: int, total: int, message: str) -> None:
        """Report progress of a multi-step operation (1-based current)."""
        ...

    @abstractmethod
    def info(self, message: str) -> None:
        """Show an informational message."""
        ...

    @abstractmethod
    def warning(self, message: str) -> None:
        """Show a warning."""
        ...

    @abstractmethod
    def error(self, message: str) -> None:
        """Show an error."""
        ...


class IConfigLoader(ABC):
    """Abstract base class for configuration loaders."""

    @abstractmethod
    def load(self, path: Path) -> dict[str, Any]:
        """Load configuration from a path.

        Raises:
            ConfigError: If loading fails.
        """
        ...

    @abstractmethod
    def merge(
        self, base: dict[str, Any], override: dict[str, Any]
    ) -> dict[str, Any]:
        """Merge two configurations with override taking precedence."""
        ...

    @abstractmethod
    def validate(self, config: dict[str, Any]) -> tuple[bool, list[str]]:
        """Validate configuration against schema.

        Returns:
            Tuple of (is_valid, list_of_errors).
        """
        ...

    @abstractmethod
    def save_user_setting(self, key: str, value: Any) -> Path:
        """Persist one top-level setting to the user settings file.

        Returns:
            Path of the file that was written.
        """
        ...
