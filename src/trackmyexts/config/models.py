"""Configuration models for TrackMyExts.

This module defines Pydantic models for all configuration sections,
including validation and defaults.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trackmyexts.core.constants import (
    DEFAULT_DEBOUNCE_SECONDS,
    DEFAULT_EDITOR_CLI,
    DEFAULT_HISTORY_LIMIT,
    SNAPSHOT_FILENAME,
)


class GitConfig(BaseModel):
    """Git-related configuration.

    Attributes:
        binary: Git executable to invoke.
        timeout: Per-command timeout in seconds (0 = wait forever).
    """

    model_config = ConfigDict(validate_assignment=True)

    binary: str = "git"
    timeout: float = Field(default=0, ge=0)


class EditorConfig(BaseModel):
    """Editor extension-manager configuration.

    Attributes:
        cli: Editor command used to list/install/uninstall extensions.
        fallback_cli: Alternate command tried when ``cli`` fails.
            When unset, the fallback retries ``cli`` with ``--force``.
        extensions_dir: Folder watched for extension changes.
        timeout: Per-command timeout in seconds (0 = wait forever).
    """

    model_config = ConfigDict(validate_assignment=True)

    cli: str = DEFAULT_EDITOR_CLI
    fallback_cli: str | None = None
    extensions_dir: str | None = None
    timeout: float = Field(default=0, ge=0)

    @field_validator("cli")
    @classmethod
    def validate_cli(cls, v: str) -> str:
        """Validate that the editor command is non-empty."""
        if not v or not v.strip():
            raise ValueError("Editor CLI must be a non-empty string")
        return v.strip()

    @field_validator("fallback_cli", "extensions_dir")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat blank strings as unset."""
        if v is not None:
            return v.strip() if v.strip() else None
        return v

    def resolved_extensions_dir(self) -> Path:
        """Get the extensions folder, defaulting to ~/.vscode/extensions."""
        if self.extensions_dir:
            return Path(self.extensions_dir).expanduser()
        return Path.home() / ".vscode" / "extensions"


class SyncConfig(BaseModel):
    """Automatic sync configuration.

    Attributes:
        push: Push after committing.
        interval_minutes: Periodic sync interval (0 disables the timer).
        debounce_seconds: Quiet period after filesystem events.
    """

    model_config = ConfigDict(validate_assignment=True)

    push: bool = True
    interval_minutes: float = Field(default=0, ge=0)
    debounce_seconds: float = Field(default=DEFAULT_DEBOUNCE_SECONDS, ge=0)


class RestoreConfig(BaseModel):
    """Restore configuration.

    Attributes:
        history_limit: Maximum revisions offered (0 = unlimited).
    """

    model_config = ConfigDict(validate_assignment=True)

    history_limit: int = Field(default=DEFAULT_HISTORY_LIMIT, ge=0)


class TrackMyExtsConfig(BaseModel):
    """Root configuration model.

    Attributes:
        repo_path: Local repository path or remote URL. When a URL is
            configured it is replaced by the clone location on first use.
        snapshot_file: Name of the snapshot file in the repository root.
    """

    model_config = ConfigDict(validate_assignment=True)

    repo_path: str | None = None
    snapshot_file: str = SNAPSHOT_FILENAME
    git: GitConfig = Field(default_factory=GitConfig)
    editor: EditorConfig = Field(default_factory=EditorConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    restore: RestoreConfig = Field(default_factory=RestoreConfig)

    @field_validator("repo_path")
    @classmethod
    def validate_repo_path(cls, v: str | None) -> str | None:
        """Strip whitespace; blank means unset."""
        if v is not None:
            return v.strip() if v.strip() else None
        return v

    @field_validator("snapshot_file")
    @classmethod
    def validate_snapshot_file(cls, v: str) -> str:
        """The snapshot must be a plain file name in the repository root."""
        v = v.strip()
        if not v or "/" in v or "\\" in v:
            raise ValueError("snapshot_file must be a plain file name")
        return v
