"""Centralized constants for TrackMyExts."""

# =============================================================================
# Snapshot
# =============================================================================

# File written at the root of the tracked repository
SNAPSHOT_FILENAME: str = "extensions.json"

# Folder created inside the user-chosen parent when cloning a remote
CLONE_DIRNAME: str = "vscode-extension-history"

# Format used for the timestamped fallback commit message
COMMIT_TIMESTAMP_FORMAT: str = "%Y-%m-%d %H:%M:%S"

# =============================================================================
# External tools
# =============================================================================

GIT_BINARY: str = "git"

DEFAULT_EDITOR_CLI: str = "code"

# Separator used in `git log --pretty=format:` output
LOG_FIELD_SEPARATOR: str = "|"

# =============================================================================
# Sync / restore
# =============================================================================

# Seconds to wait after the last filesystem event before syncing
DEFAULT_DEBOUNCE_SECONDS: float = 2.0

# Number of revisions offered when picking a restore point
DEFAULT_HISTORY_LIMIT: int = 50

# =============================================================================
# Settings
# =============================================================================

USER_CONFIG_DIRNAME: str = ".trackmyexts"
PROJECT_CONFIG_DIRNAME: str = ".trackmyexts"
SETTINGS_FILENAME: str = "settings.json"
SETTINGS_YAML_FILENAME: str = "settings.yaml"
ENV_PREFIX: str = "TRACKMYEXTS_"

# =============================================================================
# Restore marker
# =============================================================================

# Created inside the repository's .git folder while a restore is applying
RESTORE_MARKER_FILENAME: str = "trackmyexts-restore.lock"

# Markers older than this are left over from a crashed restore
RESTORE_MARKER_MAX_AGE: float = 60 * 60.0
