"""Exception hierarchy for TrackMyExts."""

from __future__ import annotations


class TrackMyExtsError(Exception):
    """Base class for all TrackMyExts errors."""

    pass


class ConfigError(TrackMyExtsError):
    """Configuration is missing, invalid, or cannot be resolved."""

    pass


class SnapshotParseError(TrackMyExtsError):
    """A snapshot document could not be parsed."""

    pass


class ExtensionManagerError(TrackMyExtsError):
    """The editor extension manager rejected or failed a request.

    Attributes:
        extension_id: Extension the request was about, if any.
        returncode: Exit code of the editor CLI (-1 if it never ran).
        stderr: Captured error output.
    """

    def __init__(
        self,
        message: str,
        extension_id: str | None = None,
        returncode: int = -1,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.extension_id = extension_id
        self.returncode = returncode
        self.stderr = stderr
