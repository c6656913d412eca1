"""Snapshot data models.

This module provides the data models shared by the writer and the
reconciler:
- SnapshotDocument: the canonical JSON record of installed extensions
- SyncResult: outcome of one write/commit/push cycle
- RestorePlan: install/uninstall sets computed for a restore
- RestoreResult: what a restore actually did

Example:
    doc = SnapshotDocument.from_ids(["b.ext", "a.ext", "b.ext"])
    doc.extensions        # ("a.ext", "b.ext")
    doc.to_json()         # '{\\n  "total": 2,\\n  "extensions": [...]\\n}\\n'
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from trackmyexts.core.errors import SnapshotParseError

if TYPE_CHECKING:
    from trackmyexts.git.history import Revision


@dataclass(frozen=True)
class SnapshotDocument:
    """Installed extensions at one point in time.

    The extension list is always duplicate-free and sorted with a plain
    (case-sensitive) string sort of the stored identifiers, so that an
    unrelated install only ever adds one line to the file.

    Attributes:
        extensions: Sorted, unique extension identifiers.
    """

    extensions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        canonical = tuple(sorted(set(self.extensions)))
        if canonical != self.extensions:
            object.__setattr__(self, "extensions", canonical)

    @classmethod
    def from_ids(cls, ids: Iterable[str]) -> SnapshotDocument:
        """Build a document from live identifiers (any order, may repeat)."""
        return cls(extensions=tuple(ids))

    @property
    def total(self) -> int:
        """Number of extensions recorded."""
        return len(self.extensions)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted shape, keys in file order."""
        return {"total": self.total, "extensions": list(self.extensions)}

    def to_json(self) -> str:
        """Serialize to the canonical file content."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"

    @classmethod
    def from_dict(cls, data: Any) -> SnapshotDocument:
        """Create from a parsed JSON value.

        Extra keys (such as the ``timestamp`` older files carry) are
        ignored; ``total`` is recomputed rather than trusted.

        Raises:
            SnapshotParseError: If the value does not have the snapshot shape.
        """
        if not isinstance(data, dict):
            raise SnapshotParseError(
                f"Snapshot root must be an object, got {type(data).__name__}"
            )
        extensions = data.get("extensions")
        if not isinstance(extensions, list):
            raise SnapshotParseError("Snapshot has no 'extensions' list")
        for item in extensions:
            if not isinstance(item, str):
                raise SnapshotParseError(
                    f"Extension identifiers must be strings, got {item!r}"
                )
        return cls.from_ids(extensions)

    @classmethod
    def from_json(cls, text: str) -> SnapshotDocument:
        """Parse file content.

        Raises:
            SnapshotParseError: If the text is not valid snapshot JSON.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SnapshotParseError(f"Invalid snapshot JSON: {e}") from e
        return cls.from_dict(data)


@dataclass
class SyncResult:
    """Outcome of one Writer run.

    Attributes:
        document: The document that was written.
        message: Commit message chosen for this change.
        added: Identifiers new since the previous snapshot.
        removed: Identifiers gone since the previous snapshot.
        committed: Whether a commit was created.
        pushed: Whether the commit was pushed.
    """

    document: SnapshotDocument
    message: str
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    committed: bool = False
    pushed: bool = False


@dataclass
class RestorePlan:
    """Changes needed to converge live state to a snapshot.

    Both lists keep the order of the list they were computed from.
    """

    revision: Revision | None
    to_install: list[str] = field(default_factory=list)
    to_uninstall: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when live state already matches the snapshot."""
        return not (self.to_install or self.to_uninstall)

    @property
    def total_changes(self) -> int:
        """Number of install/uninstall requests the plan implies."""
        return len(self.to_install) + len(self.to_uninstall)

    def summary(self) -> str:
        """One-line summary with counts."""
        return (
            f"{len(self.to_install)} to install, "
            f"{len(self.to_uninstall)} to uninstall"
        )


@dataclass
class RestoreResult:
    """What a restore did.

    Attributes:
        plan: The plan that was computed, if any.
        installed: Identifiers installed successfully.
        uninstalled: Identifiers uninstalled successfully.
        failed: Identifier -> error message for requests that failed
            on both the primary and fallback route.
        sync: Result of the post-restore snapshot, if it ran.
        message: Human-readable outcome.
    """

    plan: RestorePlan | None = None
    installed: list[str] = field(default_factory=list)
    uninstalled: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    sync: SyncResult | None = None
    message: str = ""

    @property
    def applied(self) -> bool:
        """True when the install/uninstall loop ran."""
        return bool(self.installed or self.uninstalled or self.failed)

    @property
    def success(self) -> bool:
        """True when no individual request failed."""
        return not self.failed
