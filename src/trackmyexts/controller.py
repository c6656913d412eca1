"""Sync controller: single owner of the restore-in-progress flag.

Automatic triggers (filesystem events, the periodic timer) and manual
commands both go through one SyncController. While a restore is
applying changes the automatic triggers are ignored, so the
intermediate states a restore passes through never become commits.

``trackmyexts watch`` and ``trackmyexts restore`` run as separate
processes. The flag is therefore mirrored in a RestoreMarker file
inside the repository, which every controller on that repository sees.
"""

from __future__ import annotations

import os
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from trackmyexts.core.constants import RESTORE_MARKER_FILENAME, RESTORE_MARKER_MAX_AGE
from trackmyexts.core.errors import TrackMyExtsError
from trackmyexts.core.interfaces import IExtensionManager, IUserInterface
from trackmyexts.core.logging import get_logger
from trackmyexts.snapshot.models import RestoreResult, SyncResult
from trackmyexts.snapshot.reconciler import SnapshotReconciler
from trackmyexts.snapshot.writer import SnapshotWriter

logger = get_logger("controller")


class RestoreMarker:
    """Marker file announcing a restore in progress to other processes."""

    def __init__(self, path: Path, max_age: float = RESTORE_MARKER_MAX_AGE) -> None:
        """Initialize marker.

        Args:
            path: Marker file location.
            max_age: Seconds after which a leftover marker is ignored.
        """
        self.path = path
        self.max_age = max_age

    @classmethod
    def for_repository(cls, repo_path: Path) -> RestoreMarker:
        """Marker for a working copy, kept out of the tracked tree."""
        git_dir = repo_path / ".git"
        if git_dir.is_dir():
            return cls(git_dir / RESTORE_MARKER_FILENAME)
        return cls(repo_path / f".{RESTORE_MARKER_FILENAME}")

    def acquire(self) -> None:
        """Create the marker, recording the owning process id."""
        self.path.write_text(f"{os.getpid()}\n", encoding="utf-8")
        logger.debug("Restore marker created: %s", self.path)

    def release(self) -> None:
        """Remove the marker. Safe to call when it is already gone."""
        self.path.unlink(missing_ok=True)
        logger.debug("Restore marker removed: %s", self.path)

    def is_active(self) -> bool:
        """Check for a marker younger than ``max_age``."""
        try:
            age = time.time() - self.path.stat().st_mtime
        except FileNotFoundError:
            return False
        if age > self.max_age:
            logger.warning("Ignoring stale restore marker %s", self.path)
            return False
        return True


class SyncController:
    """Routes sync and restore requests and suppresses sync during restore."""

    def __init__(
        self,
        writer: SnapshotWriter,
        reconciler: SnapshotReconciler,
        extensions: IExtensionManager,
        ui: IUserInterface,
        marker: RestoreMarker | None = None,
    ) -> None:
        self.writer = writer
        self.reconciler = reconciler
        self.extensions = extensions
        self.ui = ui
        self.marker = marker
        self._restoring = False

    @property
    def is_restoring(self) -> bool:
        """True while this or another process on the repository restores."""
        if self._restoring:
            return True
        return self.marker is not None and self.marker.is_active()

    @contextmanager
    def restoring(self) -> Iterator[None]:
        """Set the suppression flag (and marker) for the duration of the block."""
        self._restoring = True
        marked = False
        if self.marker is not None:
            try:
                self.marker.acquire()
                marked = True
            except OSError as e:
                logger.warning("Cannot create restore marker %s: %s", self.marker.path, e)
        try:
            yield
        finally:
            if marked and self.marker is not None:
                self.marker.release()
            self._restoring = False

    async def sync_now(self) -> SyncResult | None:
        """Snapshot the live extension set.

        Returns:
            The sync result, or None if it failed (the failure is logged
            and reported).
        """
        try:
            live = await self.extensions.list_installed()
            result = await self.writer.write(live)
        except (TrackMyExtsError, OSError) as e:
            logger.exception("Sync failed")
            self.ui.error(f"Sync failed: {e}")
            return None

        if result.committed:
            suffix = " and pushed" if result.pushed else ""
            self.ui.info(f"Committed{suffix}: {result.message}")
        return result

    async def on_extensions_changed(self) -> SyncResult | None:
        """Handle a change in the installed extensions."""
        if self.is_restoring:
            logger.debug("Restore in progress, ignoring extension change")
            return None
        return await self.sync_now()

    async def on_timer_tick(self) -> SyncResult | None:
        """Handle a periodic sync tick."""
        if self.is_restoring:
            logger.debug("Restore in progress, skipping periodic sync")
            return None
        return await self.sync_now()

    async def restore(
        self,
        revision_hash: str | None = None,
        dry_run: bool = False,
        assume_yes: bool = False,
    ) -> RestoreResult:
        """Restore a recorded snapshot. See SnapshotReconciler.restore."""
        return await self.reconciler.restore(
            self,
            revision_hash=revision_hash,
            dry_run=dry_run,
            assume_yes=assume_yes,
        )
