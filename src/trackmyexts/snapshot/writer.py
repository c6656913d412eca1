"""Snapshot writer: record the live extension set and commit it."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from trackmyexts.core.constants import SNAPSHOT_FILENAME
from trackmyexts.core.errors import SnapshotParseError
from trackmyexts.core.logging import get_logger
from trackmyexts.git.operations import GitOperations
from trackmyexts.git.repository import GitRepository
from trackmyexts.git.status import GitStatusTool
from trackmyexts.snapshot.diff import exact_difference
from trackmyexts.snapshot.messages import build_commit_message, default_message
from trackmyexts.snapshot.models import SnapshotDocument, SyncResult

logger = get_logger("snapshot.writer")


class SnapshotWriter:
    """Writes ``extensions.json`` and commits it when it changed.

    The file is always rewritten and staged; a commit is only created
    when git reports the path as changed, so repeated runs over an
    unchanged extension set leave history untouched.
    """

    def __init__(
        self,
        repo: GitRepository,
        snapshot_file: str = SNAPSHOT_FILENAME,
        push: bool = True,
    ) -> None:
        """Initialize writer.

        Args:
            repo: Repository holding the snapshot.
            snapshot_file: File name relative to the repository root.
            push: Push after each commit.
        """
        self.repo = repo
        self.snapshot_file = snapshot_file
        self.push = push
        self._operations = GitOperations(repo)
        self._status = GitStatusTool(repo)

    @property
    def path(self) -> Path:
        """Absolute path of the snapshot file."""
        return self.repo.path / self.snapshot_file

    def load_previous(self) -> SnapshotDocument | None:
        """Read the snapshot currently on disk.

        Returns:
            The document, or None if there is none or it cannot be parsed.
        """
        if not self.path.exists():
            return None
        try:
            return SnapshotDocument.from_json(self.path.read_text(encoding="utf-8"))
        except (SnapshotParseError, OSError) as e:
            logger.warning("Ignoring unreadable snapshot %s: %s", self.path, e)
            return None

    async def write(self, live_ids: Iterable[str]) -> SyncResult:
        """Record the live extension set.

        Args:
            live_ids: Installed extension identifiers, any order.

        Returns:
            What was written and whether it was committed/pushed.

        Raises:
            OSError: If the file cannot be written.
            GitError: If staging, committing or pushing fails.
        """
        document = SnapshotDocument.from_ids(live_ids)
        previous = self.load_previous()

        if previous is None:
            added: list[str] = []
            removed: list[str] = []
            message = default_message()
        else:
            added = exact_difference(document.extensions, previous.extensions)
            removed = exact_difference(previous.extensions, document.extensions)
            message = build_commit_message(added, removed)

        self.path.write_text(document.to_json(), encoding="utf-8")
        logger.debug("Wrote %d extensions to %s", document.total, self.path)

        result = SyncResult(document=document, message=message, added=added, removed=removed)

        await self._operations.stage([self.snapshot_file])
        if not await self._status.has_changes(self.snapshot_file):
            logger.info("Snapshot unchanged, nothing to commit")
            return result

        await self._operations.commit(message)
        result.committed = True

        if self.push:
            await self._operations.push()
            result.pushed = True

        return result
