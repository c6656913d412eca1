"""Snapshot reconciler: bring installed extensions back to a recorded state.

A restore walks through these steps:
1. List revisions that touched the snapshot file
2. Let the user pick one (or take the one given on the command line)
3. Read that revision's snapshot and diff it against live state
4. Confirm, then uninstall extras and install missing extensions
5. Snapshot the converged state

Steps 1-3 abort the restore on any error. Individual install/uninstall
failures in step 4 are collected in the result and the loop continues.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from trackmyexts.core.constants import SNAPSHOT_FILENAME
from trackmyexts.core.errors import TrackMyExtsError
from trackmyexts.core.interfaces import IExtensionManager, IUserInterface
from trackmyexts.core.logging import get_logger
from trackmyexts.git.history import GitHistory, Revision
from trackmyexts.git.repository import GitRepository
from trackmyexts.snapshot.diff import compute_restore_plan
from trackmyexts.snapshot.models import RestorePlan, RestoreResult, SnapshotDocument
from trackmyexts.snapshot.state import RestoreState, RestoreStateMachine

if TYPE_CHECKING:
    from trackmyexts.controller import SyncController

logger = get_logger("snapshot.reconciler")


class SnapshotReconciler:
    """Restores the extension set recorded in a past revision."""

    def __init__(
        self,
        repo: GitRepository,
        extensions: IExtensionManager,
        ui: IUserInterface,
        snapshot_file: str = SNAPSHOT_FILENAME,
        history_limit: int = 0,
    ) -> None:
        """Initialize reconciler.

        Args:
            repo: Repository holding the snapshot history.
            extensions: Extension manager used to apply the plan.
            ui: Pickers, confirmation and notifications.
            snapshot_file: File name relative to the repository root.
            history_limit: Maximum revisions offered (0 = all).
        """
        self.repo = repo
        self.extensions = extensions
        self.ui = ui
        self.snapshot_file = snapshot_file
        self.history_limit = history_limit
        self.history = GitHistory(repo)
        self.last_machine: RestoreStateMachine | None = None

    async def list_history(self) -> list[Revision]:
        """Revisions that touched the snapshot file, newest first."""
        return await self.history.get_revisions(self.snapshot_file, count=self.history_limit)

    async def load_snapshot(self, revision: Revision) -> SnapshotDocument:
        """Read the snapshot as committed in a revision.

        Raises:
            GitError: If the file does not exist in that revision.
            SnapshotParseError: If the committed file is not valid.
        """
        text = await self.history.show_file(revision.hash, self.snapshot_file)
        return SnapshotDocument.from_json(text)

    async def plan(self, revision: Revision) -> RestorePlan:
        """Compute the changes needed to reach a revision's snapshot."""
        snapshot = await self.load_snapshot(revision)
        current = await self.extensions.list_installed()
        return compute_restore_plan(snapshot.extensions, current, revision)

    async def apply(self, plan: RestorePlan) -> RestoreResult:
        """Uninstall extras, then install missing extensions.

        Failures are recorded per identifier and do not stop the loop.
        """
        result = RestoreResult(plan=plan)
        total = plan.total_changes
        step = 0

        for extension_id in plan.to_uninstall:
            step += 1
            self.ui.progress(step, total, f"Uninstalling {extension_id}")
            try:
                await self.extensions.uninstall(extension_id)
            except TrackMyExtsError as e:
                logger.warning("Failed to uninstall %s: %s", extension_id, e)
                result.failed[extension_id] = str(e)
            else:
                result.uninstalled.append(extension_id)

        for extension_id in plan.to_install:
            step += 1
            self.ui.progress(step, total, f"Installing {extension_id}")
            try:
                await self.extensions.install(extension_id)
            except TrackMyExtsError as e:
                logger.warning("Failed to install %s: %s", extension_id, e)
                result.failed[extension_id] = str(e)
            else:
                result.installed.append(extension_id)

        return result

    async def restore(
        self,
        session: SyncController,
        revision_hash: str | None = None,
        dry_run: bool = False,
        assume_yes: bool = False,
    ) -> RestoreResult:
        """Run a full restore.

        Args:
            session: Controller whose suppression flag guards the apply step
                and which records the converged state afterwards.
            revision_hash: Restore this revision instead of asking.
            dry_run: Stop after computing the plan.
            assume_yes: Skip the confirmation prompt.

        Returns:
            The outcome. ``result.plan`` is None when nothing was selected.

        Raises:
            TrackMyExtsError: If history, the snapshot or the live list
                could not be read.
        """
        machine = RestoreStateMachine()
        self.last_machine = machine

        try:
            if revision_hash:
                revision = await self.history.get_revision(revision_hash)
            else:
                revisions = await self.list_history()
                machine.transition(RestoreState.HISTORY_LOADED, count=len(revisions))
                if not revisions:
                    machine.transition(RestoreState.NO_HISTORY)
                    message = f"No history found for {self.snapshot_file}."
                    self.ui.info(message)
                    return RestoreResult(message=message)

                revision = self.ui.choose_revision(revisions)
                if revision is None:
                    machine.transition(RestoreState.CANCELLED, reason="no selection")
                    self.ui.info("Restore cancelled.")
                    return RestoreResult(message="Restore cancelled.")

            machine.transition(RestoreState.REVISION_SELECTED, revision=revision.hash)
            plan = await self.plan(revision)
            machine.transition(
                RestoreState.DIFF_COMPUTED,
                install=len(plan.to_install),
                uninstall=len(plan.to_uninstall),
            )
        except (TrackMyExtsError, OSError) as e:
            logger.error("Restore aborted: %s", e)
            machine.fail(str(e))
            raise

        if plan.is_empty:
            machine.transition(RestoreState.NO_CHANGES)
            message = f"Extensions already match {revision.short_hash}. Nothing to do."
            self.ui.info(message)
            return RestoreResult(plan=plan, message=message)

        if dry_run:
            machine.transition(RestoreState.CANCELLED, reason="dry run")
            return RestoreResult(plan=plan, message=f"Dry run: {plan.summary()}")

        if not assume_yes and not self.ui.confirm_restore(plan):
            machine.transition(RestoreState.CANCELLED, reason="declined")
            self.ui.info("Restore cancelled.")
            return RestoreResult(plan=plan, message="Restore cancelled.")

        machine.transition(RestoreState.CONFIRMED)
        machine.transition(RestoreState.APPLYING)
        try:
            with session.restoring():
                result = await self.apply(plan)
        finally:
            machine.reset()

        result.sync = await session.sync_now()

        result.message = (
            f"Restored {revision.short_hash}: {len(result.installed)} installed, "
            f"{len(result.uninstalled)} uninstalled"
        )
        if result.failed:
            result.message += f", {len(result.failed)} failed"
            self.ui.warning(result.message)
        else:
            self.ui.info(result.message)
        return result
