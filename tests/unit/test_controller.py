"""Tests for the sync controller."""

from __future__ import annotations

import os
import time
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from trackmyexts.controller import RestoreMarker, SyncController
from trackmyexts.core.errors import ExtensionManagerError
from trackmyexts.git.repository import GitError
from trackmyexts.snapshot.models import SnapshotDocument, SyncResult
from trackmyexts.snapshot.reconciler import SnapshotReconciler
from trackmyexts.snapshot.writer import SnapshotWriter


@pytest.fixture
def writer() -> AsyncMock:
    writer = AsyncMock(spec=SnapshotWriter)
    writer.write.return_value = SyncResult(
        document=SnapshotDocument.from_ids(["a"]),
        message="Installed: a",
        added=["a"],
        committed=True,
        pushed=True,
    )
    return writer


@pytest.fixture
def controller(writer: AsyncMock, extension_manager: AsyncMock, ui: MagicMock) -> SyncController:
    reconciler = AsyncMock(spec=SnapshotReconciler)
    return SyncController(writer, reconciler, extension_manager, ui)


class TestSyncController:
    """Tests for SyncController."""

    def test_not_restoring_initially(self, controller: SyncController) -> None:
        assert controller.is_restoring is False

    def test_restoring_context(self, controller: SyncController) -> None:
        with controller.restoring():
            assert controller.is_restoring is True
        assert controller.is_restoring is False

    def test_restoring_context_clears_on_error(self, controller: SyncController) -> None:
        with pytest.raises(ValueError):
            with controller.restoring():
                raise ValueError("boom")
        assert controller.is_restoring is False

    @pytest.mark.asyncio
    async def test_sync_now(
        self,
        controller: SyncController,
        writer: AsyncMock,
        extension_manager: AsyncMock,
        ui: MagicMock,
    ) -> None:
        extension_manager.list_installed.return_value = ["a"]

        result = await controller.sync_now()

        writer.write.assert_awaited_once_with(["a"])
        assert result is writer.write.return_value
        ui.info.assert_called_once_with("Committed and pushed: Installed: a")

    @pytest.mark.asyncio
    async def test_sync_now_without_commit_is_quiet(
        self, controller: SyncController, writer: AsyncMock, ui: MagicMock
    ) -> None:
        writer.write.return_value = SyncResult(document=SnapshotDocument(), message="m")
        await controller.sync_now()
        ui.info.assert_not_called()

    @pytest.mark.asyncio
    async def test_sync_failure_reported(
        self, controller: SyncController, writer: AsyncMock, ui: MagicMock
    ) -> None:
        writer.write.side_effect = GitError("git push failed: rejected")

        assert await controller.sync_now() is None
        ui.error.assert_called_once_with("Sync failed: git push failed: rejected")

    @pytest.mark.asyncio
    async def test_listing_failure_reported(
        self, controller: SyncController, extension_manager: AsyncMock, writer: AsyncMock, ui: MagicMock
    ) -> None:
        extension_manager.list_installed.side_effect = ExtensionManagerError("code not found")

        assert await controller.sync_now() is None
        writer.write.assert_not_awaited()
        ui.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_io_failure_reported(
        self, controller: SyncController, writer: AsyncMock, ui: MagicMock
    ) -> None:
        writer.write.side_effect = PermissionError("read-only")
        assert await controller.sync_now() is None
        ui.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_change_event_syncs(self, controller: SyncController, writer: AsyncMock) -> None:
        assert await controller.on_extensions_changed() is not None
        writer.write.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_change_event_suppressed_while_restoring(
        self, controller: SyncController, writer: AsyncMock
    ) -> None:
        with controller.restoring():
            assert await controller.on_extensions_changed() is None
            assert await controller.on_timer_tick() is None
        writer.write.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_timer_tick_syncs(self, controller: SyncController, writer: AsyncMock) -> None:
        await controller.on_timer_tick()
        writer.write.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_manual_sync_runs_while_restoring(
        self, controller: SyncController, writer: AsyncMock
    ) -> None:
        with controller.restoring():
            await controller.sync_now()
        writer.write.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_restore_delegates(self, controller: SyncController) -> None:
        await controller.restore(revision_hash="abc", dry_run=True, assume_yes=False)
        controller.reconciler.restore.assert_awaited_once_with(
            controller, revision_hash="abc", dry_run=True, assume_yes=False
        )


class TestRestoreMarker:
    """Tests for the cross-process restore marker."""

    def test_acquire_and_release(self, tmp_path: Path) -> None:
        marker = RestoreMarker(tmp_path / "restore.lock")
        assert marker.is_active() is False

        marker.acquire()
        assert marker.is_active() is True
        assert marker.path.read_text(encoding="utf-8").strip() == str(os.getpid())

        marker.release()
        assert marker.is_active() is False
        marker.release()

    def test_stale_marker_ignored(self, tmp_path: Path) -> None:
        marker = RestoreMarker(tmp_path / "restore.lock", max_age=60)
        marker.acquire()
        old = time.time() - 120
        os.utime(marker.path, (old, old))

        assert marker.is_active() is False

    def test_for_repository_prefers_git_dir(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        marker = RestoreMarker.for_repository(tmp_path)
        assert marker.path == tmp_path / ".git" / "trackmyexts-restore.lock"

    def test_for_repository_without_git_dir(self, tmp_path: Path) -> None:
        marker = RestoreMarker.for_repository(tmp_path)
        assert marker.path == tmp_path / ".trackmyexts-restore.lock"


class TestSuppressionAcrossControllers:
    """Two controllers on one repository, as `watch` and `restore` run."""

    @pytest.fixture
    def marker_path(self, tmp_path: Path) -> Path:
        return tmp_path / "restore.lock"

    @pytest.fixture
    def watch_writer(self) -> AsyncMock:
        writer = AsyncMock(spec=SnapshotWriter)
        writer.write.return_value = SyncResult(document=SnapshotDocument(), message="m")
        return writer

    @pytest.fixture
    def watch_controller(
        self, watch_writer: AsyncMock, extension_manager: AsyncMock, ui: MagicMock, marker_path: Path
    ) -> SyncController:
        return SyncController(
            watch_writer,
            AsyncMock(spec=SnapshotReconciler),
            extension_manager,
            ui,
            marker=RestoreMarker(marker_path),
        )

    @pytest.fixture
    def restore_controller(
        self, writer: AsyncMock, extension_manager: AsyncMock, ui: MagicMock, marker_path: Path
    ) -> SyncController:
        return SyncController(
            writer,
            AsyncMock(spec=SnapshotReconciler),
            extension_manager,
            ui,
            marker=RestoreMarker(marker_path),
        )

    @pytest.mark.asyncio
    async def test_other_controller_suppressed_while_restoring(
        self,
        watch_controller: SyncController,
        restore_controller: SyncController,
        watch_writer: AsyncMock,
        marker_path: Path,
    ) -> None:
        with restore_controller.restoring():
            assert marker_path.exists()
            assert watch_controller.is_restoring is True
            assert await watch_controller.on_extensions_changed() is None
            assert await watch_controller.on_timer_tick() is None
        watch_writer.write.assert_not_awaited()

        assert not marker_path.exists()
        assert watch_controller.is_restoring is False
        await watch_controller.on_extensions_changed()
        watch_writer.write.assert_awaited_once()

    def test_marker_failure_keeps_local_flag(
        self, writer: AsyncMock, extension_manager: AsyncMock, ui: MagicMock, tmp_path: Path
    ) -> None:
        marker = RestoreMarker(tmp_path / "missing" / "restore.lock")
        controller = SyncController(
            writer, AsyncMock(spec=SnapshotReconciler), extension_manager, ui, marker=marker
        )

        with controller.restoring():
            assert controller.is_restoring is True
        assert controller.is_restoring is False
