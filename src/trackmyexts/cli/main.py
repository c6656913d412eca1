"""CLI entry point for TrackMyExts.

Usage:
    trackmyexts sync
    trackmyexts restore [--dry-run] [--yes] [--revision HASH]
    trackmyexts history
    trackmyexts watch
    trackmyexts config [--set-repo PATH]
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys
from collections.abc import Sequence

from trackmyexts import __version__
from trackmyexts.cli.prompts import ConsoleInterface
from trackmyexts.cli.setup import resolve_repository
from trackmyexts.config import ConfigLoader, TrackMyExtsConfig
from trackmyexts.controller import RestoreMarker, SyncController
from trackmyexts.core import ConfigError, TrackMyExtsError, get_logger, setup_logging
from trackmyexts.extensions import create_extension_manager
from trackmyexts.snapshot import SnapshotReconciler, SnapshotWriter
from trackmyexts.watcher import ExtensionsWatcher, run_periodic

logger = get_logger("cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


async def build_controller(
    config: TrackMyExtsConfig,
    loader: ConfigLoader,
    ui: ConsoleInterface,
) -> SyncController:
    """Resolve the repository and wire writer, reconciler and manager."""
    repo = await resolve_repository(config, ui, loader)
    extensions = create_extension_manager(config.editor)
    writer = SnapshotWriter(repo, config.snapshot_file, push=config.sync.push)
    reconciler = SnapshotReconciler(
        repo,
        extensions,
        ui,
        snapshot_file=config.snapshot_file,
        history_limit=config.restore.history_limit,
    )
    marker = RestoreMarker.for_repository(repo.path)
    return SyncController(writer, reconciler, extensions, ui, marker=marker)


async def cmd_sync(
    args: argparse.Namespace,
    config: TrackMyExtsConfig,
    loader: ConfigLoader,
    ui: ConsoleInterface,
) -> int:
    """Snapshot installed extensions now."""
    controller = await build_controller(config, loader, ui)
    result = await controller.sync_now()
    if result is None:
        return EXIT_ERROR
    if not result.committed:
        ui.info(f"No changes ({result.document.total} extensions recorded).")
    return EXIT_OK


async def cmd_restore(
    args: argparse.Namespace,
    config: TrackMyExtsConfig,
    loader: ConfigLoader,
    ui: ConsoleInterface,
) -> int:
    """Restore extensions from a recorded snapshot."""
    controller = await build_controller(config, loader, ui)
    result = await controller.restore(
        revision_hash=args.revision,
        dry_run=args.dry_run,
        assume_yes=args.yes,
    )

    if args.dry_run and result.plan is not None and not result.plan.is_empty:
        ui.show_plan(result.plan)
        ui.info(result.message)

    if result.failed:
        ui.show_failures(result.failed)
        return EXIT_ERROR
    if result.applied and result.sync is None:
        return EXIT_ERROR
    return EXIT_OK


async def cmd_history(
    args: argparse.Namespace,
    config: TrackMyExtsConfig,
    loader: ConfigLoader,
    ui: ConsoleInterface,
) -> int:
    """List revisions of the snapshot file."""
    controller = await build_controller(config, loader, ui)
    revisions = await controller.reconciler.list_history()
    if not revisions:
        ui.info(f"No history found for {config.snapshot_file}.")
    else:
        ui.show_history(revisions)
    return EXIT_OK


async def cmd_watch(
    args: argparse.Namespace,
    config: TrackMyExtsConfig,
    loader: ConfigLoader,
    ui: ConsoleInterface,
) -> int:
    """Sync on every extension change until interrupted."""
    controller = await build_controller(config, loader, ui)
    await controller.sync_now()

    watcher = ExtensionsWatcher(
        config.editor.resolved_extensions_dir(),
        controller.on_extensions_changed,
        asyncio.get_running_loop(),
        debounce_seconds=config.sync.debounce_seconds,
    )
    timer = asyncio.create_task(run_periodic(controller.on_timer_tick, config.sync.interval_minutes))

    watcher.start()
    ui.info("Watching for extension changes. Press Ctrl+C to stop.")
    try:
        await asyncio.Event().wait()
    finally:
        watcher.stop()
        timer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await timer
    return EXIT_OK


async def cmd_config(
    args: argparse.Namespace,
    config: TrackMyExtsConfig,
    loader: ConfigLoader,
    ui: ConsoleInterface,
) -> int:
    """Show configuration or save the repository setting."""
    if args.set_repo:
        path = loader.save_user_setting("repo_path", args.set_repo)
        ui.info(f"Repository saved to {path}")
        return EXIT_OK

    ui.console.print_json(config.model_dump_json())
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="trackmyexts",
        description="Keep your editor extensions under version control.",
    )
    parser.add_argument("--version", action="version", version=f"trackmyexts {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    sync_parser = subparsers.add_parser("sync", help="Record installed extensions now")
    sync_parser.set_defaults(func=cmd_sync)

    restore_parser = subparsers.add_parser("restore", help="Restore extensions from history")
    restore_parser.add_argument(
        "--dry-run", action="store_true", help="Show the changes without applying them"
    )
    restore_parser.add_argument(
        "-y", "--yes", action="store_true", help="Do not ask for confirmation"
    )
    restore_parser.add_argument(
        "--revision", metavar="HASH", help="Restore this revision instead of choosing"
    )
    restore_parser.set_defaults(func=cmd_restore)

    history_parser = subparsers.add_parser("history", help="List recorded snapshots")
    history_parser.set_defaults(func=cmd_history)

    watch_parser = subparsers.add_parser("watch", help="Sync automatically on changes")
    watch_parser.set_defaults(func=cmd_watch)

    config_parser = subparsers.add_parser("config", help="Show or change settings")
    config_parser.add_argument("--set-repo", metavar="PATH", help="Save the repository URL or path")
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the TrackMyExts CLI.

    Returns:
        Exit code (0 success, 1 error, 2 configuration error, 130 interrupted).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_ERROR

    setup_logging(level=logging.DEBUG if args.verbose else None)
    ui = ConsoleInterface()

    try:
        loader = ConfigLoader()
        config = loader.config
    except ConfigError as e:
        ui.error(f"Error: {e}")
        ui.warning(
            "Hint: Check your settings at ~/.trackmyexts/settings.json or "
            ".trackmyexts/settings.json"
        )
        return EXIT_CONFIG_ERROR

    try:
        return asyncio.run(args.func(args, config, loader, ui))
    except KeyboardInterrupt:
        ui.warning("\nInterrupted")
        return EXIT_INTERRUPTED
    except ConfigError as e:
        ui.warning(str(e))
        return EXIT_CONFIG_ERROR
    except TrackMyExtsError as e:
        logger.debug("Command failed", exc_info=True)
        ui.error(f"Error: {e}")
        return EXIT_ERROR
    except Exception as e:
        logger.exception("Unexpected error")
        ui.error(f"Error: {e}")
        ui.warning("Hint: For debugging, run with TRACKMYEXTS_LOG_LEVEL=DEBUG")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
