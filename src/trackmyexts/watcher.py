"""Automatic sync triggers: extension-folder watcher and periodic timer.

The watchdog observer runs in its own thread. Events are debounced
there and the resulting sync is handed to the asyncio loop, where the
SyncController decides whether to run it.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import threading
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

if TYPE_CHECKING:
    from watchdog.observers.api import BaseObserver

from trackmyexts.core.constants import DEFAULT_DEBOUNCE_SECONDS
from trackmyexts.core.logging import get_logger

logger = get_logger("watcher")

SyncCallback = Callable[[], Awaitable[Any]]

# Files the editor rewrites inside the extensions folder on (un)install
_TRACKED_FILES = frozenset({".obsolete", "extensions.json"})


def _log_dispatch_failure(future: concurrent.futures.Future[Any]) -> None:
    """Log an error that escaped a dispatched sync."""
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error("Extension change sync failed: %s", error, exc_info=error)


class _ExtensionsChangeHandler(FileSystemEventHandler):
    """Debounces extension-folder events into a single sync request."""

    def __init__(
        self,
        on_change: Callable[[], None],
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        super().__init__()
        self._on_change = on_change
        self._debounce_seconds = debounce_seconds
        self._pending: threading.Timer | None = None
        self._lock = threading.Lock()

    def _is_relevant(self, path: str, is_directory: bool) -> bool:
        """Top-level extension folders and the editor's bookkeeping files."""
        name = Path(path).name
        if name in _TRACKED_FILES:
            return True
        if name.startswith(".") or name.endswith((".tmp", ".part")):
            return False
        return is_directory

    def _schedule(self, src_path: str) -> None:
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()

            def fire() -> None:
                with self._lock:
                    self._pending = None
                logger.debug("Debounced extension change triggered by: %s", src_path)
                self._on_change()

            self._pending = threading.Timer(self._debounce_seconds, fire)
            self._pending.daemon = True
            self._pending.start()
            logger.debug("Extension change detected, sync scheduled: %s", src_path)

    def cancel(self) -> None:
        """Drop a pending sync request."""
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None

    def on_created(self, event: FileSystemEvent) -> None:
        if self._is_relevant(str(event.src_path), event.is_directory):
            self._schedule(str(event.src_path))

    def on_deleted(self, event: FileSystemEvent) -> None:
        if self._is_relevant(str(event.src_path), event.is_directory):
            self._schedule(str(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        dest = str(getattr(event, "dest_path", "") or "")
        if self._is_relevant(str(event.src_path), event.is_directory) or (
            dest and self._is_relevant(dest, event.is_directory)
        ):
            self._schedule(dest or str(event.src_path))

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory and Path(str(event.src_path)).name in _TRACKED_FILES:
            self._schedule(str(event.src_path))


class ExtensionsWatcher:
    """Watches the editor's extensions folder and triggers syncs."""

    def __init__(
        self,
        directory: Path,
        callback: SyncCallback,
        loop: asyncio.AbstractEventLoop,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        """Initialize watcher.

        Args:
            directory: Extensions folder to observe (non-recursive).
            callback: Coroutine function run on the loop after a change.
            loop: Event loop the callback is scheduled on.
            debounce_seconds: Quiet period before a change is reported.
        """
        self.directory = directory
        self._callback = callback
        self._loop = loop
        self._handler = _ExtensionsChangeHandler(self._dispatch, debounce_seconds)
        self._observer: BaseObserver | None = None

    @property
    def is_running(self) -> bool:
        """Check whether the observer thread is active."""
        return self._observer is not None

    def _dispatch(self) -> None:
        """Hand the sync to the event loop (called from the timer thread)."""
        if self._loop.is_closed():
            return
        future = asyncio.run_coroutine_threadsafe(self._callback(), self._loop)
        future.add_done_callback(_log_dispatch_failure)

    def start(self) -> None:
        """Start observing. A missing folder is logged and ignored."""
        if self._observer is not None:
            return
        if not self.directory.is_dir():
            logger.warning("Extensions folder %s does not exist, not watching", self.directory)
            return

        self._observer = Observer()
        self._observer.schedule(  # type: ignore[no-untyped-call]
            self._handler, str(self.directory), recursive=False
        )
        self._observer.start()  # type: ignore[no-untyped-call]
        logger.info("Watching %s for extension changes", self.directory)

    def stop(self) -> None:
        """Stop observing. Safe to call multiple times."""
        self._handler.cancel()
        if self._observer is not None:
            self._observer.stop()  # type: ignore[no-untyped-call]
            self._observer.join(timeout=5.0)
            self._observer = None
            logger.info("Extension watcher stopped")


async def run_periodic(callback: SyncCallback, interval_minutes: float) -> None:
    """Call ``callback`` every ``interval_minutes`` until cancelled.

    An interval of 0 returns immediately. Errors escaping the callback
    are logged and do not stop the timer.
    """
    if interval_minutes <= 0:
        return

    interval = interval_minutes * 60
    logger.info("Periodic sync every %.1f minutes", interval_minutes)
    while True:
        await asyncio.sleep(interval)
        try:
            await callback()
        except Exception as e:
            logger.error("Periodic sync error: %s", e)
