"""Commit message selection for snapshot updates."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from trackmyexts.core.constants import COMMIT_TIMESTAMP_FORMAT


def default_message(now: datetime | None = None) -> str:
    """Timestamped message used when no diff information is available."""
    now = now or datetime.now()
    return f"Update extensions: {now.strftime(COMMIT_TIMESTAMP_FORMAT)}"


def build_commit_message(
    added: Sequence[str],
    removed: Sequence[str],
    now: datetime | None = None,
) -> str:
    """Pick the commit message for a snapshot change.

    Priority: both kinds of change get a count summary, a single kind
    lists its identifiers, no change falls back to the timestamp.
    """
    if added and removed:
        return f"Update extensions: +{len(added)} added, -{len(removed)} removed"
    if added:
        return f"Installed: {', '.join(added)}"
    if removed:
        return f"Uninstalled: {', '.join(removed)}"
    return default_message(now)
