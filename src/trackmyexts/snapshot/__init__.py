"""Snapshot recording and restoring."""

from trackmyexts.snapshot.diff import (
    casefold_difference,
    compute_restore_plan,
    exact_difference,
)
from trackmyexts.snapshot.messages import build_commit_message, default_message
from trackmyexts.snapshot.models import (
    RestorePlan,
    RestoreResult,
    SnapshotDocument,
    SyncResult,
)
from trackmyexts.snapshot.reconciler import SnapshotReconciler
from trackmyexts.snapshot.state import (
    InvalidRestoreTransition,
    RestoreState,
    RestoreStateMachine,
)
from trackmyexts.snapshot.writer import SnapshotWriter

__all__ = [
    "InvalidRestoreTransition",
    "RestorePlan",
    "RestoreResult",
    "RestoreState",
    "RestoreStateMachine",
    "SnapshotDocument",
    "SnapshotReconciler",
    "SnapshotWriter",
    "SyncResult",
    "build_commit_message",
    "casefold_difference",
    "compute_restore_plan",
    "default_message",
    "exact_difference",
]
