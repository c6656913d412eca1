"""List differences used for commit messages and restore plans."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from trackmyexts.snapshot.models import RestorePlan

if TYPE_CHECKING:
    from trackmyexts.git.history import Revision


def exact_difference(source: Sequence[str], other: Iterable[str]) -> list[str]:
    """Items of ``source`` not in ``other`` (case-sensitive), source order.

    Used by the writer, where both sides come from the same serializer.
    """
    exclude = set(other)
    return [item for item in source if item not in exclude]


def casefold_difference(source: Sequence[str], other: Iterable[str]) -> list[str]:
    """Items of ``source`` not in ``other`` ignoring case, source order.

    Duplicates in ``source`` (under case folding) are reported once, in
    the form they first appear.
    """
    exclude = {item.casefold() for item in other}
    seen: set[str] = set()
    result = []
    for item in source:
        key = item.casefold()
        if key in exclude or key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result


def compute_restore_plan(
    snapshot_ids: Sequence[str],
    current_ids: Sequence[str],
    revision: Revision | None = None,
) -> RestorePlan:
    """Compute what to install and uninstall to reach a snapshot.

    Args:
        snapshot_ids: Identifiers recorded in the chosen snapshot.
        current_ids: Identifiers installed right now.
        revision: The revision the snapshot came from.
    """
    return RestorePlan(
        revision=revision,
        to_install=casefold_difference(snapshot_ids, current_ids),
        to_uninstall=casefold_difference(current_ids, snapshot_ids),
    )
