"""Git status operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from trackmyexts.core.logging import get_logger

if TYPE_CHECKING:
    from .repository import GitRepository

logger = get_logger("git.status")


@dataclass
class FileStatus:
    """Status of a single file."""

    path: str
    status: str  # M, A, D, R, C, U, ?
    staged: bool

    @property
    def status_name(self) -> str:
        """Human-readable status name."""
        names = {
            "M": "modified",
            "A": "added",
            "D": "deleted",
            "R": "renamed",
            "C": "copied",
            "U": "unmerged",
            "?": "untracked",
        }
        return names.get(self.status, "unknown")


@dataclass
class GitStatus:
    """Working tree status, as reported by ``git status --porcelain``."""

    staged: list[FileStatus] = field(default_factory=list)
    unstaged: list[FileStatus] = field(default_factory=list)
    untracked: list[FileStatus] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        """Check if there is nothing to commit."""
        return not (self.staged or self.unstaged or self.untracked)

    @property
    def total_changes(self) -> int:
        """Total number of changed entries."""
        return len(self.staged) + len(self.unstaged) + len(self.untracked)


def parse_porcelain(output: str) -> GitStatus:
    """Parse ``git status --porcelain`` (v1) output.

    Each line is ``XY path``; X is the index column and Y the worktree
    column, ``??`` marks untracked files.
    """
    status = GitStatus()

    for line in output.splitlines():
        if not line.strip():
            continue
        if len(line) < 4:
            logger.warning("Unexpected git status line: %s", line[:100])
            continue

        xy, path = line[:2], line[3:]
        # Renames are reported as "old -> new"
        if " -> " in path:
            path = path.split(" -> ", 1)[1]

        if xy == "??":
            status.untracked.append(FileStatus(path=path, status="?", staged=False))
            continue
        if xy[0] not in (" ", "?"):
            status.staged.append(FileStatus(path=path, status=xy[0], staged=True))
        if xy[1] not in (" ", "?"):
            status.unstaged.append(FileStatus(path=path, status=xy[1], staged=False))

    return status


class GitStatusTool:
    """Git status operations."""

    def __init__(self, repo: GitRepository) -> None:
        self.repo = repo

    async def get_status(self, *paths: str) -> GitStatus:
        """Get porcelain status, optionally limited to some paths."""
        args = ["status", "--porcelain"]
        if paths:
            args.append("--")
            args.extend(paths)
        out, _, _ = await self.repo.run_git(*args)
        return parse_porcelain(out)

    async def has_changes(self, *paths: str) -> bool:
        """Check whether anything would be committed for the given paths."""
        status = await self.get_status(*paths)
        return not status.is_clean
