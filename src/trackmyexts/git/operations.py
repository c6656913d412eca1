"""Git write operations: stage, commit, push."""

from __future__ import annotations

from typing import TYPE_CHECKING

from trackmyexts.core.logging import get_logger

if TYPE_CHECKING:
    from .repository import GitRepository

logger = get_logger("git.operations")


class GitOperations:
    """Git operations that modify the repository or its remote."""

    def __init__(self, repo: GitRepository) -> None:
        self.repo = repo

    async def stage(self, paths: list[str]) -> None:
        """Stage files."""
        if not paths:
            return
        await self.repo.run_git("add", "--", *paths)

    async def commit(self, message: str) -> None:
        """Commit staged changes.

        Raises:
            GitError: If the commit fails.
        """
        await self.repo.run_git("commit", "-m", message)
        logger.info("Committed: %s", message)

    async def push(self) -> None:
        """Push the current branch to its upstream.

        Raises:
            GitError: If the push fails.
        """
        await self.repo.run_git("push")
        logger.info("Pushed to remote")
