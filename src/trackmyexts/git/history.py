"""Git history lookups for the snapshot file."""

from __future__ import annotations

from dataclasses import dataclass

from trackmyexts.core.constants import LOG_FIELD_SEPARATOR
from trackmyexts.core.logging import get_logger
from trackmyexts.git.repository import GitError, GitRepository

logger = get_logger("git.history")


@dataclass(frozen=True)
class Revision:
    """A commit that touched the snapshot file.

    Attributes:
        hash: Full commit hash.
        date: Author date as printed by ``%ai``.
        subject: First line of the commit message.
    """

    hash: str
    date: str
    subject: str

    @property
    def short_hash(self) -> str:
        """Abbreviated hash for display."""
        return self.hash[:7]

    def to_string(self) -> str:
        """Format as a single display line."""
        return f"{self.short_hash}  {self.date}  {self.subject}"


def parse_log(output: str) -> list[Revision]:
    """Parse ``git log --pretty=format:%H|%ai|%s`` output.

    The subject may itself contain the separator, so only the first two
    separators split fields. Malformed lines are skipped.
    """
    revisions = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = line.split(LOG_FIELD_SEPARATOR, 2)
        if len(parts) < 3 or not parts[0].strip():
            logger.debug("Skipping malformed log line: %s", line[:100])
            continue
        commit_hash, date, subject = parts
        revisions.append(Revision(hash=commit_hash.strip(), date=date.strip(), subject=subject))
    return revisions


class GitHistory:
    """Git history operations."""

    def __init__(self, repo: GitRepository) -> None:
        self.repo = repo

    async def get_revisions(self, path: str, count: int = 0) -> list[Revision]:
        """List commits touching a path, newest first.

        Args:
            path: Path relative to the repository root.
            count: Maximum number of revisions (0 = all).

        Returns:
            Revisions in the order git log emits them.
            Empty when the repository has no commits yet.

        Raises:
            GitError: If git log fails in a repository with commits.
        """
        sep = LOG_FIELD_SEPARATOR
        args = ["log", f"--pretty=format:%H{sep}%ai{sep}%s"]
        if count:
            args.append(f"-{count}")
        args.extend(["--", path])

        out, err, code = await self.repo.run_git(*args, check=False)
        if code != 0:
            if not await self.has_commits():
                logger.debug("Repository %s has no commits yet", self.repo.path)
                return []
            message = err.strip() or f"exit code {code}"
            raise GitError(f"git log failed: {message}", returncode=code, stderr=err)
        return parse_log(out)

    async def has_commits(self) -> bool:
        """Check whether HEAD points at a commit (false on a fresh clone or init)."""
        _, _, code = await self.repo.run_git("rev-parse", "--verify", "--quiet", "HEAD", check=False)
        return code == 0

    async def show_file(self, revision: str, path: str) -> str:
        """Get a file's content as of a revision.

        Raises:
            GitError: If the revision or path does not exist.
        """
        out, _, _ = await self.repo.run_git("show", f"{revision}:{path}")
        return out

    async def get_revision(self, ref: str) -> Revision:
        """Resolve a commit reference (full or abbreviated hash, branch, tag).

        Raises:
            GitError: If the reference does not name a commit.
        """
        sep = LOG_FIELD_SEPARATOR
        out, _, _ = await self.repo.run_git(
            "show", "-s", f"--pretty=format:%H{sep}%ai{sep}%s", f"{ref}^{{commit}}"
        )
        revisions = parse_log(out)
        if not revisions:
            raise GitError(f"Unknown revision: {ref}")
        return revisions[0]
