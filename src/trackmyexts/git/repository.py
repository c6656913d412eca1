"""Git repository access through the git command line."""

from __future__ import annotations

from pathlib import Path

from trackmyexts.core.errors import TrackMyExtsError
from trackmyexts.core.logging import get_logger
from trackmyexts.core.process import ProcessTimeoutError, run_process

logger = get_logger("git.repository")


class GitError(TrackMyExtsError):
    """A git command failed.

    Attributes:
        returncode: Exit code of the git process.
        stderr: Captured error output.
    """

    def __init__(self, message: str, returncode: int = 1, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


def is_remote_url(value: str) -> bool:
    """Check whether a repository setting names a remote rather than a path."""
    return value.startswith("http") or value.startswith("git@")


class GitRepository:
    """A local git working copy.

    All commands run with the repository root as working directory.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        binary: str = "git",
        timeout: float | None = None,
    ) -> None:
        """Initialize repository.

        Args:
            path: Working copy root. Defaults to the current directory.
            binary: Git executable.
            timeout: Per-command timeout in seconds (None/0 = no limit).
        """
        self._path = Path(path) if path is not None else Path.cwd()
        self._binary = binary
        self._timeout = timeout or None

    @property
    def path(self) -> Path:
        """Get the working copy root."""
        return self._path

    async def run_git(
        self,
        *args: str,
        check: bool = True,
        cwd: Path | None = None,
    ) -> tuple[str, str, int]:
        """Run a git command.

        Args:
            *args: Git arguments (without the binary).
            check: Raise GitError on non-zero exit.
            cwd: Override the working directory.

        Returns:
            Tuple of (stdout, stderr, returncode).

        Raises:
            GitError: If git cannot be started, times out, or (with
                check) exits non-zero.
        """
        try:
            stdout, stderr, code = await run_process(
                self._binary,
                *args,
                cwd=cwd or self._path,
                timeout=self._timeout,
            )
        except ProcessTimeoutError as e:
            raise GitError(str(e), returncode=-1) from e
        except OSError as e:
            raise GitError(f"Cannot run {self._binary}: {e}", returncode=-1) from e

        if check and code != 0:
            command = args[0] if args else ""
            message = stderr.strip() or stdout.strip() or f"exit code {code}"
            logger.debug("git %s failed (%d): %s", command, code, message)
            raise GitError(f"git {command} failed: {message}", returncode=code, stderr=stderr)

        return stdout, stderr, code

    async def is_repository(self) -> bool:
        """Check whether the path is inside a git working copy."""
        if not self._path.is_dir():
            return False
        try:
            out, _, code = await self.run_git("rev-parse", "--git-dir", check=False)
        except GitError:
            return False
        return code == 0 and bool(out.strip())

    @classmethod
    async def clone(
        cls,
        url: str,
        destination: Path,
        binary: str = "git",
        timeout: float | None = None,
    ) -> GitRepository:
        """Clone a remote repository.

        Args:
            url: Remote URL.
            destination: Target folder (must not exist yet).
            binary: Git executable.
            timeout: Per-command timeout in seconds.

        Returns:
            Repository for the new working copy.

        Raises:
            GitError: If the clone fails.
        """
        repo = cls(destination, binary=binary, timeout=timeout)
        destination.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Cloning %s into %s", url, destination)
        await repo.run_git("clone", url, str(destination), cwd=destination.parent)
        return repo
