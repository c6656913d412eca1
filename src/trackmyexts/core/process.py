"""Async subprocess helper shared by the git and editor CLI wrappers."""

from __future__ import annotations

import asyncio
from pathlib import Path

from trackmyexts.core.logging import get_logger

logger = get_logger("process")


class ProcessTimeoutError(TimeoutError):
    """Raised when a command exceeds its timeout."""

    def __init__(self, args: tuple[str, ...], timeout: float) -> None:
        self.args_run = args
        self.timeout = timeout
        super().__init__(f"Command timed out after {timeout}s: {' '.join(args)}")


async def run_process(
    *args: str,
    cwd: Path | str | None = None,
    timeout: float | None = None,
) -> tuple[str, str, int]:
    """Run a command and capture its output.

    Args:
        *args: Program followed by its arguments.
        cwd: Working directory.
        timeout: Seconds to wait before killing the process. None or 0
            waits forever.

    Returns:
        Tuple of (stdout, stderr, returncode).

    Raises:
        OSError: If the program cannot be started (e.g. not installed).
        ProcessTimeoutError: If the timeout expired.
    """
    logger.debug("Running: %s (cwd=%s)", " ".join(args), cwd)

    process = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=str(cwd) if cwd is not None else None,
    )

    try:
        if timeout:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                process.communicate(), timeout=timeout
            )
        else:
            stdout_bytes, stderr_bytes = await process.communicate()
    except TimeoutError:
        process.kill()
        await process.wait()
        raise ProcessTimeoutError(args, timeout or 0) from None
    except asyncio.CancelledError:
        process.kill()
        await process.wait()
        raise

    stdout = stdout_bytes.decode("utf-8", errors="replace")
    stderr = stderr_bytes.decode("utf-8", errors="replace")
    returncode = process.returncode if process.returncode is not None else -1

    if returncode != 0:
        logger.debug("Command exited %d: %s", returncode, stderr.strip())

    return stdout, stderr, returncode
