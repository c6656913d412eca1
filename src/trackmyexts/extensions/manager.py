"""Editor extension manager backed by the editor's command line."""

from __future__ import annotations

from trackmyexts.config.models import EditorConfig
from trackmyexts.core.errors import ExtensionManagerError
from trackmyexts.core.interfaces import IExtensionManager
from trackmyexts.core.logging import get_logger
from trackmyexts.core.process import ProcessTimeoutError, run_process
from trackmyexts.extensions.fallback import FallbackExtensionManager

logger = get_logger("extensions.manager")


class EditorExtensionManager(IExtensionManager):
    """Lists, installs and uninstalls extensions through ``code``-style CLIs.

    ``--list-extensions`` only reports user-installed extensions, so
    built-in ones never reach a snapshot.
    """

    def __init__(
        self,
        cli: str = "code",
        timeout: float | None = None,
        force: bool = False,
    ) -> None:
        """Initialize manager.

        Args:
            cli: Editor executable.
            timeout: Per-command timeout in seconds (None/0 = no limit).
            force: Pass ``--force`` to install requests.
        """
        self.cli = cli
        self.timeout = timeout or None
        self.force = force

    async def _run(self, *args: str, extension_id: str | None = None) -> str:
        try:
            stdout, stderr, code = await run_process(self.cli, *args, timeout=self.timeout)
        except ProcessTimeoutError as e:
            raise ExtensionManagerError(str(e), extension_id=extension_id) from e
        except OSError as e:
            raise ExtensionManagerError(
                f"Cannot run {self.cli}: {e}", extension_id=extension_id
            ) from e

        if code != 0:
            detail = stderr.strip() or stdout.strip() or f"exit code {code}"
            raise ExtensionManagerError(
                f"{self.cli} {args[0]} failed: {detail}",
                extension_id=extension_id,
                returncode=code,
                stderr=stderr,
            )
        return stdout

    async def list_installed(self) -> list[str]:
        out = await self._run("--list-extensions")
        return [line.strip() for line in out.splitlines() if line.strip()]

    async def install(self, extension_id: str) -> None:
        args = ["--install-extension", extension_id]
        if self.force:
            args.append("--force")
        await self._run(*args, extension_id=extension_id)
        logger.info("Installed %s", extension_id)

    async def uninstall(self, extension_id: str) -> None:
        await self._run("--uninstall-extension", extension_id, extension_id=extension_id)
        logger.info("Uninstalled %s", extension_id)


def create_extension_manager(config: EditorConfig) -> IExtensionManager:
    """Build the extension manager described by the editor settings.

    The secondary route is ``fallback_cli`` when configured, otherwise
    the same CLI retried with ``--force``.
    """
    primary = EditorExtensionManager(config.cli, timeout=config.timeout)
    if config.fallback_cli:
        secondary = EditorExtensionManager(config.fallback_cli, timeout=config.timeout)
    else:
        secondary = EditorExtensionManager(config.cli, timeout=config.timeout, force=True)
    return FallbackExtensionManager(primary, secondary)
