"""Primary/secondary execution for extension requests.

A request is first sent through the primary route. If that fails the
secondary route is tried for the same effect; only when both fail does
the caller see an error, and that error carries both causes.

Example:
    action = FallbackAction(
        name="install ms-python.python",
        primary=lambda: code_cli.install("ms-python.python"),
        secondary=lambda: codium_cli.install("ms-python.python"),
    )
    await action.run()
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from trackmyexts.core.errors import ExtensionManagerError, TrackMyExtsError
from trackmyexts.core.interfaces import IExtensionManager
from trackmyexts.core.logging import get_logger

logger = get_logger("extensions.fallback")


class FallbackExhausted(TrackMyExtsError):
    """Both the primary and the secondary route failed.

    Attributes:
        primary_error: Error from the primary route.
        secondary_error: Error from the secondary route.
    """

    def __init__(
        self,
        name: str,
        primary_error: Exception,
        secondary_error: Exception,
    ) -> None:
        self.name = name
        self.primary_error = primary_error
        self.secondary_error = secondary_error
        super().__init__(
            f"{name} failed: {primary_error}; fallback also failed: {secondary_error}"
        )


@dataclass
class FallbackAction:
    """One request with a primary and a secondary way of performing it.

    Attributes:
        name: Description used in logs and errors.
        primary: Coroutine factory for the preferred route.
        secondary: Coroutine factory for the alternate route.
    """

    name: str
    primary: Callable[[], Awaitable[None]]
    secondary: Callable[[], Awaitable[None]]

    async def run(self) -> bool:
        """Perform the request.

        Returns:
            True if the primary route succeeded, False if the secondary did.

        Raises:
            FallbackExhausted: If both routes raised ExtensionManagerError.
        """
        try:
            await self.primary()
            return True
        except ExtensionManagerError as primary_error:
            logger.info("%s: primary route failed (%s), trying fallback", self.name, primary_error)
            try:
                await self.secondary()
            except ExtensionManagerError as secondary_error:
                logger.warning("%s: fallback failed: %s", self.name, secondary_error)
                raise FallbackExhausted(self.name, primary_error, secondary_error) from secondary_error
            return False


class FallbackExtensionManager(IExtensionManager):
    """Extension manager that routes each request through a FallbackAction.

    Listing only uses the primary manager.
    """

    def __init__(self, primary: IExtensionManager, secondary: IExtensionManager) -> None:
        self.primary = primary
        self.secondary = secondary

    async def list_installed(self) -> list[str]:
        return await self.primary.list_installed()

    async def install(self, extension_id: str) -> None:
        await FallbackAction(
            name=f"install {extension_id}",
            primary=lambda: self.primary.install(extension_id),
            secondary=lambda: self.secondary.install(extension_id),
        ).run()

    async def uninstall(self, extension_id: str) -> None:
        await FallbackAction(
            name=f"uninstall {extension_id}",
            primary=lambda: self.primary.uninstall(extension_id),
            secondary=lambda: self.secondary.uninstall(extension_id),
        ).run()
