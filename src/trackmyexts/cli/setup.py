"""Repository resolution for first use.

When no repository is configured the user is asked for one. A remote
URL is cloned into ``<chosen folder>/vscode-extension-history`` and the
local clone path is saved, so later runs go straight to the clone.
"""

from __future__ import annotations

from pathlib import Path

from trackmyexts.config.models import TrackMyExtsConfig
from trackmyexts.core.constants import CLONE_DIRNAME
from trackmyexts.core.errors import ConfigError
from trackmyexts.core.interfaces import IConfigLoader, IUserInterface
from trackmyexts.core.logging import get_logger
from trackmyexts.git.repository import GitRepository, is_remote_url

logger = get_logger("cli.setup")


async def resolve_repository(
    config: TrackMyExtsConfig,
    ui: IUserInterface,
    loader: IConfigLoader,
) -> GitRepository:
    """Find, clone or ask for the snapshot repository.

    Args:
        config: Loaded configuration.
        ui: Used to ask for the repository and clone folder.
        loader: Persists the chosen repository.

    Returns:
        The local working copy.

    Raises:
        ConfigError: If the user cancels or the path is not usable.
        GitError: If cloning fails.
    """
    value = config.repo_path
    if not value:
        value = ui.ask_repository()
        if not value:
            raise ConfigError("Sync cancelled. No path provided.")
        loader.save_user_setting("repo_path", value)

    if is_remote_url(value):
        parent = ui.ask_clone_parent()
        if parent is None:
            raise ConfigError("Sync cancelled. No folder selected.")
        target = parent / CLONE_DIRNAME
        if not target.exists():
            ui.info(f"Cloning {value} into {target}...")
            await GitRepository.clone(
                value, target, binary=config.git.binary, timeout=config.git.timeout
            )
        loader.save_user_setting("repo_path", str(target))
        value = str(target)

    path = Path(value).expanduser()
    if not path.exists():
        raise ConfigError("Invalid path. Please set a valid Git repository path.")

    repo = GitRepository(path, binary=config.git.binary, timeout=config.git.timeout)
    if not await repo.is_repository():
        raise ConfigError(f"{path} is not a Git repository.")

    logger.debug("Using repository %s", path)
    return repo
