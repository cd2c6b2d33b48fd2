"""Oh My Zsh installation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .commands import CommandRunner

logger = logging.getLogger(__name__)


class ShellFrameworkInstaller:
    """Installs Oh My Zsh unless it is already present.

    The upstream install script is fetched with curl and run unattended with
    RUNZSH=no, so it neither prompts nor replaces the running shell.
    """

    def __init__(self, url: str, target_dir: Path, runner: Optional[CommandRunner] = None) -> None:
        """Initialize the installer.

        Args:
            url: Location of the upstream install script.
            target_dir: Directory the framework installs into.
            runner: Command runner (None for a default one).
        """
        self.url = url
        self.target_dir = Path(target_dir)
        self.runner = runner or CommandRunner()

    def is_installed(self) -> bool:
        """Check if the framework directory exists."""
        return self.target_dir.is_dir()

    def install(self) -> bool:
        """Install the framework if needed.

        Returns:
            bool: True if the installer ran, False if it was already installed.

        Raises:
            CommandFailure: If downloading or running the installer fails.
        """
        if self.is_installed():
            logger.info("Oh My Zsh already installed")
            return False

        logger.info("Installing Oh My Zsh...")
        script = self.runner.run(["curl", "-fsSL", self.url], capture=True)
        self.runner.run(
            ["sh", "-c", script, "", "--unattended"],
            env={"RUNZSH": "no", "ZSH": str(self.target_dir)},
        )
        return True
