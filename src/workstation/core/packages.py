"""Package manager detection and package installation."""

from __future__ import annotations

import logging
import shutil
from enum import Enum
from typing import Callable, List, Optional, Sequence

from .commands import CommandRunner
from .errors import UnsupportedEnvironment

logger = logging.getLogger(__name__)


class PackageManager(Enum):
    """Package managers the provisioner knows how to drive."""

    APT = "apt"
    DNF = "dnf"
    YUM = "yum"
    UNSUPPORTED = "unsupported"


# Probe order matters: the first executable found wins
DETECTION_ORDER = (PackageManager.APT, PackageManager.DNF, PackageManager.YUM)


def detect_package_manager(
    which: Callable[[str], Optional[str]] = shutil.which,
) -> PackageManager:
    """Detect the system package manager.

    Args:
        which: Lookup for an executable on the search path. Defaults to
               shutil.which.

    Returns:
        PackageManager: The first of apt, dnf and yum that is available.

    Raises:
        UnsupportedEnvironment: If none of them is available.
    """
    for manager in DETECTION_ORDER:
        if which(manager.value):
            logger.debug("Detected package manager: %s", manager.value)
            return manager
    raise UnsupportedEnvironment()


class PackageInstaller:
    """Installs packages with a specific package manager.

    Each run refreshes the package index and then installs the requested
    packages, both through sudo. The first failing command aborts the run.
    """

    def __init__(self, manager: PackageManager, runner: Optional[CommandRunner] = None) -> None:
        """Initialize the installer.

        Raises:
            UnsupportedEnvironment: If manager is PackageManager.UNSUPPORTED.
        """
        if manager is PackageManager.UNSUPPORTED:
            raise UnsupportedEnvironment()
        self.manager = manager
        self.runner = runner or CommandRunner()

    def update_command(self) -> List[str]:
        """Build the command that refreshes the package index."""
        if self.manager is PackageManager.APT:
            return ["sudo", "apt", "update"]
        return ["sudo", self.manager.value, "update", "-y"]

    def install_command(self, packages: Sequence[str]) -> List[str]:
        """Build the command that installs packages."""
        return ["sudo", self.manager.value, "install", "-y", *packages]

    def install(self, packages: Sequence[str]) -> None:
        """Update the package index, then install packages.

        Args:
            packages: Package names to install.

        Raises:
            CommandFailure: If either the update or the install step fails.
        """
        logger.info("Updating package index with %s", self.manager.value)
        self.runner.run(self.update_command())

        logger.info("Installing packages: %s", ", ".join(packages))
        self.runner.run(self.install_command(packages))
