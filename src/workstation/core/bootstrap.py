"""Provisioning sequence for a fresh workstation."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from rich.prompt import Confirm

from .backup import ConfigFileWriter, WriteResult
from .commands import CommandRunner
from .config import Config
from .errors import PrivilegeViolation, ProvisionError, StageFailed
from .framework import ShellFrameworkInstaller
from .packages import PackageInstaller, PackageManager, detect_package_manager
from .repository import ExternalRepoRunner

logger = logging.getLogger(__name__)


class Stage(Enum):
    """Stages of a provisioning run, in order.

    Each value describes the work done to reach the stage.
    """

    START = "starting"
    PACKAGES_INSTALLED = "installing packages"
    SHELL_FRAMEWORK_INSTALLED = "installing Oh My Zsh"
    EDITOR_CONFIG_WRITTEN = "writing the vim configuration"
    EXTERNAL_TMUX_CONFIG_APPLIED = "applying the tmux configuration"
    SHELL_CONFIG_WRITTEN = "writing the zsh configuration"
    FONTS_INSTALLED = "installing Nerd Fonts"
    DONE = "finishing"


@dataclass
class ProvisionResult:
    """What a provisioning run got through.

    Attributes:
        stages: Stages reached, in order.
        package_manager: The package manager used, once detected.
        writes: Results of the configuration file writes.
    """

    stages: List[Stage] = field(default_factory=list)
    package_manager: Optional[PackageManager] = None
    writes: List[WriteResult] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        """Check if the run reached the final stage."""
        return bool(self.stages) and self.stages[-1] is Stage.DONE


class Provisioner:
    """Runs the provisioning stages one after another.

    The sequence is linear. The first failure aborts the run with a
    StageFailed error naming the stage that was being attempted; nothing is
    retried or resumed. Running again from the start is safe because package
    installs are repeatable, file writes back up first, and external scripts
    run in throwaway clones.
    """

    def __init__(
        self,
        config: Config,
        runner: Optional[CommandRunner] = None,
        writer: Optional[ConfigFileWriter] = None,
        repo_runner: Optional[ExternalRepoRunner] = None,
        which: Callable[[str], Optional[str]] = shutil.which,
        geteuid: Callable[[], int] = os.geteuid,
        confirm: Callable[[str], bool] = Confirm.ask,
    ) -> None:
        """Initialize the provisioner.

        Args:
            config: Provisioner configuration.
            runner: Command runner shared by all stages.
            writer: Configuration file writer.
            repo_runner: Runner for external repository scripts.
            which: Executable lookup used for package manager detection.
            geteuid: Returns the effective user id.
            confirm: Asks the user a yes/no question.
        """
        self.config = config
        self.runner = runner or CommandRunner()
        self.writer = writer or ConfigFileWriter(dry_run=self.runner.dry_run)
        self.repo_runner = repo_runner or ExternalRepoRunner(self.runner)
        self.which = which
        self.geteuid = geteuid
        self.confirm = confirm

    def check_privileges(self) -> None:
        """Refuse to run as root.

        Raises:
            PrivilegeViolation: If the effective user is root.
        """
        if self.geteuid() == 0:
            raise PrivilegeViolation()

    def install_packages(self, result: ProvisionResult) -> None:
        """Detect the package manager and install the configured packages."""
        logger.info("Installing required packages...")
        manager = detect_package_manager(self.which)
        result.package_manager = manager
        PackageInstaller(manager, self.runner).install(self.config.packages)

    def install_shell_framework(self, result: ProvisionResult) -> None:
        """Install Oh My Zsh if it is missing."""
        section = self.config.section("oh_my_zsh")
        installer = ShellFrameworkInstaller(
            section["url"], self.config.resolve_path(section["dir"]), self.runner
        )
        installer.install()

    def write_editor_config(self, result: ProvisionResult) -> None:
        """Write the vim configuration."""
        self._write_section("vim", result)

    def apply_tmux_config(self, result: ProvisionResult) -> None:
        """Run the external tmux configuration script."""
        section = self.config.section("tmux")
        self.repo_runner.run(section["repo"], section["script"])

    def write_shell_config(self, result: ProvisionResult) -> None:
        """Write the zsh configuration."""
        self._write_section("zsh", result)

    def install_fonts(self, result: ProvisionResult) -> None:
        """Run the external Nerd Fonts installer."""
        section = self.config.section("fonts")
        self.repo_runner.run(section["repo"], section["script"])

    def wants_fonts(self) -> bool:
        """Decide whether the optional fonts stage runs."""
        mode = self.config.font_mode
        if mode == "always":
            return True
        if mode == "ask":
            return self.confirm("Would you like to install Nerd Fonts?")
        return False

    def _write_section(self, name: str, result: ProvisionResult) -> None:
        section = self.config.section(name)
        path = self.config.resolve_path(section["path"])
        result.writes.append(self.writer.write(path, section["content"]))

    def _advance(
        self,
        stage: Stage,
        step: Callable[[ProvisionResult], None],
        result: ProvisionResult,
    ) -> None:
        try:
            step(result)
        except (ProvisionError, OSError) as e:
            raise StageFailed(stage.name, stage.value, e) from e
        result.stages.append(stage)
        logger.debug("Reached stage %s", stage.name)

    def provision(self) -> ProvisionResult:
        """Provision the workstation.

        Returns:
            ProvisionResult: The stages reached and the files written.

        Raises:
            PrivilegeViolation: If run as root.
            StageFailed: If any stage fails.
        """
        self.check_privileges()

        result = ProvisionResult(stages=[Stage.START])
        self._advance(Stage.PACKAGES_INSTALLED, self.install_packages, result)
        self._advance(Stage.SHELL_FRAMEWORK_INSTALLED, self.install_shell_framework, result)
        self._advance(Stage.EDITOR_CONFIG_WRITTEN, self.write_editor_config, result)
        self._advance(Stage.EXTERNAL_TMUX_CONFIG_APPLIED, self.apply_tmux_config, result)
        self._advance(Stage.SHELL_CONFIG_WRITTEN, self.write_shell_config, result)
        if self.wants_fonts():
            self._advance(Stage.FONTS_INSTALLED, self.install_fonts, result)
        result.stages.append(Stage.DONE)

        logger.info(
            "Configuration complete! Please restart your terminal for changes to take effect."
        )
        return result
