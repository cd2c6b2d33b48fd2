"""External repository handling for the provisioner."""

from __future__ import annotations

import logging
import stat
import subprocess
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Optional, Union

from .commands import CommandRunner
from .errors import CloneFailed, ScriptMissing

logger = logging.getLogger(__name__)


class GitRepository:
    """Represents a local clone of a Git repository.

    Attributes:
        path (Path): Path to the Git repository.
    """

    def __init__(self, path: Path):
        """Initialize repository."""
        self.path = Path(path).resolve()
        self.name = self.path.name

    def __str__(self) -> str:
        """Return string representation."""
        return f"GitRepository({self.path})"

    def __repr__(self) -> str:
        """Return string representation."""
        return self.__str__()

    @classmethod
    def clone(cls, url: str, destination: Path) -> "GitRepository":
        """Clone a repository into a directory.

        Args:
            url (str): Repository URL or local path.
            destination (Path): Empty or missing directory to clone into.

        Returns:
            GitRepository: The new clone.

        Raises:
            CloneFailed: If git cannot clone the repository.
        """
        try:
            subprocess.run(
                ["git", "clone", url, str(destination)],
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            if e.stderr:
                logger.error(e.stderr.strip())
            raise CloneFailed(url) from e
        except OSError as e:
            raise CloneFailed(url) from e
        return cls(destination)


class ExternalRepoRunner:
    """Clones a repository into a scratch directory and runs a script from it.

    The scratch directory belongs to a single run() call and is removed when
    the call returns or raises, whichever step failed.

    Attributes:
        runner (CommandRunner): Runs the repository script.
        workspace_root (Optional[Path]): Parent for scratch directories
            (None for the system temporary directory).
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        workspace_root: Optional[Union[str, Path]] = None,
    ) -> None:
        """Initialize the runner."""
        self.runner = runner or CommandRunner()
        self.workspace_root = workspace_root

    def run(self, repo_url: str, script: str) -> None:
        """Clone a repository and execute a script inside the clone.

        The script is made executable and runs with the clone as its working
        directory, inheriting the environment and standard streams.

        Args:
            repo_url (str): Repository to clone.
            script (str): Path of the script relative to the repository root.

        Raises:
            CloneFailed: If the repository cannot be cloned.
            ScriptMissing: If the clone has no such script.
            CommandFailure: If the script exits with a non-zero status.
        """
        if self.runner.dry_run:
            logger.info("Would clone %s and run %s", repo_url, script)
            return

        with TemporaryDirectory(prefix="workstation-", dir=self.workspace_root) as temp_dir:
            logger.info("Cloning %s to %s", repo_url, temp_dir)
            repo = GitRepository.clone(repo_url, Path(temp_dir))

            script_path = repo.path / script
            if not script_path.is_file():
                raise ScriptMissing(script, repo_url)

            mode = script_path.stat().st_mode
            script_path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

            logger.info("Running %s", script)
            self.runner.run([str(script_path)], cwd=repo.path)
