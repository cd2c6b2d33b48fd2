"""Command execution for the provisioner."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .errors import CommandFailure

logger = logging.getLogger(__name__)


def command_exists(name: str) -> bool:
    """Check if an executable is resolvable on the search path."""
    return shutil.which(name) is not None


def format_argv(argv: Sequence[str]) -> str:
    """Render an argument vector the way a shell user would type it."""
    return " ".join(shlex.quote(arg) for arg in argv)


class CommandRunner:
    """Runs external commands, failing fast on a non-zero exit status.

    Commands are always argument vectors. Standard streams are inherited from
    the parent process unless output capture is requested, so package manager
    progress and third-party installer prompts reach the user unchanged.

    Attributes:
        dry_run (bool): If True, commands are logged but never executed.
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the runner."""
        self.dry_run = dry_run

    def run(
        self,
        argv: Sequence[str],
        cwd: Optional[Union[str, Path]] = None,
        env: Optional[Dict[str, str]] = None,
        capture: bool = False,
    ) -> str:
        """Run a command and return its captured standard output.

        Args:
            argv: Command and its arguments.
            cwd: Working directory for the command (None for the current one).
            env: Extra environment variables layered over the parent environment.
            capture: Capture standard output instead of inheriting it.

        Returns:
            str: Captured standard output, or an empty string when output was
                 not captured or the runner is in dry-run mode.

        Raises:
            CommandFailure: If the command exits with a non-zero status or
                            cannot be started.
        """
        args: List[str] = [str(arg) for arg in argv]
        if self.dry_run:
            logger.info("Would run: %s", format_argv(args))
            return ""

        logger.debug("Running: %s", format_argv(args))
        try:
            result = subprocess.run(
                args,
                cwd=cwd,
                env={**os.environ, **env} if env else None,
                stdout=subprocess.PIPE if capture else None,
                text=True,
                check=False,
            )
        except OSError as e:
            logger.debug("Could not start %s: %s", args[0], e)
            raise CommandFailure(args, 127) from e

        if result.returncode != 0:
            raise CommandFailure(args, result.returncode)
        return result.stdout or ""
