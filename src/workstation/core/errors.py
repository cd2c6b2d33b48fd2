"""Error types raised while provisioning a workstation.

Every error is fatal. Nothing in the core package recovers from these; they
unwind to the command line interface, which reports them and exits non-zero.
"""

from __future__ import annotations

from typing import Optional, Sequence


class ProvisionError(RuntimeError):
    """Base class for all provisioning failures."""


class PrivilegeViolation(ProvisionError):
    """Raised when the provisioner is run as the root user."""

    def __init__(self) -> None:
        super().__init__("This tool should not be run as root")


class UnsupportedEnvironment(ProvisionError):
    """Raised when no known package manager is available."""

    def __init__(self, message: str = "Unsupported package manager") -> None:
        super().__init__(message)


class CommandFailure(ProvisionError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        super().__init__(f"Command failed ({returncode}): {' '.join(self.argv)}")


class CloneFailed(ProvisionError):
    """Raised when a remote repository cannot be cloned."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Failed to clone repository {url}")


class ScriptMissing(ProvisionError):
    """Raised when a cloned repository lacks the expected script."""

    def __init__(self, script: str, url: str) -> None:
        self.script = script
        self.url = url
        super().__init__(f"{script} not found in repository {url}")


class ConfigWriteError(ProvisionError):
    """Raised when a configuration file cannot be written."""


class ConfigError(ProvisionError, ValueError):
    """Raised when the provisioner configuration is invalid."""


class StageFailed(ProvisionError):
    """Wraps the error that aborted a provisioning stage.

    Attributes:
        stage: Name of the stage that could not be reached.
        cause: The underlying error.
    """

    def __init__(self, stage: str, action: str, cause: Optional[BaseException] = None) -> None:
        self.stage = stage
        self.cause = cause
        message = f"Error occurred while {action}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
