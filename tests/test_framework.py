"""Tests for Oh My Zsh installation."""

from pathlib import Path

import pytest

from workstation.core.errors import CommandFailure
from workstation.core.framework import ShellFrameworkInstaller

URL = "https://example.com/install.sh"


def test_skip_when_installed(home: Path, recording_runner) -> None:
    """Test that an existing installation is left alone."""
    (home / ".oh-my-zsh").mkdir()
    installer = ShellFrameworkInstaller(URL, home / ".oh-my-zsh", recording_runner)

    assert installer.is_installed()
    assert not installer.install()
    assert recording_runner.calls == []


def test_install(home: Path, recording_runner) -> None:
    """Test downloading and running the installer unattended."""
    recording_runner.hook = lambda args, env: "echo install" if args[0] == "curl" else ""
    installer = ShellFrameworkInstaller(URL, home / ".oh-my-zsh", recording_runner)

    assert installer.install()

    assert recording_runner.calls == [
        ["curl", "-fsSL", URL],
        ["sh", "-c", "echo install", "", "--unattended"],
    ]
    assert recording_runner.envs[1] == {"RUNZSH": "no", "ZSH": str(home / ".oh-my-zsh")}


def test_download_failure(home: Path, recording_runner) -> None:
    """Test that a failed download stops before running anything."""
    recording_runner.fail_on = lambda args: args[0] == "curl"
    installer = ShellFrameworkInstaller(URL, home / ".oh-my-zsh", recording_runner)

    with pytest.raises(CommandFailure):
        installer.install()

    assert len(recording_runner.calls) == 1
