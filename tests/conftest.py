"""Test configuration."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from workstation.core.commands import CommandRunner
from workstation.core.config import Config
from workstation.core.errors import CommandFailure
from workstation.core.repository import ExternalRepoRunner


class RecordingRunner(CommandRunner):
    """Command runner that records commands instead of executing them."""

    def __init__(self) -> None:
        super().__init__(dry_run=False)
        self.calls: List[List[str]] = []
        self.envs: List[Optional[Dict[str, str]]] = []
        self.fail_on: Optional[Callable[[List[str]], bool]] = None
        self.hook: Optional[Callable[[List[str], Optional[Dict[str, str]]], str]] = None

    def run(
        self,
        argv: Sequence[str],
        cwd: Optional[object] = None,
        env: Optional[Dict[str, str]] = None,
        capture: bool = False,
    ) -> str:
        args = [str(arg) for arg in argv]
        self.calls.append(args)
        self.envs.append(env)
        if self.fail_on is not None and self.fail_on(args):
            raise CommandFailure(args, 1)
        if self.hook is not None:
            return self.hook(args, env) or ""
        return ""


class RecordingRepoRunner(ExternalRepoRunner):
    """External repository runner that records runs instead of cloning."""

    def __init__(self) -> None:
        super().__init__(RecordingRunner())
        self.runs: List[Tuple[str, str]] = []
        self.error: Optional[Exception] = None

    def run(self, repo_url: str, script: str) -> None:
        self.runs.append((repo_url, script))
        if self.error is not None:
            raise self.error


def install_oh_my_zsh(args: List[str], env: Optional[Dict[str, str]]) -> str:
    """Stand in for the Oh My Zsh installer by creating its directory."""
    if args[0] == "curl":
        return "echo installing"
    if args[0] == "sh" and env:
        Path(env["ZSH"]).mkdir(parents=True, exist_ok=True)
    return ""


def create_git_repo(repo_path: Path, files: Dict[str, str]) -> Path:
    """Create a Git repository with one commit holding the given files."""
    repo_path.mkdir(parents=True, exist_ok=True)
    subprocess.run(["git", "init"], cwd=repo_path, check=True, capture_output=True)
    subprocess.run(["git", "config", "user.name", "Test User"], cwd=repo_path, check=True)
    subprocess.run(["git", "config", "user.email", "test@example.com"], cwd=repo_path, check=True)
    for name, content in files.items():
        file_path = repo_path / name
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
    subprocess.run(["git", "add", "."], cwd=repo_path, check=True, capture_output=True)
    subprocess.run(
        ["git", "commit", "-m", "Initial commit"], cwd=repo_path, check=True, capture_output=True
    )
    return repo_path


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Create an empty home directory."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    return home_dir


@pytest.fixture
def test_config(home: Path) -> Config:
    """Create a configuration rooted at the temporary home directory."""
    config = Config()
    config._merge_config({"home": str(home)})
    return config


@pytest.fixture
def recording_runner() -> RecordingRunner:
    """Create a command runner that only records commands."""
    return RecordingRunner()


@pytest.fixture
def repo_runner() -> RecordingRepoRunner:
    """Create an external repository runner that only records runs."""
    return RecordingRepoRunner()


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Create a directory to hold scratch clones."""
    root = tmp_path / "workspaces"
    root.mkdir()
    return root


@pytest.fixture
def script_repo(tmp_path: Path) -> Path:
    """Create a repository whose script records where and that it ran."""
    return create_git_repo(
        tmp_path / "script_repo",
        {
            "setup.sh": '#!/bin/sh\necho ran > "$MARKER"\npwd >> "$MARKER"\n',
            "fail.sh": "#!/bin/sh\nexit 3\n",
        },
    )
