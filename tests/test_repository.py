"""Tests for external repository handling."""

from pathlib import Path

import pytest

from workstation.core.commands import CommandRunner
from workstation.core.errors import CloneFailed, CommandFailure, ScriptMissing
from workstation.core.repository import ExternalRepoRunner, GitRepository


@pytest.fixture
def marker(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the test scripts at a marker file outside the clone."""
    marker_path = tmp_path / "marker.txt"
    monkeypatch.setenv("MARKER", str(marker_path))
    return marker_path


@pytest.fixture
def runner(workspace_root: Path) -> ExternalRepoRunner:
    """Create an external repository runner using scratch clones."""
    return ExternalRepoRunner(CommandRunner(), workspace_root=workspace_root)


def test_clone(script_repo: Path, tmp_path: Path) -> None:
    """Test cloning a repository."""
    repo = GitRepository.clone(str(script_repo), tmp_path / "clone")
    assert repo.name == "clone"
    assert (repo.path / "setup.sh").exists()


def test_clone_failure(tmp_path: Path) -> None:
    """Test cloning a repository that does not exist."""
    with pytest.raises(CloneFailed):
        GitRepository.clone(str(tmp_path / "missing"), tmp_path / "clone")


def test_run_script(
    runner: ExternalRepoRunner, script_repo: Path, workspace_root: Path, marker: Path
) -> None:
    """Test that the script runs inside the clone and the clone is removed."""
    runner.run(str(script_repo), "setup.sh")

    lines = marker.read_text().splitlines()
    assert lines[0] == "ran"
    assert "workstation-" in Path(lines[1]).name
    assert not list(workspace_root.iterdir())


def test_run_unreachable_repository(
    runner: ExternalRepoRunner, tmp_path: Path, workspace_root: Path
) -> None:
    """Test that a failed clone leaves no scratch directory behind."""
    with pytest.raises(CloneFailed):
        runner.run(str(tmp_path / "missing"), "setup.sh")

    assert not list(workspace_root.iterdir())


def test_run_missing_script(
    runner: ExternalRepoRunner, script_repo: Path, workspace_root: Path, marker: Path
) -> None:
    """Test that a missing script fails and leaves no scratch directory behind."""
    with pytest.raises(ScriptMissing) as excinfo:
        runner.run(str(script_repo), "install.sh")

    assert excinfo.value.script == "install.sh"
    assert not marker.exists()
    assert not list(workspace_root.iterdir())


def test_run_failing_script(
    runner: ExternalRepoRunner, script_repo: Path, workspace_root: Path
) -> None:
    """Test that a failing script is reported and the clone is removed."""
    with pytest.raises(CommandFailure) as excinfo:
        runner.run(str(script_repo), "fail.sh")

    assert excinfo.value.returncode == 3
    assert not list(workspace_root.iterdir())


def test_run_dry_run(script_repo: Path, workspace_root: Path, marker: Path) -> None:
    """Test that dry-run mode neither clones nor runs anything."""
    runner = ExternalRepoRunner(CommandRunner(dry_run=True), workspace_root=workspace_root)

    runner.run(str(script_repo), "setup.sh")

    assert not marker.exists()
    assert not list(workspace_root.iterdir())
