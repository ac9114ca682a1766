"""Tests for the repository publisher."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from distpack.errors import PackagerProcessingError
from distpack.git.publisher import RepositoryPublisher, RepositoryTarget

TARGET = RepositoryTarget(
    clone_url="https://github.com/acme/chocolatey-bucket.git",
    branch="main",
    message="foo 1.0.0",
    author_name="Release Bot",
    author_email="bot@example.com",
)


def _package(tmp_path: Path) -> Path:
    package = tmp_path / "package"
    (package / "foo").mkdir(parents=True)
    (package / "foo" / "foo.nuspec").write_text("<package/>", encoding="utf-8")
    (package / "README.md").write_text("readme", encoding="utf-8")
    return package


def _cloning_runner(calls: list, status: str = " M foo/foo.nuspec\n"):
    def runner(args, cwd, env=None, capture_output=False):  # type: ignore[no-untyped-def]
        calls.append((list(args), Path(cwd), env, capture_output))
        if args[:2] == ["git", "clone"]:
            Path(args[-1]).mkdir(parents=True)
        if capture_output and args == ["git", "status", "--porcelain"]:
            return status
        return ""

    return runner


def test_publish_clones_copies_commits_and_pushes(tmp_path: Path) -> None:
    package = _package(tmp_path)
    checkout = tmp_path / "checkout"
    calls: list = []

    result = RepositoryPublisher(runner=_cloning_runner(calls)).publish(
        package, TARGET, checkout_directory=checkout
    )

    assert result is True
    commands = [call[0] for call in calls]
    assert commands[0] == [
        "git",
        "clone",
        "--depth",
        "1",
        "--branch",
        "main",
        TARGET.clone_url,
        str(checkout),
    ]
    assert commands[1] == ["git", "add", "--all"]
    assert commands[2] == ["git", "status", "--porcelain"]
    assert commands[3] == ["git", "commit", "-m", "foo 1.0.0"]
    assert commands[4] == ["git", "push", "origin", "HEAD:main"]
    assert calls[3][2]["GIT_AUTHOR_NAME"] == "Release Bot"
    assert calls[3][2]["GIT_COMMITTER_EMAIL"] == "bot@example.com"
    assert all(call[1] == checkout for call in calls[1:])
    assert (checkout / "foo" / "foo.nuspec").read_text(encoding="utf-8") == "<package/>"
    assert (checkout / "README.md").is_file()


def test_publish_without_changes_does_not_commit(tmp_path: Path) -> None:
    calls: list = []

    result = RepositoryPublisher(runner=_cloning_runner(calls, status="")).publish(
        _package(tmp_path), TARGET, checkout_directory=tmp_path / "checkout"
    )

    assert result is False
    assert [call[0][1] for call in calls] == ["clone", "add", "status"]


def test_dry_run_runs_no_git_commands(tmp_path: Path) -> None:
    calls: list = []

    result = RepositoryPublisher(runner=_cloning_runner(calls)).publish(
        _package(tmp_path), TARGET, checkout_directory=tmp_path / "checkout", dry_run=True
    )

    assert result is False
    assert calls == []


def test_existing_checkout_is_replaced(tmp_path: Path) -> None:
    checkout = tmp_path / "checkout"
    checkout.mkdir()
    (checkout / "stale.txt").write_text("old", encoding="utf-8")
    calls: list = []

    RepositoryPublisher(runner=_cloning_runner(calls)).publish(
        _package(tmp_path), TARGET, checkout_directory=checkout
    )

    assert not (checkout / "stale.txt").exists()


def test_failed_git_command_raises_processing_error(tmp_path: Path) -> None:
    def runner(args, cwd, env=None, capture_output=False):  # type: ignore[no-untyped-def]
        raise subprocess.CalledProcessError(128, list(args))

    with pytest.raises(PackagerProcessingError, match="git clone failed with exit code 128"):
        RepositoryPublisher(runner=runner).publish(
            _package(tmp_path), TARGET, checkout_directory=tmp_path / "checkout"
        )


def test_default_runner_tolerates_undecodable_output(tmp_path: Path) -> None:
    script = "import sys; sys.stdout.buffer.write(b'\\xff M caf\\xe9')"

    output = RepositoryPublisher._default_runner(
        [sys.executable, "-c", script], cwd=tmp_path, capture_output=True
    )

    assert "M caf" in output
