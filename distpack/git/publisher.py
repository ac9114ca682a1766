"""Publishing packaged files into a package manager repository."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from ..errors import PackagerProcessingError
from ..logging import get_logger


@dataclass(frozen=True)
class RepositoryTarget:
    """Where the repository publisher pushes packaged files for remote builds."""

    clone_url: str
    branch: str
    message: str
    author_name: str
    author_email: str


class RepositoryPublisher:
    """Clones the bucket repository, copies the package tree in and pushes it."""

    def __init__(
        self,
        runner: Callable[..., str] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._runner = runner or self._default_runner
        self.logger = logger or get_logger("git")

    def publish(
        self,
        package_directory: Path,
        target: RepositoryTarget,
        *,
        checkout_directory: Path,
        dry_run: bool = False,
    ) -> bool:
        """Push the contents of ``package_directory`` to ``target``.

        Returns True when a commit was pushed, False on dry run or when the
        repository already holds identical files.
        """
        if dry_run:
            self.logger.warning(
                "Dry run: not pushing %s to %s", package_directory, target.clone_url
            )
            return False

        if checkout_directory.exists():
            shutil.rmtree(checkout_directory)
        checkout_directory.parent.mkdir(parents=True, exist_ok=True)

        self._run(
            [
                "git",
                "clone",
                "--depth",
                "1",
                "--branch",
                target.branch,
                target.clone_url,
                str(checkout_directory),
            ],
            cwd=checkout_directory.parent,
        )

        self._copy_tree(package_directory, checkout_directory)

        self._run(["git", "add", "--all"], cwd=checkout_directory)
        status = self._run(
            ["git", "status", "--porcelain"], cwd=checkout_directory, capture_output=True
        )
        if not status.strip():
            self.logger.info("No changes to publish to %s", target.clone_url)
            return False

        env = os.environ.copy()
        env["GIT_AUTHOR_NAME"] = target.author_name
        env["GIT_AUTHOR_EMAIL"] = target.author_email
        env["GIT_COMMITTER_NAME"] = target.author_name
        env["GIT_COMMITTER_EMAIL"] = target.author_email

        self._run(["git", "commit", "-m", target.message], cwd=checkout_directory, env=env)
        self._run(
            ["git", "push", "origin", f"HEAD:{target.branch}"], cwd=checkout_directory
        )
        self.logger.info("Pushed %s to %s", target.message, target.clone_url)
        return True

    # ------------------------------------------------------------------
    # Helpers

    @staticmethod
    def _copy_tree(source: Path, destination: Path) -> None:
        for entry in sorted(source.iterdir()):
            target = destination / entry.name
            if entry.is_dir():
                shutil.copytree(entry, target, dirs_exist_ok=True)
            else:
                shutil.copyfile(entry, target)

    def _run(
        self,
        args: Iterable[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        args = list(args)
        self.logger.debug(" ".join(args))
        try:
            return self._runner(args, cwd=cwd, env=env, capture_output=capture_output)
        except subprocess.CalledProcessError as exc:
            raise PackagerProcessingError(
                f"{' '.join(args[:2])} failed with exit code {exc.returncode}"
            ) from exc

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            env=env,
            check=True,
            text=True,
            errors="replace",
            capture_output=capture_output,
        )
        if capture_output:
            return completed.stdout
        return ""


__all__ = ["RepositoryPublisher", "RepositoryTarget"]
