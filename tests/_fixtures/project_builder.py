"""Helper utilities for constructing temporary distpack projects in tests."""

from __future__ import annotations

import logging
import textwrap
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from distpack.command import CommandResult
from distpack.config import DistPackConfig, load_config
from distpack.context import ExecutionContext

DEFAULT_CONFIG = """
project:
  name: foo
  version: 1.0.0
  description: Foo command line tool
  website: https://example.com/foo
  license: Apache-2.0
  license_url: https://example.com/foo/LICENSE
  authors: [Jane Doe, John Roe]
  tags: [cli, tool]
  copyright: 2024 Foo Authors
release:
  kind: github
  owner: acme
  name: foo
distributions:
  foo:
    executable: foo
    artifacts:
      - path: build/foo-1.0.0.zip
        platform: windows-x86_64
packagers:
  chocolatey:
    api_key: secret-key
"""


class ProjectBuilder:
    """Writes a throwaway project with a .distpack.yml and build artifacts."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_config(self, content: str = DEFAULT_CONFIG) -> Path:
        self.write({".distpack.yml": content})
        return self.root / ".distpack.yml"

    def write_artifact(self, relative: str = "build/foo-1.0.0.zip", data: bytes = b"zip") -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    def load(self) -> DistPackConfig:
        return load_config(self.root)

    def context(
        self,
        *,
        dry_run: bool = False,
        host_os: str = "windows",
        logger: Optional[logging.Logger] = None,
    ) -> ExecutionContext:
        return ExecutionContext.create(
            self.load(),
            dry_run=dry_run,
            host_os=host_os,
            logger=logger or logging.getLogger("tests.distpack"),
        )

    def path(self) -> Path:
        """Return the project root path."""
        return self.root


class RecordingRunner:
    """Stands in for subprocess: records calls and returns canned exit codes."""

    def __init__(
        self,
        returncodes: Optional[Dict[str, int]] = None,
        on_call: Optional[Callable[[List[str], Path], None]] = None,
    ) -> None:
        self.calls: List[List[str]] = []
        self.cwds: List[Path] = []
        self.timeouts: List[Optional[float]] = []
        self._returncodes = returncodes or {}
        self._on_call = on_call

    def __call__(
        self, args: Sequence[str], *, cwd: Path, timeout: Optional[float] = None
    ) -> CommandResult:
        args = list(args)
        self.calls.append(args)
        self.cwds.append(Path(cwd))
        self.timeouts.append(timeout)
        if self._on_call is not None:
            self._on_call(args, Path(cwd))
        code = self._returncodes.get(args[1] if len(args) > 1 else args[0], 0)
        return CommandResult(
            command=args,
            returncode=code,
            stdout="ok" if code == 0 else "",
            stderr="" if code == 0 else "boom",
        )

    def subcommands(self) -> List[str]:
        return [call[1] for call in self.calls if len(call) > 1]


def produce_nupkg(name: str = "foo.1.0.0.nupkg") -> Callable[[List[str], Path], None]:
    """Return an ``on_call`` hook that writes a package when ``choco pack`` runs."""

    def _hook(args: List[str], cwd: Path) -> None:
        if args[:2] == ["choco", "pack"]:
            (cwd / name).write_bytes(b"nupkg")

    return _hook


__all__ = ["DEFAULT_CONFIG", "ProjectBuilder", "RecordingRunner", "produce_nupkg"]
