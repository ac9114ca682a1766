"""Invocation of external package manager tools."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Set

from .errors import ExternalToolFailure, PackagerProcessingError
from .logging import get_logger

_MASK = "**********"


@dataclass
class Command:
    """A program name plus its ordered arguments."""

    program: str
    args: List[str] = field(default_factory=list)
    _secrets: Set[int] = field(default_factory=set, repr=False)

    def arg(self, value: object) -> "Command":
        self.args.append(str(value))
        return self

    def secret_arg(self, value: object) -> "Command":
        """Append an argument that must never show up in logs or errors."""
        self._secrets.add(len(self.args))
        self.args.append(str(value))
        return self

    def as_list(self) -> List[str]:
        return [self.program, *self.args]

    def display_args(self) -> List[str]:
        return [
            self.program,
            *(_MASK if index in self._secrets else value for index, value in enumerate(self.args)),
        ]

    def display(self) -> str:
        return " ".join(self.display_args())


@dataclass
class CommandResult:
    """Outcome of one external tool invocation."""

    command: Sequence[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return "\n".join(part for part in (self.stdout.strip(), self.stderr.strip()) if part)


Runner = Callable[..., CommandResult]


class CommandExecutor:
    """Runs commands synchronously and fails on nonzero exit codes.

    There are no retries. ``timeout`` is ``None`` by default, which blocks until
    the program exits.
    """

    def __init__(
        self,
        runner: Runner | None = None,
        *,
        timeout: Optional[float] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._runner = runner or self._default_runner
        self.timeout = timeout
        self.logger = logger or get_logger("command")

    def run(self, working_directory: Path, command: Command) -> CommandResult:
        if not working_directory.is_dir():
            raise PackagerProcessingError(f"Working directory {working_directory} does not exist")

        self.logger.debug(command.display())
        try:
            result = self._runner(
                command.as_list(),
                cwd=working_directory,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise PackagerProcessingError(
                f"Unable to locate executable '{command.program}'."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ExternalToolFailure(
                command.program,
                command.display_args(),
                None,
                output=f"timed out after {exc.timeout} seconds",
            ) from exc

        if not result.succeeded:
            raise ExternalToolFailure(
                command.program,
                command.display_args(),
                result.returncode,
                result.output,
            )
        result.command = command.display_args()
        return result

    @staticmethod
    def _default_runner(
        args: Sequence[str],
        *,
        cwd: Path,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=False,
            text=True,
            errors="replace",
            capture_output=True,
            timeout=timeout,
        )
        return CommandResult(
            command=list(args),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


__all__ = ["Command", "CommandExecutor", "CommandResult"]
