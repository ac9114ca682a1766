"""Exceptions raised while packaging and publishing distributions."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class PackagerProcessingError(RuntimeError):
    """Raised when a packager phase cannot complete."""


class ExternalToolFailure(PackagerProcessingError):
    """Raised when an external program exits with a nonzero status."""

    def __init__(
        self,
        program: str,
        args: Sequence[str],
        exit_code: int | None,
        output: str = "",
    ) -> None:
        self.program = program
        self.arguments = list(args)
        self.exit_code = exit_code
        self.output = output
        status = f"exit code {exit_code}" if exit_code is not None else "timeout"
        message = f"{program} failed with {status}: {' '.join(self.arguments)}"
        if output.strip():
            message += f"\n{output.strip()}"
        super().__init__(message)


class ArtifactNotFound(PackagerProcessingError):
    """Raised when publishing finds no built artifact to upload."""

    def __init__(self, directory: Path, suffix: str, *, display: Path | str | None = None) -> None:
        self.directory = directory
        self.suffix = suffix
        shown = display if display is not None else directory
        super().__init__(f"No {suffix} file found in {shown}")


class TemplateRenderError(PackagerProcessingError):
    """Raised when a template cannot be rendered with the current context."""


__all__ = [
    "ArtifactNotFound",
    "ExternalToolFailure",
    "PackagerProcessingError",
    "TemplateRenderError",
]
