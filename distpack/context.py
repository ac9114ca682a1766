"""Execution context threaded through every packager call."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import DistPackConfig
from .logging import get_logger
from .platform import PlatformGate, current_os


@dataclass(frozen=True)
class ExecutionContext:
    """Carries configuration, logger, base directory and platform gate."""

    config: DistPackConfig
    logger: logging.Logger
    gate: PlatformGate

    @classmethod
    def create(
        cls,
        config: DistPackConfig,
        *,
        dry_run: bool = False,
        logger: logging.Logger | None = None,
        host_os: str | None = None,
    ) -> "ExecutionContext":
        return cls(
            config=config,
            logger=logger or get_logger("packager"),
            gate=PlatformGate(dry_run=dry_run, host_os=host_os or current_os()),
        )

    @property
    def basedir(self) -> Path:
        return self.config.root

    @property
    def dry_run(self) -> bool:
        return self.gate.is_dry_run()

    @property
    def output_directory(self) -> Path:
        return self.basedir / "out" / "distpack"

    def prepare_directory(self, distribution: str, packager: str) -> Path:
        return self.output_directory / distribution / "prepare" / packager

    def package_directory(self, distribution: str, packager: str) -> Path:
        return self.output_directory / distribution / "package" / packager

    def relativize_to_basedir(self, path: Path) -> Path:
        try:
            return path.resolve().relative_to(self.basedir.resolve())
        except ValueError:
            return path


__all__ = ["ExecutionContext"]
