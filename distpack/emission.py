"""Routing rendered template files into a package directory."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol

from .logging import get_logger
from .models import Distribution


@dataclass(frozen=True)
class RoutingDecision:
    """Where a single rendered file goes, if anywhere."""

    skip: bool
    output_path: Optional[Path] = None

    @classmethod
    def skipped(cls) -> "RoutingDecision":
        return cls(skip=True)

    @classmethod
    def to(cls, output_path: Path) -> "RoutingDecision":
        return cls(skip=False, output_path=output_path)


class FileRouter(Protocol):
    def route_file(
        self, relative_path: str, output_root: Path, distribution: Distribution
    ) -> RoutingDecision:
        """Decide the output path of a file from its path relative to the tree root."""


class FileEmitter:
    """Copies a rendered template tree into its final layout."""

    def __init__(self, router: FileRouter, logger: logging.Logger | None = None) -> None:
        self.router = router
        self.logger = logger or get_logger("emission")

    def emit(self, source_root: Path, output_root: Path, distribution: Distribution) -> List[Path]:
        written: List[Path] = []
        if not source_root.is_dir():
            return written
        for source in sorted(source_root.rglob("*")):
            if not source.is_file():
                continue
            relative = source.relative_to(source_root).as_posix()
            decision = self.router.route_file(relative, output_root, distribution)
            if decision.skip or decision.output_path is None:
                self.logger.debug("Skipping %s", relative)
                continue
            target = decision.output_path
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
            self.logger.debug("Wrote %s", target)
            written.append(target)
        return written


__all__ = ["FileEmitter", "FileRouter", "RoutingDecision"]
