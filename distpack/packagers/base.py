"""Base classes for package manager backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterator, Optional, Tuple

from ..command import Command
from ..context import ExecutionContext
from ..emission import RoutingDecision
from ..git.publisher import RepositoryTarget
from ..models import Artifact, Distribution
from ..templating import TemplateContext, resolve_template


class PackagerBackend(ABC):
    """Contract for package manager integrations driven by the packager processor.

    The processor owns sequencing and gating; a backend only supplies the
    package manager specific pieces: template variables, output routing and
    the commands that build and publish a package.
    """

    name: str = ""
    required_platform: Optional[str] = None
    artifact_suffix: str = ""
    integration_marker: Optional[str] = None
    supported_extensions: Tuple[str, ...] = ()

    def __init__(self, context: ExecutionContext) -> None:
        self.context = context

    @property
    def config(self) -> Any:
        return self.context.config.packager(self.name)

    @property
    def enabled(self) -> bool:
        return bool(getattr(self.config, "enabled", True))

    @property
    def remote_build(self) -> bool:
        return bool(getattr(self.config, "remote_build", False))

    def select_artifact(self, distribution: Distribution) -> Optional[Artifact]:
        """Return the first artifact this package manager can install."""
        for artifact in distribution.artifacts:
            if self.supported_extensions and not artifact.file_name.lower().endswith(
                self.supported_extensions
            ):
                continue
            if artifact.platform and self.required_platform:
                if not artifact.platform.lower().startswith(self.required_platform):
                    continue
            return artifact
        return None

    def repository_target(self, props: TemplateContext) -> RepositoryTarget:
        config = self.config
        releaser = self.context.config.release
        owner = config.resolved_repository_owner(releaser)
        return RepositoryTarget(
            clone_url=releaser.repo_clone_url(owner, config.repository.name),
            branch=config.repository.branch,
            message=resolve_template(config.commit_message, props),
            author_name=config.commit_author.name,
            author_email=config.commit_author.email,
        )

    def is_integration_file(self, relative_path: str) -> bool:
        if not self.integration_marker:
            return False
        return self.integration_marker in relative_path.split("/")

    def emits_integration_files(self) -> bool:
        """Integration files are kept only for remote builds on a host that understands them."""
        if not self.integration_marker:
            return False
        return self.remote_build and self.context.config.release.supports_integration(
            self.integration_marker
        )

    @abstractmethod
    def fill_properties(self, props: TemplateContext, distribution: Distribution) -> None:
        """Add package manager specific variables to the template context."""

    @abstractmethod
    def route_file(
        self, relative_path: str, output_root: Path, distribution: Distribution
    ) -> RoutingDecision:
        """Decide where a rendered file lands inside the package directory."""

    @abstractmethod
    def build_commands(
        self, props: TemplateContext, distribution: Distribution
    ) -> Iterator[Command]:
        """Yield the commands that build the package, in order."""

    @abstractmethod
    def publish_commands(
        self, props: TemplateContext, distribution: Distribution, exec_directory: Path
    ) -> Iterator[Command]:
        """Yield the commands that publish the package, in order.

        Commands are consumed lazily so later steps can inspect files produced
        by earlier ones.
        """


__all__ = ["PackagerBackend", "RepositoryTarget"]
