"""State machine driving one packager for one distribution."""

from __future__ import annotations

import hashlib
import shutil
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from ..command import Command, CommandExecutor
from ..context import ExecutionContext
from ..emission import FileEmitter
from ..errors import PackagerProcessingError
from ..git.publisher import RepositoryPublisher
from ..models import Artifact, Distribution
from ..templating import TemplateContext, TemplateEngine, bundled_templates, resolve_template
from ..templating import keys
from .base import PackagerBackend

_ARCHIVE_EXTENSIONS = (
    ".tar.gz",
    ".tar.bz2",
    ".tar.xz",
    ".tgz",
    ".tbz2",
    ".txz",
    ".tar",
    ".zip",
)


class ProcessorState(str, Enum):
    IDLE = "idle"
    PREPARED = "prepared"
    PACKAGING = "packaging"
    PACKAGED = "packaged"
    PUBLISHING = "publishing"
    PUBLISHED = "published"
    DELEGATED = "delegated"
    SKIPPED = "skipped"


_PUBLISHABLE = frozenset(
    {ProcessorState.PACKAGED, ProcessorState.DELEGATED, ProcessorState.SKIPPED}
)


class PackagerProcessor:
    """Runs the prepare, package and publish phases of a single packager.

    One processor owns one template context and one set of output
    directories. Phases must be called in order; ``package`` prepares first
    when called on a fresh processor.
    """

    def __init__(
        self,
        context: ExecutionContext,
        backend: PackagerBackend,
        distribution: Distribution,
        *,
        executor: CommandExecutor | None = None,
        publisher: RepositoryPublisher | None = None,
    ) -> None:
        self.context = context
        self.backend = backend
        self.distribution = distribution
        self.logger = context.logger
        self.executor = executor or CommandExecutor(logger=context.logger)
        self.publisher = publisher or RepositoryPublisher(logger=context.logger)
        self.engine = TemplateEngine(
            [
                context.config.template_directory(backend.name, distribution.name),
                bundled_templates(backend.name),
            ]
        )
        self.emitter = FileEmitter(backend, context.logger)
        self.state = ProcessorState.IDLE
        self._props: Optional[TemplateContext] = None

    # ------------------------------------------------------------------
    # Directories

    @property
    def prepare_directory(self) -> Path:
        return self.context.prepare_directory(self.distribution.name, self.backend.name)

    @property
    def package_directory(self) -> Path:
        return self.context.package_directory(self.distribution.name, self.backend.name)

    @property
    def execution_directory(self) -> Path:
        return self.package_directory / self.distribution.name

    @property
    def checkout_directory(self) -> Path:
        return (
            self.context.output_directory
            / self.distribution.name
            / "checkout"
            / self.backend.name
        )

    # ------------------------------------------------------------------
    # Template context

    @property
    def props(self) -> TemplateContext:
        if self._props is None:
            props = TemplateContext()
            self._fill_project_properties(props)
            self._fill_distribution_properties(props)
            self.backend.fill_properties(props, self.distribution)
            props.freeze()
            self._props = props
        return self._props

    def _fill_project_properties(self, props: TemplateContext) -> None:
        project = self.context.config.project
        releaser = self.context.config.release
        props.set(keys.KEY_PROJECT_NAME, project.name)
        props.set(keys.KEY_PROJECT_VERSION, project.version)
        props.set(keys.KEY_PROJECT_DESCRIPTION, project.description)
        props.set(keys.KEY_PROJECT_LONG_DESCRIPTION, project.long_description)
        props.set(keys.KEY_PROJECT_WEBSITE, project.website)
        props.set(keys.KEY_PROJECT_LICENSE, project.license)
        props.set(keys.KEY_PROJECT_LICENSE_URL, project.license_url)
        props.set(keys.KEY_PROJECT_AUTHORS_BY_SPACE, " ".join(project.authors))
        props.set(keys.KEY_PROJECT_AUTHORS_BY_COMMA, ",".join(project.authors))
        props.set(keys.KEY_PROJECT_TAGS_BY_SPACE, " ".join(project.tags))
        props.set(keys.KEY_PROJECT_COPYRIGHT, project.copyright)
        props.set(keys.KEY_TAG_NAME, resolve_template(releaser.tag_name, props))
        props.set(keys.KEY_RELEASE_REPO_URL, releaser.repo_url())

    def _fill_distribution_properties(self, props: TemplateContext) -> None:
        distribution = self.distribution
        props.set(keys.KEY_DISTRIBUTION_NAME, distribution.name)
        props.set(keys.KEY_DISTRIBUTION_EXECUTABLE_NAME, distribution.executable)
        props.set(
            keys.KEY_DISTRIBUTION_EXECUTABLE_WINDOWS,
            f"{distribution.executable}.{distribution.windows_extension}",
        )
        props.set(keys.KEY_DISTRIBUTION_PREPARE_DIRECTORY, self.prepare_directory)
        props.set(keys.KEY_DISTRIBUTION_PACKAGE_DIRECTORY, self.package_directory)

        artifact = self.backend.select_artifact(distribution)
        if artifact is None:
            self.logger.warning(
                "Distribution %s has no artifact suitable for %s",
                distribution.name,
                self.backend.name,
            )
            for key in (
                keys.KEY_DISTRIBUTION_ARTIFACT_FILE,
                keys.KEY_DISTRIBUTION_ARTIFACT_FILE_NAME,
                keys.KEY_DISTRIBUTION_URL,
                keys.KEY_DISTRIBUTION_CHECKSUM_SHA_256,
            ):
                props.set(key, "")
            return

        tag = props.get(keys.KEY_TAG_NAME)
        props.set(keys.KEY_DISTRIBUTION_ARTIFACT_FILE, artifact.file_name)
        props.set(
            keys.KEY_DISTRIBUTION_ARTIFACT_FILE_NAME,
            _strip_archive_extension(artifact.file_name),
        )
        props.set(
            keys.KEY_DISTRIBUTION_URL,
            self.context.config.release.download_url(tag, artifact.file_name),
        )
        props.set(keys.KEY_DISTRIBUTION_CHECKSUM_SHA_256, self._checksum(artifact))

    def _checksum(self, artifact: Artifact) -> str:
        if not artifact.path.is_file():
            self.logger.warning(
                "Artifact %s does not exist; checksum left empty",
                self.context.relativize_to_basedir(artifact.path),
            )
            return ""
        digest = hashlib.sha256()
        try:
            with artifact.path.open("rb") as handle:
                for chunk in iter(lambda: handle.read(65536), b""):
                    digest.update(chunk)
        except OSError as exc:
            raise self._io_failure("preparing", artifact.path, exc) from exc
        return digest.hexdigest()

    # ------------------------------------------------------------------
    # Phases

    def prepare(self) -> ProcessorState:
        """Render the template tree into the prepare directory."""
        self._require({ProcessorState.IDLE}, "prepare")
        props = self.props
        destination = self.prepare_directory
        self.logger.info(
            "Preparing %s distribution with %s", self.distribution.name, self.backend.name
        )
        try:
            if destination.exists():
                shutil.rmtree(destination)
            destination.mkdir(parents=True, exist_ok=True)
            written = self.engine.render_tree(props, destination)
        except OSError as exc:
            raise self._io_failure("preparing", destination, exc) from exc
        self.logger.debug("Rendered %d template files", len(written))
        self.state = ProcessorState.PREPARED
        return self.state

    def package(self) -> ProcessorState:
        """Emit the package tree and build the package when the host allows it."""
        if self.state is ProcessorState.IDLE:
            self.prepare()
        self._require({ProcessorState.PREPARED}, "package")
        self.state = ProcessorState.PACKAGING
        props = self.props
        output_root = self.package_directory
        self.logger.info(
            "Packaging %s distribution with %s", self.distribution.name, self.backend.name
        )
        try:
            if output_root.exists():
                shutil.rmtree(output_root)
            output_root.mkdir(parents=True, exist_ok=True)
            self.emitter.emit(self.prepare_directory, output_root, self.distribution)
        except OSError as exc:
            raise self._io_failure("packaging", output_root, exc) from exc

        if self.backend.remote_build:
            self.logger.info(
                "Remote build enabled for %s; packaging is delegated", self.backend.name
            )
            self.state = ProcessorState.DELEGATED
            return self.state

        if not self.context.gate.is_supported_platform(self.backend.required_platform):
            self.logger.warning(
                "Skipping %s packaging: requires %s, host is %s",
                self.backend.name,
                self.backend.required_platform,
                self.context.gate.host_os,
            )
            self.state = ProcessorState.SKIPPED
            return self.state

        self._run_commands(
            self.backend.build_commands(props, self.distribution), "packaging"
        )
        self.state = ProcessorState.PACKAGED
        return self.state

    def publish(self) -> ProcessorState:
        """Publish the package, or hand it to the bucket repository for remote builds."""
        self._require(_PUBLISHABLE, "publish")
        props = self.props

        if self.backend.remote_build:
            self.state = ProcessorState.PUBLISHING
            target = self.backend.repository_target(props)
            try:
                self.publisher.publish(
                    self.package_directory,
                    target,
                    checkout_directory=self.checkout_directory,
                    dry_run=self.context.dry_run,
                )
            except OSError as exc:
                raise self._io_failure("publishing", self.checkout_directory, exc) from exc
            self.state = ProcessorState.DELEGATED
            return self.state

        if self.context.dry_run:
            self.logger.warning(
                "Dry run: skipping %s publication of %s",
                self.backend.name,
                self.distribution.name,
            )
            self.state = ProcessorState.SKIPPED
            return self.state

        if not self.context.gate.is_supported_platform(self.backend.required_platform):
            self.logger.warning(
                "Skipping %s publication: requires %s, host is %s",
                self.backend.name,
                self.backend.required_platform,
                self.context.gate.host_os,
            )
            self.state = ProcessorState.SKIPPED
            return self.state

        self.state = ProcessorState.PUBLISHING
        self.logger.info(
            "Publishing %s distribution with %s", self.distribution.name, self.backend.name
        )
        self._run_commands(
            self.backend.publish_commands(props, self.distribution, self.execution_directory),
            "publishing",
        )
        self.state = ProcessorState.PUBLISHED
        return self.state

    # ------------------------------------------------------------------
    # Helpers

    def _run_commands(self, commands: Iterable[Command], phase: str) -> None:
        directory = self.execution_directory
        try:
            for command in commands:
                self.executor.run(directory, command)
        except OSError as exc:
            raise self._io_failure(phase, directory, exc) from exc

    def _require(self, allowed: Iterable[ProcessorState], phase: str) -> None:
        if self.state not in allowed:
            raise PackagerProcessingError(
                f"Cannot {phase} {self.distribution.name} with {self.backend.name} "
                f"from state {self.state.value}"
            )

    def _io_failure(self, phase: str, directory: Path, exc: OSError) -> PackagerProcessingError:
        return PackagerProcessingError(
            f"Unexpected error when {phase} {self.context.relativize_to_basedir(directory)}: {exc}"
        )


def _strip_archive_extension(file_name: str) -> str:
    lowered = file_name.lower()
    for extension in _ARCHIVE_EXTENSIONS:
        if lowered.endswith(extension):
            return file_name[: -len(extension)]
    return file_name


__all__ = ["PackagerProcessor", "ProcessorState"]
