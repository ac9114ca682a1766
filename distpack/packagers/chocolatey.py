"""Chocolatey (Windows) packager backend."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from ..command import Command
from ..config import ChocolateyConfig
from ..discovery import find_first_with_suffix
from ..emission import RoutingDecision
from ..errors import ArtifactNotFound, PackagerProcessingError
from ..models import Distribution
from ..templating import TemplateContext, resolve_template, trim_tpl_extension
from ..templating.keys import (
    KEY_CHOCOLATEY_BUCKET_REPO_CLONE_URL,
    KEY_CHOCOLATEY_BUCKET_REPO_URL,
    KEY_CHOCOLATEY_ICON_URL,
    KEY_CHOCOLATEY_PACKAGE_NAME,
    KEY_CHOCOLATEY_PACKAGE_SOURCE_URL,
    KEY_CHOCOLATEY_PACKAGE_VERSION,
    KEY_CHOCOLATEY_REPOSITORY_CLONE_URL,
    KEY_CHOCOLATEY_REPOSITORY_URL,
    KEY_CHOCOLATEY_SOURCE,
    KEY_CHOCOLATEY_TITLE,
    KEY_CHOCOLATEY_USERNAME,
    KEY_DISTRIBUTION_JAVA_MAIN_CLASS,
    KEY_DISTRIBUTION_JAVA_MAIN_MODULE,
    KEY_PROJECT_LICENSE_URL,
)
from .base import PackagerBackend

CHOCO = "choco"


class ChocolateyBackend(PackagerBackend):
    """Builds ``.nupkg`` packages with ``choco`` and pushes them to a feed."""

    name = "chocolatey"
    required_platform = "windows"
    artifact_suffix = ".nupkg"
    integration_marker = ".github"
    supported_extensions = (".zip", ".msi", ".exe")

    MANIFEST_TEMPLATE = "binary.nuspec"
    MANIFEST_EXTENSION = ".nuspec"
    SCRIPT_EXTENSION = ".ps1"

    @property
    def config(self) -> ChocolateyConfig:
        return self.context.config.packager(self.name)

    def fill_properties(self, props: TemplateContext, distribution: Distribution) -> None:
        config = self.config
        releaser = self.context.config.release

        props.set(KEY_DISTRIBUTION_JAVA_MAIN_CLASS, distribution.java.main_class or "")
        props.set(KEY_DISTRIBUTION_JAVA_MAIN_MODULE, distribution.java.main_module or "")

        if not props.contains(KEY_PROJECT_LICENSE_URL) or not str(
            props.get(KEY_PROJECT_LICENSE_URL)
        ).strip():
            self.context.logger.warning(
                "Project %s has no license URL; the generated nuspec will lack one",
                self.context.config.project.name,
            )

        owner = config.resolved_repository_owner(releaser)
        release_url = releaser.repo_url()
        repository_url = releaser.repo_url(owner, config.repository.name)
        repository_clone_url = releaser.repo_clone_url(owner, config.repository.name)

        props.set(KEY_CHOCOLATEY_BUCKET_REPO_URL, repository_url)
        props.set(KEY_CHOCOLATEY_BUCKET_REPO_CLONE_URL, repository_clone_url)
        props.set(
            KEY_CHOCOLATEY_PACKAGE_SOURCE_URL,
            repository_url if config.remote_build else release_url,
        )
        props.set(KEY_CHOCOLATEY_REPOSITORY_URL, repository_url)
        props.set(KEY_CHOCOLATEY_REPOSITORY_CLONE_URL, repository_clone_url)

        props.set(KEY_CHOCOLATEY_PACKAGE_NAME, config.resolved_package_name(distribution))
        props.set(KEY_CHOCOLATEY_PACKAGE_VERSION, resolve_template(config.package_version, props))
        props.set(KEY_CHOCOLATEY_USERNAME, config.resolved_username(releaser))
        props.set(KEY_CHOCOLATEY_TITLE, config.title or self.context.config.project.name)
        props.set(KEY_CHOCOLATEY_ICON_URL, resolve_template(config.icon_url, props))
        props.set(KEY_CHOCOLATEY_SOURCE, config.source)

    def route_file(
        self, relative_path: str, output_root: Path, distribution: Distribution
    ) -> RoutingDecision:
        if self.is_integration_file(relative_path) and not self.emits_integration_files():
            return RoutingDecision.skipped()

        file_name = trim_tpl_extension(relative_path)
        if file_name == self.MANIFEST_TEMPLATE:
            package_name = self.config.resolved_package_name(distribution)
            return RoutingDecision.to(
                output_root / distribution.name / f"{package_name}{self.MANIFEST_EXTENSION}"
            )
        if file_name.endswith(self.SCRIPT_EXTENSION):
            return RoutingDecision.to(output_root / distribution.name / file_name)
        return RoutingDecision.to(output_root / file_name)

    def build_commands(
        self, props: TemplateContext, distribution: Distribution
    ) -> Iterator[Command]:
        package_name = props.get(KEY_CHOCOLATEY_PACKAGE_NAME)
        yield Command(CHOCO).arg("pack").arg(f"{package_name}{self.MANIFEST_EXTENSION}")

    def publish_commands(
        self, props: TemplateContext, distribution: Distribution, exec_directory: Path
    ) -> Iterator[Command]:
        api_key = self.config.resolved_api_key()
        if not api_key:
            raise PackagerProcessingError(
                f"No Chocolatey API key configured; set packagers.chocolatey.api_key "
                f"or {ChocolateyConfig.API_KEY_ENV}"
            )
        source = props.get(KEY_CHOCOLATEY_SOURCE)

        yield (
            Command(CHOCO)
            .arg("apikey")
            .arg("-k")
            .secret_arg(api_key)
            .arg("-source")
            .arg(source)
        )

        nupkg = find_first_with_suffix(exec_directory, self.artifact_suffix)
        if nupkg is None:
            raise ArtifactNotFound(
                exec_directory,
                self.artifact_suffix,
                display=self.context.relativize_to_basedir(exec_directory),
            )

        yield Command(CHOCO).arg("push").arg(nupkg).arg("-s").arg(source)


__all__ = ["ChocolateyBackend"]
