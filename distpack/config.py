"""Configuration loading for distpack (.distpack.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import yaml

from .models import Artifact, Distribution, JavaMetadata, Project
from .release import Releaser

CONFIG_FILENAME = ".distpack.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class RepositoryConfig:
    """Package manager repository (bucket) that remote builds push into."""

    owner: Optional[str] = None
    name: str = "chocolatey-bucket"
    branch: str = "main"


@dataclass
class CommitAuthorConfig:
    """Identity used for commits made by the repository publisher."""

    name: str = "distpack"
    email: str = "distpack@example.com"


@dataclass
class ChocolateyConfig:
    """Settings for the Chocolatey packager."""

    API_KEY_ENV = "CHOCOLATEY_API_KEY"

    enabled: bool = True
    remote_build: bool = False
    package_name: Optional[str] = None
    package_version: str = "${projectVersion}"
    title: Optional[str] = None
    username: Optional[str] = None
    icon_url: str = ""
    api_key: Optional[str] = None
    source: str = "https://push.chocolatey.org/"
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    template_directory: Optional[str] = None
    commit_author: CommitAuthorConfig = field(default_factory=CommitAuthorConfig)
    commit_message: str = "${distributionName} ${projectVersion}"

    def resolved_package_name(self, distribution: Distribution) -> str:
        return self.package_name or distribution.name

    def resolved_repository_owner(self, releaser: Releaser) -> str:
        return self.repository.owner or releaser.owner

    def resolved_username(self, releaser: Releaser) -> str:
        return self.username or self.resolved_repository_owner(releaser)

    def resolved_api_key(self) -> str:
        return self.api_key or os.environ.get(self.API_KEY_ENV, "")


@dataclass
class DistPackConfig:
    """Represents the settings defined in .distpack.yml."""

    root: Path
    project: Project
    release: Releaser
    distributions: Dict[str, Distribution] = field(default_factory=dict)
    packagers: Dict[str, Any] = field(default_factory=dict)

    def packager(self, name: str) -> Any:
        try:
            return self.packagers[name]
        except KeyError:
            raise ConfigError(f"Packager '{name}' is not configured") from None

    def template_directory(self, packager: str, distribution: str) -> Path:
        """Return the project-level template override directory for a packager."""
        configured = getattr(self.packagers.get(packager), "template_directory", None)
        if configured:
            return self.root / configured
        return self.root / "src" / "distpack" / "distributions" / distribution / packager


def load_config(config_path: Path) -> DistPackConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        raise FileNotFoundError(f"No {CONFIG_FILENAME} found at {config_file}")

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    project = _parse_project(_as_dict(data.get("project")))
    release = _parse_release(_as_dict(data.get("release")))

    distributions: Dict[str, Distribution] = {}
    for name, raw in _as_dict(data.get("distributions")).items():
        distributions[str(name)] = _parse_distribution(str(name), _as_dict(raw), root)

    packagers: Dict[str, Any] = {}
    for name, raw in _as_dict(data.get("packagers")).items():
        parser = _PACKAGER_PARSERS.get(str(name))
        section = _as_dict(raw)
        packagers[str(name)] = parser(section) if parser else section

    return DistPackConfig(
        root=root,
        project=project,
        release=release,
        distributions=distributions,
        packagers=packagers,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _parse_project(data: Dict[str, Any]) -> Project:
    name = _as_str(data.get("name"))
    version = _as_str(data.get("version"))
    if not name or not version:
        raise ConfigError("project.name and project.version are required")
    description = _as_str(data.get("description")) or ""
    return Project(
        name=name,
        version=version,
        description=description,
        long_description=_as_str(data.get("long_description")) or description,
        website=_as_str(data.get("website")) or "",
        license=_as_str(data.get("license")) or "",
        license_url=_as_str(data.get("license_url")) or "",
        authors=_as_str_list(data.get("authors")),
        tags=_as_str_list(data.get("tags")),
        copyright=_as_str(data.get("copyright")) or "",
    )


def _parse_release(data: Dict[str, Any]) -> Releaser:
    kind = (_as_str(data.get("kind")) or "github").lower()
    owner = _as_str(data.get("owner"))
    name = _as_str(data.get("name"))
    if not owner or not name:
        raise ConfigError("release.owner and release.name are required")
    try:
        return Releaser(
            kind=kind,
            owner=owner,
            name=name,
            host=_as_str(data.get("host")),
            tag_name=_as_str(data.get("tag_name")) or "v${projectVersion}",
        )
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc


def _parse_distribution(name: str, data: Dict[str, Any], root: Path) -> Distribution:
    java_data = _as_dict(data.get("java"))
    artifacts: List[Artifact] = []
    for entry in data.get("artifacts") or []:
        if isinstance(entry, str):
            entry = {"path": entry}
        entry = _as_dict(entry)
        raw_path = _as_str(entry.get("path"))
        if not raw_path:
            raise ConfigError(f"Artifact entries of distribution '{name}' require a path")
        path = Path(raw_path)
        artifacts.append(
            Artifact(
                path=path if path.is_absolute() else root / path,
                platform=_as_str(entry.get("platform")),
            )
        )
    return Distribution(
        name=name,
        executable=_as_str(data.get("executable")) or name,
        windows_extension=(_as_str(data.get("windows_extension")) or "exe").lstrip("."),
        java=JavaMetadata(
            main_class=_as_str(java_data.get("main_class")),
            main_module=_as_str(java_data.get("main_module")),
        ),
        artifacts=artifacts,
    )


def _parse_chocolatey(data: Dict[str, Any]) -> ChocolateyConfig:
    config = ChocolateyConfig()
    enabled = _as_bool(data.get("enabled"))
    if enabled is not None:
        config.enabled = enabled
    config.remote_build = _as_bool(data.get("remote_build")) or False
    config.package_name = _as_str(data.get("package_name"))
    config.package_version = _as_str(data.get("package_version")) or config.package_version
    config.title = _as_str(data.get("title"))
    config.username = _as_str(data.get("username"))
    config.icon_url = _as_str(data.get("icon_url")) or ""
    config.api_key = _as_str(data.get("api_key"))
    config.source = _as_str(data.get("source")) or config.source
    config.template_directory = _as_str(data.get("template_directory"))
    config.commit_message = _as_str(data.get("commit_message")) or config.commit_message

    repository_data = _as_dict(data.get("repository"))
    if repository_data:
        config.repository = RepositoryConfig(
            owner=_as_str(repository_data.get("owner")),
            name=_as_str(repository_data.get("name")) or RepositoryConfig.name,
            branch=_as_str(repository_data.get("branch")) or RepositoryConfig.branch,
        )

    author_data = _as_dict(data.get("commit_author"))
    if author_data:
        config.commit_author = CommitAuthorConfig(
            name=_as_str(author_data.get("name")) or CommitAuthorConfig.name,
            email=_as_str(author_data.get("email")) or CommitAuthorConfig.email,
        )
    return config


_PACKAGER_PARSERS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    "chocolatey": _parse_chocolatey,
}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ChocolateyConfig",
    "CommitAuthorConfig",
    "ConfigError",
    "DistPackConfig",
    "RepositoryConfig",
    "load_config",
]
