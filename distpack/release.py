"""Release host models resolving repository and download URLs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

_DEFAULT_HOSTS: Dict[str, str] = {
    "github": "https://github.com",
    "gitlab": "https://gitlab.com",
    "gitea": "https://gitea.com",
    "codeberg": "https://codeberg.org",
}

_INTEGRATIONS: Dict[str, FrozenSet[str]] = {
    "github": frozenset({".github"}),
    "gitlab": frozenset({".gitlab"}),
    "gitea": frozenset({".gitea"}),
    "codeberg": frozenset({".gitea"}),
    "generic": frozenset(),
}

SUPPORTED_KINDS = tuple(_INTEGRATIONS)


@dataclass(frozen=True)
class Releaser:
    """Repository host the project is released from."""

    kind: str
    owner: str
    name: str
    host: Optional[str] = None
    tag_name: str = "v${projectVersion}"

    def __post_init__(self) -> None:
        if self.kind not in _INTEGRATIONS:
            raise ValueError(
                f"Unsupported releaser '{self.kind}'. Expected one of: {', '.join(SUPPORTED_KINDS)}"
            )
        if self.kind == "generic" and not self.host:
            raise ValueError("The generic releaser requires an explicit host")

    @property
    def base_url(self) -> str:
        host = self.host or _DEFAULT_HOSTS[self.kind]
        return host.rstrip("/")

    def repo_url(self, owner: str | None = None, name: str | None = None) -> str:
        return f"{self.base_url}/{owner or self.owner}/{name or self.name}"

    def repo_clone_url(self, owner: str | None = None, name: str | None = None) -> str:
        return f"{self.repo_url(owner, name)}.git"

    def download_url(self, tag: str, file_name: str) -> str:
        """Return the public URL of a release asset."""
        if self.kind == "gitlab":
            return f"{self.repo_url()}/-/releases/{tag}/downloads/{file_name}"
        return f"{self.repo_url()}/releases/download/{tag}/{file_name}"

    def supports_integration(self, marker: str) -> bool:
        """Return True when the host understands files under ``marker`` (e.g. ``.github``)."""
        return marker in _INTEGRATIONS[self.kind]


__all__ = ["Releaser", "SUPPORTED_KINDS"]
