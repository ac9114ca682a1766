"""Host platform and dry-run checks used to gate packager phases."""

from __future__ import annotations

import platform
from dataclasses import dataclass, field

_OS_ALIASES = {
    "windows": "windows",
    "win32": "windows",
    "cygwin": "windows",
    "darwin": "osx",
    "macos": "osx",
    "osx": "osx",
    "linux": "linux",
}


def normalize_os_name(name: str) -> str:
    lowered = name.strip().lower()
    return _OS_ALIASES.get(lowered, lowered)


def current_os() -> str:
    return normalize_os_name(platform.system())


def is_windows() -> bool:
    return current_os() == "windows"


@dataclass(frozen=True)
class PlatformGate:
    """Answers whether the host can run a package manager's tooling."""

    dry_run: bool = False
    host_os: str = field(default_factory=current_os)

    def is_supported_platform(self, required: str | None) -> bool:
        if required is None:
            return True
        return normalize_os_name(self.host_os) == normalize_os_name(required)

    def is_dry_run(self) -> bool:
        return self.dry_run


__all__ = ["PlatformGate", "current_os", "is_windows", "normalize_os_name"]
