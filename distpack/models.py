"""Core data models shared across distpack components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class Project:
    """Project metadata exposed to every packager template."""

    name: str
    version: str
    description: str = ""
    long_description: str = ""
    website: str = ""
    license: str = ""
    license_url: str = ""
    authors: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    copyright: str = ""


@dataclass(frozen=True)
class JavaMetadata:
    """Entry point information for JVM based distributions."""

    main_class: Optional[str] = None
    main_module: Optional[str] = None


@dataclass(frozen=True)
class Artifact:
    """A single build output file belonging to a distribution."""

    path: Path
    platform: Optional[str] = None

    @property
    def file_name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class Distribution:
    """Build output being packaged; immutable for one packaging run."""

    name: str
    executable: str
    windows_extension: str = "exe"
    java: JavaMetadata = field(default_factory=JavaMetadata)
    artifacts: List[Artifact] = field(default_factory=list)
