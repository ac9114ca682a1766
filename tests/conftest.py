from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a project with the default configuration and artifact."""
    builder = ProjectBuilder(tmp_path)
    builder.write_config()
    builder.write_artifact()
    return builder
