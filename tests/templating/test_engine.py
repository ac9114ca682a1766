"""Tests for Jinja2 template rendering."""

from __future__ import annotations

from pathlib import Path

import pytest

from distpack.errors import TemplateRenderError
from distpack.templating import (
    TemplateContext,
    TemplateEngine,
    bundled_templates,
    resolve_template,
    trim_tpl_extension,
)


def _write(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_resolve_template_substitutes_dollar_variables() -> None:
    props = TemplateContext({"projectVersion": "1.2.3"})

    assert resolve_template("v${projectVersion}", props) == "v1.2.3"
    assert resolve_template("", props) == ""
    assert resolve_template(None, props) == ""


def test_resolve_template_leaves_plain_dollars_alone() -> None:
    props = {"name": "foo"}

    assert resolve_template("$tools = ${name}", props) == "$tools = foo"


def test_undefined_variable_raises_template_render_error() -> None:
    with pytest.raises(TemplateRenderError):
        resolve_template("${missing}", {})


def test_trim_tpl_extension() -> None:
    assert trim_tpl_extension("binary.nuspec.tpl") == "binary.nuspec"
    assert trim_tpl_extension("tools/chocolateyinstall.ps1.tpl") == "tools/chocolateyinstall.ps1"
    assert trim_tpl_extension("icon.png") == "icon.png"


def test_override_directory_wins_over_bundled(tmp_path: Path) -> None:
    override = tmp_path / "override"
    bundled = tmp_path / "bundled"
    _write(override, "README.md.tpl", "override ${projectName}")
    _write(bundled, "README.md.tpl", "bundled ${projectName}")
    _write(bundled, "tools/extra.txt.tpl", "extra")

    engine = TemplateEngine([override, bundled])

    assert engine.list_templates() == ["README.md.tpl", "tools/extra.txt.tpl"]
    assert engine.render("README.md.tpl", {"projectName": "foo"}) == "override foo"


def test_render_tree_renders_templates_and_copies_other_files(tmp_path: Path) -> None:
    source = tmp_path / "templates"
    _write(source, "README.md.tpl", "# ${projectName}\n")
    (source / "icon.bin").write_bytes(b"\x00\x01")
    destination = tmp_path / "prepare"

    written = TemplateEngine([source]).render_tree(
        TemplateContext({"projectName": "foo"}), destination
    )

    assert sorted(path.name for path in written) == ["README.md.tpl", "icon.bin"]
    assert (destination / "README.md.tpl").read_text(encoding="utf-8") == "# foo\n"
    assert (destination / "icon.bin").read_bytes() == b"\x00\x01"


def test_missing_search_paths_render_nothing(tmp_path: Path) -> None:
    engine = TemplateEngine([tmp_path / "does-not-exist"])

    assert engine.render_tree(TemplateContext(), tmp_path / "out") == []


def test_nuspec_templates_escape_xml(tmp_path: Path) -> None:
    _write(tmp_path, "binary.nuspec.tpl", "<title>${title}</title>")

    rendered = TemplateEngine([tmp_path]).render("binary.nuspec.tpl", {"title": "A & B"})

    assert rendered == "<title>A &amp; B</title>"


def test_bundled_chocolatey_templates_are_shipped() -> None:
    names = TemplateEngine([bundled_templates("chocolatey")]).list_templates()

    assert "binary.nuspec.tpl" in names
    assert "tools/chocolateyinstall.ps1.tpl" in names
    assert "tools/chocolateyuninstall.ps1.tpl" in names
    assert "README.md.tpl" in names
    assert ".github/workflows/publish.yml.tpl" in names
