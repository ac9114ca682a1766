"""Jinja2 backed rendering of packager templates."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List, Mapping, Sequence

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)

from ..errors import TemplateRenderError
from .context import TemplateContext

TPL_EXTENSION = ".tpl"

_BUNDLED_TEMPLATES = Path(__file__).resolve().parent.parent / "templates"


def trim_tpl_extension(file_name: str) -> str:
    """Strip a trailing ``.tpl`` so ``binary.nuspec.tpl`` becomes ``binary.nuspec``."""
    if file_name.endswith(TPL_EXTENSION):
        return file_name[: -len(TPL_EXTENSION)]
    return file_name


def bundled_templates(packager: str) -> Path:
    """Return the directory holding the default templates of a packager."""
    return _BUNDLED_TEMPLATES / packager


class TemplateEngine:
    """Renders ``${var}`` templates from an ordered list of directories.

    Earlier directories win, so a project can override a bundled template by
    providing a file with the same relative name.
    """

    def __init__(self, search_paths: Sequence[Path] = ()) -> None:
        self.search_paths = self._unique(search_paths)
        self._env = self._create_env(self.search_paths)

    def resolve(self, text: str | None, props: TemplateContext | Mapping[str, object]) -> str:
        """Render a single template string such as a configured package version."""
        if not text:
            return ""
        try:
            return self._env.from_string(text).render(self._variables(props))
        except TemplateError as exc:
            raise TemplateRenderError(f"Unable to resolve '{text}': {exc}") from exc

    def list_templates(self) -> List[str]:
        return sorted(self._env.list_templates())

    def render(self, name: str, props: TemplateContext | Mapping[str, object]) -> str:
        try:
            template = self._env.get_template(name)
            return template.render(self._variables(props))
        except TemplateError as exc:
            raise TemplateRenderError(f"Unable to render template {name}: {exc}") from exc

    def render_tree(self, props: TemplateContext, destination: Path) -> List[Path]:
        """Render every template into ``destination`` keeping relative names.

        Files ending in ``.tpl`` are rendered; anything else is copied as-is.
        """
        written: List[Path] = []
        for name in self.list_templates():
            target = destination / name
            target.parent.mkdir(parents=True, exist_ok=True)
            if name.endswith(TPL_EXTENSION):
                target.write_text(self.render(name, props), encoding="utf-8")
            else:
                shutil.copyfile(self._locate(name), target)
            written.append(target)
        return written

    def _locate(self, name: str) -> Path:
        for directory in self.search_paths:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        raise TemplateRenderError(f"Template file {name} not found")

    @staticmethod
    def _variables(props: TemplateContext | Mapping[str, object]) -> dict:
        if isinstance(props, TemplateContext):
            return props.as_dict()
        return dict(props)

    @staticmethod
    def _unique(paths: Sequence[Path]) -> List[Path]:
        # ensure uniqueness preserving order
        seen: set[str] = set()
        ordered: List[Path] = []
        for path in paths:
            key = str(path)
            if key not in seen:
                ordered.append(path)
                seen.add(key)
        return ordered

    @staticmethod
    def _create_env(search_paths: Sequence[Path]) -> Environment:
        loader = FileSystemLoader([str(path) for path in search_paths])
        return Environment(
            loader=loader,
            autoescape=select_autoescape(
                enabled_extensions=("nuspec.tpl", "xml.tpl"),
                default_for_string=False,
            ),
            undefined=StrictUndefined,
            variable_start_string="${",
            variable_end_string="}",
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )


def resolve_template(text: str | None, props: TemplateContext | Mapping[str, object]) -> str:
    """Render ``text`` against ``props`` without any template directories."""
    return TemplateEngine().resolve(text, props)


__all__ = [
    "TPL_EXTENSION",
    "TemplateEngine",
    "bundled_templates",
    "resolve_template",
    "trim_tpl_extension",
]
