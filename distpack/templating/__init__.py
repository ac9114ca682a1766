"""Template context and rendering helpers."""

from .context import FrozenContextError, MissingKeyError, TemplateContext
from .engine import TemplateEngine, bundled_templates, resolve_template, trim_tpl_extension

__all__ = [
    "FrozenContextError",
    "MissingKeyError",
    "TemplateContext",
    "TemplateEngine",
    "bundled_templates",
    "resolve_template",
    "trim_tpl_extension",
]
