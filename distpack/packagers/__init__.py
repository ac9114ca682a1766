"""Packager backends and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Iterable, List, Sequence, Set

from ..context import ExecutionContext
from .base import PackagerBackend
from .chocolatey import ChocolateyBackend
from .processor import PackagerProcessor, ProcessorState

_ENTRY_POINT_GROUP = "distpack.packagers"

_BUILTIN_FACTORIES: dict[str, Callable[[ExecutionContext], PackagerBackend]] = {
    "chocolatey": ChocolateyBackend,
}


def discover_packagers(
    context: ExecutionContext, enabled: Sequence[str] | None = None
) -> List[PackagerBackend]:
    """Return instantiated packager backends, honoring optional enabled names."""

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    backends: List[PackagerBackend] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[ExecutionContext], PackagerBackend]) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        instance = factory(context)
        if not isinstance(instance, PackagerBackend):
            raise TypeError(
                f"Packager factory for '{name}' did not return a PackagerBackend instance"
            )
        backends.append(instance)
        seen.add(key)
        if enabled_set is not None:
            enabled_set.discard(key)

    for name, factory in _BUILTIN_FACTORIES.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        name = entry.name
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - broken third-party plugin
            raise RuntimeError(f"Failed to load packager entry point '{name}': {exc}") from exc

        def _factory(ctx: ExecutionContext, obj: object = loaded) -> PackagerBackend:
            return _coerce_backend(obj, ctx)

        _add(name, _factory)

    if enabled_set:
        missing = ", ".join(sorted(enabled_set))
        raise ValueError(f"Unknown packagers requested: {missing}")

    return backends


def _coerce_backend(obj: object, context: ExecutionContext) -> PackagerBackend:
    if isinstance(obj, PackagerBackend):
        return obj
    if callable(obj):
        instance = obj(context)
        if isinstance(instance, PackagerBackend):
            return instance
    raise TypeError("Packager entry point must be a PackagerBackend subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "ChocolateyBackend",
    "PackagerBackend",
    "PackagerProcessor",
    "ProcessorState",
    "discover_packagers",
]
