"""Variable bag used to render packager templates."""

from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping


class MissingKeyError(KeyError):
    """Raised when a template variable is requested but was never set."""


class FrozenContextError(RuntimeError):
    """Raised when a frozen template context is mutated."""


class TemplateContext:
    """String-keyed mapping of template variables.

    Values are usually strings, but phases also stash typed values (for
    example the resolved package directory as a :class:`~pathlib.Path`).
    Keys can be added or overwritten until :meth:`freeze` is called; they can
    never be removed.
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._values: Dict[str, Any] = {}
        self._frozen = False
        if initial:
            self.update(initial)

    def set(self, key: str, value: Any) -> None:
        if self._frozen:
            raise FrozenContextError(f"Cannot set '{key}' on a frozen template context")
        self._values[str(key)] = value

    def update(self, values: Mapping[str, Any]) -> None:
        for key, value in values.items():
            self.set(key, value)

    def get(self, key: str) -> Any:
        try:
            return self._values[key]
        except KeyError:
            raise MissingKeyError(key) from None

    def contains(self, key: str) -> bool:
        return key in self._values

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def as_dict(self) -> Dict[str, Any]:
        """Return a shallow copy suitable for passing to a template engine."""
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        state = "frozen" if self._frozen else "open"
        return f"TemplateContext({len(self._values)} keys, {state})"


__all__ = ["FrozenContextError", "MissingKeyError", "TemplateContext"]
