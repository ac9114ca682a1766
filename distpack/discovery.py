"""Locating built package artifacts."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


def find_first_with_suffix(directory: Path, suffix: str) -> Optional[str]:
    """Return the first file name in ``directory`` ending with ``suffix``.

    Only immediate entries are inspected. Candidates are sorted lexically so
    the result does not depend on filesystem iteration order. Returns ``None``
    when nothing matches; ``OSError`` from listing the directory propagates.
    """
    candidates = sorted(
        entry.name
        for entry in directory.iterdir()
        if entry.name.endswith(suffix) and entry.is_file()
    )
    return candidates[0] if candidates else None


__all__ = ["find_first_with_suffix"]
