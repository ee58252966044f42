"""Filesystem helper utilities shared across common modules."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

SIZE_UNITS: Sequence[str] = ("B", "KB", "MB", "GB", "TB")


def human_size(num: float) -> str:
    """Format a byte count as ``"<value> <unit>"`` with one decimal place."""
    value = float(num)
    for unit in SIZE_UNITS:
        if value < 1024.0:
            return f"{value:.1f} {unit}"
        value /= 1024.0
    return f"{value:.1f} PB"


def tree_size(path: Path) -> int:
    """Total size in bytes of the regular files at or beneath ``path``.

    Entries that cannot be stat'ed count as zero.
    """
    try:
        if path.is_file():
            return path.stat().st_size
        if not path.is_dir():
            return 0
    except OSError:
        return 0

    total = 0
    for child in path.rglob("*"):
        try:
            if child.is_file():
                total += child.stat().st_size
        except OSError:
            continue
    return total
