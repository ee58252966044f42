"""
file.counter

Count files and text lines per extension under a directory tree.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from common.base.logging import get_logger
from common.shared.utils import Progress

log = get_logger(__name__)

NO_EXTENSION = "(no ext)"


@dataclass
class ExtensionCount:
    extension: str
    files: int = 0
    lines: int = 0


def normalize_extensions(values: Optional[Iterable[str]]) -> List[str]:
    """Lowercase filter extensions and give each a leading dot."""
    result: List[str] = []
    for value in values or []:
        ext = value.strip().lower()
        if not ext:
            continue
        result.append(ext if ext.startswith(".") else f".{ext}")
    return result


def extension_key(path: Path) -> str:
    suffix = path.suffix
    return suffix.lower() if suffix else NO_EXTENSION


def count_lines(path: Path) -> int:
    """Number of lines in a UTF-8 text file; 0 if it cannot be read as text."""
    try:
        with open(path, "r", encoding="utf-8") as handle:
            return sum(1 for _ in handle)
    except (OSError, UnicodeDecodeError):
        return 0


def _iter_files(root: Path) -> Iterator[Path]:
    for dirpath, _dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        for filename in filenames:
            path = base / filename
            if path.is_file():
                yield path


def count_by_extension(directory: Path, extensions: Optional[Iterable[str]] = None) -> List[ExtensionCount]:
    """
    Group regular files under ``directory`` by extension.

    Args:
        directory: Root of the walk.
        extensions: Optional filter; ``"py"`` and ``".py"`` are equivalent.

    Returns:
        One row per extension, most files first (ties broken by extension).
    """
    directory = directory.expanduser()
    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    wanted = set(normalize_extensions(extensions))
    counts: Dict[str, ExtensionCount] = {}

    for path in Progress(_iter_files(directory), desc="Counting", unit="file"):
        key = extension_key(path)
        if wanted and key not in wanted:
            continue
        row = counts.setdefault(key, ExtensionCount(extension=key))
        row.files += 1
        row.lines += count_lines(path)

    log.debug("Counted %d extensions under %s", len(counts), directory)
    return sorted(counts.values(), key=lambda row: (-row.files, row.extension))


def totals(rows: Iterable[ExtensionCount]) -> ExtensionCount:
    total = ExtensionCount(extension="TOTAL")
    for row in rows:
        total.files += row.files
        total.lines += row.lines
    return total
