"""
file.sizer

Rank the immediate children of a directory by total size on disk.
A directory's size is the sum of the regular files beneath it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from common.base.fs import tree_size
from common.base.logging import get_logger
from common.shared.utils import Progress

log = get_logger(__name__)

DEFAULT_TOP = 20


@dataclass(frozen=True)
class SizeEntry:
    path: Path
    size: int
    is_dir: bool

    @property
    def name(self) -> str:
        return self.path.name


def largest_entries(directory: Path, top: int = DEFAULT_TOP) -> List[SizeEntry]:
    """
    Return at most ``top`` children of ``directory`` ordered by size, largest first.

    Raises:
        NotADirectoryError: If ``directory`` is not a directory.
    """
    directory = directory.expanduser()
    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    children = sorted(directory.iterdir())
    entries: List[SizeEntry] = []
    for child in Progress(children, desc="Sizing", unit="entry"):
        entries.append(SizeEntry(path=child, size=tree_size(child), is_dir=child.is_dir()))

    entries.sort(key=lambda entry: entry.size, reverse=True)
    log.debug("Sized %d entries under %s", len(entries), directory)
    return entries[:max(top, 0)]
