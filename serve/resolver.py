"""Map decoded request paths onto the filesystem below the server root."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class TargetKind(Enum):
    DIRECTORY = "directory"
    FILE = "file"
    MISSING = "missing"


@dataclass(frozen=True)
class ResolvedTarget:
    # Kept as a string: pathlib would drop trailing "/" and "." segments.
    absolute_path: str
    kind: TargetKind


def join_root(root_dir: Path | str, decoded_path: str) -> str:
    """
    Join ``decoded_path`` onto ``root_dir`` with a plain separator join.

    Leading slashes are stripped so the remainder is always relative. Nothing
    else is normalized: ``..`` may point outside ``root_dir`` and a trailing
    ``/`` is kept.
    """
    remainder = decoded_path.lstrip("/")
    if not remainder:
        return str(root_dir)
    return os.path.join(str(root_dir), remainder)


def classify(path: str) -> TargetKind:
    try:
        mode = os.stat(path).st_mode
    except (OSError, ValueError):
        # ValueError: embedded NUL from a %00 escape
        return TargetKind.MISSING
    if stat.S_ISDIR(mode):
        return TargetKind.DIRECTORY
    if stat.S_ISREG(mode):
        return TargetKind.FILE
    return TargetKind.MISSING


def resolve_target(root_dir: Path | str, decoded_path: str) -> ResolvedTarget:
    path = join_root(root_dir, decoded_path)
    return ResolvedTarget(absolute_path=path, kind=classify(path))
