"""
serve.listing

Minimal HTML index for directory targets.

Links are built by appending ``/<name>`` to the request path exactly as the
client sent it (still percent-encoded, trailing slashes trimmed). Names are
written verbatim; nothing is HTML-escaped.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Tuple

from common.base.logging import get_logger

log = get_logger(__name__)

DIR_ICON = "📁"
FILE_ICON = "📄"
BODY_ENCODING = "utf-8"


def list_children(directory: Path | str) -> List[Tuple[str, bool]]:
    """Return ``(name, is_dir)`` for the immediate children, sorted by raw name bytes."""
    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError as exc:
        log.debug("Cannot list %s: %s", directory, exc)
        return []

    children: List[Tuple[str, bool]] = []
    for entry in sorted(entries, key=lambda e: os.fsencode(e.name)):
        try:
            is_dir = entry.is_dir()
        except OSError:
            is_dir = False
        children.append((entry.name, is_dir))
    return children


def child_href(raw_path: str, name: str) -> str:
    return f"{raw_path.rstrip('/')}/{name}"


def render_listing(directory: Path | str, raw_path: str) -> str:
    parts = [
        "<html><head><meta charset='utf-8'></head><body>",
        f"<h2>{DIR_ICON} {directory}</h2><ul>",
    ]
    for name, is_dir in list_children(directory):
        icon = DIR_ICON if is_dir else FILE_ICON
        parts.append(f"<li>{icon} <a href='{child_href(raw_path, name)}'>{name}</a></li>")
    parts.append("</ul></body></html>")
    return "".join(parts)


def render_listing_bytes(directory: Path | str, raw_path: str) -> bytes:
    return render_listing(directory, raw_path).encode(BODY_ENCODING, "surrogateescape")
