"""Extension-based content-type lookup."""

from __future__ import annotations

from pathlib import Path
from typing import Dict

DEFAULT_MIME = "application/octet-stream"

MIME_TYPES: Dict[str, str] = {
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "json": "application/json",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "pdf": "application/pdf",
    "txt": "text/plain",
    "md": "text/plain",
}


def guess_mime(ext: str) -> str:
    """Map a bare extension (no dot) to a content type.

    Matching is exact: ``"HTML"`` is not ``"html"``.
    """
    return MIME_TYPES.get(ext, DEFAULT_MIME)


def mime_for_path(path: Path) -> str:
    return guess_mime(path.suffix[1:])
