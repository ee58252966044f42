"""Request line parsing.

Only the path token of the first line is modeled. Headers and body are never
read off the wire.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

DEFAULT_PATH = "/"
LINE_ENCODING = "utf-8"


@dataclass(frozen=True)
class HttpRequest:
    raw_path_token: str


def parse_request_line(line: str) -> HttpRequest:
    """Take the second whitespace-delimited token as the path (``/`` if absent)."""
    tokens = line.split()
    path = tokens[1] if len(tokens) > 1 else DEFAULT_PATH
    return HttpRequest(raw_path_token=path)


def read_request(stream: BinaryIO) -> HttpRequest:
    """Read one newline-terminated line from ``stream`` and parse it.

    EOF before any newline yields whatever was read (possibly nothing).
    """
    line = stream.readline()
    return parse_request_line(line.decode(LINE_ENCODING, "surrogateescape"))
