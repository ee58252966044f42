"""
serve.response

HTTP response model and its wire form.

Status line ``HTTP/1.1 <code> <reason>``, one ``Name: value`` line per
header, a blank line, then the body bytes. ``Content-Length`` comes from
the actual body length, except for the 404 whose header is a fixed ``9``.
"""

from __future__ import annotations

import socket
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from common.base.logging import get_logger

log = get_logger(__name__)

CRLF = "\r\n"
HTML_TYPE = "text/html"
NOT_FOUND_BODY = b"404 oops"
NOT_FOUND_TYPE = "text/plain"
# Fixed value sent with the 8-byte body.
NOT_FOUND_LENGTH = "9"

Header = Tuple[str, str]


@dataclass
class HttpResponse:
    status_code: int
    reason_phrase: str
    headers: List[Header] = field(default_factory=list)
    body: Optional[bytes] = None

    @classmethod
    def with_body(cls, status_code: int, reason_phrase: str, body: bytes, content_type: str) -> "HttpResponse":
        return cls(
            status_code=status_code,
            reason_phrase=reason_phrase,
            headers=[("Content-Type", content_type), ("Content-Length", str(len(body)))],
            body=body,
        )

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    def head_bytes(self) -> bytes:
        lines = [f"HTTP/1.1 {self.status_code} {self.reason_phrase}"]
        lines.extend(f"{name}: {value}" for name, value in self.headers)
        return (CRLF.join(lines) + CRLF + CRLF).encode("latin-1")

    def serialize(self) -> bytes:
        return self.head_bytes() + (self.body or b"")


def ok(body: bytes, content_type: str) -> HttpResponse:
    return HttpResponse.with_body(200, "OK", body, content_type)


def not_found() -> HttpResponse:
    return HttpResponse(
        404,
        "Not Found",
        headers=[("Content-Type", NOT_FOUND_TYPE), ("Content-Length", NOT_FOUND_LENGTH)],
        body=NOT_FOUND_BODY,
    )


def internal_error() -> HttpResponse:
    return HttpResponse(500, "Internal Server Error")


def write_response(conn: socket.socket, response: HttpResponse) -> bool:
    """Send ``response`` on ``conn``. Failures are logged at DEBUG and reported as False."""
    try:
        conn.sendall(response.head_bytes())
        if response.body:
            conn.sendall(response.body)
    except OSError as exc:
        log.debug("Dropped %s response: %s", response.status_code, exc)
        return False
    return True
