"""
serve.handler

One request/response cycle per accepted connection:
read the request line, decode and resolve its path, write the response,
close the connection.
"""

from __future__ import annotations

import socket
from pathlib import Path
from typing import Optional

from common.base.logging import get_logger
from serve.decode import percent_decode
from serve.listing import render_listing_bytes
from serve.mime import mime_for_path
from serve.request import HttpRequest, read_request
from serve.resolver import ResolvedTarget, TargetKind, resolve_target
from serve.response import HTML_TYPE, HttpResponse, internal_error, not_found, ok, write_response

log = get_logger(__name__)


def build_response(request: HttpRequest, target: ResolvedTarget) -> HttpResponse:
    """Choose the response for ``target``; the target kind alone decides its shape."""
    if target.kind is TargetKind.DIRECTORY:
        body = render_listing_bytes(target.absolute_path, request.raw_path_token)
        return ok(body, HTML_TYPE)

    if target.kind is TargetKind.FILE:
        try:
            with open(target.absolute_path, "rb") as fh:
                data = fh.read()
        except OSError as exc:
            log.debug("Read failed for %s: %s", target.absolute_path, exc)
            return internal_error()
        log.info("GET %s", request.raw_path_token)
        return ok(data, mime_for_path(Path(target.absolute_path)))

    return not_found()


def respond(request: HttpRequest, root_dir: Path) -> HttpResponse:
    target = resolve_target(root_dir, percent_decode(request.raw_path_token))
    return build_response(request, target)


def handle_connection(conn: socket.socket, root_dir: Path) -> Optional[HttpResponse]:
    """
    Serve a single request on ``conn`` and close it.

    Returns the response that was attempted, or None when the request line
    could not be read. Socket errors never propagate.
    """
    try:
        with conn.makefile("rb") as reader:
            request = read_request(reader)
        response = respond(request, root_dir)
        write_response(conn, response)
        return response
    except OSError as exc:
        log.debug("Connection dropped before a response was sent: %s", exc)
        return None
    finally:
        conn.close()
