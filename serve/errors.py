"""Exceptions raised by the static file server."""

from __future__ import annotations


class ServeError(Exception):
    """Base class for static file server failures."""


class BindError(ServeError):
    """The listening socket could not be bound to the requested address."""

    def __init__(self, host: str, port: int, reason: str):
        self.host = host
        self.port = port
        self.reason = reason
        super().__init__(f"Failed to bind {host}:{port}: {reason}")
