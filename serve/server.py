"""
serve.server

Listening socket and accept loop for the static file server.

The default loop is sequential: accept one connection, serve it to
completion, accept the next. With ``workers > 1`` accepted connections are
handed to a thread pool instead. ``read_timeout`` bounds reads on accepted
connections; by default reads never time out.
"""

from __future__ import annotations

import selectors
import socket
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from common.base.logging import get_logger
from common.shared.loader import validate_port
from serve.errors import BindError
from serve.handler import handle_connection

log = get_logger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_BACKLOG = 128
# Applied when a pool is used without an explicit read_timeout.
DEFAULT_POOL_READ_TIMEOUT = 30.0


@dataclass(frozen=True)
class ServerConfig:
    root_dir: Path
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    backlog: int = DEFAULT_BACKLOG
    workers: int = 1
    read_timeout: Optional[float] = None

    @classmethod
    def from_settings(
        cls,
        directory: Path | str = ".",
        port: int = DEFAULT_PORT,
        *,
        host: str = DEFAULT_HOST,
        backlog: int = DEFAULT_BACKLOG,
        workers: int = 1,
        read_timeout: Optional[float] = None,
    ) -> "ServerConfig":
        """
        Build a config with ``directory`` resolved to an absolute path.

        With ``workers > 1`` and no ``read_timeout``, reads time out after
        ``DEFAULT_POOL_READ_TIMEOUT`` seconds so idle clients cannot pin every
        worker.

        Raises:
            NotADirectoryError: If ``directory`` does not exist or is not a directory.
            ValueError: If ``port``, ``workers`` or ``read_timeout`` is out of range.
        """
        root = Path(directory).expanduser().resolve()
        if not root.is_dir():
            raise NotADirectoryError(f"Root path is not a directory: {root}")
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        if read_timeout is not None and read_timeout <= 0:
            raise ValueError(f"read_timeout must be positive, got {read_timeout}")
        if workers > 1 and read_timeout is None:
            read_timeout = DEFAULT_POOL_READ_TIMEOUT
        return cls(
            root_dir=root,
            port=validate_port(port),
            host=host,
            backlog=backlog,
            workers=workers,
            read_timeout=read_timeout,
        )


class StaticFileServer:
    """Serve files below ``config.root_dir`` over HTTP/1.1, one request per connection."""

    def __init__(self, config: ServerConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._shutdown_request = threading.Event()
        self._stopped = threading.Event()
        self._stopped.set()

    # ------------------------------------------------------------------
    # LIFECYCLE
    # ------------------------------------------------------------------

    def bind(self) -> Tuple[str, int]:
        """Create, bind and listen. Returns the bound ``(host, port)``."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self.config.host, self.config.port))
            sock.listen(self.config.backlog)
        except OSError as exc:
            sock.close()
            raise BindError(self.config.host, self.config.port, exc.strerror or str(exc)) from exc
        self._socket = sock
        if self.config.workers > 1:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.workers,
                thread_name_prefix="vasu-http",
            )
        return self.server_address

    @property
    def server_address(self) -> Tuple[str, int]:
        if self._socket is None:
            raise RuntimeError("Server socket is not bound")
        host, port = self._socket.getsockname()[:2]
        return host, port

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    def __enter__(self) -> "StaticFileServer":
        if self._socket is None:
            self.bind()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # ACCEPT LOOP
    # ------------------------------------------------------------------

    def serve_once(self) -> None:
        """Block until one connection arrives and dispatch it."""
        if self._socket is None:
            raise RuntimeError("Server socket is not bound")
        try:
            conn, addr = self._socket.accept()
        except OSError as exc:
            log.debug("accept() failed: %s", exc)
            return
        log.debug("Connection from %s:%s", *addr[:2])
        self._dispatch(conn)

    def serve_forever(self, poll_interval: float = 0.5) -> None:
        """
        Accept connections until ``shutdown()`` is called.

        ``poll_interval`` only controls how quickly a shutdown request is
        noticed while idle; it is not applied to client connections.
        """
        if self._socket is None:
            raise RuntimeError("Server socket is not bound")
        self._shutdown_request.clear()
        self._stopped.clear()
        try:
            with selectors.DefaultSelector() as selector:
                selector.register(self._socket, selectors.EVENT_READ)
                while not self._shutdown_request.is_set():
                    if selector.select(poll_interval):
                        self.serve_once()
        finally:
            self._shutdown_request.clear()
            self._stopped.set()

    def shutdown(self) -> None:
        """
        Stop ``serve_forever`` after the in-flight connection, then wait for it to return.

        Does nothing when the loop is not running.
        """
        if self._stopped.is_set():
            return
        self._shutdown_request.set()
        self._stopped.wait()

    def _dispatch(self, conn: socket.socket) -> None:
        conn.settimeout(self.config.read_timeout)
        if self._executor is not None:
            future = self._executor.submit(handle_connection, conn, self.config.root_dir)
            future.add_done_callback(_log_worker_failure)
        else:
            handle_connection(conn, self.config.root_dir)


def _log_worker_failure(future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        log.error("Connection worker failed: %s", exc, exc_info=exc)


def serve_directory(config: ServerConfig) -> None:
    """Bind, announce, and serve ``config.root_dir`` until the process is terminated."""
    with StaticFileServer(config) as server:
        host, port = server.server_address
        log.info("⚡ Serving %s at http://%s:%s", config.root_dir, host, port)
        log.info("Press Ctrl-C to stop")
        server.serve_forever()
