from __future__ import annotations

import dataclasses
import logging
import socket
import threading
from concurrent.futures import Future
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Tuple

import pytest

from serve.errors import BindError
from serve.server import DEFAULT_POOL_READ_TIMEOUT, ServerConfig, StaticFileServer, _log_worker_failure

LOCALHOST = "127.0.0.1"


def _request(address: Tuple[str, int], raw: bytes) -> bytes:
    with socket.create_connection(address, timeout=5) as sock:
        sock.sendall(raw)
        chunks = []
        while True:
            chunk = sock.recv(65536)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


def _get(address: Tuple[str, int], path: str) -> Tuple[str, dict, bytes]:
    raw = _request(address, f"GET {path} HTTP/1.1\r\n".encode("utf-8"))
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    headers = dict(line.split(": ", 1) for line in lines[1:])
    return lines[0], headers, body


@contextmanager
def running_server(config: ServerConfig) -> Iterator[Tuple[str, int]]:
    with StaticFileServer(config) as server:
        thread = threading.Thread(target=server.serve_forever, kwargs={"poll_interval": 0.05}, daemon=True)
        thread.start()
        try:
            yield server.server_address
        finally:
            server.shutdown()
            thread.join(timeout=5)


@pytest.fixture
def site(tmp_path: Path) -> Path:
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_bytes(b"Hello world!")
    (root / "a").mkdir()
    return root


def test_end_to_end_scenario(site: Path) -> None:
    config = ServerConfig.from_settings(site, 0, host=LOCALHOST)
    with running_server(config) as address:
        status, headers, body = _get(address, "/")
        assert status == "HTTP/1.1 200 OK"
        assert b"href='/a'" in body
        assert b"href='/index.html'" in body

        status, headers, body = _get(address, "/index.html")
        assert status == "HTTP/1.1 200 OK"
        assert headers["Content-Type"] == "text/html"
        assert headers["Content-Length"] == "12"
        assert body == b"Hello world!"

        status, headers, body = _get(address, "/missing.txt")
        assert status == "HTTP/1.1 404 Not Found"
        assert headers["Content-Length"] == "9"
        assert body == b"404 oops"


def test_sequential_connections_are_independent(site: Path) -> None:
    config = ServerConfig.from_settings(site, 0, host=LOCALHOST)
    with running_server(config) as address:
        first = _get(address, "/index.html")
        second = _get(address, "/missing.txt")
        third = _get(address, "/index.html")
    assert first == third
    assert second[2] == b"404 oops"


def test_large_file_round_trip(site: Path) -> None:
    payload = bytes(range(256)) * 4096
    (site / "blob.bin").write_bytes(payload)
    config = ServerConfig.from_settings(site, 0, host=LOCALHOST)
    with running_server(config) as address:
        _, headers, body = _get(address, "/blob.bin")
    assert headers["Content-Type"] == "application/octet-stream"
    assert headers["Content-Length"] == str(len(payload))
    assert body == payload


def test_worker_pool_serves_requests(site: Path) -> None:
    config = ServerConfig.from_settings(site, 0, host=LOCALHOST, workers=4)
    with running_server(config) as address:
        results = [_get(address, "/index.html") for _ in range(8)]
    assert all(body == b"Hello world!" for _, _, body in results)


def test_read_timeout_frees_the_sequential_loop(site: Path) -> None:
    config = ServerConfig.from_settings(site, 0, host=LOCALHOST, read_timeout=0.2)
    with running_server(config) as address:
        with socket.create_connection(address, timeout=5) as idle:
            idle.sendall(b"GET /index")  # never finishes the line
            _, _, body = _get(address, "/index.html")
            assert body == b"Hello world!"
            assert idle.recv(1024) == b""


def test_shutdown_before_serving_is_a_no_op(site: Path) -> None:
    config = ServerConfig.from_settings(site, 0, host=LOCALHOST)
    with StaticFileServer(config) as server:
        server.shutdown()
        thread = threading.Thread(target=server.serve_forever, kwargs={"poll_interval": 0.05}, daemon=True)
        thread.start()
        try:
            _, _, body = _get(server.server_address, "/index.html")
            assert body == b"Hello world!"
            assert thread.is_alive()
        finally:
            server.shutdown()
            thread.join(timeout=5)
    assert not thread.is_alive()


def test_serve_forever_can_restart_after_shutdown(site: Path) -> None:
    config = ServerConfig.from_settings(site, 0, host=LOCALHOST)
    with StaticFileServer(config) as server:
        for _ in range(2):
            thread = threading.Thread(target=server.serve_forever, kwargs={"poll_interval": 0.05}, daemon=True)
            thread.start()
            _, _, body = _get(server.server_address, "/index.html")
            assert body == b"Hello world!"
            server.shutdown()
            thread.join(timeout=5)
            assert not thread.is_alive()


def test_worker_failures_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    future: Future = Future()
    future.set_exception(RuntimeError("boom"))
    with caplog.at_level(logging.ERROR, logger="vasu"):
        _log_worker_failure(future)
    assert [r.getMessage() for r in caplog.records] == ["Connection worker failed: boom"]
    assert caplog.records[0].exc_info is not None


def test_successful_workers_log_nothing(caplog: pytest.LogCaptureFixture) -> None:
    future: Future = Future()
    future.set_result(None)
    with caplog.at_level(logging.DEBUG, logger="vasu"):
        _log_worker_failure(future)
    assert caplog.records == []


def test_bind_failure_raises_bind_error(site: Path) -> None:
    with StaticFileServer(ServerConfig.from_settings(site, 0, host=LOCALHOST)) as first:
        _, port = first.server_address
        with pytest.raises(BindError) as excinfo:
            StaticFileServer(ServerConfig.from_settings(site, port, host=LOCALHOST)).bind()
    assert excinfo.value.port == port
    assert isinstance(excinfo.value.__cause__, OSError)


def test_server_address_requires_bind(site: Path) -> None:
    server = StaticFileServer(ServerConfig.from_settings(site, 0))
    with pytest.raises(RuntimeError):
        server.server_address


def test_config_resolves_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "public").mkdir()
    config = ServerConfig.from_settings("public", 9000)
    assert config.root_dir == (tmp_path / "public").resolve()
    assert config.root_dir.is_absolute()
    assert config.port == 9000
    assert config.host == "0.0.0.0"


def test_config_does_not_change_working_directory(site: Path) -> None:
    before = Path.cwd()
    ServerConfig.from_settings(site, 0)
    assert Path.cwd() == before


@pytest.mark.parametrize("port", [-1, 65536, True])
def test_config_rejects_bad_ports(site: Path, port: int) -> None:
    with pytest.raises(ValueError):
        ServerConfig.from_settings(site, port)


def test_config_rejects_missing_root(tmp_path: Path) -> None:
    with pytest.raises(NotADirectoryError):
        ServerConfig.from_settings(tmp_path / "nope", 8080)


def test_config_is_immutable(site: Path) -> None:
    config = ServerConfig.from_settings(site, 8080)
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.port = 9090  # type: ignore[misc]


@pytest.mark.parametrize("read_timeout", [0, -1, -0.5])
def test_config_rejects_non_positive_read_timeout(site: Path, read_timeout: float) -> None:
    with pytest.raises(ValueError):
        ServerConfig.from_settings(site, 0, read_timeout=read_timeout)


def test_sequential_config_keeps_blocking_reads(site: Path) -> None:
    assert ServerConfig.from_settings(site, 0).read_timeout is None


def test_worker_pool_gets_a_default_read_timeout(site: Path) -> None:
    config = ServerConfig.from_settings(site, 0, workers=4)
    assert config.read_timeout == DEFAULT_POOL_READ_TIMEOUT


def test_explicit_read_timeout_wins_over_pool_default(site: Path) -> None:
    config = ServerConfig.from_settings(site, 0, workers=4, read_timeout=2.5)
    assert config.read_timeout == 2.5
