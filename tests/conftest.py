from __future__ import annotations

import json
import os
import shutil
import socket
import tempfile
import threading
from typing import Any, Callable, Iterator

import pytest

VERSION_PAYLOAD = {"Version": "24.0.0", "ApiVersion": "1.43", "Os": "linux"}


def http_response(
    body: bytes = b"",
    *,
    status: str = "200 OK",
    headers: list[tuple[str, str]] | None = None,
    content_length: bool = True,
) -> bytes:
    lines = [f"HTTP/1.1 {status}", "Server: Docker/24.0.0 (linux)"]
    lines.extend(f"{name}: {value}" for name, value in headers or [])
    if content_length:
        lines.append(f"Content-Length: {len(body)}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode("ascii") + body


def json_response(payload: Any, *, status: str = "200 OK") -> bytes:
    body = json.dumps(payload, indent=2).encode("utf-8") + b"\n"
    return http_response(body, status=status, headers=[("Content-Type", "application/json")])


def chunked_response(*chunks: bytes, status: str = "200 OK") -> bytes:
    head = http_response(status=status, headers=[("Transfer-Encoding", "chunked")], content_length=False)
    body = b"".join(f"{len(chunk):x}\r\n".encode("ascii") + chunk + b"\r\n" for chunk in chunks)
    return head + body + b"0\r\n\r\n"


class FakeDaemon:
    """Accepts one connection and answers each request head with the next canned response.

    Request bodies are not consumed per request; whatever the client sent after
    the last request head is collected in ``trailing`` once the client closes,
    unless ``hangup`` is set, in which case the daemon closes right after the
    last response.
    """

    def __init__(self, family: int, address: Any, responses: list[bytes], *, hangup: bool = False) -> None:
        self.responses = responses
        self.hangup = hangup
        self.requests: list[bytes] = []
        self.trailing = b""
        self._server = socket.socket(family, socket.SOCK_STREAM)
        self._server.bind(address)
        self._server.listen(1)
        self.address = self._server.getsockname()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        try:
            conn, _ = self._server.accept()
        except OSError:
            return
        with conn, conn.makefile("rb") as reader:
            for response in self.responses:
                head = b""
                while True:
                    line = reader.readline()
                    if not line:
                        return
                    head += line
                    if line == b"\r\n":
                        break
                self.requests.append(head)
                conn.sendall(response)
            if not self.hangup:
                self.trailing = reader.read()

    def join(self) -> None:
        self._thread.join(timeout=5)

    def close(self) -> None:
        self._server.close()
        self.join()


@pytest.fixture
def socket_dir() -> Iterator[str]:
    # AF_UNIX paths are limited to ~100 bytes, so keep them short.
    path = tempfile.mkdtemp(prefix="dockerd-")
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def unix_daemon(socket_dir: str) -> Iterator[Callable[..., FakeDaemon]]:
    daemons: list[FakeDaemon] = []

    def start(*responses: bytes, hangup: bool = False) -> FakeDaemon:
        path = os.path.join(socket_dir, f"d{len(daemons)}.sock")
        daemon = FakeDaemon(socket.AF_UNIX, path, list(responses), hangup=hangup)
        daemons.append(daemon)
        return daemon

    yield start
    for daemon in daemons:
        daemon.close()


@pytest.fixture
def tcp_daemon() -> Iterator[Callable[..., FakeDaemon]]:
    daemons: list[FakeDaemon] = []

    def start(*responses: bytes) -> FakeDaemon:
        daemon = FakeDaemon(socket.AF_INET, ("127.0.0.1", 0), list(responses))
        daemons.append(daemon)
        return daemon

    yield start
    for daemon in daemons:
        daemon.close()
