"""Unix domain socket transport for the daemon's control API."""

from __future__ import annotations

import socket

from ..errors import ConnectError
from ..logger import BoundLogger, create_logger
from ..parser import BodyFraming
from .base import Transport
from .stream import SocketTransport

DEFAULT_SOCKET_PATH = "/var/run/docker.sock"


class UnixSocketTransport(SocketTransport):
    kind: Transport.Kind = "unix"

    def __init__(
        self,
        path: str = DEFAULT_SOCKET_PATH,
        *,
        framing: BodyFraming = "exact",
        send_content_length: bool = False,
        logger: BoundLogger | None = None,
    ) -> None:
        self.path = path
        log = (logger or create_logger()).child("transport.unix")
        log.info("Connecting to unix://%s", path)
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(path)
        except OSError as exc:
            sock.close()
            raise ConnectError(f"Cannot connect to unix://{path}: {exc}", context=path) from exc
        super().__init__(sock, framing=framing, send_content_length=send_content_length, logger=log)


__all__ = ["DEFAULT_SOCKET_PATH", "UnixSocketTransport"]
