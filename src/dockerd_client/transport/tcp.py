"""Plain TCP transport for daemons exposed on ``tcp://host:port``."""

from __future__ import annotations

import socket

from ..errors import ConnectError
from ..logger import BoundLogger, create_logger
from ..parser import BodyFraming
from .base import Transport
from .stream import SocketTransport

DEFAULT_TCP_PORT = 2375


class TcpTransport(SocketTransport):
    kind: Transport.Kind = "tcp"

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_TCP_PORT,
        *,
        framing: BodyFraming = "exact",
        send_content_length: bool = False,
        logger: BoundLogger | None = None,
    ) -> None:
        self._host = host
        self._port = port
        log = (logger or create_logger()).child("transport.tcp")
        log.info("Connecting to %s:%s (tcp)", host, port)
        try:
            sock = socket.create_connection((host, port))
        except OSError as exc:
            raise ConnectError(f"Cannot connect to {host}:{port}: {exc}", context=(host, port)) from exc
        try:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        except OSError as exc:
            sock.close()
            raise ConnectError(f"Cannot connect to {host}:{port}: {exc}", context=(host, port)) from exc
        super().__init__(sock, framing=framing, send_content_length=send_content_length, logger=log)


__all__ = ["DEFAULT_TCP_PORT", "TcpTransport"]
