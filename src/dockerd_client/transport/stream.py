"""Shared request/response loop for connected stream sockets."""

from __future__ import annotations

import socket
import threading
from typing import IO

from ..errors import TransportError
from ..logger import BoundLogger
from ..parser import BodyFraming, read_response
from ..wire import build_request
from .base import STATUS_CODE_KEY, Transport, TransportResponse


class SocketTransport:
    """Drives one request/response exchange at a time over a connected socket.

    Subclasses open the socket; this class owns it from then on. The lock is
    held for the whole write-then-read round trip, so concurrent callers on
    one transport are serialized.
    """

    kind: Transport.Kind

    def __init__(
        self,
        sock: socket.socket,
        *,
        framing: BodyFraming = "exact",
        send_content_length: bool = False,
        logger: BoundLogger,
    ) -> None:
        self._socket: socket.socket | None = sock
        self._reader: IO[bytes] | None = sock.makefile("rb")
        self._framing: BodyFraming = framing
        self._send_content_length = send_content_length
        self._logger = logger
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._socket is None

    def round_trip(self, method: str, target: str, body: bytes | None = None) -> TransportResponse:
        with self._lock:
            if self._socket is None or self._reader is None:
                raise TransportError("Transport is closed", step="write")

            request = build_request(method, target, body, send_content_length=self._send_content_length)
            self._logger.debug("%s %s bytes=%d", method, target, len(request))
            try:
                self._socket.sendall(request)
            except OSError as exc:
                self._reset()
                raise TransportError(f"Request write failed: {exc}", step="write") from exc

            try:
                response = read_response(self._reader, framing=self._framing, method=method, logger=self._logger)
            except Exception:
                # The stream position is unknown after a failed read.
                self._reset()
                raise

        self._logger.debug(
            "%s %s <- status=%s bytes=%d",
            method,
            target,
            response.headers.get(STATUS_CODE_KEY),
            len(response.body),
        )
        return response

    def close(self) -> None:
        with self._lock:
            self._reset()

    def _reset(self) -> None:
        if self._reader is not None:
            try:
                self._reader.close()
            except OSError:
                pass
            self._reader = None
        if self._socket is not None:
            self._logger.debug("Closing %s connection", self.kind)
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None


__all__ = ["SocketTransport"]
