"""Custom exceptions raised by the dockerd Python client."""

from __future__ import annotations

from typing import Any


class DockerdError(Exception):
    """Base error for all client failures.

    ``step`` names the stage of the round trip that failed
    (connect, write, read, parse, decode, handshake or status).
    """

    step: str | None = None

    def __init__(self, message: str, *, step: str | None = None, context: Any | None = None) -> None:
        super().__init__(message)
        if step is not None:
            self.step = step
        self.context = context


class ConnectError(DockerdError):
    """Raised when the daemon socket cannot be reached."""

    step = "connect"


class TransportError(DockerdError):
    """Raised when a read or write fails mid-protocol, including truncation."""

    step = "read"


class ProtocolError(DockerdError):
    """Raised for a malformed status line, header line or body framing."""

    step = "parse"


class DecodeError(DockerdError):
    """Raised when the body bytes are not valid UTF-8 JSON."""

    step = "decode"


class MissingFieldError(DockerdError):
    """Raised when the version handshake payload lacks a required field."""

    step = "handshake"

    def __init__(self, field: str, *, context: Any | None = None) -> None:
        super().__init__(f"Handshake payload is missing string field {field!r}", context=context)
        self.field = field


class APIError(DockerdError):
    """Raised by ``ApiResult.raise_for_status`` for 4xx/5xx responses."""

    step = "status"

    def __init__(self, message: str, *, status: int, context: Any | None = None) -> None:
        super().__init__(message, context=context)
        self.status = status


class BadRequestError(APIError):
    """Raised when the daemon rejects the request parameters."""


class NotFoundError(APIError):
    """Raised when the target resource does not exist."""


class ConflictError(APIError):
    """Raised when the resource is in a conflicting state."""


class ServerError(APIError):
    """Raised for 5xx style failures."""


__all__ = [
    "APIError",
    "BadRequestError",
    "ConflictError",
    "ConnectError",
    "DecodeError",
    "DockerdError",
    "MissingFieldError",
    "NotFoundError",
    "ProtocolError",
    "ServerError",
    "TransportError",
]
