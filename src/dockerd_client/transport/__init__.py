"""Transport implementations exposed to users."""

from .base import Transport, TransportKind, TransportResponse
from .http import HttpxTransport
from .stream import SocketTransport
from .tcp import TcpTransport
from .unix import UnixSocketTransport

__all__ = [
    "HttpxTransport",
    "SocketTransport",
    "TcpTransport",
    "Transport",
    "TransportKind",
    "TransportResponse",
    "UnixSocketTransport",
]
