"""Public surface for the dockerd Python client."""

from .client import ClientOptions, DockerClient
from .errors import (
    APIError,
    BadRequestError,
    ConflictError,
    ConnectError,
    DecodeError,
    DockerdError,
    MissingFieldError,
    NotFoundError,
    ProtocolError,
    ServerError,
    TransportError,
)
from .transport import HttpxTransport, TcpTransport, UnixSocketTransport
from .types import ApiResult, ExecuteResult, JSONValue
from .version import __version__

__all__ = [
    "__version__",
    "APIError",
    "ApiResult",
    "BadRequestError",
    "ClientOptions",
    "ConflictError",
    "ConnectError",
    "DecodeError",
    "DockerClient",
    "DockerdError",
    "ExecuteResult",
    "HttpxTransport",
    "JSONValue",
    "MissingFieldError",
    "NotFoundError",
    "ProtocolError",
    "ServerError",
    "TcpTransport",
    "TransportError",
    "UnixSocketTransport",
]
