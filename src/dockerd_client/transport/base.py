"""Common transport abstractions."""

from __future__ import annotations

from typing import Literal, Protocol, runtime_checkable

from ..parser import HTTP_VERSION_KEY, STATUS_CODE_KEY, STATUS_REASON_KEY, TransportResponse

TransportKind = Literal["unix", "tcp", "httpx"]


@runtime_checkable
class Transport(Protocol):
    Kind = TransportKind

    @property
    def kind(self) -> TransportKind: ...

    def round_trip(self, method: str, target: str, body: bytes | None = None) -> TransportResponse: ...

    def close(self) -> None: ...


__all__ = [
    "HTTP_VERSION_KEY",
    "STATUS_CODE_KEY",
    "STATUS_REASON_KEY",
    "Transport",
    "TransportKind",
    "TransportResponse",
]
