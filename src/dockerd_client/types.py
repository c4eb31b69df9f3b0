"""Result types handed back to callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Generic, Mapping, TypeVar

from .errors import (
    APIError,
    BadRequestError,
    ConflictError,
    DecodeError,
    NotFoundError,
    ProtocolError,
    ServerError,
)
from .parser import (
    HTTP_VERSION_KEY,
    STATUS_CODE_KEY,
    STATUS_REASON_KEY,
    JSONValue,
    TransportResponse,
    decode_payload,
    extract_error_message,
)

T = TypeVar("T")

_SYNTHETIC_KEYS = (HTTP_VERSION_KEY, STATUS_CODE_KEY, STATUS_REASON_KEY)

_STATUS_ERRORS: dict[int, type[APIError]] = {
    400: BadRequestError,
    404: NotFoundError,
    409: ConflictError,
}


@dataclass
class ExecuteResult(Generic[T]):
    ok: bool
    data: T | None = None
    error: Exception | None = None


@dataclass(frozen=True)
class ApiResult:
    """Headers and decoded payload of a single round trip.

    ``headers`` holds the last value received for each name plus the
    synthetic ``http_version``, ``status_code`` and ``status`` keys;
    ``raw_headers`` keeps every received pair in order.
    """

    headers: Mapping[str, str]
    body: bytes = b""
    raw_headers: tuple[tuple[str, str], ...] = ()
    payload: JSONValue = field(default_factory=dict)
    decode_error: DecodeError | None = None

    @classmethod
    def from_response(cls, response: TransportResponse) -> "ApiResult":
        try:
            payload = decode_payload(response.body)
            decode_error = None
        except DecodeError as exc:
            payload = None
            decode_error = exc
        return cls(
            headers=MappingProxyType(dict(response.headers)),
            body=response.body,
            raw_headers=tuple(response.raw_headers),
            payload=payload,
            decode_error=decode_error,
        )

    @property
    def data(self) -> JSONValue:
        """The decoded payload; raises the recorded ``DecodeError`` if decoding failed."""
        if self.decode_error is not None:
            raise self.decode_error
        return self.payload

    @property
    def ok(self) -> bool:
        return self.decode_error is None and self.status_code() < 400

    @property
    def reason(self) -> str:
        return self.headers.get(STATUS_REASON_KEY, "")

    @property
    def http_version(self) -> str:
        return self.headers.get(HTTP_VERSION_KEY, "")

    def status_code(self) -> int:
        value = self.headers.get(STATUS_CODE_KEY)
        if value is None:
            raise ProtocolError("Response has no status code")
        try:
            return int(value)
        except ValueError as exc:
            raise ProtocolError(f"Non-numeric status code: {value!r}") from exc

    def get_all(self, name: str) -> list[str]:
        return [value for key, value in self.raw_headers if key == name]

    def raise_for_status(self) -> "ApiResult":
        status = self.status_code()
        if status < 400:
            return self
        message = extract_error_message(self.body.decode("utf-8", errors="replace"))
        if status >= 500:
            raise ServerError(message, status=status, context=self)
        exc_type = _STATUS_ERRORS.get(status, APIError)
        raise exc_type(message, status=status, context=self)

    def __str__(self) -> str:
        lines = [f"{key}: {value}" for key, value in self.headers.items() if key not in _SYNTHETIC_KEYS]
        status_line = f"{self.http_version} {self.headers.get(STATUS_CODE_KEY, '')} {self.reason}".rstrip()
        shown = self.payload if self.decode_error is None else self.body
        return "\n".join([status_line, *lines, "", repr(shown)])


__all__ = ["ApiResult", "ExecuteResult", "JSONValue"]
