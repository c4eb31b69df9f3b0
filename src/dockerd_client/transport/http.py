"""Unix socket transport built on top of httpx."""

from __future__ import annotations

import httpx

from ..errors import ConnectError, ProtocolError, TransportError
from ..logger import BoundLogger, create_logger
from ..wire import METHODS
from .base import (
    HTTP_VERSION_KEY,
    STATUS_CODE_KEY,
    STATUS_REASON_KEY,
    Transport,
    TransportResponse,
)
from .unix import DEFAULT_SOCKET_PATH


class HttpxTransport:
    """Performs the round trip with httpx instead of the built-in reader.

    The result is mapped onto the same ``TransportResponse`` shape, synthetic
    status keys included, so ``ApiResult`` cannot tell the two apart. httpx
    always decodes the full body whatever the framing.
    """

    kind: Transport.Kind = "httpx"

    def __init__(
        self,
        path: str = DEFAULT_SOCKET_PATH,
        *,
        client: httpx.Client | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self.path = path
        self._client = client or httpx.Client(
            transport=httpx.HTTPTransport(uds=path),
            base_url="http://localhost",
            timeout=None,
        )
        self._owns_client = client is None
        self._logger = (logger or create_logger()).child("transport.httpx")

    def round_trip(self, method: str, target: str, body: bytes | None = None) -> TransportResponse:
        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported method: {method}")

        request_headers = {"Accept": "*/*", "Accept-Encoding": "identity"}
        try:
            self._logger.debug("HTTPX %s %s bytes=%d", method, target, len(body or b""))
            response = self._client.request(method, target, content=body or None, headers=request_headers)
            payload = response.content
        except httpx.ConnectError as exc:
            raise ConnectError(f"Cannot connect to unix://{self.path}: {exc}", context=self.path) from exc
        except httpx.ProtocolError as exc:
            raise ProtocolError(f"Malformed response for {method} {target}: {exc}") from exc
        except httpx.WriteError as exc:
            raise TransportError(f"Request write failed: {exc}", step="write") from exc
        except httpx.TransportError as exc:
            raise TransportError(f"HTTPX round trip failed: {exc}") from exc

        self._logger.debug(
            "HTTPX %s %s <- status=%s bytes=%d",
            method,
            target,
            response.status_code,
            len(payload),
        )
        headers: dict[str, str] = {
            HTTP_VERSION_KEY: response.http_version,
            STATUS_CODE_KEY: str(response.status_code),
            STATUS_REASON_KEY: response.reason_phrase,
        }
        raw_headers = [
            (name.decode("iso-8859-1"), value.decode("iso-8859-1")) for name, value in response.headers.raw
        ]
        headers.update(raw_headers)
        return TransportResponse(headers=headers, body=payload, raw_headers=raw_headers)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


__all__ = ["HttpxTransport"]
