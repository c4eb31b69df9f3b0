"""Response reader: status line, header block and body framing.

The reader is a strictly sequential parse over a buffered binary stream
(anything with ``readline(limit)`` and ``read(n)``, e.g. the object
returned by ``socket.makefile("rb")`` or an ``io.BytesIO``):

1. the status line becomes the synthetic ``http_version``,
   ``status_code`` and ``status`` headers,
2. header lines are read up to the two byte ``b"\\r\\n"`` terminator,
3. the body is read according to ``Transfer-Encoding: chunked`` or
   ``Content-Length``, in that order of precedence.

Two framing policies exist for step 3. ``"exact"`` follows HTTP/1.1:
every chunk of a chunked body is decoded and ``Content-Length`` bodies are
read byte for byte. ``"line"`` reads bodies one line at a time: a chunked
body yields only its first chunk and a ``Content-Length`` body only its
first line.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import IO, Literal, Mapping, MutableMapping, Union, cast

from .errors import DecodeError, ProtocolError, TransportError
from .logger import BoundLogger, create_logger

BodyFraming = Literal["exact", "line"]

FRAMINGS: tuple[BodyFraming, ...] = ("exact", "line")

MAX_LINE = 65536

_CRLF = b"\r\n"
_NO_BODY_STATUSES = {204, 304}

JSONValue = Union[dict[str, "JSONValue"], list["JSONValue"], str, int, float, bool, None]

# Synthetic header keys derived from the status line.
HTTP_VERSION_KEY = "http_version"
STATUS_CODE_KEY = "status_code"
STATUS_REASON_KEY = "status"


@dataclass
class TransportResponse:
    headers: Mapping[str, str]
    body: bytes = b""
    raw_headers: list[tuple[str, str]] = field(default_factory=list)


def parse_framing(value: str) -> BodyFraming:
    normalized = value.strip().lower()
    if normalized not in FRAMINGS:
        raise ValueError(f"Unsupported body framing: {value!r}")
    return cast(BodyFraming, normalized)


def read_response(
    reader: IO[bytes],
    *,
    framing: BodyFraming = "exact",
    method: str | None = None,
    logger: BoundLogger | None = None,
) -> TransportResponse:
    """Read one complete response from ``reader``.

    Any read failure aborts the whole response; no partial result is returned.
    """
    log = (logger or create_logger()).child("parser")
    headers: dict[str, str] = {}
    raw_headers: list[tuple[str, str]] = []

    read_status_line(reader, headers)
    log.trace("status line: %s %s %s", headers[HTTP_VERSION_KEY], headers[STATUS_CODE_KEY], headers[STATUS_REASON_KEY])
    read_headers(reader, headers, raw_headers)
    log.trace("parsed %d header lines", len(raw_headers))
    body = read_body(reader, headers, framing=framing, method=method)
    log.trace("body framing=%s bytes=%d", framing, len(body))
    return TransportResponse(headers=headers, body=body, raw_headers=raw_headers)


def parse_status_line(line: str) -> tuple[str, str, str]:
    """Split ``"HTTP/1.1 404 Not Found"`` into version, code and reason.

    The reason phrase may contain spaces and may be missing entirely.
    """
    tokens = line.rstrip("\r\n").split(" ")
    if len(tokens) < 2:
        raise ProtocolError(f"Malformed status line: {line!r}")
    return tokens[0], tokens[1], " ".join(tokens[2:])


def read_status_line(reader: IO[bytes], headers: MutableMapping[str, str]) -> None:
    line = _read_line(reader, "status line")
    version, code, reason = parse_status_line(line.decode("iso-8859-1"))
    headers[HTTP_VERSION_KEY] = version
    headers[STATUS_CODE_KEY] = code
    headers[STATUS_REASON_KEY] = reason


def parse_header_line(line: str) -> tuple[str, str]:
    name, sep, value = line.partition(":")
    name = name.strip('"')
    if not sep or not name:
        raise ProtocolError(f"Malformed header line: {line!r}")
    return name, value.rstrip("\r\n").lstrip(" \t").strip('"')


def read_headers(
    reader: IO[bytes],
    headers: MutableMapping[str, str],
    raw_headers: list[tuple[str, str]] | None = None,
) -> None:
    """Read header lines into ``headers`` until the blank line.

    Duplicate names overwrite earlier values in ``headers``; ``raw_headers``
    keeps every pair. A malformed line leaves the headers parsed so far
    untouched.
    """
    while True:
        line = _read_line(reader, "header line")
        if line == _CRLF:
            return
        try:
            name, value = parse_header_line(line.decode("iso-8859-1"))
        except ProtocolError as exc:
            exc.context = {"headers": dict(headers)}
            raise
        headers[name] = value
        if raw_headers is not None:
            raw_headers.append((name, value))


def response_has_body(headers: MutableMapping[str, str], method: str | None = None) -> bool:
    if method is not None and method.upper() == "HEAD":
        return False
    code = headers.get(STATUS_CODE_KEY, "")
    if code.isascii() and code.isdigit():
        status = int(code)
        if 100 <= status < 200 or status in _NO_BODY_STATUSES:
            return False
    return True


def read_body(
    reader: IO[bytes],
    headers: MutableMapping[str, str],
    *,
    framing: BodyFraming = "exact",
    method: str | None = None,
) -> bytes:
    if not response_has_body(headers, method):
        return b""

    if headers.get("Transfer-Encoding") == "chunked":
        if framing == "line":
            _read_line(reader, "chunk size", limit=None)
            return _read_line(reader, "chunk data", limit=None)
        return read_chunked(reader)

    content_length = headers.get("Content-Length")
    if content_length is not None and content_length != "0":
        if framing == "line":
            return _read_line(reader, "body", limit=None)
        return read_exact(reader, _parse_content_length(content_length))

    return b""


def read_chunked(reader: IO[bytes]) -> bytes:
    """Decode a complete chunked body, trailers included."""
    parts: list[bytes] = []
    while True:
        size_line = _read_line(reader, "chunk size")
        size = _parse_chunk_size(size_line)
        if size == 0:
            break
        parts.append(read_exact(reader, size))
        if _read_line(reader, "chunk terminator") != _CRLF:
            raise ProtocolError("Chunk data is not followed by CRLF")

    # Trailer section ends at the first blank line.
    while _read_line(reader, "chunk trailer") != _CRLF:
        pass
    return b"".join(parts)


def read_exact(reader: IO[bytes], length: int) -> bytes:
    parts: list[bytes] = []
    remaining = length
    while remaining > 0:
        try:
            data = reader.read(remaining)
        except OSError as exc:
            raise TransportError(f"Body read failed: {exc}") from exc
        if not data:
            raise TransportError(
                f"Connection closed after {length - remaining} of {length} body bytes",
                context={"expected": length, "received": length - remaining},
            )
        parts.append(data)
        remaining -= len(data)
    return b"".join(parts)


def decode_payload(body: bytes) -> JSONValue:
    """Decode UTF-8 JSON; a blank body decodes to an empty object."""
    if not body.strip():
        return {}
    try:
        return json.loads(body.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Body is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Invalid JSON response: {exc}", context=body[:200]) from exc


def extract_error_message(body: str | None) -> str:
    if not body:
        return "Error occurred"
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        return body.strip() or "Error occurred"

    if isinstance(parsed, dict) and "message" in parsed:
        message = parsed["message"]
        if isinstance(message, str):
            return message
        return str(message)
    return body.strip() or "Error occurred"


def _parse_content_length(value: str) -> int:
    try:
        length = int(value.strip())
    except ValueError as exc:
        raise ProtocolError(f"Invalid Content-Length: {value!r}") from exc
    if length < 0:
        raise ProtocolError(f"Invalid Content-Length: {value!r}")
    return length


def _parse_chunk_size(line: bytes) -> int:
    token = line.split(b";", 1)[0].strip()
    try:
        size = int(token, 16)
    except ValueError as exc:
        raise ProtocolError(f"Invalid chunk size line: {line!r}") from exc
    if size < 0:
        raise ProtocolError(f"Invalid chunk size line: {line!r}")
    return size


def _read_line(reader: IO[bytes], what: str, *, limit: int | None = MAX_LINE) -> bytes:
    try:
        line = reader.readline(limit + 1) if limit is not None else reader.readline()
    except OSError as exc:
        raise TransportError(f"Failed to read {what}: {exc}") from exc
    if not line:
        raise TransportError(f"Connection closed while reading {what}")
    if limit is not None and len(line) > limit:
        raise ProtocolError(f"{what.capitalize()} exceeds {limit} bytes")
    if not line.endswith(b"\n"):
        raise TransportError(f"Connection closed in the middle of {what}", context=line[:200])
    return line


__all__ = [
    "BodyFraming",
    "FRAMINGS",
    "HTTP_VERSION_KEY",
    "JSONValue",
    "MAX_LINE",
    "STATUS_CODE_KEY",
    "STATUS_REASON_KEY",
    "TransportResponse",
    "decode_payload",
    "extract_error_message",
    "parse_framing",
    "parse_header_line",
    "parse_status_line",
    "read_body",
    "read_chunked",
    "read_exact",
    "read_headers",
    "read_response",
    "read_status_line",
    "response_has_body",
]
