"""HTTP/1.1 request serialization."""

from __future__ import annotations

import re

METHODS = ("GET", "HEAD", "POST", "PUT", "DELETE")

REQUEST_HEADERS = (
    ("Host", "localhost"),
    ("Accept", "*/*"),
)

_INVALID_PATH_CHARS = re.compile(r"[\x00-\x20\x7f]")


def format_target(api_version: str, path: str) -> str:
    """Prefix an already percent-encoded ``path`` with the API version."""
    if not path.startswith("/"):
        raise ValueError(f"Request path must start with '/': {path!r}")
    if _INVALID_PATH_CHARS.search(path):
        raise ValueError(f"Request path contains whitespace or control characters: {path!r}")
    return f"/v{api_version}{path}"


def encode_body(body: bytes | str | None) -> bytes | None:
    if body is None:
        return None
    if isinstance(body, str):
        return body.encode("utf-8")
    return bytes(body)


def build_request(
    method: str,
    target: str,
    body: bytes | str | None = None,
    *,
    send_content_length: bool = False,
) -> bytes:
    """Serialize the request line, fixed headers, blank line and body.

    The daemon tolerates bodies without ``Content-Length`` for the supported
    verbs, so the header is only written when ``send_content_length`` is set.
    """
    method = method.upper()
    if method not in METHODS:
        raise ValueError(f"Unsupported method: {method}")

    payload = encode_body(body)
    lines = [f"{method} {target} HTTP/1.1"]
    lines.extend(f"{name}: {value}" for name, value in REQUEST_HEADERS)
    if send_content_length and payload:
        lines.append(f"Content-Length: {len(payload)}")
    head = ("\r\n".join(lines) + "\r\n\r\n").encode("ascii")
    if payload:
        return head + payload
    return head


__all__ = ["METHODS", "build_request", "encode_body", "format_target"]
