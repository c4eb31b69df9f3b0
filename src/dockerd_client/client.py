"""High-level client for the daemon's control API."""

from __future__ import annotations

import json as jsonlib
import os
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import urlparse

from .errors import DockerdError, MissingFieldError
from .logger import LogLevel, create_logger, parse_log_level
from .parser import BodyFraming, parse_framing
from .transport import TcpTransport, Transport, UnixSocketTransport
from .transport.tcp import DEFAULT_TCP_PORT
from .transport.unix import DEFAULT_SOCKET_PATH
from .types import ApiResult, ExecuteResult
from .wire import encode_body, format_target

DEFAULT_HOST = f"unix://{DEFAULT_SOCKET_PATH}"
BOOTSTRAP_API_VERSION = "1.24"
HANDSHAKE_PATH = "/version"


@dataclass
class ClientOptions:
    base_url: str | None = None
    framing: BodyFraming = "exact"
    send_content_length: bool = False
    transport: Transport | None = None
    logger: object | None = None
    log_level: LogLevel = "info"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> "ClientOptions":
        """Read ``DOCKER_HOST``, ``DOCKERD_CLIENT_FRAMING`` and ``DOCKERD_CLIENT_LOG_LEVEL``."""
        env = os.environ if environ is None else environ
        options = cls()
        if env.get("DOCKER_HOST"):
            options.base_url = env["DOCKER_HOST"]
        if env.get("DOCKERD_CLIENT_FRAMING"):
            options.framing = parse_framing(env["DOCKERD_CLIENT_FRAMING"])
        if env.get("DOCKERD_CLIENT_LOG_LEVEL"):
            options.log_level = parse_log_level(env["DOCKERD_CLIENT_LOG_LEVEL"])
        for name, value in overrides.items():
            if not hasattr(options, name):
                raise TypeError(f"Unknown client option: {name}")
            setattr(options, name, value)
        return options


class DockerClient:
    """Primary entry point for talking to the daemon.

    Construction connects and performs the version handshake; every later
    request path is prefixed with the negotiated API version.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        framing: BodyFraming = "exact",
        send_content_length: bool = False,
        transport: Transport | None = None,
        logger: object | None = None,
        log_level: LogLevel = "info",
    ) -> None:
        options = ClientOptions(
            base_url=base_url,
            framing=framing,
            send_content_length=send_content_length,
            transport=transport,
            logger=logger,
            log_level=log_level,
        )
        self.base_url = options.base_url or DEFAULT_HOST
        self.framing = parse_framing(options.framing)
        self._logger = create_logger(logger=options.logger, level=options.log_level)
        self._logger.info("Initializing DockerClient for %s", self.base_url)
        self._transport = options.transport or self._create_transport(
            self.base_url, self.framing, options.send_content_length
        )

        self.version = ""
        self.api_version = BOOTSTRAP_API_VERSION
        self.os_version = ""
        try:
            self._handshake()
        except Exception:
            self._transport.close()
            raise

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> "DockerClient":
        options = ClientOptions.from_env(environ, **overrides)
        return cls(
            base_url=options.base_url,
            framing=options.framing,
            send_content_length=options.send_content_length,
            transport=options.transport,
            logger=options.logger,
            log_level=options.log_level,
        )

    def request(
        self,
        method: str,
        path: str,
        body: bytes | str | None = None,
        *,
        json: Any = None,
    ) -> ApiResult:
        if json is not None:
            if body is not None:
                raise ValueError("Pass either body or json, not both")
            body = jsonlib.dumps(json)
        target = format_target(self.api_version, path)
        response = self._transport.round_trip(method.upper(), target, encode_body(body))
        return ApiResult.from_response(response)

    def request_safe(
        self,
        method: str,
        path: str,
        body: bytes | str | None = None,
        *,
        json: Any = None,
    ) -> ExecuteResult[ApiResult]:
        try:
            return ExecuteResult(ok=True, data=self.request(method, path, body, json=json))
        except (DockerdError, ValueError) as exc:
            return ExecuteResult(ok=False, error=exc)

    def get(self, path: str) -> ApiResult:
        return self.request("GET", path)

    def head(self, path: str) -> ApiResult:
        return self.request("HEAD", path)

    def post(self, path: str, body: bytes | str | None = None, *, json: Any = None) -> ApiResult:
        return self.request("POST", path, body, json=json)

    def put(self, path: str, body: bytes | str | None = None, *, json: Any = None) -> ApiResult:
        return self.request("PUT", path, body, json=json)

    def delete(self, path: str, body: bytes | str | None = None, *, json: Any = None) -> ApiResult:
        return self.request("DELETE", path, body, json=json)

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "DockerClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __str__(self) -> str:
        return (
            f"Docker Version: {self.version}\n"
            f"Api Version: v{self.api_version}\n"
            f"Os Version: {self.os_version}\n"
        )

    def _handshake(self) -> None:
        result = self.get(HANDSHAKE_PATH).raise_for_status()
        data = result.data
        fields: dict[str, str] = {}
        for name in ("Version", "ApiVersion", "Os"):
            value = data.get(name) if isinstance(data, dict) else None
            if not isinstance(value, str):
                raise MissingFieldError(name, context=data)
            fields[name] = value

        self.version = fields["Version"]
        self.api_version = fields["ApiVersion"]
        self.os_version = fields["Os"]
        self._logger.info(
            "Negotiated API v%s with daemon %s (%s)", self.api_version, self.version, self.os_version
        )

    def _create_transport(self, base_url: str, framing: BodyFraming, send_content_length: bool) -> Transport:
        parsed = urlparse(base_url)
        scheme = parsed.scheme or "unix"

        if scheme == "unix":
            if parsed.netloc:
                raise ValueError(f"unix:// URLs take an absolute socket path, got host {parsed.netloc!r}: {base_url}")
            path = parsed.path or DEFAULT_SOCKET_PATH
            return UnixSocketTransport(
                path, framing=framing, send_content_length=send_content_length, logger=self._logger
            )

        if scheme == "tcp":
            host = parsed.hostname or "localhost"
            port = parsed.port or DEFAULT_TCP_PORT
            return TcpTransport(
                host, port, framing=framing, send_content_length=send_content_length, logger=self._logger
            )

        raise ValueError(f"Unsupported scheme: {scheme}")


__all__ = ["BOOTSTRAP_API_VERSION", "ClientOptions", "DockerClient"]
