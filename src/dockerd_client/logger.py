"""Level-filtered logging wrapper shared by the client, transports and parser."""

from __future__ import annotations

import logging
from typing import Any, Callable, Literal, cast

LogLevel = Literal["trace", "debug", "info", "warn", "error"]

TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

DEFAULT_LOGGER_NAME = "dockerd_client"

LOG_LEVEL_PRIORITY: dict[LogLevel, int] = {
    "trace": 0,
    "debug": 1,
    "info": 2,
    "warn": 3,
    "error": 4,
}


class BoundLogger:
    """Wraps a logging.Logger (or duck-typed object) with the client's log levels."""

    def __init__(
        self,
        logger: Any | None = None,
        *,
        level: LogLevel = "info",
    ) -> None:
        self._logger = logger or _default_logger()
        self._level = parse_log_level(level)

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._enabled("trace"):
            self._log(TRACE_LEVEL, msg, *args, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._enabled("debug"):
            self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._enabled("info"):
            self._log(logging.INFO, msg, *args, **kwargs)

    def warn(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._enabled("warn"):
            self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._enabled("error"):
            self._log(logging.ERROR, msg, *args, **kwargs)

    def child(self, name: str) -> "BoundLogger":
        """Create a child logger anchored to the same Python logger.

        ``name`` may be dotted (``"transport.unix"``), which nests the
        child the same way ``logging.Logger.getChild`` does.
        """
        if isinstance(self._logger, logging.Logger):
            base = self._logger.getChild(name)
        else:
            base = self._logger
        return BoundLogger(base, level=self._level)

    def _enabled(self, level: LogLevel) -> bool:
        return LOG_LEVEL_PRIORITY[level] >= LOG_LEVEL_PRIORITY[self._level]

    def _log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        try:
            if hasattr(self._logger, "log"):
                self._logger.log(level, msg, *args, **kwargs)
                return

            # Fall back to direct method invocation (duck typing)
            method_map: dict[int, Callable[..., Any] | None] = {
                TRACE_LEVEL: getattr(self._logger, "trace", None),
                logging.DEBUG: getattr(self._logger, "debug", None),
                logging.INFO: getattr(self._logger, "info", None),
                logging.WARNING: getattr(self._logger, "warn", None),
                logging.ERROR: getattr(self._logger, "error", None),
            }
            handler = method_map.get(level)
            if handler:
                handler(msg, *args, **kwargs)
        except Exception:
            # Never let logging failures bubble up into client code
            pass


def parse_log_level(value: str) -> LogLevel:
    """Normalise a level name from configuration; ``warning`` is accepted for ``warn``."""
    normalized = value.strip().lower()
    if normalized == "warning":
        normalized = "warn"
    if normalized not in LOG_LEVEL_PRIORITY:
        raise ValueError(f"Unsupported log level: {value!r}")
    return cast(LogLevel, normalized)


def _default_logger() -> logging.Logger:
    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(TRACE_LEVEL)
    return logger


def create_logger(*, logger: Any | None = None, level: LogLevel = "info") -> BoundLogger:
    if isinstance(logger, BoundLogger):
        return logger
    return BoundLogger(logger, level=level)


__all__ = ["BoundLogger", "LogLevel", "TRACE_LEVEL", "create_logger", "parse_log_level"]
