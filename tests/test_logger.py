import logging

import pytest

from dockerd_client.logger import BoundLogger, create_logger, parse_log_level


class RecordingLogger:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def debug(self, msg: str, *args: object) -> None:
        self.messages.append(("debug", msg % args))

    def warn(self, msg: str, *args: object) -> None:
        self.messages.append(("warn", msg % args))


def test_level_filtering_with_duck_typed_logger() -> None:
    recorder = RecordingLogger()
    logger = create_logger(logger=recorder, level="warn")
    logger.debug("hidden %s", 1)
    logger.warn("shown %s", 2)
    assert recorder.messages == [("warn", "shown 2")]


def test_child_nests_python_logger(caplog: pytest.LogCaptureFixture) -> None:
    base = logging.getLogger("dockerd_client.tests")
    child = BoundLogger(base, level="debug").child("transport.unix")
    with caplog.at_level(logging.DEBUG, logger="dockerd_client.tests"):
        child.debug("GET %s", "/v1.43/info")
    assert caplog.records[-1].name == "dockerd_client.tests.transport.unix"
    assert caplog.records[-1].getMessage() == "GET /v1.43/info"


def test_parse_log_level() -> None:
    assert parse_log_level("DEBUG") == "debug"
    assert parse_log_level("warning") == "warn"
    with pytest.raises(ValueError):
        parse_log_level("verbose")
