"""
Unit tests for the logging helpers and Sentry scrubbing
"""

import logging

from teamtasks.core.logging import filter_sensitive_data, init_sentry
from teamtasks.logging import LogLevel, get_logger
from teamtasks.middleware.logging import client_ip
from teamtasks.logging.formatters import LevelFormatter, get_formatter_for_level


def make_record(message: str, context=None) -> logging.LogRecord:
    record = logging.LogRecord("teamtasks.test", logging.INFO, __file__, 1, message, None, None)
    if context is not None:
        record.context = context
    return record


class TestLevelFormatter:

    def test_tag_and_context(self):
        line = LevelFormatter("INFO").format(make_record("Team created", {"team_id": "t-1", "owner_id": "u-1"}))

        assert line.startswith("[INFO] ")
        assert "teamtasks.test - Team created" in line
        assert line.endswith("| team_id=t-1 owner_id=u-1")

    def test_without_context(self):
        line = LevelFormatter("INFO").format(make_record("plain"))

        assert "|" not in line

    def test_request_lines_omit_logger_name(self):
        line = get_formatter_for_level(LogLevel.REQUEST).format(make_record("API request"))

        assert "teamtasks.test" not in line


class TestSentry:

    def test_disabled_without_dsn(self):
        assert init_sentry() is False

    def test_sensitive_fields_are_masked(self):
        event = {
            "request": {
                "data": {"username": "ada", "password": "secret", "code": "abcdef"},
                "headers": {"Authorization": "Bearer abc", "Accept": "application/json"},
            }
        }

        filtered = filter_sensitive_data(event)

        assert filtered["request"]["data"] == {"username": "ada", "password": "[FILTERED]", "code": "[FILTERED]"}
        assert filtered["request"]["headers"] == {"Authorization": "[FILTERED]", "Accept": "application/json"}

    def test_event_without_request(self):
        assert filter_sensitive_data({"message": "boom"}) == {"message": "boom"}


class TestCustomLogger:

    def test_shared_per_name(self):
        assert get_logger("teamtasks.test") is get_logger("teamtasks.test")

    def test_bind_merges_context(self):
        logger = get_logger("teamtasks.test")
        child = logger.bind(request_id="r-1").bind(team_id="t-1")

        assert child.bound == {"request_id": "r-1", "team_id": "t-1"}
        assert logger.bound == {}
        assert child.logger is logger.logger


class FakeRequest:
    def __init__(self, headers, host="10.0.0.1"):
        self.headers = headers
        self.client = type("Client", (), {"host": host})() if host else None


class TestClientIp:

    def test_forwarded_for(self):
        assert client_ip(FakeRequest({"x-forwarded-for": "1.2.3.4, 10.0.0.1"})) == "1.2.3.4"

    def test_peer_address(self):
        assert client_ip(FakeRequest({})) == "10.0.0.1"

    def test_unknown(self):
        assert client_ip(FakeRequest({}, host=None)) == "unknown"
