"""
Unit tests for core.logger module.

Tests:
- format_kv_pairs() quoting, escaping and truncation
- Logger context attachment, truncation and level filtering
- StructuredFormatter and JsonFormatter output
- setup_logging() root configuration
"""

import json
import logging
import sys

import pytest

from notefeed.core.logger import (
    JsonFormatter,
    LogFormat,
    Logger,
    StructuredFormatter,
    format_kv_pairs,
    setup_logging,
)


def _record(msg: str, *, level: int = logging.INFO, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("feed", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# =============================================================================
# format_kv_pairs() Tests
# =============================================================================


class TestFormatKvPairs:
    def test_empty(self) -> None:
        assert format_kv_pairs({}) == ""

    def test_simple_values(self) -> None:
        assert format_kv_pairs({"a": 1, "b": "x"}) == " a=1 b=x"

    def test_spaces_quoted(self) -> None:
        assert format_kv_pairs({"msg": "two words"}) == ' msg="two words"'

    def test_quotes_escaped(self) -> None:
        assert format_kv_pairs({"msg": 'say "hi"'}) == ' msg="say \\"hi\\""'

    def test_empty_value_quoted(self) -> None:
        assert format_kv_pairs({"v": ""}) == ' v=""'

    def test_truncation(self) -> None:
        result = format_kv_pairs({"v": "x" * 20}, max_value_length=5)
        assert result == ' v="xxxxx...<truncated 15 chars>"'

    def test_truncation_disabled(self) -> None:
        assert format_kv_pairs({"v": "x" * 2000}, max_value_length=None) == " v=" + "x" * 2000

    def test_custom_prefix(self) -> None:
        assert format_kv_pairs({"a": 1}, prefix="") == "a=1"


# =============================================================================
# Logger Tests
# =============================================================================


class TestLogger:
    def test_name(self) -> None:
        assert Logger("feed.pipeline").name == "feed.pipeline"

    def test_context_attached(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = Logger("test.kv")
        with caplog.at_level(logging.INFO, logger="test.kv"):
            logger.info("pipeline_completed", posts=3)
        record = caplog.records[-1]
        assert record.getMessage() == "pipeline_completed"
        assert record.structured_kv == {"posts": "3"}  # type: ignore[attr-defined]

    def test_context_truncated(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = Logger("test.trunc", max_value_length=4)
        with caplog.at_level(logging.INFO, logger="test.trunc"):
            logger.warning("fetch_empty", filter="abcdefgh")
        kv = caplog.records[-1].structured_kv  # type: ignore[attr-defined]
        assert kv == {"filter": "abcd...<truncated 4 chars>"}

    def test_disabled_level_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = Logger("test.quiet")
        with caplog.at_level(logging.WARNING, logger="test.quiet"):
            logger.debug("ignored", a=1)
        assert not [r for r in caplog.records if r.name == "test.quiet"]

    def test_exception_carries_traceback(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = Logger("test.exc")
        with caplog.at_level(logging.ERROR, logger="test.exc"):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                logger.exception("unhandled_error", path="/")
        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.exc_info is not None


# =============================================================================
# Formatter Tests
# =============================================================================


class TestStructuredFormatter:
    def test_plain_record(self) -> None:
        assert StructuredFormatter().format(_record("relay_notice relay=x")) == (
            "info feed relay_notice relay=x"
        )

    def test_structured_record(self) -> None:
        record = _record("request_completed", structured_kv={"status": "200"})
        assert StructuredFormatter().format(record) == "info feed request_completed status=200"


class TestJsonFormatter:
    def test_structured_record(self) -> None:
        record = _record(
            "nip05_failed", level=logging.WARNING, structured_kv={"handle": "alice@example.com"}
        )
        payload = json.loads(JsonFormatter().format(record))

        assert payload["level"] == "warning"
        assert payload["logger"] == "feed"
        assert payload["message"] == "nip05_failed"
        assert payload["handle"] == "alice@example.com"
        assert payload["timestamp"].endswith("+00:00")

    def test_plain_record(self) -> None:
        payload = json.loads(JsonFormatter().format(_record("relay_notice")))
        assert payload["message"] == "relay_notice"
        assert "exception" not in payload

    def test_context_cannot_override_reserved_keys(self) -> None:
        record = _record("real", structured_kv={"message": "fake", "level": "fake"})
        payload = json.loads(JsonFormatter().format(record))
        assert payload["message"] == "real"
        assert payload["level"] == "info"

    def test_exception(self) -> None:
        try:
            raise ValueError("bad")
        except ValueError:
            record = _record("failed", level=logging.ERROR, exc_info=sys.exc_info())
        payload = json.loads(JsonFormatter().format(record))
        assert "ValueError: bad" in payload["exception"]


# =============================================================================
# setup_logging() Tests
# =============================================================================


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def _restore_root(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        yield
        root.handlers = saved_handlers
        root.setLevel(saved_level)

    def test_text_format(self) -> None:
        setup_logging("debug")

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)
        assert root.level == logging.DEBUG

    def test_json_format(self) -> None:
        setup_logging("WARNING", LogFormat.JSON)

        root = logging.getLogger()
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.WARNING
