"""Tests for the structured logging system (travel_kernel/logging_config.py)."""

import json
import logging
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from travel_kernel.domain.values import Unit
from travel_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()
    configure_logging(level=logging.DEBUG)


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "travel_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("computed", extra={"nights": 3, "mode": "rental"})

        record = _parse_log(stream)
        assert record["nights"] == 3
        assert record["mode"] == "rental"

    def test_decimal_and_enum_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("q", extra={"amount": Decimal("12.50"), "unit": Unit.NIGHTS})

        record = _parse_log(stream)
        assert record["amount"] == "12.50"
        assert record["unit"] == "nights"

    def test_uuid_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        uid = uuid4()
        get_logger("test").info("with_uuid", extra={"request_id": uid})

        assert _parse_log(stream)["request_id"] == str(uid)

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(correlation_id="abc-123", trip_id="spring")
        get_logger("test").info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["trip_id"] == "spring"

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "trip_id" not in record

    def test_exception_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        try:
            raise ValueError("boom")
        except ValueError:
            get_logger("test").error("failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "traceback" in record

    def test_kernel_exception_fields_extracted(self):
        """Kernel exceptions carry .code and structured attributes."""
        from travel_kernel.exceptions import UnitMismatchError

        handler, stream = _make_handler()
        configure_logging(handler=handler)
        try:
            raise UnitMismatchError("times", ("rooms", "per mile"))
        except UnitMismatchError:
            get_logger("test").error("unit_error", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "UNIT_MISMATCH"
        assert record["exc_type"] == "UnitMismatchError"
        assert record["exc_operation"] == "times"
        assert record["exc_units"] == ["rooms", "per mile"]

    def test_valid_json_every_line(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second", extra={"k": "v"})
        logger.debug("third")

        logs = _parse_all_logs(stream)
        # default level is INFO, so the debug line is dropped
        assert len(logs) == 2
        for record in logs:
            assert {"ts", "level", "logger", "message"} <= record.keys()


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    """Tests for context propagation."""

    def test_set_and_get(self):
        LogContext.set(correlation_id="x", trip_id="y")
        assert LogContext.get_all() == {"correlation_id": "x", "trip_id": "y"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_context_manager(self):
        LogContext.set(trip_id="outer")
        with LogContext.bind(trip_id="inner"):
            assert LogContext.get_all()["trip_id"] == "inner"
        assert LogContext.get_all()["trip_id"] == "outer"

    def test_bind_restores_none(self):
        assert "trip_id" not in LogContext.get_all()
        with LogContext.bind(trip_id="temp"):
            assert LogContext.get_all()["trip_id"] == "temp"
        assert "trip_id" not in LogContext.get_all()

    def test_all_fields(self):
        LogContext.set(correlation_id="c", trip_id="t")
        assert LogContext.get_all() == {"correlation_id": "c", "trip_id": "t"}

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError):
            LogContext.set(trace_id="r")


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    """Tests for initialization."""

    def test_idempotent(self):
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        h2, _ = _make_handler()
        configure_logging(handler=h2)  # second call is no-op
        assert len(logging.getLogger("travel_kernel").handlers) == 1

    def test_get_logger_returns_child(self):
        assert get_logger("engines.lodging").name == "travel_kernel.engines.lodging"

    def test_logger_hierarchy(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        get_logger("deep.nested.module").debug("hierarchy_test")

        record = _parse_log(stream)
        assert record["message"] == "hierarchy_test"
        assert record["logger"] == "travel_kernel.deep.nested.module"

    def test_reset_clears_handlers(self):
        h, _ = _make_handler()
        configure_logging(handler=h)
        reset_logging()
        assert logging.getLogger("travel_kernel").handlers == []
