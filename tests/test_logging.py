"""Tests for the structured logging system (seedtrace_kernel/logging_config.py)."""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from seedtrace_kernel.domain.seed_level import SeedLevel
from seedtrace_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests, then restore the suite setup."""
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
        assert record["logger"] == "seedtrace_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("relation", extra={"parent_id": "A", "depth": 3})

        record = _parse_log(stream)
        assert record["parent_id"] == "A"
        assert record["depth"] == 3

    def test_domain_values_serialised(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info(
            "values",
            extra={
                "quantity": Decimal("12.500"),
                "harvest": date(2024, 3, 1),
                "lot_level": SeedLevel.G1,
            },
        )

        record = _parse_log(stream)
        assert record["quantity"] == "12.500"
        assert record["harvest"] == "2024-03-01"
        assert record["lot_level"] == "G1"
        assert record["level"] == "INFO"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(correlation_id="abc-123", lot_id="SL-G1-2024-001")
        get_logger("test").info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["lot_id"] == "SL-G1-2024-001"

    def test_seedtrace_exception_fields_extracted(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        from seedtrace_kernel.exceptions import InvalidHierarchyError

        try:
            raise InvalidHierarchyError("P", "G3", "K", "G2")
        except InvalidHierarchyError:
            get_logger("test").error("relation_failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "INVALID_HIERARCHY"
        assert record["exc_type"] == "InvalidHierarchyError"
        assert record["exc_parent_level"] == "G3"
        assert record["exc_child_id"] == "K"
        assert "traceback" in record

    def test_extra_overrides_bound_context(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        with LogContext.bind(lot_id="SL-GO-2024-001"):
            get_logger("test").error("cycle", extra={"lot_id": "SL-G1-2024-004"})

        assert _parse_log(stream)["lot_id"] == "SL-G1-2024-004"

    def test_extra_cannot_replace_envelope(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").warning("envelope", extra={"level": "G2", "ts": "never"})

        record = _parse_log(stream)
        assert record["level"] == "WARNING"
        assert record["ts"] != "never"

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "lot_id" not in record

    def test_level_filtering(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second")
        logger.debug("third")

        assert [r["message"] for r in _parse_all_logs(stream)] == ["first", "second"]


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    def test_set_and_get(self):
        LogContext.set(correlation_id="x", actor_id="y")
        assert LogContext.get_all() == {"correlation_id": "x", "actor_id": "y"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_restores_previous(self):
        LogContext.set(lot_id="outer")
        with LogContext.bind(lot_id="inner"):
            assert LogContext.get_all()["lot_id"] == "inner"
        assert LogContext.get_all()["lot_id"] == "outer"

    def test_bind_restores_none(self):
        with LogContext.bind(request_id="temp"):
            assert LogContext.get_all()["request_id"] == "temp"
        assert "request_id" not in LogContext.get_all()


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    def test_idempotent(self):
        root = logging.getLogger("seedtrace_kernel")
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        before = list(root.handlers)

        h2, _ = _make_handler()
        configure_logging(handler=h2)

        assert root.handlers == before
        assert h1 in root.handlers
        assert h2 not in root.handlers

    def test_get_logger_returns_child(self):
        assert get_logger("services.genealogy").name == "seedtrace_kernel.services.genealogy"

    def test_logger_hierarchy(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        get_logger("deep.nested.module").debug("hierarchy_test")

        record = _parse_log(stream)
        assert record["logger"] == "seedtrace_kernel.deep.nested.module"
