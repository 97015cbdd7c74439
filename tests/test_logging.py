"""Tests for the structured logging system (clevio_kernel/logging_config.py)."""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from clevio_kernel.domain.compliance import Severity
from clevio_kernel.exceptions import LeadTimeViolationError
from clevio_kernel.logging_config import (
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


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_all_logs(stream: StringIO) -> list[dict]:
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


def _parse_log(stream: StringIO) -> dict:
    return _parse_all_logs(stream)[0]


class TestStructuredFormatter:
    """JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "clevio.test"
        assert "ts" in record

    def test_domain_values_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info(
            "values",
            extra={
                "run_date": date(2025, 3, 21),
                "fee_total": Decimal("3000.00"),
                "severity": Severity.CRITICAL,
            },
        )

        record = _parse_log(stream)
        assert record["run_date"] == "2025-03-21"
        assert record["fee_total"] == "3000.00"
        assert record["severity"] == "critical"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(correlation_id="abc-123", client_id="c-9")
        get_logger("test").info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["client_id"] == "c-9"

    def test_clevio_exception_fields_extracted(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        try:
            raise LeadTimeViolationError(date(2025, 3, 10), date(2025, 3, 17))
        except LeadTimeViolationError:
            get_logger("test").error("schedule_failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "LEAD_TIME_VIOLATION"
        assert record["exc_type"] == "LeadTimeViolationError"
        assert record["exc_earliest"] == "2025-03-17"
        assert "traceback" in record

    def test_debug_suppressed_at_info(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.debug("second")

        assert len(_parse_all_logs(stream)) == 1


class TestLogContext:
    def test_bind_restores_previous(self):
        LogContext.set(session_id="outer")
        with LogContext.bind(session_id="inner", issue_id="i-1"):
            assert LogContext.get_all() == {"session_id": "inner", "issue_id": "i-1"}
        assert LogContext.get_all() == {"session_id": "outer"}

    def test_clear(self):
        LogContext.set(actor_id="admin")
        LogContext.clear()

        assert LogContext.get_all() == {}

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            LogContext.set(tenant_id="t-1")


class TestConfigureLogging:
    def test_idempotent(self):
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        h2, _ = _make_handler()
        configure_logging(handler=h2)

        handlers = logging.getLogger("clevio").handlers
        assert h1 in handlers
        assert h2 not in handlers

    def test_child_loggers_inherit(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        get_logger("engines.recurring").debug("hierarchy_test")

        record = _parse_log(stream)
        assert record["logger"] == "clevio.engines.recurring"
