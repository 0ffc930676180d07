"""Tests for the invocation logging adapter."""

import logging
from datetime import UTC, datetime

import pytest

from fnruntime.invocation.context import InvocationContext
from fnruntime.invocation.models import Event, HandlerLogLevel, LogRecord, TriggerInfo
from fnruntime.logging.adapters.invocation_adapter import (
    HANDLER_LOGGER_NAME,
    emit_log_records,
    set_invocation_context,
)
from fnruntime.logging.context import clear_context, get_extra_context, get_invocation_id


@pytest.fixture(autouse=True)
def _clear_logging_context():
    """Clear logging context around each test."""
    clear_context()
    yield
    clear_context()


class TestSetInvocationContext:
    def test_sets_invocation_id_from_event(self):
        set_invocation_context(Event(id="event-1"), InvocationContext())
        assert get_invocation_id() == "event-1"

    def test_sets_worker_id(self):
        set_invocation_context(Event(id="event-2"), InvocationContext(worker_id="7"))
        assert get_extra_context()["worker_id"] == "7"

    def test_event_trigger_wins(self):
        event = Event(trigger=TriggerInfo(kind="cron", name="every-minute"))
        context = InvocationContext(trigger=TriggerInfo(kind="http", name="default-http"))
        set_invocation_context(event, context)
        extra = get_extra_context()
        assert extra["trigger_kind"] == "cron"
        assert extra["trigger_name"] == "every-minute"

    def test_falls_back_to_context_trigger(self):
        context = InvocationContext(trigger=TriggerInfo(kind="http", name="default-http"))
        set_invocation_context(Event(), context)
        assert get_extra_context()["trigger_kind"] == "http"

    def test_no_trigger_fields_when_unknown(self):
        set_invocation_context(Event(), InvocationContext())
        assert "trigger_kind" not in get_extra_context()


class TestEmitLogRecords:
    def test_forwards_in_order_with_levels(self, caplog):
        records = [
            LogRecord(level=HandlerLogLevel.DEBUG, message="Debug message"),
            LogRecord(level=HandlerLogLevel.INFO, message="Info message"),
            LogRecord(level=HandlerLogLevel.WARN, message="Warn message"),
            LogRecord(level=HandlerLogLevel.ERROR, message="Error message"),
        ]
        with caplog.at_level(logging.DEBUG, logger=HANDLER_LOGGER_NAME):
            count = emit_log_records(records)

        assert count == 4
        assert [record.getMessage() for record in caplog.records] == [
            "Debug message",
            "Info message",
            "Warn message",
            "Error message",
        ]
        assert [record.levelno for record in caplog.records] == [
            logging.DEBUG,
            logging.INFO,
            logging.WARNING,
            logging.ERROR,
        ]

    def test_attributes_under_with(self, caplog):
        record = LogRecord(
            level=HandlerLogLevel.ERROR,
            message="Error message",
            attributes={"source": "rabbit", "weight": 7},
            timestamp=datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC),
        )
        with caplog.at_level(logging.DEBUG, logger=HANDLER_LOGGER_NAME):
            emit_log_records([record])

        emitted = caplog.records[0]
        assert getattr(emitted, "with") == {"source": "rabbit", "weight": 7}
        assert emitted.handler_timestamp == "2024-01-02T03:04:05+00:00"

    def test_uses_given_logger(self, caplog):
        target = logging.getLogger("tests.handler")
        with caplog.at_level(logging.DEBUG, logger="tests.handler"):
            emit_log_records([LogRecord(level="info", message="hello")], target)
        assert caplog.records[0].name == "tests.handler"

    def test_empty(self):
        assert emit_log_records([]) == 0
