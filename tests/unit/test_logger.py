"""Test event binding, structlog processors and logging setup."""

from __future__ import annotations

import io
import json
import logging

import pytest

from opendatalayer.data_layer import DataLayer
from opendatalayer.observability.logger import (
    _add_event,
    bind_event,
    get_current_event,
    get_logger,
    setup_logging,
)


class TestBindEvent:
    def test_unbound_by_default(self):
        assert get_current_event() is None

    def test_binding_is_scoped(self):
        with bind_event("id-1", "page.view"):
            assert get_current_event() == ("id-1", "page.view")
        assert get_current_event() is None

    def test_nested_binding_restores_outer(self):
        with bind_event("outer", "a"):
            with bind_event("inner", "b"):
                assert get_current_event() == ("inner", "b")
            assert get_current_event() == ("outer", "a")


class TestAddEventProcessor:
    def test_adds_fields_when_bound(self):
        with bind_event("id-1", "page.view"):
            out = _add_event(None, "info", {"event": "hello"})
        assert out == {"event": "hello", "event_id": "id-1", "event_name": "page.view"}

    def test_noop_when_unbound(self):
        assert _add_event(None, "info", {"event": "hello"}) == {"event": "hello"}


def test_get_logger_returns_bound_logger():
    logger = get_logger("opendatalayer.test")
    assert hasattr(logger, "info")


@pytest.fixture
def log_stream(restore_logging) -> io.StringIO:
    stream = io.StringIO()
    setup_logging(level="DEBUG", format="json", stream=stream)
    return stream


def _lines(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines()]


class TestSetupLogging:
    def test_stdlib_records_carry_bound_event(self, log_stream):
        with bind_event("id-1", "page.view"):
            logging.getLogger("opendatalayer.sample").info("handled %s", "thing")

        (entry,) = _lines(log_stream)
        assert entry["event"] == "handled thing"
        assert entry["event_id"] == "id-1"
        assert entry["event_name"] == "page.view"
        assert entry["level"] == "info"
        assert entry["logger"] == "opendatalayer.sample"

    def test_structlog_entries_carry_bound_event(self, log_stream):
        with bind_event("id-2", "ecommerce.purchase"):
            get_logger("opendatalayer.sample").warning("slow", elapsed_ms=12)

        (entry,) = _lines(log_stream)
        assert entry["event"] == "slow"
        assert entry["elapsed_ms"] == 12
        assert entry["event_id"] == "id-2"

    def test_dropped_event_log_names_the_event(self, log_stream):
        dl = DataLayer()
        dl.use(lambda event, next_: None)

        event = dl.push("page.view")

        entries = [e for e in _lines(log_stream) if e["logger"] == "opendatalayer.data_layer"]
        assert [e["event_id"] for e in entries] == [event.id]
        assert entries[0]["event_name"] == "page.view"

    def test_level_filters_records(self, restore_logging):
        stream = io.StringIO()
        setup_logging(level="WARNING", stream=stream)
        logging.getLogger("opendatalayer.sample").info("quiet")
        assert stream.getvalue() == ""

    def test_repeated_setup_replaces_handler(self, restore_logging):
        first, second = io.StringIO(), io.StringIO()
        setup_logging(stream=first)
        setup_logging(stream=second)

        logging.getLogger("opendatalayer.sample").warning("once")

        assert first.getvalue() == ""
        assert len(_lines(second)) == 1
