"""Unit tests for log context binding and JSON formatting."""

import json
import logging
from datetime import datetime, timezone

from zinasite.logging_config import (
    ContextFilter,
    JsonFormatter,
    backend_var,
    get_request_id,
    log_context,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("zinasite.test", logging.INFO, __file__, 1, "Fetched %s", ("events",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    ContextFilter().filter(record)
    return record


class TestLogContext:

    def test_binds_and_restores(self):
        with log_context(request_id="req-1", backend="gateway"):
            assert get_request_id() == "req-1"
            with log_context(backend="hosted_direct"):
                assert backend_var.get() == "hosted_direct"
                assert get_request_id() == "req-1"
            assert backend_var.get() == "gateway"

        assert get_request_id() is None
        assert backend_var.get() is None

    def test_unbound_fields_are_dashes(self):
        record = _record()
        assert (record.request_id, record.backend) == ("-", "-")


class TestJsonFormatter:

    def test_context_and_extra_fields(self):
        with log_context(backend="hosted_direct"):
            record = _record(resource="events", start=datetime(2026, 7, 1, tzinfo=timezone.utc))

        line = json.loads(JsonFormatter().format(record))

        assert line["message"] == "Fetched events"
        assert line["backend"] == "hosted_direct"
        assert "request_id" not in line
        assert line["resource"] == "events"
        assert line["start"] == "2026-07-01T00:00:00Z"

    def test_unencodable_extra_becomes_string(self):
        line = json.loads(JsonFormatter().format(_record(client=object())))
        assert line["client"].startswith("<object object")
