"""Tests for structured logging."""

import json
import logging

from didcomm_demo.logging_config import JSONFormatter, log_context


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("didcomm_demo.flows", logging.INFO, __file__, 10, "sent %s", ("m1",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields(self):
        """Test that the message is rendered with its metadata."""
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["message"] == "sent m1"
        assert data["level"] == "INFO"
        assert data["logger"] == "didcomm_demo.flows"
        assert "correlation_id" not in data
        assert "context" not in data

    def test_correlation_id_lifted(self):
        """Test correlation id becomes a top-level field."""
        record = make_record(**log_context(correlation_id="c-1", step="pack"))

        data = json.loads(JSONFormatter().format(record))

        assert data["correlation_id"] == "c-1"
        assert data["context"] == {"step": "pack"}


def test_log_context_drops_none():
    """Test unset fields are left out."""
    assert log_context(correlation_id=None, alias="alice") == {"context": {"alias": "alice"}}
