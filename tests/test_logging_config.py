"""Tests for structured logging."""

import json
import logging

from app.core.request_context import clear_request_id, set_request_id
from app.logging_config import ContextFilter, JSONFormatter


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("app.test", logging.WARNING, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_request_id_and_extra():
    """Request context and extra fields land in the JSON payload."""
    set_request_id("req-1")
    try:
        record = _record("[ANALYSIS] Cache hit for abc123", conversation_id="abc123", message_count=5)
        ContextFilter().filter(record)
        payload = json.loads(JSONFormatter().format(record))
    finally:
        clear_request_id()

    assert payload["severity"] == "WARNING"
    assert payload["message"] == "[ANALYSIS] Cache hit for abc123"
    assert payload["request_id"] == "req-1"
    assert payload["conversation_id"] == "abc123"
    assert payload["message_count"] == 5
    assert payload["timestamp"].endswith("Z")


def test_json_formatter_without_request_context():
    """No request id is emitted outside a request."""
    record = _record("startup")
    ContextFilter().filter(record)
    payload = json.loads(JSONFormatter().format(record))

    assert "request_id" not in payload
