"""Tests for request ID sanitization and logging context."""

import logging

from taskauth.middleware.request_id import sanitize_request_id
from taskauth.shared.context import RequestIdLogFilter, current_request_id


def test_valid_request_id_is_kept() -> None:
    assert sanitize_request_id("abc-123_X") == "abc-123_X"


def test_unsafe_request_id_is_replaced() -> None:
    for raw in [None, "", "bad id\nwith newline", "x" * 65]:
        replaced = sanitize_request_id(raw)
        assert replaced != raw
        assert len(replaced) == 36


def test_log_filter_adds_request_id() -> None:
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
    RequestIdLogFilter().filter(record)
    assert record.request_id == "-"

    token = current_request_id.set("req-1")
    try:
        RequestIdLogFilter().filter(record)
        assert record.request_id == "req-1"
    finally:
        current_request_id.reset(token)
