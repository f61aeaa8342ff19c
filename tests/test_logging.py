import json
import logging

from newsdesk.core import context
from newsdesk.core.logging import JsonFormatter, RequestContextFilter


def _format(record: logging.LogRecord) -> dict:
    RequestContextFilter().filter(record)
    return json.loads(JsonFormatter().format(record))


def test_json_log_carries_context_and_extra_fields() -> None:
    context.set_request_id("req-1")
    context.set_department("CS")
    try:
        record = logging.makeLogRecord(
            {"name": "newsdesk.test", "levelno": logging.INFO, "levelname": "INFO", "msg": "Grouped report built", "buckets": 3}
        )
        payload = _format(record)
    finally:
        context.clear_context()

    assert payload["message"] == "Grouped report built"
    assert payload["request_id"] == "req-1"
    assert payload["department"] == "CS"
    assert payload["buckets"] == 3


def test_cleared_context_uses_placeholders() -> None:
    context.clear_context()
    record = logging.makeLogRecord({"name": "newsdesk.test", "msg": "hello"})
    payload = _format(record)
    assert payload["request_id"] == "-"
    assert payload["department"] == "-"
