import json
import logging

import structlog

from sprintboard.logging import configure_logging, json_formatter


def _record(**extra) -> logging.LogRecord:
    record = logging.makeLogRecord(
        {
            "name": "sprintboard.test",
            "levelname": "INFO",
            "levelno": logging.INFO,
            "msg": "search.completed entity=%s",
            "args": ("ticket",),
        }
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_renders_message_and_extra():
    payload = json.loads(json_formatter().format(_record(request_id="abc")))

    assert payload["message"] == "search.completed entity=ticket"
    assert payload["level"] == "info"
    assert payload["logger"] == "sprintboard.test"
    assert payload["request_id"] == "abc"
    assert "ts" in payload


def test_configure_logging_sets_package_level():
    configure_logging(level="debug", fmt="json")
    try:
        assert logging.getLogger("sprintboard").level == logging.DEBUG
        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)
    finally:
        configure_logging(level="INFO", fmt="plain")
