"""Tests for logging configuration."""

import json
import logging
import sys

from dropshare.core.logging import JsonLogFormatter, entry_id_context, setup_logging


def make_record(msg="hello", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord("dropshare.test", level, __file__, 10, msg, (), exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_basic_fields():
    output = json.loads(JsonLogFormatter().format(make_record()))

    assert output["message"] == "hello"
    assert output["severity"] == "INFO"
    assert output["logger"] == "dropshare.test"
    assert "timestamp" in output
    assert "entry_id" not in output


def test_json_formatter_includes_extra_and_entry_id():
    token = entry_id_context.set("entry-1")
    try:
        output = json.loads(JsonLogFormatter().format(make_record(file_name="a.png", size_bytes=10)))
    finally:
        entry_id_context.reset(token)

    assert output["entry_id"] == "entry-1"
    assert output["file_name"] == "a.png"
    assert output["size_bytes"] == 10


def test_json_formatter_exception_details():
    try:
        raise ValueError("bad value")
    except ValueError:
        record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

    output = json.loads(JsonLogFormatter().format(record))

    assert output["severity"] == "ERROR"
    assert output["exception_type"] == "ValueError"
    assert output["exception_message"] == "bad value"
    assert "Traceback" in output["exception"]


def test_setup_logging_uses_json_outside_local(monkeypatch):
    from dropshare.core.config import settings

    monkeypatch.setattr(settings, "ENV", "prod")
    monkeypatch.setattr(settings, "LOG_LEVEL", "warning")

    setup_logging()

    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert isinstance(root.handlers[0].formatter, JsonLogFormatter)
    assert logging.getLogger("uvicorn").propagate is False


def test_setup_logging_local_is_debug_text(monkeypatch):
    from dropshare.core.config import settings

    monkeypatch.setattr(settings, "ENV", "local")

    setup_logging()

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert not isinstance(root.handlers[0].formatter, JsonLogFormatter)
