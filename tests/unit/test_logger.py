"""
utils.logger 單元測試
驗證 JsonFormatter 輸出格式與 logger 設定。
"""

import json
import logging
import sys

import pytest

from model_matchers.utils.logger import JsonFormatter, logger


def _record(msg="hello", **extra):
    record = logging.LogRecord(
        name="model_matchers", level=logging.WARNING, pathname=__file__,
        lineno=10, msg=msg, args=(), exc_info=None, func="fn",
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
class TestJsonFormatter:

    def test_basic_fields(self):
        data = json.loads(JsonFormatter().format(_record("中文訊息")))
        assert data["message"] == "中文訊息"
        assert data["level"] == "WARNING"
        assert data["logger"] == "model_matchers"
        assert data["line"] == 10
        assert "timestamp" in data
        assert "event" not in data

    def test_event_field(self):
        event = {"macro": "should_have_index", "replacement": "should_have_db_index"}
        data = json.loads(JsonFormatter().format(_record(event=event)))
        assert data["event"] == event

    def test_exception_field(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record(exc_info=sys.exc_info())
        data = json.loads(JsonFormatter().format(record))
        assert "ValueError: boom" in data["exception"]


@pytest.mark.unit
class TestLogger:

    def test_name_and_propagation(self):
        assert logger.name == "model_matchers"
        assert logger.propagate is False

    def test_has_console_handler(self):
        assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)
