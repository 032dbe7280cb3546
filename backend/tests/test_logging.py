"""
Tests for log formatting and the daybook logger namespace.
"""

import json
import logging

from app.logging_config import ColoredFormatter, JsonFormatter, get_logger


def make_record(level=logging.WARNING, message="Family 42: trimmed"):
    return logging.LogRecord("daybook.test", level, __file__, 1, message, None, None)


class TestFormatters:
    def test_colored_line_is_wrapped_in_level_color(self):
        line = ColoredFormatter().format(make_record())
        assert line.startswith("\x1b[33;20m")
        assert line.endswith("\x1b[0m")
        assert "| WARNING  | daybook.test | Family 42: trimmed" in line

    def test_json_line(self):
        payload = json.loads(JsonFormatter().format(make_record(logging.INFO)))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "daybook.test"
        assert payload["message"] == "Family 42: trimmed"


def test_get_logger_namespaces_modules():
    assert get_logger("app.services.periodic").name == "daybook.app.services.periodic"
    assert get_logger("daybook.store").name == "daybook.store"
