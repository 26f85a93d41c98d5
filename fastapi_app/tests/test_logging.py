"""
Тесты форматтеров и фильтра логирования
"""

import json
import logging

from core.logging_config import MASK, ColoredFormatter, JSONFormatter, SensitiveDataFilter, extra_fields


def make_record(msg="Analysis completed", level=logging.INFO, **extra):
    record = logging.LogRecord("tests", level, __file__, 10, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_extra_fields_returns_only_user_supplied_attributes():
    record = make_record(chat_id=42, score=7.5)

    assert extra_fields(record) == {"chat_id": 42, "score": 7.5}


def test_sensitive_filter_masks_secrets_and_keeps_other_fields():
    record = make_record(password="SecurePassword123", Authorization="Bearer abc", email="user@example.com")

    assert SensitiveDataFilter().filter(record) is True
    assert record.password == MASK
    assert record.Authorization == MASK
    assert record.email == "user@example.com"


def test_json_formatter_includes_extra_fields():
    record = make_record(chat_id=42, category="dating")

    data = json.loads(JSONFormatter().format(record))

    assert data["message"] == "Analysis completed"
    assert data["level"] == "INFO"
    assert data["logger"] == "tests"
    assert data["chat_id"] == 42
    assert data["category"] == "dating"


def test_json_formatter_serializes_unknown_types_as_strings():
    record = make_record(path=object())

    data = json.loads(JSONFormatter().format(record))

    assert data["path"].startswith("<object object")


def test_colored_formatter_does_not_touch_original_record():
    record = make_record(level=logging.WARNING, user_id=7)

    line = ColoredFormatter("%(levelname)s - %(message)s").format(record)

    assert record.levelname == "WARNING"
    assert "\033[33mWARNING" in line
    assert line.endswith("| user_id=7")
