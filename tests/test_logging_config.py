"""Tests for structured JSON logging."""

import json
import logging
import sys

from storygame.logging_config import StructuredFormatter, configure_logging


def make_record(msg="Game started", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord(
        "storygame.test", level, __file__, 10, msg, None, exc_info, func="play"
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formats_json_with_standard_fields():
    data = json.loads(StructuredFormatter().format(make_record()))
    assert data["message"] == "Game started"
    assert data["level"] == "INFO"
    assert data["logger"] == "storygame.test"
    assert data["function"] == "play"
    assert data["line"] == 10
    assert "timestamp" in data


def test_includes_extra_fields():
    record = make_record(blank_count=3, mode="template")
    data = json.loads(StructuredFormatter().format(record))
    assert data["blank_count"] == 3
    assert data["mode"] == "template"
    assert "args" not in data
    assert "msecs" not in data


def test_unserializable_extra_becomes_string():
    record = make_record(path=object())
    data = json.loads(StructuredFormatter().format(record))
    assert data["path"].startswith("<object object")


def test_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = make_record(level=logging.ERROR, exc_info=sys.exc_info())
    data = json.loads(StructuredFormatter().format(record))
    assert "ValueError: boom" in data["exception"]


def test_configure_logging_installs_one_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging("debug")
        configure_logging("warning")
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)
        assert root.level == logging.WARNING
        assert logging.getLogger("spacy").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
