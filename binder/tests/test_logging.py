"""
Tests for structured logging setup.
"""

import json
import logging

from binder_operator.logging_config import get_logger, setup_logging


def test_json_lines_carry_trace_id_and_extra(monkeypatch, capsys):
    monkeypatch.setenv("BINDER_LOG_FORMAT", "json")
    monkeypatch.setenv("BINDER_LOG_LEVEL", "INFO")
    setup_logging()
    try:
        get_logger("binder.test", trace_id="uid-api-7").info("pod status changed", extra={"pod": "api-7"})
        logging.getLogger("binder.test").info("plain")

        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.strip()]
    finally:
        logging.getLogger().handlers.clear()

    assert lines[0]["message"] == "pod status changed"
    assert lines[0]["trace_id"] == "uid-api-7"
    assert lines[0]["pod"] == "api-7"
    assert lines[0]["level"] == "INFO"
    assert lines[1]["trace_id"] == "N/A"


def test_text_format_shows_trace_id(monkeypatch, capsys):
    monkeypatch.setenv("BINDER_LOG_FORMAT", "text")
    monkeypatch.setenv("BINDER_LOG_LEVEL", "INFO")
    setup_logging()
    try:
        get_logger("binder.test", trace_id="uid-web-1").info("mount")
        out = capsys.readouterr().out
    finally:
        logging.getLogger().handlers.clear()

    assert "[uid-web-1] mount" in out


def test_unknown_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("BINDER_LOG_LEVEL", "chatty")
    setup_logging()
    try:
        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("kubernetes").level == logging.WARNING
    finally:
        logging.getLogger().handlers.clear()
