# tests/unit/logging/test_logger.py — v3
"""Tests for logging/logger.py — logger factory and formatters."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from memocache.cache.simple_cache import SimpleMemoCache
from memocache.config.settings import Settings
from memocache.logging.context import fill_context
from memocache.logging.logger import (
    JsonFormatter,
    TextFormatter,
    get_logger,
    setup_logging,
    setup_logging_from_settings,
)


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )
    for k, v in extra.items():
        setattr(record, k, v)
    return record


class TestJsonFormatter:
    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record("Hello")))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_fill_context(self):
        with fill_context("quotes", ("ACME", 1)):
            output = JsonFormatter().format(_record("computing"))
        parsed = json.loads(output)
        assert parsed["context"]["cache"] == "quotes"
        assert parsed["context"]["key"] == ["ACME", 1]

    def test_format_with_data(self):
        parsed = json.loads(JsonFormatter().format(_record("m", data={"n": 1})))
        assert parsed["data"] == {"n": 1}

    def test_format_with_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record("failed")
            record.exc_info = sys.exc_info()
        parsed = json.loads(JsonFormatter().format(record))
        assert "ValueError: boom" in parsed["exception"]


class TestTextFormatter:
    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_format_with_context(self):
        with fill_context("quotes", "ACME"):
            output = TextFormatter().format(_record("computing"))
        assert "[quotes]" in output
        assert "('ACME')" in output


class TestGetLogger:
    def test_returns_logger(self):
        logger = get_logger("test_module")
        assert logger.name == "memocache.test_module"


class TestSetupLogging:
    def test_console_only(self):
        root = setup_logging(level="DEBUG", log_format="text")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_reinit_does_not_stack_handlers(self):
        setup_logging()
        root = setup_logging()
        assert len(root.handlers) == 1

    def test_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "memocache.log"
        root = setup_logging(log_file=str(log_file))
        assert len(root.handlers) == 2
        get_logger("cache").warning("written to file")
        for handler in root.handlers:
            handler.flush()
        line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert json.loads(line)["message"] == "written to file"

    def test_from_settings(self, tmp_path):
        s = Settings(
            _env_file=None,
            log_level="WARNING",
            log_format="text",
            log_file=tmp_path / "m.log",
        )
        root = setup_logging_from_settings(s)
        assert root.level == logging.WARNING
        assert len(root.handlers) == 2


class TestFillLogging:
    def _json_lines(self, log_file) -> list[dict]:
        for handler in logging.getLogger("memocache").handlers:
            handler.flush()
        return [
            json.loads(line)
            for line in log_file.read_text(encoding="utf-8").splitlines()
            if line.strip()
        ]

    def test_compute_logs_carry_cache_and_key(self, tmp_path):
        log_file = tmp_path / "memocache.log"
        setup_logging(level="INFO", log_format="json", log_file=str(log_file))
        cache = SimpleMemoCache(name="quotes")

        def fetch_quote():
            get_logger("pricing").info("fetching quote")
            return 101.5

        cache.get_or_compute("ACME", fetch_quote)
        get_logger("pricing").info("after fill")

        lines = {entry["message"]: entry for entry in self._json_lines(log_file)}
        assert lines["fetching quote"]["logger"] == "memocache.pricing"
        assert lines["fetching quote"]["context"] == {"cache": "quotes", "key": "ACME"}
        assert "context" not in lines["after fill"]

    def test_failure_warning_carries_cache_and_key(self, tmp_path):
        log_file = tmp_path / "memocache.log"
        setup_logging(level="WARNING", log_format="json", log_file=str(log_file))
        cache = SimpleMemoCache(name="quotes")

        def fetch_quote():
            raise ConnectionError("feed down")

        with pytest.raises(ConnectionError):
            cache.get_or_compute("ACME", fetch_quote)

        (warning,) = self._json_lines(log_file)
        assert warning["level"] == "WARNING"
        assert warning["message"] == (
            "Compute failed for key 'ACME' in cache 'quotes': feed down"
        )
        assert warning["context"] == {"cache": "quotes", "key": "ACME"}
