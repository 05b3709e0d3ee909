"""
Tests for environment configuration and structured logging.
"""

import json
import logging

import pytest

from desync.config import DesyncConfig
from desync.logging_config import TraceIDFilter, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_config_defaults(monkeypatch):
    for key in ("DESYNC_LOG_LEVEL", "DESYNC_LOG_FORMAT", "DESYNC_ADD_SYSTEM"):
        monkeypatch.delenv(key, raising=False)

    assert DesyncConfig.from_env() == DesyncConfig()


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("DESYNC_LOG_LEVEL", "debug")
    monkeypatch.setenv("DESYNC_LOG_FORMAT", "TEXT")
    monkeypatch.setenv("DESYNC_ADD_SYSTEM", "false")

    config = DesyncConfig.from_env()

    assert config == DesyncConfig(log_level="DEBUG", log_format="text", add_system=False)


def test_config_unknown_format_falls_back(monkeypatch):
    monkeypatch.setenv("DESYNC_LOG_FORMAT", "xml")
    assert DesyncConfig.from_env().log_format == "json"


def test_setup_logging_json(restore_root_logger, capsys):
    setup_logging(DesyncConfig(log_level="INFO", log_format="json"))

    get_logger("desync.test", trace_id="replica-1").info("hello")

    line = capsys.readouterr().err.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["message"] == "hello"
    assert record["trace_id"] == "replica-1"
    assert record["level"] == "INFO"


def test_setup_logging_text_level(restore_root_logger, capsys):
    setup_logging(DesyncConfig(log_level="WARNING", log_format="text"))

    logging.getLogger("desync.test").info("hidden")
    logging.getLogger("desync.test").warning("shown")

    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "shown [trace_id=N/A]" in err


def test_trace_id_filter_fills_missing():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    assert TraceIDFilter().filter(record)
    assert record.trace_id == "N/A"
