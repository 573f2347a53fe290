"""Tests for log file setup and crash hooks."""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler

import pytest

from quickplay import app_logging


@pytest.fixture
def isolated_logging(monkeypatch):
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(sys, "unraisablehook", sys.unraisablehook)
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)
    monkeypatch.setattr(app_logging, "_enable_fault_handler", lambda log_path: None)
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    logging.captureWarnings(False)


def _file_handlers(path):
    return [
        h
        for h in logging.getLogger().handlers
        if isinstance(h, RotatingFileHandler) and h.baseFilename == str(path)
    ]


def test_creates_log_file_and_handler(isolated_logging, tmp_path):
    log_path = app_logging.setup_app_logging(tmp_path / "logs")
    assert log_path == tmp_path / "logs" / "quickplay.log"
    assert log_path.exists()
    assert len(_file_handlers(log_path)) == 1


def test_setup_is_idempotent(isolated_logging, tmp_path):
    first = app_logging.setup_app_logging(tmp_path)
    second = app_logging.setup_app_logging(tmp_path)
    assert first == second
    assert len(_file_handlers(first)) == 1


def test_messages_reach_the_file(isolated_logging, tmp_path):
    log_path = app_logging.setup_app_logging(tmp_path)
    logging.info("player state=%s", "running")
    for handler in _file_handlers(log_path):
        handler.flush()
    assert "player state=running" in log_path.read_text(encoding="utf-8")


def test_exception_hooks_installed(isolated_logging, tmp_path):
    original = sys.excepthook
    app_logging.setup_app_logging(tmp_path)
    assert sys.excepthook is not original

    log_path = tmp_path / "quickplay.log"
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        sys.excepthook(*sys.exc_info())
    for handler in _file_handlers(log_path):
        handler.flush()
    text = log_path.read_text(encoding="utf-8")
    assert "Unhandled exception" in text
    assert "RuntimeError: boom" in text
