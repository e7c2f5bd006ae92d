"""
tests/unit/test_logger.py

Unit tests for logger.py.
Root handlers are saved and restored so pytest's log capture keeps working.
"""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler

import pytest

from logger import LOG_FILE_NAME, configure_logging


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_configure_logging_writes_log_file(tmp_path, restore_root_logger):
    configure_logging("DEBUG", str(tmp_path))
    logging.getLogger("ddns.test").info("IP changed: %s -> %s", "1.2.3.4", "5.6.7.8")
    for handler in restore_root_logger.handlers:
        handler.flush()

    content = (tmp_path / LOG_FILE_NAME).read_text(encoding="utf-8")
    assert "[INFO] ddns.test: IP changed: 1.2.3.4 -> 5.6.7.8" in content
    assert restore_root_logger.level == logging.DEBUG


def test_configure_logging_without_file(tmp_path, restore_root_logger):
    configure_logging("WARNING", None)

    assert not any(isinstance(h, TimedRotatingFileHandler) for h in restore_root_logger.handlers)
    assert logging.getLogger("httpx").level == logging.WARNING


def test_configure_logging_replaces_handlers(tmp_path, restore_root_logger):
    configure_logging("INFO", str(tmp_path))
    configure_logging("INFO", str(tmp_path))

    assert len(restore_root_logger.handlers) == 2
