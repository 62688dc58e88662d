"""Tests for logging setup."""

import logging
import sys

import pytest

from src.utils.logging_config import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_console_only():
    logger = setup_logging("debug")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.handlers[0].stream is sys.stderr


def test_unknown_level_falls_back_to_info():
    assert setup_logging("chatty").level == logging.INFO


def test_file_handler(tmp_path):
    log_file = tmp_path / "logs" / "barcode.log"

    logger = setup_logging("INFO", str(log_file))
    logging.getLogger("src.barcode.test").info("registry ready")
    for handler in logger.handlers:
        handler.flush()

    assert len(logger.handlers) == 2
    assert "registry ready" in log_file.read_text(encoding="utf-8")


def test_repeated_setup_does_not_duplicate_handlers():
    setup_logging()
    assert len(setup_logging().handlers) == 1
