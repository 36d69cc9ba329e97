"""Tests for modelgrid logging utilities (package-scoped handlers, env level)."""

from __future__ import annotations

import logging
import sys

import pytest

import modelgrid
from modelgrid.utils.logging import LOG_LEVEL_ENV, configure_logging, get_logger


@pytest.fixture
def clean_logger():
    """Restore the modelgrid logger's handlers and level after each test."""
    logger = logging.getLogger("modelgrid")
    handlers = logger.handlers[:]
    level = logger.level
    yield logger
    for h in logger.handlers[:]:
        if h not in handlers:
            h.close()
            logger.removeHandler(h)
    logger.setLevel(level)


def _stderr_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr]


def test_package_logger_has_null_handler():
    """Importing modelgrid never leaves its logger without a handler."""
    assert modelgrid.__version__
    logger = logging.getLogger("modelgrid")
    assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)


def test_get_logger_default_and_named():
    assert get_logger().name == "modelgrid"
    assert get_logger("modelgrid.grid").name == "modelgrid.grid"


def test_configure_logging_adds_single_stderr_handler(clean_logger):
    configure_logging(level="DEBUG")
    configure_logging(level="DEBUG")
    assert len(_stderr_handlers(clean_logger)) == 1
    assert clean_logger.level == logging.DEBUG


def test_configure_logging_never_touches_root(clean_logger):
    root_handlers = logging.getLogger().handlers[:]
    configure_logging(level="INFO")
    assert logging.getLogger().handlers == root_handlers


def test_configure_logging_force_replaces_handlers(clean_logger):
    configure_logging(level="INFO")
    configure_logging(level="WARNING", force=True)
    assert len(_stderr_handlers(clean_logger)) == 1
    assert clean_logger.level == logging.WARNING


def test_configure_logging_level_from_env(clean_logger, monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "ERROR")
    configure_logging(force=True)
    assert clean_logger.level == logging.ERROR
