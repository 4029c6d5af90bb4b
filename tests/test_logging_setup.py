"""Tests for process-wide logging configuration."""

import logging

import pytest

from taskboard import logging_setup
from taskboard.logging_setup import setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    level = root.level
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_setup_logging_replaces_handlers(root_logger: logging.Logger) -> None:
    setup_logging(logging.DEBUG)
    setup_logging(logging.WARNING)

    assert len(root_logger.handlers) == 1
    assert root_logger.level == logging.WARNING
    assert root_logger.handlers[0].level == logging.WARNING


def test_module_is_documented() -> None:
    assert logging_setup.__doc__
