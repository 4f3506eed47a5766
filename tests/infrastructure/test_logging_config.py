"""Tests for the command line logging setup."""

import logging

import pytest

from teahaven.infrastructure.logging_config import configure_logging


@pytest.fixture
def teahaven_logger():
    logger = logging.getLogger("teahaven")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_installs_one_handler(teahaven_logger):
    configure_logging("DEBUG")
    configure_logging("WARNING")

    ours = [h for h in teahaven_logger.handlers if getattr(h, "_teahaven", False)]
    assert len(ours) == 1
    assert teahaven_logger.level == logging.WARNING


def test_unknown_level_falls_back_to_info(teahaven_logger):
    configure_logging("chatty")
    assert teahaven_logger.level == logging.INFO
