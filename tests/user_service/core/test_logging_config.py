"""Tests for logging configuration."""

import logging

import pytest

from user_service.core.logging_config import configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield root
    root.setLevel(level)
    root.handlers[:] = handlers


def test_configure_logging_sets_level(restore_root_logger):
    """Test that the root level follows the argument."""
    configure_logging("DEBUG")

    assert restore_root_logger.level == logging.DEBUG


def test_configure_logging_adds_single_handler(restore_root_logger):
    """Test that repeated calls do not stack handlers."""
    handler = configure_logging("INFO")
    assert configure_logging("WARNING") is handler

    assert restore_root_logger.handlers.count(handler) == 1
    assert restore_root_logger.level == logging.WARNING


def test_configure_logging_reattaches_removed_handler(restore_root_logger):
    """Test that the handler is added back if something removed it."""
    handler = configure_logging("INFO")
    restore_root_logger.removeHandler(handler)

    assert configure_logging("INFO") is handler
    assert handler in restore_root_logger.handlers
