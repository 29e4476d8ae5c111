"""Shared pytest fixtures."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _detach_cli_log_handlers():
    """CLI invocations bind a handler to the runner's stderr; drop it after each test."""
    yield
    logger = logging.getLogger("spo_cli")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
