"""Logging setup tests."""

from __future__ import annotations

import logging

from spo_cli.log import configure_logging


def test_configure_logging_levels_and_single_handler() -> None:
    logger = logging.getLogger("spo_cli")

    configure_logging()
    assert logger.level == logging.WARNING
    configure_logging(verbose=True)
    assert logger.level == logging.INFO
    configure_logging(verbose=True, debug=True)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
