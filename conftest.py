from __future__ import annotations

import logging

import pytest

from common.base.logging import ROOT_LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_vasu_logger():
    """Undo setup_logging() so caplog sees records in every test."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
