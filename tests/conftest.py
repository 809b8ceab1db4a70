import logging

import pytest

from rpmfetch.log import logger


@pytest.fixture(autouse=True)
def _reset_logger_level():
    """Undo level changes made by commandline parsing between tests."""
    level = logger.level
    yield
    logger.setLevel(level)


@pytest.fixture
def debug_logs(caplog):
    caplog.set_level(logging.DEBUG, logger='rpmfetch')
    return caplog
