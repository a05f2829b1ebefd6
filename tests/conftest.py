"""Pytest configuration and fixtures."""

import logging

import pytest

from soft_assert import RecordingReporter

pytest_plugins = ["pytester"]


@pytest.fixture
def reporter() -> RecordingReporter:
    """Reporter that records failures instead of failing the test."""
    return RecordingReporter()


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Drop handlers of failure loggers created by a test."""
    yield

    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("soft_assert.test"):
            logger = logging.getLogger(name)
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()
