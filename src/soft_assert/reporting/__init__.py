"""Reporters that receive soft assertion failures."""

from soft_assert.reporting.base import RecordingReporter, Reporter
from soft_assert.reporting.pytest_reporter import PytestReporter

__all__ = ["Reporter", "RecordingReporter", "PytestReporter"]
