"""
soft-assert-pytest: soft assertions for pytest and any other test reporter.

Checks record failures through a reporter and let the test carry on.
"""

from soft_assert.checks import (
    Nullable,
    Recovery,
    deep_equal,
    equal,
    is_nil,
    matches,
    nil,
    panics,
    recovery,
)
from soft_assert.config.models import SoftAssertConfig
from soft_assert.logging.failure_logger import Failure, FailureLogger
from soft_assert.reporting import PytestReporter, RecordingReporter, Reporter

__version__ = "0.1.0"

__all__ = [
    # Checks
    "nil",
    "equal",
    "panics",
    "matches",
    "is_nil",
    "deep_equal",
    "recovery",
    "Nullable",
    "Recovery",
    # Reporting
    "Reporter",
    "RecordingReporter",
    "PytestReporter",
    # Config
    "SoftAssertConfig",
    # Logging
    "Failure",
    "FailureLogger",
]
