"""Reporter that collects soft failures for a pytest test item."""

from __future__ import annotations

import logging
import sys
import threading
from datetime import datetime
from pathlib import Path
from types import CodeType, FrameType
from typing import TYPE_CHECKING, Any, List, Optional, Set

from soft_assert.logging.failure_logger import Failure
from soft_assert.reporting.base import join_args

if TYPE_CHECKING:
    from soft_assert.logging.failure_logger import FailureLogger

logger = logging.getLogger(__name__)


class PytestReporter:
    """
    Collect failures for one test and attribute each to its caller.

    Features:
    - Helper frames registered via helper() are skipped when locating a failure
    - Failures are kept until the test report is built
    - Optional forwarding to a FailureLogger
    - Thread-safe operations
    """

    def __init__(
        self,
        test_name: str = "",
        failure_logger: Optional[FailureLogger] = None,
    ):
        """
        Initialize the reporter.

        Args:
            test_name: Node id of the test the failures belong to.
            failure_logger: Optional logger every failure is forwarded to.
        """
        self._test_name = test_name
        self._failure_logger = failure_logger
        self._helpers: Set[CodeType] = set()
        self._failures: List[Failure] = []
        self._lock = threading.Lock()

    def helper(self) -> None:
        """Mark the calling function as a helper frame."""
        code = sys._getframe(1).f_code
        with self._lock:
            self._helpers.add(code)

    def error(self, *args: Any) -> None:
        """Record a failure located at the nearest non-helper caller."""
        failure = Failure(
            message=join_args(args),
            location=self._locate(sys._getframe(1)),
            test_name=self._test_name,
            timestamp=datetime.now(),
        )

        with self._lock:
            self._failures.append(failure)

        logger.debug(f"Soft assertion failed at {failure.location}: {failure.message}")

        if self._failure_logger is not None:
            self._failure_logger.log_failure(failure)

    def _locate(self, frame: Optional[FrameType]) -> Optional[str]:
        with self._lock:
            helpers = set(self._helpers)

        while frame is not None:
            if frame.f_code not in helpers:
                return f"{Path(frame.f_code.co_filename).name}:{frame.f_lineno}"
            frame = frame.f_back

        return None

    @property
    def test_name(self) -> str:
        return self._test_name

    @property
    def failures(self) -> List[Failure]:
        """Copy of the failures recorded so far."""
        with self._lock:
            return list(self._failures)

    @property
    def failed(self) -> bool:
        with self._lock:
            return bool(self._failures)

    def format_report(
        self,
        max_message_length: int = 2000,
        show_location: bool = True,
    ) -> str:
        """
        Render the recorded failures for a test report.

        Args:
            max_message_length: Longest message kept before truncation.
            show_location: Whether to prefix each failure with file:line.

        Returns:
            Multi-line failure summary, empty if nothing failed.
        """
        failures = self.failures
        if not failures:
            return ""

        lines = [f"{len(failures)} soft assertion failure(s):"]
        for failure in failures:
            message = failure.message
            if len(message) > max_message_length:
                message = message[:max_message_length] + "..."
            if show_location and failure.location:
                message = f"{failure.location}: {message}"
            lines.append(f"  - {message}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"PytestReporter({self._test_name!r}, failures={len(self._failures)})"
