"""Soft assertion failure log with console, file and JSON output."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class Failure:
    """A soft assertion failure recorded during a test."""

    message: str
    location: Optional[str]
    test_name: str
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON export."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "test": self.test_name,
            "location": self.location,
            "message": self.message,
        }


class ColoredFormatter(logging.Formatter):
    """Formatter with color support for console output."""

    COLORS = {
        "RESET": "\033[0m",
        "RED": "\033[91m",
        "YELLOW": "\033[93m",
        "CYAN": "\033[96m",
    }

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        failure = getattr(record, "soft_assert_failure", None)

        if failure and isinstance(failure, Failure):
            return self._format_failure(failure)

        return super().format(record)

    def _format_failure(self, failure: Failure) -> str:
        timestamp = failure.timestamp.strftime("%H:%M:%S.%f")[:-3]
        where = failure.location or "?"

        if self.use_colors:
            return (
                f"{self.COLORS['CYAN']}[{timestamp}] [{failure.test_name}] {where}"
                f"{self.COLORS['RESET']} "
                f"{self.COLORS['RED']}✗ {failure.message}{self.COLORS['RESET']}"
            )
        return f"[{timestamp}] [{failure.test_name}] {where} ✗ {failure.message}"


class FailureLogger:
    """
    Logger for soft assertion failures.

    Provides:
    - Console output with colors
    - Optional log file
    - JSON export of the whole session
    - Failure history tracking
    """

    def __init__(
        self,
        name: str = "session",
        level: str = "WARNING",
        log_to_console: bool = True,
        log_to_file: Optional[Path] = None,
        use_colors: bool = True,
    ):
        """
        Initialize failure logger.

        Args:
            name: Logger name, nested under "soft_assert".
            level: Logging level (DEBUG, INFO, WARNING, ERROR).
            log_to_console: Whether to log to console.
            log_to_file: Optional path to log file.
            use_colors: Whether to use colors in console output.
        """
        self._logger = logging.getLogger(f"soft_assert.{name}")
        self._logger.setLevel(getattr(logging, level.upper()))
        self._failures: List[Failure] = []

        # Prevent duplicate handlers
        self._logger.handlers.clear()

        if log_to_console:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(ColoredFormatter(use_colors=use_colors))
            self._logger.addHandler(console_handler)

        if log_to_file:
            file_handler = logging.FileHandler(log_to_file, encoding="utf-8")
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
            )
            self._logger.addHandler(file_handler)

    def log_failure(self, failure: Failure) -> None:
        """Record a failure and emit it as a WARNING record."""
        self._failures.append(failure)

        record = self._logger.makeRecord(
            name=self._logger.name,
            level=logging.WARNING,
            fn="",
            lno=0,
            msg="%s: %s",
            args=(failure.location or failure.test_name, failure.message),
            exc_info=None,
        )
        record.soft_assert_failure = failure
        self._logger.handle(record)

    def get_failures(self, test_name: Optional[str] = None) -> List[Failure]:
        """
        Get logged failures with optional filtering.

        Args:
            test_name: Only return failures of this test.

        Returns:
            List of matching failures.
        """
        if test_name:
            return [f for f in self._failures if f.test_name == test_name]
        return list(self._failures)

    def export_to_json(self, filepath: Path | str) -> None:
        """
        Export all failures to a JSON file.

        Args:
            filepath: Path to output JSON file.
        """
        data = [failure.to_dict() for failure in self._failures]

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)

    def close(self) -> None:
        """Detach and close all handlers."""
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()

    def clear(self) -> None:
        """Clear failure history."""
        self._failures.clear()

    @property
    def failure_count(self) -> int:
        return len(self._failures)
