"""Reporter capability consumed by the assertion checks."""

from __future__ import annotations

from typing import Any, List, Protocol, runtime_checkable


@runtime_checkable
class Reporter(Protocol):
    """
    Minimal interface a check needs from a test-reporting mechanism.

    Anything providing these two methods can receive failures, including
    pytest's fixtures in this package and hand-written doubles.
    """

    def helper(self) -> None:
        """Mark the calling function as a helper frame."""
        ...

    def error(self, *args: Any) -> None:
        """Record a failure; execution continues."""
        ...


def join_args(args: tuple) -> str:
    """Join failure arguments with single spaces."""
    return " ".join(str(arg) for arg in args)


class RecordingReporter:
    """
    Reporter that only remembers what it was told.

    Usage:
        reporter = RecordingReporter()
        nil(reporter, 0)
        assert reporter.errors == ["got (int) 0 but expect nil"]
    """

    def __init__(self):
        self.helper_calls = 0
        self.errors: List[str] = []

    def helper(self) -> None:
        self.helper_calls += 1

    def error(self, *args: Any) -> None:
        self.errors.append(join_args(args))

    @property
    def failed(self) -> bool:
        """Whether any failure was recorded."""
        return bool(self.errors)

    def reset(self) -> None:
        """Forget recorded calls."""
        self.helper_calls = 0
        self.errors.clear()

    def __repr__(self) -> str:
        return f"RecordingReporter(errors={len(self.errors)})"
