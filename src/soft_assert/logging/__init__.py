"""Failure logging for soft assertions."""

from soft_assert.logging.failure_logger import ColoredFormatter, Failure, FailureLogger

__all__ = ["ColoredFormatter", "Failure", "FailureLogger"]
