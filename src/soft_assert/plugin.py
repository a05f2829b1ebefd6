"""
Pytest plugin for soft assertions.

This module provides the options, fixtures and report hook that turn failures
recorded through the ``check`` fixture into a failed test.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Generator

import pytest

from soft_assert.config.loader import ConfigLoader
from soft_assert.config.models import SoftAssertConfig
from soft_assert.logging.failure_logger import FailureLogger
from soft_assert.reporting.pytest_reporter import PytestReporter

if TYPE_CHECKING:
    from _pytest.config.argparsing import Parser

logger = logging.getLogger(__name__)

# Report text the skipping plugin gives a passing strict xfail test
STRICT_XPASS = "[XPASS(strict)]"


# =============================================================================
# Pytest Hooks - Configuration and Options
# =============================================================================


def pytest_addoption(parser: Parser) -> None:
    """Register pytest command-line and ini options."""
    group = parser.getgroup("soft-assert", "Soft Assertion Options")

    group.addoption(
        "--soft-assert-config",
        dest="soft_assert_config",
        metavar="PATH",
        help="Path to soft assertion YAML configuration file",
    )

    group.addoption(
        "--soft-assert-log-level",
        dest="soft_assert_log_level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Soft assertion failure log level",
    )

    group.addoption(
        "--soft-assert-log-file",
        dest="soft_assert_log_file",
        metavar="PATH",
        help="Path to write soft assertion failure logs",
    )

    group.addoption(
        "--soft-assert-report",
        dest="soft_assert_report",
        metavar="PATH",
        help="Write every soft assertion failure of the session to this JSON file",
    )

    # INI options
    parser.addini(
        "soft_assert_config_file",
        help="Default soft assertion configuration file path (searched for when empty)",
        default="",
    )

    parser.addini(
        "soft_assert_max_message_length",
        help="Longest failure message kept in the test report",
        default="",
    )


# =============================================================================
# Session-scoped Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def soft_assert_config(request: pytest.FixtureRequest) -> SoftAssertConfig:
    """
    Load soft assertion configuration.

    This fixture loads configuration from:
    1. --soft-assert-config command line option
    2. soft_assert_config_file ini option
    3. Default config file search

    Command-line and ini overrides are applied on top.

    Returns:
        SoftAssertConfig instance.

    Raises:
        FileNotFoundError: If --soft-assert-config names a missing file.
    """
    return ConfigLoader.from_pytest_config(request.config)


@pytest.fixture(scope="session")
def soft_assert_logger(
    request: pytest.FixtureRequest,
    soft_assert_config: SoftAssertConfig,
) -> Generator[FailureLogger, None, None]:
    """
    Create the session failure logger.

    The JSON report, when requested, is written after the session's last test.

    Returns:
        FailureLogger shared by every check fixture.
    """
    log_file = request.config.getoption("soft_assert_log_file")

    failure_logger = FailureLogger(
        name="session",
        level=soft_assert_config.log_level,
        log_to_console=soft_assert_config.log_failures,
        log_to_file=Path(log_file) if log_file else None,
        use_colors=soft_assert_config.use_colors,
    )

    yield failure_logger

    report_path = request.config.getoption("soft_assert_report")
    if report_path:
        failure_logger.export_to_json(report_path)
        logger.info(
            f"Wrote {failure_logger.failure_count} soft assertion failure(s) to {report_path}"
        )

    failure_logger.close()


# =============================================================================
# Function-scoped Fixtures
# =============================================================================


@pytest.fixture
def check(
    request: pytest.FixtureRequest,
    soft_assert_logger: FailureLogger,
) -> PytestReporter:
    """
    Per-test reporter for soft assertions.

    Usage:
        def test_parse(check):
            equal(check, parse("1,2"), [1, 2])
            nil(check, parse_error("1,2"))

    Failures do not stop the test; they fail its report afterwards.

    Returns:
        PytestReporter bound to the current test.
    """
    return PytestReporter(
        test_name=request.node.nodeid,
        failure_logger=soft_assert_logger,
    )


# =============================================================================
# Pytest Hooks - Reporting
# =============================================================================


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call):
    """Fail the call report of tests whose check fixture recorded failures."""
    outcome = yield
    rep = outcome.get_result()

    if rep.when != "call" or not hasattr(item, "funcargs"):
        return

    reporter = item.funcargs.get("check")
    if not isinstance(reporter, PytestReporter) or not reporter.failed:
        return

    cfg = item.funcargs.get("soft_assert_config") or SoftAssertConfig()
    text = reporter.format_report(
        max_message_length=cfg.max_message_length,
        show_location=cfg.show_location,
    )

    strict_xpass = (
        rep.failed
        and isinstance(rep.longrepr, str)
        and rep.longrepr.startswith(STRICT_XPASS)
    )

    if strict_xpass or (rep.passed and hasattr(rep, "wasxfail")):
        # Soft failures satisfy an xfail marker
        if strict_xpass:
            rep.wasxfail = rep.longrepr[len(STRICT_XPASS):].strip()
        rep.outcome = "skipped"
        rep.longrepr = text
    elif rep.passed:
        rep.outcome = "failed"
        rep.longrepr = text
    else:
        rep.sections.append(("soft assertion failures", text))
