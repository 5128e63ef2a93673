"""
================================================================================
Result Listener
================================================================================

Fans test lifecycle events out to the logger and the report sink.

    suite start  -> banner
    test start   -> new report entry, markers as categories
    pass         -> PASS + duration + parameters
    fail         -> FAIL + reason + duration + parameters + screenshot
    skip         -> SKIP + reason + duration + screenshot
    suite end    -> banner, report flushed

Registered as a pytest plugin by the root conftest:

    config.pluginmanager.register(ResultListener(), "sentinel-result-listener")

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional

import pytest
from loguru import logger

from sentinel_tools.report_tools import ReportSink, Status

from .browser_manager import BrowserSession
from .screenshots import capture_screenshot


# Fixture name the listener looks up to find a failed test's browser
SESSION_FIXTURE = "browser_session"

# Markers that are pytest plumbing, not report categories
_INTERNAL_MARKERS = {"parametrize", "usefixtures", "filterwarnings", "skip", "skipif", "xfail"}

ScreenshotTaker = Callable[[Optional[BrowserSession], str], Optional[Path]]


def default_report_name() -> str:
    """report.json, or report-<worker>.json under pytest-xdist."""
    worker = os.getenv("PYTEST_XDIST_WORKER")
    return f"report-{worker}.json" if worker else "report.json"


class ResultListener:
    """
    Test lifecycle listener.

    The on_* methods carry the behavior and can be driven directly; the
    pytest_* hooks translate pytest reports into those calls.

    Args:
        sink: Report sink (a new one writing reports/report.json by default)
        screenshot: Callable taking (session, name) and returning a path or None
    """

    def __init__(
        self,
        sink: Optional[ReportSink] = None,
        screenshot: ScreenshotTaker = capture_screenshot,
    ):
        self.sink = sink or ReportSink(file_name=default_report_name())
        self._screenshot = screenshot

    # =========================================================================
    # Lifecycle events
    # =========================================================================

    def on_suite_start(self, name: str = "") -> None:
        logger.info("=" * 60)
        logger.info(f"Test Suite Started: {name}")
        logger.info("=" * 60)

    def on_test_start(
        self,
        name: str,
        description: str = "",
        categories: Iterable[str] = (),
    ) -> None:
        logger.info(f"Starting test: {name}")
        self.sink.create_entry(name)
        categories = list(categories)
        if categories:
            self.sink.assign_category(*categories)
        if description:
            self.sink.log(Status.INFO, description)

    def on_test_success(
        self,
        name: str,
        duration_ms: float,
        params: Optional[Dict[str, Any]] = None,
    ) -> None:
        logger.info(f"Test passed: {name} ({duration_ms:.0f} ms)")
        self.sink.log(Status.PASS, f"Test passed: {name}")
        self._log_details(duration_ms, params)

    def on_test_failure(
        self,
        name: str,
        reason: str,
        duration_ms: float,
        params: Optional[Dict[str, Any]] = None,
        session: Optional[BrowserSession] = None,
    ) -> None:
        logger.error(f"Test failed: {name}")
        logger.error(f"Reason: {reason}")
        self.sink.log(Status.FAIL, f"Test failed: {name}")
        self.sink.log(Status.FAIL, f"Reason: {reason}")
        self._log_details(duration_ms, params)
        self._attach_screenshot(session, name)

    def on_test_skipped(
        self,
        name: str,
        reason: str,
        duration_ms: float,
        session: Optional[BrowserSession] = None,
    ) -> None:
        logger.warning(f"Test skipped: {name} ({reason})")
        self.sink.log(Status.SKIP, f"Test skipped: {name}")
        if reason:
            self.sink.log(Status.INFO, f"Reason: {reason}")
        self.sink.log(Status.INFO, f"Duration: {duration_ms:.0f} ms")
        # Tests skipped before a browser was started have nothing to capture
        if session is not None:
            self._attach_screenshot(session, name)

    def on_suite_finish(self, name: str = "") -> Optional[Path]:
        logger.info("=" * 60)
        logger.info(f"Test Suite Finished: {name}")
        logger.info("=" * 60)
        return self.sink.flush()

    def _log_details(self, duration_ms: float, params: Optional[Dict[str, Any]]) -> None:
        self.sink.log(Status.INFO, f"Duration: {duration_ms:.0f} ms")
        if params:
            rendered = ", ".join(f"{key}={value}" for key, value in params.items())
            self.sink.log(Status.INFO, f"Parameters: {rendered}")

    def _attach_screenshot(self, session: Optional[BrowserSession], name: str) -> None:
        path = self._screenshot(session, name)
        if path is None:
            logger.warning(f"Screenshot skipped for '{name}': nothing captured")
            self.sink.log(Status.INFO, "Screenshot not available")
            return
        self.sink.attach_screenshot(path)
        self.sink.log(Status.INFO, f"Screenshot: {path}")

    # =========================================================================
    # Pytest hooks
    # =========================================================================

    def pytest_sessionstart(self, session: pytest.Session) -> None:
        self.on_suite_start(session.name)

    @pytest.hookimpl(tryfirst=True)
    def pytest_runtest_setup(self, item: pytest.Item) -> None:
        doc = (getattr(getattr(item, "function", None), "__doc__", None) or "").strip()
        categories = [
            marker.name for marker in item.iter_markers()
            if marker.name not in _INTERNAL_MARKERS
        ]
        self.on_test_start(
            item.nodeid,
            description=doc.splitlines()[0] if doc else "",
            categories=dict.fromkeys(categories),
        )

    @pytest.hookimpl(hookwrapper=True)
    def pytest_runtest_makereport(self, item: pytest.Item, call: pytest.CallInfo):
        outcome = yield
        report = outcome.get_result()

        # Setup is reported only when it did not pass; teardown never is
        if report.when == "teardown" or (report.when == "setup" and report.passed):
            return

        name = item.nodeid
        duration_ms = report.duration * 1000
        params = _params_of(item)
        session = item.funcargs.get(SESSION_FIXTURE) if hasattr(item, "funcargs") else None

        if report.passed:
            self.on_test_success(name, duration_ms, params)
        elif report.skipped:
            self.on_test_skipped(name, _skip_reason(report), duration_ms, session)
        else:
            reason = call.excinfo.exconly() if call.excinfo is not None else report.longreprtext
            self.on_test_failure(name, reason, duration_ms, params, session)

    def pytest_sessionfinish(self, session: pytest.Session, exitstatus: int) -> None:
        self.on_suite_finish(session.name)


def _params_of(item: pytest.Item) -> Dict[str, Any]:
    callspec = getattr(item, "callspec", None)
    return dict(callspec.params) if callspec is not None else {}


def _skip_reason(report: pytest.TestReport) -> str:
    # Skips are reported as (file, line, "Skipped: reason")
    if isinstance(report.longrepr, tuple) and len(report.longrepr) == 3:
        return str(report.longrepr[2]).replace("Skipped: ", "", 1)
    return str(report.longrepr or "")


__all__ = [
    "ResultListener",
    "SESSION_FIXTURE",
    "default_report_name",
]
