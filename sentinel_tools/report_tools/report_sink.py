"""
================================================================================
Report Sink
================================================================================

Thread-safe collector of per-test report entries.

Features:
- One append-only entry stream per test, keyed by test name
- Current entry tracked per thread (parallel workers never share one)
- Screenshots mirrored into the Allure report
- JSON summary written on flush

Statuses: PASS, FAIL, SKIP, INFO.

================================================================================
"""

import getpass
import json
import os
import platform
import threading
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import allure
from loguru import logger

from sentinel_tools.common import ensure_directory, get_config, resolve_path


REPORT_TITLE = "SentinelQA Automation Report"
REPORT_NAME = "Regression Test Suite Results"


class Status(str, Enum):
    """Report entry statuses."""
    PASS = "PASS"
    FAIL = "FAIL"
    SKIP = "SKIP"
    INFO = "INFO"


# ================================================================================
# Data Models
# ================================================================================

@dataclass
class LogLine:
    """One status/message line of a report entry."""
    status: Status
    message: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


@dataclass
class ReportEntry:
    """Everything recorded for one test."""
    name: str
    thread: str = field(default_factory=lambda: threading.current_thread().name)
    started_at: str = field(default_factory=lambda: datetime.now().isoformat())
    categories: List[str] = field(default_factory=list)
    author: Optional[str] = None
    logs: List[LogLine] = field(default_factory=list)
    screenshots: List[str] = field(default_factory=list)

    @property
    def status(self) -> Status:
        """Outcome: the last non-INFO status logged, INFO if none."""
        for line in reversed(self.logs):
            if line.status is not Status.INFO:
                return line.status
        return Status.INFO

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        data["logs"] = [
            {"status": line.status.value, "message": line.message, "timestamp": line.timestamp}
            for line in self.logs
        ]
        return data


@dataclass
class ReportSummary:
    """Summary of test execution results."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def pass_rate(self) -> float:
        """Calculate pass rate percentage."""
        if self.total == 0:
            return 0.0
        return (self.passed / self.total) * 100

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "pass_rate": f"{self.pass_rate:.2f}%",
            "timestamp": self.timestamp,
        }


# ================================================================================
# Sink
# ================================================================================

class ReportSink:
    """
    Process-wide report sink shared by all worker threads.

    Example:
        sink = ReportSink()
        sink.create_entry("test_login")
        sink.log(Status.PASS, "Test passed")
        sink.attach_screenshot(Path("screenshots/test_login.png"))
        sink.flush()
    """

    def __init__(
        self,
        report_dir: Optional[Path] = None,
        file_name: str = "report.json",
        title: str = None,
        name: str = None,
    ):
        self.report_dir = Path(report_dir) if report_dir else resolve_path("paths.reports", "reports")
        self.file_name = file_name
        self.title = title or get_config("report.title", REPORT_TITLE)
        self.name = name or get_config("report.name", REPORT_NAME)

        self._lock = threading.Lock()
        self._entries: Dict[str, ReportEntry] = {}
        self._local = threading.local()

    # -- entries -------------------------------------------------------------

    def create_entry(self, name: str) -> ReportEntry:
        """Start a new entry and make it current for the calling thread."""
        entry = ReportEntry(name=name)
        with self._lock:
            key = name
            counter = 2
            while key in self._entries:
                key = f"{name}#{counter}"
                counter += 1
            self._entries[key] = entry
        self._local.entry = entry
        return entry

    def current(self) -> Optional[ReportEntry]:
        """Entry most recently created by the calling thread."""
        return getattr(self._local, "entry", None)

    def entries(self) -> List[ReportEntry]:
        with self._lock:
            return list(self._entries.values())

    def get(self, name: str) -> Optional[ReportEntry]:
        with self._lock:
            return self._entries.get(name)

    # -- writes ---------------------------------------------------------------

    def log(self, status: Status, message: str) -> None:
        """Append a line to the current entry. No-op without one."""
        entry = self.current()
        if entry is None:
            return
        with self._lock:
            entry.logs.append(LogLine(Status(status), message))

    def assign_category(self, *categories: str) -> None:
        """Tag the current entry with groups such as 'smoke' or 'regression'."""
        entry = self.current()
        if entry is None:
            return
        with self._lock:
            for category in categories:
                if category not in entry.categories:
                    entry.categories.append(category)

    def assign_author(self, author: str) -> None:
        entry = self.current()
        if entry is not None:
            entry.author = author

    def attach_screenshot(self, path: Path) -> None:
        """Record a screenshot on the current entry and attach it to Allure."""
        entry = self.current()
        if entry is None:
            return
        with self._lock:
            entry.screenshots.append(str(path))

        allure.attach.file(
            str(path),
            name=f"{entry.name} screenshot",
            attachment_type=allure.attachment_type.PNG,
        )

    # -- output -----------------------------------------------------------------

    def summary(self) -> ReportSummary:
        summary = ReportSummary()
        for entry in self.entries():
            summary.total += 1
            status = entry.status
            if status is Status.PASS:
                summary.passed += 1
            elif status is Status.FAIL:
                summary.failed += 1
            elif status is Status.SKIP:
                summary.skipped += 1
        return summary

    def flush(self) -> Path:
        """Write the report JSON and return its path."""
        entries = [entry.to_dict() for entry in self.entries()]
        report = {
            "title": self.title,
            "name": self.name,
            "system": {
                "os": platform.platform(),
                "python": platform.python_version(),
                "user": _current_user(),
                "environment": get_config("browser.environment", "DEV"),
            },
            "summary": self.summary().to_dict(),
            "entries": entries,
        }

        path = ensure_directory(self.report_dir) / self.file_name
        with self._lock:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(report, f, indent=2, default=str)

        logger.info(f"Report written: {path} ({len(entries)} entries)")
        return path


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return os.getenv("USER", "unknown")


__all__ = [
    "LogLine",
    "ReportEntry",
    "ReportSink",
    "ReportSummary",
    "Status",
]
