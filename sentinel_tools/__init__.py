"""
================================================================================
Sentinel Tools
================================================================================

Supporting utilities for the SentinelQA UI harness.

Modules:
    - common: Shared configuration and logging utilities
    - report_tools: Report sink and pytest result listener

Example:
    from sentinel_tools.common import init_logger
    from sentinel_tools.report_tools import ReportSink, Status

    init_logger()
    sink = ReportSink()
    sink.create_entry("test_login")
    sink.log(Status.INFO, "Opened home page")

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
