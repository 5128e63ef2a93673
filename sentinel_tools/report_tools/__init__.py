"""
================================================================================
Report Tools
================================================================================

Report sink shared by the result listener and tests.

Usage:
    from sentinel_tools.report_tools import ReportSink, Status

================================================================================
"""

from .report_sink import LogLine, ReportEntry, ReportSink, ReportSummary, Status

__all__ = [
    "LogLine",
    "ReportEntry",
    "ReportSink",
    "ReportSummary",
    "Status",
]
