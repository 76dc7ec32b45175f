"""Report encodings for scan results."""

from report.options import REPORT_FORMATS, ReportFormat, ReportOptions
from report.remediation import RemediationSuggestion, suggestions_for
from report.write import render_report, write_report

__all__ = [
    "REPORT_FORMATS",
    "RemediationSuggestion",
    "ReportFormat",
    "ReportOptions",
    "render_report",
    "suggestions_for",
    "write_report",
]
