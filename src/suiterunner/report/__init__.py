"""Report rendering."""

from suiterunner.report.generator import ReportGenerator, format_duration, group_results

__all__ = ["ReportGenerator", "format_duration", "group_results"]
