"""Report retrieval over HTTP."""

from quality_tracker.fetcher.report_fetcher import ReportFetcher

__all__ = ["ReportFetcher"]
