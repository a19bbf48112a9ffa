"""Exception hierarchy for the quality tracker."""

from quality_tracker.models.model_fetch import FetchResult


class QualityTrackerError(Exception):
    """Base class for all quality tracker errors."""


class SourceNotFoundError(QualityTrackerError):
    """Raised when a fetch is requested for a source id that is not configured."""

    def __init__(self, source_id: str):
        self.source_id = source_id
        super().__init__(f"Source not found: {source_id!r}")


class IngestionError(QualityTrackerError):
    """Raised when an ingestion cycle aborts before anything is persisted.

    Carries the failed FetchResult so callers can show the status code and
    response snippet.
    """

    def __init__(self, source_id: str, result: FetchResult):
        self.source_id = source_id
        self.result = result
        super().__init__(f"Fetch failed for {source_id}: {result.error}")
