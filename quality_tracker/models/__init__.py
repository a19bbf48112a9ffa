"""Pydantic models for the quality tracker."""

from quality_tracker.models.model_eval import ScoreWeights
from quality_tracker.models.model_fetch import (
    FetchErrorType,
    FetchResult,
    IngestBatchResult,
)
from quality_tracker.models.model_history import HistoryEntry, LastMeta, Overview
from quality_tracker.models.model_report import (
    ERROR_TYPE,
    WARNING_TYPE,
    FileIssues,
    ParsedReport,
    ReportFile,
    ReportMessage,
    Summary,
)
from quality_tracker.models.model_source import Source, SourceType

__all__ = [
    # Report models
    "ERROR_TYPE",
    "WARNING_TYPE",
    "FileIssues",
    "ParsedReport",
    "ReportFile",
    "ReportMessage",
    "Summary",
    # Source models
    "Source",
    "SourceType",
    # History models
    "HistoryEntry",
    "LastMeta",
    "Overview",
    # Fetch models
    "FetchErrorType",
    "FetchResult",
    "IngestBatchResult",
    # Score configuration
    "ScoreWeights",
]
