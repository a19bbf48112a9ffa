"""Data models for report fetching and ingestion operations."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class FetchErrorType(Enum):
    """Classification of fetch failures."""

    # Network failure or timeout before a response arrived
    TRANSPORT = "transport"

    # Response arrived with a status other than 200
    HTTP_STATUS = "http_status"

    # Body was empty, not JSON, or not an object
    MALFORMED_REPORT = "malformed_report"

    NONE = "none"


@dataclass
class FetchResult:
    """Result of a single report fetch."""

    success: bool
    url: str
    fetched_at: datetime
    report: dict[str, Any] | None = None
    status_code: int | None = None
    error: str | None = None
    error_type: FetchErrorType = FetchErrorType.NONE
    body_snippet: str = ""
    duration_seconds: float = 0.0


@dataclass
class IngestBatchResult:
    """Result of ingesting reports for several sources."""

    total: int
    succeeded: int
    failed: int
    duration_seconds: float
    scores: dict[str, int] = field(default_factory=dict)  # source_id → score
    failures: dict[str, str] = field(default_factory=dict)  # source_id → error
