"""Models for retained scan history."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from quality_tracker.models.common import _utc_now
from quality_tracker.models.model_report import Summary


class HistoryEntry(BaseModel):
    """One retained ingestion result.

    Immutable once created. The full report is kept for later drill-down.
    """

    model_config = ConfigDict(frozen=True)

    fetched_at: datetime = Field(default_factory=_utc_now)
    source: str = Field(default="", description="URL the report was fetched from")
    score: int = Field(ge=0, le=100)
    summary: Summary = Field(default_factory=Summary)
    report: dict[str, Any] = Field(default_factory=dict)


class LastMeta(BaseModel):
    """Fetch metadata of the most recent successful ingestion across sources."""

    source_id: str
    fetched_at: datetime
    source: str = ""


class Overview(BaseModel):
    """Dashboard aggregate over the latest entry of every configured source."""

    score: int = Field(default=0, ge=0, le=100)
    summary: Summary = Field(default_factory=Summary)
    scored_sources: int = Field(default=0, ge=0, description="Sources with at least one scan")
    latest_by_source: dict[str, HistoryEntry] = Field(default_factory=dict)
