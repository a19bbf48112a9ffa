"""Dashboard aggregation across the latest scan of each configured source."""

import logging

from quality_tracker.history.history_store import HistoryStore
from quality_tracker.models.model_history import HistoryEntry, Overview
from quality_tracker.models.model_report import Summary
from quality_tracker.models.model_source import Source
from quality_tracker.report.scoring import round_half_up

logger = logging.getLogger(__name__)


def build_overview(sources: list[Source], history: HistoryStore) -> Overview:
    """Aggregate the latest history entry of every configured source.

    Counts are summed across sources. The overall score is the rounded mean of
    the latest scores, or 0 when no source has been fetched yet. Orphaned
    history (sources that were removed) is not included.

    Args:
        sources: Configured sources, in display order.
        history: History store to read the latest entries from.

    Returns:
        Overview with the aggregate summary, score and latest entry per source.
    """
    latest_by_source: dict[str, HistoryEntry] = {}
    errors = 0
    warnings = 0
    files_with_issues = 0

    for source in sources:
        latest = history.latest(source.id)
        if latest is None:
            continue

        latest_by_source[source.id] = latest
        errors += latest.summary.errors
        warnings += latest.summary.warnings
        files_with_issues += latest.summary.files_with_issues

    scores = [entry.score for entry in latest_by_source.values()]
    overall_score = round_half_up(sum(scores) / len(scores)) if scores else 0

    logger.debug(f"Overview over {len(scores)}/{len(sources)} fetched sources: {overall_score}")

    return Overview(
        score=overall_score,
        summary=Summary(errors=errors, warnings=warnings, files_with_issues=files_with_issues),
        scored_sources=len(scores),
        latest_by_source=latest_by_source,
    )
