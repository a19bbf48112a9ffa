"""Pipeline orchestration for report ingestion.

One ingestion cycle:
1. Fetch the report (abort on transport error, non-200 or malformed body)
2. Build the issue summary
3. Compute the quality score
4. Push the entry into the source's history

Nothing is written unless the fetch fully succeeds.
"""

import asyncio
import logging
import time
from collections.abc import Callable

from quality_tracker.consts import FETCH_CONCURRENCY
from quality_tracker.errors import IngestionError, SourceNotFoundError
from quality_tracker.fetcher.report_fetcher import ReportFetcher
from quality_tracker.history.history_store import HistoryStore
from quality_tracker.models.model_eval import ScoreWeights
from quality_tracker.models.model_fetch import IngestBatchResult
from quality_tracker.models.model_history import HistoryEntry
from quality_tracker.models.model_source import Source
from quality_tracker.registry.source_registry import SourceRegistry
from quality_tracker.report.scoring import compute_score
from quality_tracker.report.summary_builder import build_summary

logger = logging.getLogger(__name__)


async def ingest_source(
    source: Source,
    history: HistoryStore,
    fetcher: ReportFetcher,
    weights: ScoreWeights | None = None,
) -> HistoryEntry:
    """Run one fetch → summarize → score → push cycle for a source.

    Args:
        source: Source to fetch.
        history: Store receiving the new entry.
        fetcher: Report fetcher.
        weights: Optional score weights.

    Returns:
        The recorded history entry.

    Raises:
        IngestionError: If the fetch failed. History is left unchanged.
    """
    result = await fetcher.fetch(source.url, source.token)
    if not result.success or result.report is None:
        raise IngestionError(source.id, result)

    summary = build_summary(result.report)
    score = compute_score(summary, weights)

    entry = HistoryEntry(
        fetched_at=result.fetched_at,
        source=source.url,
        score=score,
        summary=summary,
        report=result.report,
    )
    history.push(source.id, entry)

    logger.info(
        f"Ingested {source.id}: score={score} errors={summary.errors} "
        f"warnings={summary.warnings} files={summary.files_with_issues}"
    )
    return entry


async def ingest_source_id(
    source_id: str,
    registry: SourceRegistry,
    history: HistoryStore,
    fetcher: ReportFetcher,
    weights: ScoreWeights | None = None,
) -> HistoryEntry:
    """Resolve a configured source by id and ingest its report.

    Raises:
        SourceNotFoundError: If no source has this id.
        IngestionError: If the fetch failed.
    """
    source = registry.get(source_id)
    if source is None:
        raise SourceNotFoundError(source_id)
    return await ingest_source(source, history, fetcher, weights)


async def ingest_all(
    sources: list[Source],
    history: HistoryStore,
    fetcher: ReportFetcher,
    concurrency: int = FETCH_CONCURRENCY,
    progress_callback: Callable[[int, int], None] | None = None,
    weights: ScoreWeights | None = None,
) -> IngestBatchResult:
    """Ingest reports for several sources concurrently.

    Sources are independent: a failed fetch or a storage error for one source
    is recorded in failures and does not affect the others.
    Uses asyncio.Semaphore to limit parallel fetches and calls
    progress_callback(current, total) after each source completes.

    Args:
        sources: Sources to fetch.
        history: Store receiving new entries.
        fetcher: Report fetcher.
        concurrency: Maximum concurrent fetches.
        progress_callback: Optional callback for progress updates.
        weights: Optional score weights.

    Returns:
        IngestBatchResult with per-source scores and failures.
    """
    start_time = time.time()
    semaphore = asyncio.Semaphore(max(1, concurrency))
    scores: dict[str, int] = {}
    failures: dict[str, str] = {}
    completed = 0

    async def ingest_one(source: Source) -> None:
        nonlocal completed
        async with semaphore:
            try:
                entry = await ingest_source(source, history, fetcher, weights)
                scores[source.id] = entry.score
            except IngestionError as e:
                failures[source.id] = e.result.error or "unknown error"
            except OSError as e:
                logger.error(f"Storage error while ingesting {source.id}: {e}")
                failures[source.id] = f"Storage error: {e}"
            finally:
                completed += 1
                if progress_callback:
                    progress_callback(completed, len(sources))

    await asyncio.gather(*(ingest_one(source) for source in sources))

    duration = time.time() - start_time
    logger.info(
        f"Batch complete: {len(scores)} succeeded, {len(failures)} failed in {duration:.1f}s"
    )

    return IngestBatchResult(
        total=len(sources),
        succeeded=len(scores),
        failed=len(failures),
        duration_seconds=duration,
        scores=scores,
        failures=failures,
    )


def run_fetch(
    source_id: str,
    registry: SourceRegistry,
    history: HistoryStore,
    fetcher: ReportFetcher | None = None,
) -> HistoryEntry:
    """Synchronous wrapper around ingest_source_id."""
    fetcher = fetcher or ReportFetcher()
    return asyncio.run(ingest_source_id(source_id, registry, history, fetcher))


def run_fetch_all(
    registry: SourceRegistry,
    history: HistoryStore,
    fetcher: ReportFetcher | None = None,
    concurrency: int = FETCH_CONCURRENCY,
    progress_callback: Callable[[int, int], None] | None = None,
) -> IngestBatchResult:
    """Synchronous wrapper around ingest_all for every configured source."""
    fetcher = fetcher or ReportFetcher()
    return asyncio.run(
        ingest_all(
            registry.list(),
            history,
            fetcher,
            concurrency=concurrency,
            progress_callback=progress_callback,
        )
    )
