"""Capped, newest-first scan history keyed by source id."""

import logging
import threading
from typing import Any

from pydantic import ValidationError

from quality_tracker.consts import (
    GLOBAL_SOURCE_ID,
    HISTORY_CAP,
    STORAGE_CATEGORY_HISTORY,
    STORAGE_CATEGORY_SETTINGS,
    STORAGE_KEY_LAST_META,
)
from quality_tracker.models.model_history import HistoryEntry, LastMeta
from quality_tracker.storage.permanent_storage.base import PermanentStorage

logger = logging.getLogger(__name__)


class HistoryStore:
    """Append-and-trim log of scan results per source.

    Each source's list lives under its own storage key, so pushes for
    different sources never touch each other's data. Pushes for the same
    source are serialized by a per-source lock. The cap is enforced on every
    push, never on read.

    Single-source (global) history is the same store used with
    GLOBAL_SOURCE_ID as the key.
    """

    def __init__(self, storage: PermanentStorage):
        """Initialize HistoryStore.

        Args:
            storage: Backend holding one history list per source id.
        """
        self.storage = storage
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, source_id: str) -> threading.Lock:
        with self._locks_guard:
            if source_id not in self._locks:
                self._locks[source_id] = threading.Lock()
            return self._locks[source_id]

    def _load_raw(self, source_id: str) -> list[Any]:
        data = self.storage.load(source_id, STORAGE_CATEGORY_HISTORY)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning(f"Ignoring malformed history for {source_id}: {type(data).__name__}")
            return []
        return data

    def push(self, source_id: str, entry: HistoryEntry) -> None:
        """Prepend an entry and keep only the newest HISTORY_CAP entries.

        A source without history starts from an empty list. Other sources'
        histories are untouched.

        Args:
            source_id: Source key (GLOBAL_SOURCE_ID for global history).
            entry: Entry to record.
        """
        with self._lock_for(source_id):
            items = self._load_raw(source_id)
            items.insert(0, entry.model_dump(mode="json"))
            evicted = max(0, len(items) - HISTORY_CAP)
            items = items[:HISTORY_CAP]
            self.storage.save(source_id, items, STORAGE_CATEGORY_HISTORY)

            meta = LastMeta(source_id=source_id, fetched_at=entry.fetched_at, source=entry.source)
            self.storage.save(
                STORAGE_KEY_LAST_META, meta.model_dump(mode="json"), STORAGE_CATEGORY_SETTINGS
            )

        logger.info(
            f"Recorded scan for {source_id}: score={entry.score} "
            f"({len(items)} retained, {evicted} evicted)"
        )

    def latest(self, source_id: str = GLOBAL_SOURCE_ID) -> HistoryEntry | None:
        """Return the newest entry for a source, or None if it has no history."""
        entries = self.list(source_id)
        return entries[0] if entries else None

    def clear(self, source_id: str = GLOBAL_SOURCE_ID) -> int:
        """Drop all entries for one source.

        Returns:
            Number of entries removed.
        """
        with self._lock_for(source_id):
            count = len(self._load_raw(source_id))
            self.storage.delete(source_id, STORAGE_CATEGORY_HISTORY)

        logger.info(f"Cleared {count} history entries for {source_id}")
        return count

    def clear_all(self) -> int:
        """Drop every source's history and the last-fetch cache.

        Returns:
            Number of entries removed across all sources.
        """
        count = sum(self.clear(source_id) for source_id in self.source_ids())
        self.storage.delete(STORAGE_KEY_LAST_META, STORAGE_CATEGORY_SETTINGS)
        return count

    def source_ids(self) -> list[str]:
        """List source ids with stored history, including removed sources."""
        return self.storage.list_keys(STORAGE_CATEGORY_HISTORY)

    def last_meta(self) -> LastMeta | None:
        """Return metadata of the most recent successful fetch across sources."""
        data = self.storage.load(STORAGE_KEY_LAST_META, STORAGE_CATEGORY_SETTINGS)
        if data is None:
            return None
        try:
            return LastMeta.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid last fetch metadata: {e}")
            return None

    def last_report(self) -> dict[str, Any] | None:
        """Return the report of the most recent successful fetch across sources."""
        meta = self.last_meta()
        if meta is None:
            return None
        latest = self.latest(meta.source_id)
        return latest.report if latest is not None else None

    # Defined last: inside the class body this name shadows the builtin
    # used in the annotations above.
    def list(self, source_id: str = GLOBAL_SOURCE_ID) -> list[HistoryEntry]:
        """Return a source's history, newest first.

        Stored records that no longer validate are skipped.
        """
        entries = []
        for raw in self._load_raw(source_id):
            try:
                entries.append(HistoryEntry.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping invalid history entry for {source_id}: {e}")
        return entries
