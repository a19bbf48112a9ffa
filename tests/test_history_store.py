"""Tests for the capped scan history."""

import threading
from datetime import UTC, datetime, timedelta

from conftest import make_entry

from quality_tracker.consts import GLOBAL_SOURCE_ID, HISTORY_CAP
from quality_tracker.history.history_store import HistoryStore
from quality_tracker.storage.permanent_storage.memory_storage import MemoryStorage


class TestHistoryStore:
    """Tests for HistoryStore."""

    def test_empty_history(self, history: HistoryStore) -> None:
        """Test a source without history."""
        assert history.list("abc") == []
        assert history.latest("abc") is None
        assert history.last_meta() is None
        assert history.last_report() is None

    def test_push_prepends(self, history: HistoryStore) -> None:
        """Test newest entries come first."""
        history.push("abc", make_entry(90))
        history.push("abc", make_entry(80))

        scores = [entry.score for entry in history.list("abc")]
        assert scores == [80, 90]
        assert history.latest("abc").score == 80

    def test_cap_keeps_newest(self, history: HistoryStore) -> None:
        """Test 15 pushes keep the 15th through 6th, newest first."""
        base = datetime(2024, 1, 1, tzinfo=UTC)
        for i in range(1, 16):
            history.push("abc", make_entry(i, fetched_at=base + timedelta(minutes=i)))

        entries = history.list("abc")

        assert len(entries) == HISTORY_CAP
        assert [entry.score for entry in entries] == list(range(15, 5, -1))
        assert entries[0].fetched_at == base + timedelta(minutes=15)

    def test_sources_are_independent(self, history: HistoryStore) -> None:
        """Test pushing for one source leaves others untouched."""
        history.push("abc", make_entry(70))
        for _ in range(12):
            history.push("def", make_entry(50))

        assert [entry.score for entry in history.list("abc")] == [70]
        assert len(history.list("def")) == HISTORY_CAP

    def test_global_history_default_key(self, history: HistoryStore) -> None:
        """Test single-source mode uses the global key."""
        history.push(GLOBAL_SOURCE_ID, make_entry(99))

        assert history.latest().score == 99
        assert history.list("abc") == []

    def test_roundtrip_preserves_entry(self, history: HistoryStore) -> None:
        """Test a stored entry reads back with summary and report intact."""
        entry = make_entry(95, errors=1, warnings=2, files_with_issues=1)
        history.push("abc", entry)

        latest = history.latest("abc")
        assert latest == entry
        assert latest.summary.warnings == 2
        assert latest.report == {"files": {}}

    def test_clear(self, history: HistoryStore) -> None:
        """Test clearing one source."""
        history.push("abc", make_entry(90))
        history.push("abc", make_entry(91))
        history.push("def", make_entry(92))

        assert history.clear("abc") == 2
        assert history.list("abc") == []
        assert len(history.list("def")) == 1
        assert history.clear("missing") == 0

    def test_clear_all(self, history: HistoryStore) -> None:
        """Test clearing every source and the last-fetch cache."""
        history.push("abc", make_entry(90))
        history.push("def", make_entry(92))

        assert history.clear_all() == 2
        assert history.source_ids() == []
        assert history.last_meta() is None

    def test_last_meta_and_report(self, history: HistoryStore) -> None:
        """Test the last-fetch cache follows the most recent push."""
        history.push("abc", make_entry(90))
        history.push("def", make_entry(80))

        meta = history.last_meta()
        assert meta.source_id == "def"
        assert meta.source == "https://example.com/phpcs.json"
        assert history.last_report() == {"files": {}}

    def test_source_ids(self, history: HistoryStore) -> None:
        """Test listing sources with history."""
        history.push("def", make_entry(80))
        history.push("abc", make_entry(90))

        assert history.source_ids() == ["abc", "def"]

    def test_malformed_stored_history_is_ignored(self, storage: MemoryStorage) -> None:
        """Test non-list and invalid stored records do not break reads or pushes."""
        storage.save("abc", {"not": "a list"}, "history")
        storage.save("def", [{"score": 500}, make_entry(70).model_dump(mode="json")], "history")
        history = HistoryStore(storage)

        assert history.list("abc") == []
        assert [entry.score for entry in history.list("def")] == [70]

        history.push("abc", make_entry(60))
        assert [entry.score for entry in history.list("abc")] == [60]

    def test_concurrent_pushes_same_source(self, history: HistoryStore) -> None:
        """Test concurrent pushes for one source lose no entries below the cap."""
        threads = [
            threading.Thread(target=history.push, args=("abc", make_entry(i))) for i in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(entry.score for entry in history.list("abc")) == list(range(8))
