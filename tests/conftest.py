"""Pytest configuration and fixtures."""

from datetime import UTC, datetime
from typing import Any

import pytest

from quality_tracker.history.history_store import HistoryStore
from quality_tracker.models.model_history import HistoryEntry
from quality_tracker.models.model_report import Summary
from quality_tracker.models.model_source import Source, SourceType
from quality_tracker.registry.source_registry import SourceRegistry
from quality_tracker.storage.permanent_storage.memory_storage import MemoryStorage


@pytest.fixture
def storage() -> MemoryStorage:
    """Create an empty in-memory storage backend."""
    return MemoryStorage()


@pytest.fixture
def history(storage: MemoryStorage) -> HistoryStore:
    """Create a HistoryStore over in-memory storage."""
    return HistoryStore(storage)


@pytest.fixture
def registry(storage: MemoryStorage) -> SourceRegistry:
    """Create a SourceRegistry over in-memory storage."""
    return SourceRegistry(storage)


@pytest.fixture
def sample_report() -> dict[str, Any]:
    """A PHPCS report with one error and two warnings in a single file."""
    return {
        "totals": {"errors": 1, "warnings": 2, "fixable": 0},
        "files": {
            "src/Plugin.php": {
                "errors": 1,
                "warnings": 2,
                "messages": [
                    {
                        "message": "Missing doc comment for function init()",
                        "source": "Squiz.Commenting.FunctionComment.Missing",
                        "severity": 5,
                        "type": "ERROR",
                        "line": 12,
                        "column": 5,
                    },
                    {
                        "message": "Line exceeds 120 characters",
                        "source": "Generic.Files.LineLength.TooLong",
                        "severity": 5,
                        "type": "WARNING",
                        "line": 40,
                        "column": 121,
                    },
                    {
                        "message": "Processing form data without nonce verification",
                        "source": "WordPress.Security.NonceVerification.Missing",
                        "severity": 5,
                        "type": "warning",
                        "line": 55,
                        "column": 9,
                    },
                ],
            },
            "src/Clean.php": {"errors": 0, "warnings": 0, "messages": []},
        },
    }


@pytest.fixture
def clean_report() -> dict[str, Any]:
    """A PHPCS report without any messages."""
    return {
        "totals": {"errors": 0, "warnings": 0, "fixable": 0},
        "files": {"src/Clean.php": {"errors": 0, "warnings": 0, "messages": []}},
    }


@pytest.fixture
def sample_source() -> Source:
    """Create a sample configured source."""
    return Source(
        id="abc1234567",
        type=SourceType.PLUGIN,
        name="My Plugin",
        url="https://raw.githubusercontent.com/acme/my-plugin/main/phpcs.json",
    )


@pytest.fixture
def private_source() -> Source:
    """Create a sample source that needs a token."""
    return Source(
        id="def7654321",
        type=SourceType.THEME,
        name="Private Theme",
        url="https://raw.githubusercontent.com/acme/private-theme/main/phpcs.json",
        token="ghp_secret_token_1234",
    )


def make_entry(score: int, fetched_at: datetime | None = None, **summary: int) -> HistoryEntry:
    """Build a history entry with the given score and summary counts."""
    return HistoryEntry(
        fetched_at=fetched_at or datetime.now(UTC),
        source="https://example.com/phpcs.json",
        score=score,
        summary=Summary(**summary),
        report={"files": {}},
    )
