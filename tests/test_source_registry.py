"""Tests for source sanitization and the source registry."""

import re

import pytest

from quality_tracker.models.model_source import Source, SourceType
from quality_tracker.registry.source_registry import (
    SourceRegistry,
    new_id,
    sanitize_sources,
    sanitize_text,
    sanitize_token,
    sanitize_type,
    sanitize_url,
)
from quality_tracker.storage.permanent_storage.memory_storage import MemoryStorage

REPORT_URL = "https://raw.githubusercontent.com/acme/plugin/main/phpcs.json"


class TestSanitizers:
    """Tests for field sanitizers."""

    def test_new_id_shape(self) -> None:
        """Test generated ids are short lowercase hex strings."""
        ids = {new_id() for _ in range(50)}

        assert len(ids) == 50
        assert all(re.fullmatch(r"[0-9a-f]{10}", source_id) for source_id in ids)

    def test_sanitize_text(self) -> None:
        """Test tags are stripped and whitespace collapsed."""
        assert sanitize_text("  <b>My</b>\n  Plugin\t") == "My Plugin"
        assert sanitize_text(None) == ""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (f"  {REPORT_URL}  ", REPORT_URL),
            ("http://localhost:8080/report.json", "http://localhost:8080/report.json"),
            ("ftp://example.com/report.json", ""),
            ("not a url", ""),
            ("/relative/path.json", ""),
            ("", ""),
            (None, ""),
        ],
    )
    def test_sanitize_url(self, value: object, expected: str) -> None:
        """Test only absolute http(s) URLs survive."""
        assert sanitize_url(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Bearer abc123", "abc123"),
            ("bearer   abc123", "abc123"),
            ("  abc123  ", "abc123"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_sanitize_token(self, value: object, expected: str) -> None:
        """Test a pasted Bearer prefix is removed."""
        assert sanitize_token(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("theme", SourceType.THEME),
            ("Plugin", SourceType.PLUGIN),
            ("mu-plugin", SourceType.MU_PLUGIN),
            ("mu", SourceType.MU_PLUGIN),
            ("library", SourceType.PLUGIN),
            (None, SourceType.PLUGIN),
        ],
    )
    def test_sanitize_type(self, value: object, expected: SourceType) -> None:
        """Test unknown types coerce to plugin."""
        assert sanitize_type(value) == expected


class TestSanitizeSources:
    """Tests for sanitize_sources."""

    def test_drops_rows_without_name_or_url(self) -> None:
        """Test incomplete rows are dropped silently."""
        rows = [
            {"name": "No URL"},
            {"url": REPORT_URL},
            {"name": "Bad URL", "url": "not a url"},
            {"name": "   ", "url": REPORT_URL},
            "not a row",
            {"name": "Kept", "url": REPORT_URL},
        ]

        sources = sanitize_sources(rows)

        assert [source.name for source in sources] == ["Kept"]

    def test_generates_missing_ids(self) -> None:
        """Test rows without an id get a fresh one."""
        sources = sanitize_sources([{"name": "A", "url": REPORT_URL}])

        assert len(sources[0].id) == 10

    def test_keeps_and_normalizes_ids(self) -> None:
        """Test supplied ids are lowercased and stripped of unsafe characters."""
        sources = sanitize_sources([{"id": "My ID/42", "name": "A", "url": REPORT_URL}])

        assert sources[0].id == "myid42"

    def test_duplicate_ids_are_regenerated(self) -> None:
        """Test an id reused in the batch is replaced for the later row."""
        rows = [
            {"id": "same", "name": "First", "url": REPORT_URL},
            {"id": "same", "name": "Second", "url": REPORT_URL},
        ]

        sources = sanitize_sources(rows)

        assert sources[0].id == "same"
        assert sources[1].id != "same"
        assert len({source.id for source in sources}) == 2

    def test_coerces_type_and_token(self) -> None:
        """Test type coercion and token cleanup."""
        rows = [
            {"name": "A", "url": REPORT_URL, "type": "widget", "token": "Bearer secret"},
            {"name": "B", "url": REPORT_URL, "type": "mu"},
        ]

        sources = sanitize_sources(rows)

        assert sources[0].type == SourceType.PLUGIN
        assert sources[0].token == "secret"
        assert sources[1].type == SourceType.MU_PLUGIN
        assert sources[1].token == ""

    def test_accepts_form_style_mapping(self) -> None:
        """Test a mapping of index → row is accepted in order."""
        rows = {
            "0": {"name": "A", "url": REPORT_URL},
            "1": {"name": "B", "url": REPORT_URL},
        }

        sources = sanitize_sources(rows)

        assert [source.name for source in sources] == ["A", "B"]

    @pytest.mark.parametrize("raw", [None, "rows", 42])
    def test_non_collection_input(self, raw: object) -> None:
        """Test unusable input yields no sources."""
        assert sanitize_sources(raw) == []


class TestSourceRegistry:
    """Tests for SourceRegistry."""

    def test_empty_registry(self, registry: SourceRegistry) -> None:
        """Test a fresh registry has no sources."""
        assert registry.list() == []
        assert registry.get("abc") is None

    def test_sanitize_and_replace(self, registry: SourceRegistry) -> None:
        """Test saved sources read back in order."""
        saved = registry.sanitize_and_replace(
            [
                {"id": "one", "type": "theme", "name": "Theme One", "url": REPORT_URL},
                {"id": "two", "name": "Plugin Two", "url": REPORT_URL, "token": "t0ken"},
            ]
        )

        assert registry.list() == saved
        assert registry.get("two").token == "t0ken"
        assert registry.get("one").type == SourceType.THEME

    def test_replace_overwrites_previous(self, registry: SourceRegistry) -> None:
        """Test each save replaces the whole registry."""
        registry.sanitize_and_replace([{"id": "one", "name": "A", "url": REPORT_URL}])
        registry.sanitize_and_replace([{"id": "two", "name": "B", "url": REPORT_URL}])

        assert [source.id for source in registry.list()] == ["two"]

    def test_ids_stable_across_saves(self, registry: SourceRegistry) -> None:
        """Test resubmitting saved rows keeps their ids."""
        first = registry.sanitize_and_replace([{"type": "theme", "name": "A", "url": REPORT_URL}])
        second = registry.sanitize_and_replace([source.model_dump() for source in first])

        assert second[0].id == first[0].id
        assert second[0].type == SourceType.THEME

    def test_invalid_stored_rows_skipped(self, storage: MemoryStorage) -> None:
        """Test stored rows that fail validation are skipped on read."""
        valid = Source(id="abc", name="A", url=REPORT_URL).model_dump(mode="json")
        storage.save("sources", [{"id": "", "name": "Broken"}, valid], "settings")

        assert [source.id for source in SourceRegistry(storage).list()] == ["abc"]

    def test_label(self) -> None:
        """Test display labels."""
        source = Source(id="abc", type=SourceType.MU_PLUGIN, name="Loader", url=REPORT_URL)

        assert source.label == "MU Plugin — Loader"
