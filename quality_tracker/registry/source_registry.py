"""Registry of configured report sources.

Rows arrive from an untyped form or JSON file. Every write re-sanitizes the
whole batch and replaces the stored registry in a single storage write.
"""

import hashlib
import logging
import re
import secrets
import time
from collections.abc import Mapping
from typing import Any

from pydantic import HttpUrl, TypeAdapter, ValidationError

from quality_tracker.consts import SOURCE_ID_LENGTH, STORAGE_CATEGORY_SETTINGS, STORAGE_KEY_SOURCES
from quality_tracker.models.model_source import Source, SourceType
from quality_tracker.storage.permanent_storage.base import PermanentStorage

logger = logging.getLogger(__name__)

_KEY_DISALLOWED = re.compile(r"[^a-z0-9_\-]")
_TAGS = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")
_BEARER_PREFIX = re.compile(r"^Bearer\s+", re.IGNORECASE)
_HTTP_URL = TypeAdapter(HttpUrl)

# Short type keys accepted on input
_TYPE_ALIASES = {"mu": SourceType.MU_PLUGIN}


def new_id() -> str:
    """Generate a short opaque source id.

    SHA-256 of a nanosecond timestamp and a random value, truncated to
    SOURCE_ID_LENGTH hex characters.
    """
    seed = f"{time.time_ns()}:{secrets.randbits(64)}"
    return hashlib.sha256(seed.encode()).hexdigest()[:SOURCE_ID_LENGTH]


def sanitize_key(value: Any) -> str:
    """Lowercase and keep only a-z, 0-9, '-' and '_'."""
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        return ""
    return _KEY_DISALLOWED.sub("", str(value).lower())


def sanitize_text(value: Any) -> str:
    """Plain single-line text: tags stripped, whitespace collapsed, trimmed."""
    if not isinstance(value, str):
        return ""
    return _WHITESPACE.sub(" ", _TAGS.sub("", value)).strip()


def sanitize_url(value: Any) -> str:
    """Return the trimmed URL if it is an absolute http(s) URL, else ''."""
    if not isinstance(value, str):
        return ""
    url = value.strip()
    if not url:
        return ""
    try:
        _HTTP_URL.validate_python(url)
    except ValidationError:
        return ""
    return url


def sanitize_token(value: Any) -> str:
    """Trim a token and drop a pasted 'Bearer ' prefix."""
    if not isinstance(value, str):
        return ""
    return _BEARER_PREFIX.sub("", value.strip())


def sanitize_type(value: Any) -> SourceType:
    """Normalize a source type, defaulting to plugin for unknown values."""
    if isinstance(value, SourceType):
        return value
    key = sanitize_key(value)
    if key in _TYPE_ALIASES:
        return _TYPE_ALIASES[key]
    try:
        return SourceType(key)
    except ValueError:
        return SourceType.PLUGIN


def _iter_rows(raw_rows: Any) -> list[Any]:
    """Accept a list of rows or a form-style mapping of index → row."""
    if isinstance(raw_rows, Mapping):
        return list(raw_rows.values())
    if isinstance(raw_rows, (list, tuple)):
        return list(raw_rows)
    return []


def sanitize_sources(raw_rows: Any) -> list[Source]:
    """Sanitize a batch of untyped source rows.

    Rows without a usable name or URL are dropped silently. Missing ids are
    generated; an id already used earlier in the batch is replaced by a fresh
    one so every id in the result is unique.

    Args:
        raw_rows: List of row mappings, or a mapping of index → row.

    Returns:
        Sanitized sources in input order.
    """
    sources: list[Source] = []
    seen_ids: set[str] = set()

    for row in _iter_rows(raw_rows):
        if not isinstance(row, Mapping):
            continue

        source_id = sanitize_key(row.get("id"))
        source_type = sanitize_type(row.get("type"))
        name = sanitize_text(row.get("name"))
        url = sanitize_url(row.get("url"))
        token = sanitize_token(row.get("token"))

        if not name or not url:
            logger.debug(f"Dropping source row without name or url: id={source_id or '-'}")
            continue

        if not source_id:
            source_id = new_id()
        while source_id in seen_ids:
            replacement = new_id()
            logger.warning(f"Duplicate source id {source_id} in batch, reassigned to {replacement}")
            source_id = replacement
        seen_ids.add(source_id)

        sources.append(
            Source(id=source_id, type=source_type, name=name, url=url, token=token)
        )

    return sources


class SourceRegistry:
    """Persistent set of configured sources."""

    def __init__(self, storage: PermanentStorage):
        """Initialize SourceRegistry.

        Args:
            storage: Backend holding the sources list.
        """
        self.storage = storage

    def sanitize_and_replace(self, raw_rows: Any) -> list[Source]:
        """Sanitize a batch of rows and replace the stored registry with it.

        History of sources that disappear from the batch is kept.

        Args:
            raw_rows: List of row mappings, or a mapping of index → row.

        Returns:
            The sources now stored.
        """
        sources = sanitize_sources(raw_rows)
        self.storage.save(
            STORAGE_KEY_SOURCES,
            [source.model_dump(mode="json") for source in sources],
            STORAGE_CATEGORY_SETTINGS,
        )
        logger.info(f"Saved {len(sources)} sources")
        return sources

    def get(self, source_id: str) -> Source | None:
        """Find a source by id."""
        for source in self.list():
            if source.id == source_id:
                return source
        return None

    # Defined last: inside the class body this name shadows the builtin.
    def list(self) -> list[Source]:
        """Return stored sources in saved order, skipping records that fail validation."""
        data = self.storage.load(STORAGE_KEY_SOURCES, STORAGE_CATEGORY_SETTINGS)
        if not isinstance(data, list):
            return []

        sources = []
        for raw in data:
            try:
                sources.append(Source.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping invalid stored source: {e}")
        return sources
