"""Configured report sources."""

from quality_tracker.registry.source_registry import (
    SourceRegistry,
    new_id,
    sanitize_sources,
    sanitize_token,
)

__all__ = ["SourceRegistry", "new_id", "sanitize_sources", "sanitize_token"]
