"""Scan history retention."""

from quality_tracker.history.history_store import HistoryStore

__all__ = ["HistoryStore"]
