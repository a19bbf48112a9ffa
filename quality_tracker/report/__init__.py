"""Report processing: summaries, scores, drill-down and dashboard aggregation.

All functions here are pure over their inputs except build_overview, which
reads (never writes) a HistoryStore.
"""

from quality_tracker.report.issues import parse_message, parse_report, top_files
from quality_tracker.report.overview import build_overview
from quality_tracker.report.scoring import compute_score, round_half_up, score_band
from quality_tracker.report.summary_builder import build_summary

__all__ = [
    "build_summary",
    "compute_score",
    "round_half_up",
    "score_band",
    "parse_message",
    "parse_report",
    "top_files",
    "build_overview",
]
