"""Typed drill-down over retained reports.

Decodes a raw report into files and messages with defaults for every field,
and selects the files with the most issues for display.
"""

from collections.abc import Mapping
from typing import Any

from quality_tracker.consts import ISSUES_MAX_FILES, ISSUES_MAX_PER_FILE
from quality_tracker.models.model_report import (
    FileIssues,
    ParsedReport,
    ReportFile,
    ReportMessage,
)


def _as_int(value: Any) -> int:
    """Coerce a JSON value to a non-negative int, defaulting to 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        return max(0, int(value))
    if isinstance(value, str):
        try:
            return max(0, int(value.strip()))
        except ValueError:
            return 0
    return 0


def _as_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def parse_message(raw: Any) -> ReportMessage | None:
    """Decode one message record. Returns None when the message is not a mapping."""
    if not isinstance(raw, Mapping):
        return None

    rule = _as_str(raw.get("source")) or _as_str(raw.get("sniff"))
    return ReportMessage(
        type=_as_str(raw.get("type")).upper(),
        line=_as_int(raw.get("line")),
        column=_as_int(raw.get("column")),
        message=_as_str(raw.get("message")),
        rule=rule,
    )


def parse_report(report: Any) -> ParsedReport:
    """Decode a raw report into typed files and messages.

    Files whose entry is not a mapping or whose messages list is missing or
    empty are left out. Non-mapping messages are skipped.

    Args:
        report: Decoded report document (any shape).

    Returns:
        ParsedReport in the report's file order.
    """
    if not isinstance(report, Mapping):
        return ParsedReport()
    files = report.get("files")
    if not isinstance(files, Mapping):
        return ParsedReport()

    parsed_files: list[ReportFile] = []
    for path, file_data in files.items():
        if not isinstance(file_data, Mapping):
            continue
        raw_messages = file_data.get("messages")
        if not isinstance(raw_messages, list) or not raw_messages:
            continue

        messages = [m for m in (parse_message(raw) for raw in raw_messages) if m is not None]
        parsed_files.append(ReportFile(path=str(path), messages=messages))

    return ParsedReport(files=parsed_files)


def top_files(
    report: Any,
    max_files: int = ISSUES_MAX_FILES,
    max_per_file: int = ISSUES_MAX_PER_FILE,
) -> list[FileIssues]:
    """Select the files with the most issues for drill-down.

    Args:
        report: Decoded report document (any shape).
        max_files: Maximum number of files returned.
        max_per_file: Maximum number of messages kept per file.

    Returns:
        Files sorted by message count descending (ties keep report order),
        each with at most max_per_file messages.
    """
    parsed = parse_report(report)
    ranked = sorted(parsed.files, key=lambda f: len(f.messages), reverse=True)

    rows: list[FileIssues] = []
    for report_file in ranked:
        if len(rows) >= max_files:
            break
        if not report_file.messages:
            continue

        rows.append(
            FileIssues(
                path=report_file.path,
                errors=report_file.errors,
                warnings=report_file.warnings,
                issue_count=len(report_file.messages),
                messages=report_file.messages[:max_per_file],
                truncated=len(report_file.messages) > max_per_file,
            )
        )

    return rows
