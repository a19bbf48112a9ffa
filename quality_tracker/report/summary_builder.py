"""Summary builder for PHPCS-style JSON reports.

Reports come from external CI pipelines and are treated as untrusted: any
missing or mistyped field degrades to "no issues" instead of raising.
"""

from collections.abc import Mapping
from typing import Any

from quality_tracker.models.model_report import ERROR_TYPE, WARNING_TYPE, Summary


def _report_files(report: Any) -> Mapping[Any, Any]:
    """Return the report's files mapping, or an empty mapping for any other shape."""
    if not isinstance(report, Mapping):
        return {}
    files = report.get("files")
    return files if isinstance(files, Mapping) else {}


def _file_messages(file_data: Any) -> list[Any]:
    """Return a file entry's messages list, or an empty list for any other shape."""
    if not isinstance(file_data, Mapping):
        return []
    messages = file_data.get("messages")
    return messages if isinstance(messages, list) else []


def _message_type(message: Any) -> str:
    """Upper-cased message type, or '' when the message or its type is unusable."""
    if not isinstance(message, Mapping):
        return ""
    value = message.get("type")
    return value.upper() if isinstance(value, str) else ""


def build_summary(report: Any) -> Summary:
    """Count errors, warnings and files with issues in a raw report.

    A file counts toward files_with_issues once when its messages list is
    present and non-empty, whatever the message types. Message types other
    than ERROR/WARNING are ignored.

    Args:
        report: Decoded report document (any shape).

    Returns:
        Summary with non-negative counts. Zero-filled for malformed input.
    """
    errors = 0
    warnings = 0
    files_with_issues = 0

    for file_data in _report_files(report).values():
        messages = _file_messages(file_data)
        if not messages:
            continue

        files_with_issues += 1
        for message in messages:
            message_type = _message_type(message)
            if message_type == ERROR_TYPE:
                errors += 1
            elif message_type == WARNING_TYPE:
                warnings += 1

    return Summary(errors=errors, warnings=warnings, files_with_issues=files_with_issues)


def main() -> None:
    """Demonstrate summary building on well-formed and malformed reports."""
    print("Summary Builder Demo")
    print("=" * 50)

    test_cases = [
        ("Empty report", {}),
        (
            "One file, mixed messages",
            {
                "files": {
                    "a.php": {
                        "messages": [{"type": "ERROR"}, {"type": "warning"}, {"type": "WARNING"}]
                    }
                }
            },
        ),
        ("files is a list", {"files": ["a.php"]}),
        ("messages is a string", {"files": {"a.php": {"messages": "oops"}}}),
        ("Unknown and non-string types", {"files": {"a.php": {"messages": [{"type": 3}, {}]}}}),
    ]

    for description, report in test_cases:
        summary = build_summary(report)
        print(f"\n{description}:")
        print(
            f"  errors={summary.errors}, warnings={summary.warnings}, "
            f"files_with_issues={summary.files_with_issues}"
        )


if __name__ == "__main__":
    main()
