"""Quality score heuristic for issue summaries."""

import math

from quality_tracker.consts import SCORE_BAND_FAIR, SCORE_BAND_GOOD
from quality_tracker.models.model_eval import ScoreWeights
from quality_tracker.models.model_report import Summary

MAX_SCORE = 100
MIN_SCORE = 0

_DEFAULT_WEIGHTS = ScoreWeights()


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (Python's round() is banker's)."""
    return math.floor(value + 0.5)


def compute_score(summary: Summary, weights: ScoreWeights | None = None) -> int:
    """Map an issue summary to a 0-100 quality score.

    Algorithm:
        penalty = errors×4 + warnings×1
        score   = 100 - min(100, round(penalty / 5))
        Clamped to [0, 100]. No issues: 100

    Args:
        summary: Issue counts to score
        weights: Optional penalty weights (defaults to 4 / 1 / 5)

    Returns:
        Integer score between 0-100
    """
    weights = weights or _DEFAULT_WEIGHTS

    penalty = summary.errors * weights.error + summary.warnings * weights.warning
    deduction = min(MAX_SCORE, round_half_up(penalty / weights.divisor))
    score = MAX_SCORE - deduction

    return max(MIN_SCORE, min(MAX_SCORE, score))


def score_band(score: int) -> str:
    """Classify a score for display: 'good', 'fair' or 'poor'."""
    if score >= SCORE_BAND_GOOD:
        return "good"
    elif score >= SCORE_BAND_FAIR:
        return "fair"
    else:
        return "poor"


def main() -> None:
    """Demonstrate quality scoring with sample summaries."""
    print("Quality Score Demo")
    print("=" * 50)

    test_cases = [
        ("Clean report", Summary()),
        ("1 error, 2 warnings", Summary(errors=1, warnings=2, files_with_issues=1)),
        ("Warnings only", Summary(warnings=40, files_with_issues=12)),
        ("Error heavy", Summary(errors=60, warnings=10, files_with_issues=20)),
        ("Pathological (score floors at 0)", Summary(errors=10_000, files_with_issues=500)),
    ]

    for description, summary in test_cases:
        score = compute_score(summary)
        print(f"\n{description}:")
        print(f"  E={summary.errors}, W={summary.warnings}, F={summary.files_with_issues}")
        print(f"  Score: {score}/100 ({score_band(score)})")

    print("\n## Scoring Formula")
    print("penalty = errors×4 + warnings×1")
    print("score = 100 - min(100, round(penalty / 5))")


if __name__ == "__main__":
    main()
