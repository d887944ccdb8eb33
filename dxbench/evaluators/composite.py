"""Composite scoring functions for combining dimension results."""

from dxbench.consts import (
    MAX_TOP_ISSUES,
    RATING_EXCELLENT,
    RATING_GOOD,
    RATING_NEEDS_WORK,
    TOP_ISSUE_SCORE_CEILING,
)
from dxbench.evaluators.base import round_half_up
from dxbench.models.model_eval import Dimension, DXScore, EvaluatorResult, Rating, TopIssue

SUGGESTIONS: dict[str, str] = {
    Dimension.TOOL_SELECTION.value: "Improve tool descriptions to be more specific and distinct from each other",
    Dimension.PARAMETER_ACCURACY.value: "Add parameter descriptions and default values to your input schemas",
    Dimension.AMBIGUITY_HANDLING.value: "Make tool descriptions clearer about when each tool should be used",
    Dimension.MULTI_TOOL.value: "Consider adding tool descriptions that explain relationships between tools",
    Dimension.ERROR_RECOVERY.value: "Return structured error messages with actionable information",
}
DEFAULT_SUGGESTION = "Review tool definitions for clarity"


def calculate_overall_score(results: list[EvaluatorResult]) -> int:
    """Calculate the weighted mean of dimension scores.

    Dividing by the total weight renormalises when a dimension (error
    recovery) was skipped.

    Args:
        results: Dimension results that actually ran

    Returns:
        Overall score 0-100, or 0 if no weight is present
    """
    total_weight = sum(r.weight for r in results)
    if total_weight == 0:
        return 0
    weighted = sum(r.score * r.weight for r in results)
    return round_half_up(weighted / total_weight)


def score_to_rating(score: int) -> Rating:
    """Map an overall score to its rating band."""
    if score >= RATING_EXCELLENT:
        return Rating.EXCELLENT
    if score >= RATING_GOOD:
        return Rating.GOOD
    if score >= RATING_NEEDS_WORK:
        return Rating.NEEDS_WORK
    return Rating.POOR


def extract_top_issues(results: list[EvaluatorResult]) -> list[TopIssue]:
    """Pick the weakest dimensions and pair each with a fix suggestion.

    Dimensions are sorted ascending by score (ties keep input order).
    Dimensions at or above the ceiling, or with no failed scenarios, are
    skipped.

    Args:
        results: Dimension results

    Returns:
        Up to MAX_TOP_ISSUES issues, weakest first
    """
    issues: list[TopIssue] = []

    for result in sorted(results, key=lambda r: r.score):
        if len(issues) >= MAX_TOP_ISSUES:
            break
        if result.score >= TOP_ISSUE_SCORE_CEILING:
            continue

        failed = result.failed_details
        if not failed:
            continue

        first_note = next((d.note for d in failed if d.note), None)
        if first_note:
            description = f"{result.dimension}: {first_note}"
        else:
            description = f"{result.dimension}: {len(failed)} scenario(s) failed"

        issues.append(
            TopIssue(
                dimension=result.dimension,
                description=description,
                suggestion=SUGGESTIONS.get(result.dimension, DEFAULT_SUGGESTION),
            )
        )

    return issues


def calculate_dx_score(results: list[EvaluatorResult]) -> DXScore:
    """Aggregate dimension results into the final DX score.

    Args:
        results: Dimension results in evaluation order

    Returns:
        DXScore with overall score, rating, dimensions and top issues
    """
    overall = calculate_overall_score(results)
    return DXScore(
        overall=overall,
        rating=score_to_rating(overall),
        dimensions=list(results),
        top_issues=extract_top_issues(results),
    )
