"""Render a BenchReport for the terminal (rich) or as JSON."""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from dxbench.consts import RATING_EXCELLENT, RATING_GOOD, RATING_NEEDS_WORK
from dxbench.evaluators.base import round_half_up
from dxbench.models.model_bench import BenchEstimate, BenchReport
from dxbench.models.model_eval import EvaluatorResult

BAR_WIDTH = 22


def _get_score_color(score: int) -> str:
    """Get color for score display."""
    if score >= RATING_EXCELLENT:
        return "green"
    elif score >= RATING_GOOD:
        return "cyan"
    elif score >= RATING_NEEDS_WORK:
        return "yellow"
    else:
        return "red"


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def score_bar(score: int, width: int = BAR_WIDTH) -> Text:
    """Build a filled/empty bar for a 0-100 score."""
    filled = round_half_up(score / 100 * width)
    bar = Text("█" * filled, style=_get_score_color(score))
    bar.append("░" * (width - filled), style="dim")
    return bar


def dimension_summary(result: EvaluatorResult) -> str:
    """Short trailing summary: first failure note, else passed/total."""
    if not result.details:
        return ""
    note = next((d.note for d in result.failed_details if d.note), None)
    if note:
        return f"({note})"
    return f"({result.passed_count}/{len(result.details)} correct)"


def render_report(report: BenchReport, console: Console, server_name: str | None = None) -> None:
    """Print the human-readable report.

    Args:
        report: Finished bench report
        console: Rich console to print to
        server_name: Optional server name for the header
    """
    counts = f"{_plural(len(report.tools), 'tool')}, {_plural(len(report.scenarios), 'scenario')}"
    header = f"DX Bench - {server_name} ({counts})" if server_name else f"DX Bench - {counts}"
    console.print(f"\n[bold]{header}[/bold]\n")

    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Dimension", style="bold")
    table.add_column("Bar")
    table.add_column("Score", justify="right")
    table.add_column("Summary", style="dim")

    for result in report.score.dimensions:
        table.add_row(
            result.dimension,
            score_bar(result.score),
            Text(f"{result.score}%", style=_get_score_color(result.score)),
            dimension_summary(result),
        )

    console.print(table)

    score = report.score
    color = _get_score_color(score.overall)
    console.print()
    console.print(
        Panel.fit(
            f"[bold {color}]Agent DX Score:  {score.overall} / 100[/bold {color}]\n"
            f"Rating: {score.rating.value}",
            border_style=color,
        )
    )

    if score.top_issues:
        console.print("\n[bold]Top issues:[/bold]")
        for i, issue in enumerate(score.top_issues, start=1):
            console.print(f"  {i}. {issue.description}", markup=False)
            console.print(f"     [dim]→ Fix: {issue.suggestion}[/dim]")

    if report.total_cost > 0:
        tokens = report.total_input_tokens + report.total_output_tokens
        console.print(f"\n[dim]Cost: ~${report.total_cost:.4f} ({tokens} tokens)[/dim]")
    console.print()


def render_estimate(estimate: BenchEstimate, model: str, console: Console) -> None:
    """Print the pre-flight estimate as a table."""
    table = Table(title="Bench Estimate")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="magenta")

    table.add_row("Model", model)
    table.add_row("Scenarios", str(estimate.scenario_count))
    table.add_row("Runs per scenario", str(estimate.runs))
    table.add_row("Total calls", str(estimate.total_calls))
    table.add_row("Estimated cost", f"~${estimate.estimated_cost:.2f}")

    console.print(table)


def report_to_dict(report: BenchReport) -> dict[str, Any]:
    """Build the machine-readable export structure."""
    return {
        "score": report.score.overall,
        "rating": report.score.rating.value,
        "dimensions": [
            {
                "dimension": d.dimension,
                "score": d.score,
                "weight": d.weight,
                "passed": d.passed_count,
                "total": len(d.details),
                "details": [
                    det.model_dump(mode="json", by_alias=True, exclude_none=True) for det in d.details
                ],
            }
            for d in report.score.dimensions
        ],
        "topIssues": [
            issue.model_dump(mode="json", by_alias=True) for issue in report.score.top_issues
        ],
        "scenarios": [
            {
                "id": s.id,
                "task": s.task,
                "expectedTool": s.expected_tool,
                "expectedParams": s.expected_params,
                "tags": s.tags,
                "difficulty": s.difficulty.value,
                "response": (
                    {
                        "content": report.responses[i].content,
                        "toolCalls": [
                            call.model_dump(mode="json") for call in report.responses[i].tool_calls
                        ],
                    }
                    if i < len(report.responses)
                    else None
                ),
            }
            for i, s in enumerate(report.scenarios)
        ],
        "config": {
            "provider": report.config.provider.value,
            "model": report.config.model,
            "runs": report.config.runs,
            "temperature": report.config.temperature,
        },
        "tools": [t.name for t in report.tools],
        "cost": {
            "inputTokens": report.total_input_tokens,
            "outputTokens": report.total_output_tokens,
            "estimatedCost": report.total_cost,
        },
    }


def format_report_json(report: BenchReport) -> str:
    """Serialize the report export as indented JSON."""
    return json.dumps(report_to_dict(report), indent=2, ensure_ascii=False)
