"""CLI interface for dxbench."""

import asyncio
import json
import logging
from io import StringIO
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from dxbench.config import RawConfig, load_config, resolve_bench_config
from dxbench.errors import DxBenchError
from dxbench.llm.factory import create_adapter
from dxbench.models.model_bench import BenchConfig
from dxbench.models.model_tool import ToolDefinition
from dxbench.pipeline import estimate_bench, run_bench
from dxbench.reporter import format_report_json, render_estimate, render_report

app = typer.Typer(
    name="dxbench",
    help="dxbench - Benchmark how well an LLM agent can use your tool catalog",
)

console = Console()

OUTPUT_FORMATS = ("text", "json")


@app.callback()
def main() -> None:
    """Benchmark tool catalogs from the model's point of view."""


def load_tool_catalog(path: Path) -> list[ToolDefinition]:
    """Load tool definitions from a JSON file.

    Accepts a list of tool definitions or an object with a "tools" list
    (the shape of an MCP tools/list result).

    Raises:
        ValueError: If the file is not valid JSON or has no usable tool list.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("tools")
    if not isinstance(data, list):
        raise ValueError(f'{path} must contain a list of tools or an object with a "tools" list')

    try:
        return [ToolDefinition.model_validate(item) for item in data]
    except ValidationError as e:
        raise ValueError(f"Invalid tool definition in {path}:\n{e}") from e


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    return typer.Exit(2)


def _write_or_print(text: str, output: Path | None) -> None:
    if output:
        output.write_text(text, encoding="utf-8")
        console.print(f"[green]Wrote report to {output}[/green]")
    else:
        typer.echo(text)


async def _run(
    tools: list[ToolDefinition],
    bench_config: BenchConfig,
    raw_config: RawConfig | None,
    output_format: str,
    output: Path | None,
    yes: bool,
    dry_run: bool,
) -> None:
    adapter = create_adapter(bench_config.provider, bench_config.model)
    try:
        if output_format == "text":
            console.print(f"\n[bold]Preparing scenarios for {len(tools)} tool(s)...[/bold]")
        estimate = await estimate_bench(tools, bench_config, adapter)

        if dry_run:
            render_estimate(estimate, bench_config.model, console)
            console.print("\n[dim]Run without --dry-run to perform the benchmark[/dim]")
            return

        if estimate.estimated_cost > 0 and not yes:
            console.print(
                f"\nThis benchmark will run {estimate.scenario_count} scenarios × "
                f"{estimate.runs} runs = {estimate.total_calls} LLM calls"
            )
            console.print(f"Estimated cost: ~${estimate.estimated_cost:.2f} ({bench_config.model})")
            if not typer.confirm("Proceed?", default=True):
                console.print("Aborted.")
                return

        if output_format == "text":
            console.print(
                f"\n[bold]Running with {bench_config.model} "
                f"({bench_config.runs} run(s) per scenario)...[/bold]\n"
            )
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task("Calling model...", total=estimate.total_calls)

                def on_progress(current: int, total: int):
                    progress.update(task, completed=current, total=total)

                report = await run_bench(
                    tools, bench_config, adapter, estimate.scenarios, progress_callback=on_progress
                )
        else:
            report = await run_bench(tools, bench_config, adapter, estimate.scenarios)
    finally:
        await adapter.aclose()

    if output_format == "json":
        _write_or_print(format_report_json(report), output)
        return

    server_name = raw_config.server.name if raw_config else None
    if output:
        file_console = Console(file=StringIO(), record=True, width=120)
        render_report(report, file_console, server_name=server_name)
        _write_or_print(file_console.export_text(), output)
    else:
        render_report(report, console, server_name=server_name)


@app.command()
def bench(
    tools_file: Path = typer.Argument(..., help="JSON file with tool definitions"),
    provider: str = typer.Option(None, "--provider", help="LLM provider: anthropic, openai, ollama"),
    model: str = typer.Option(None, "--model", help="Model to use"),
    scenarios: str = typer.Option(None, "--scenarios", help="Scenario YAML file, or 'auto' to generate"),
    runs: int = typer.Option(None, "--runs", help="Runs per scenario (majority vote)"),
    temperature: float = typer.Option(None, "--temperature", help="Sampling temperature"),
    concurrency: int = typer.Option(None, "--concurrency", help="Max scenarios in flight"),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text, json"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the report to a file"),
    skip_error_recovery: bool = typer.Option(
        False, "--skip-error-recovery", help="Skip error recovery evaluation"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip cost confirmation prompt"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Only produce scenarios and show the estimate"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable info logging"),
    config_path: Path = typer.Option(None, "--config", help="Config file (default: ./dxbench.config.yaml)"),
) -> None:
    """Benchmark a tool catalog against an LLM and print the Agent DX score."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if output_format not in OUTPUT_FORMATS:
        raise _fail(f"Unsupported format '{output_format}'. Use 'text' or 'json'.")

    try:
        raw_config = load_config(config_path)
        bench_config = resolve_bench_config(
            raw_config,
            provider=provider,
            model=model,
            scenarios=scenarios,
            runs=runs,
            temperature=temperature,
            concurrency=concurrency,
            skip_error_recovery=skip_error_recovery,
            verbose=verbose,
        )
    except DxBenchError as e:
        raise _fail(f"Config error: {e}")

    try:
        tools = load_tool_catalog(tools_file)
    except (OSError, ValueError) as e:
        raise _fail(f"Could not load tools: {e}")

    if not tools:
        raise _fail("Tool catalog is empty. Nothing to benchmark.")

    try:
        asyncio.run(
            _run(tools, bench_config, raw_config, output_format, output, yes, dry_run)
        )
    except (DxBenchError, ValueError) as e:
        raise _fail(str(e))


if __name__ == "__main__":
    app()
