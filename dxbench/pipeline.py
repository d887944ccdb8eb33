"""Pipeline orchestration for a complete benchmark.

The bench is split in two so a caller can show the projected cost and ask
for confirmation before spending anything on evaluation:

estimate_bench:
1. Produce scenarios (load file or generate)
2. Project call count and cost

run_bench:
1. Drive the model through every scenario (majority vote over runs)
2. Evaluate all dimensions
3. Aggregate into the DX score and resolve cost
"""

import logging
import time
from collections.abc import Callable

from dxbench.evaluators.composite import calculate_dx_score
from dxbench.evaluators.registry import EvaluatorRegistry
from dxbench.llm.base_adapter import LLMAdapter
from dxbench.models.model_bench import BenchConfig, BenchEstimate, BenchReport
from dxbench.models.model_eval import DimensionWeights, EvalContext
from dxbench.models.model_scenario import BenchScenario
from dxbench.models.model_tool import ToolDefinition
from dxbench.runner.bench_runner import BenchRunner
from dxbench.runner.cost import estimate_cost
from dxbench.scenarios.producer import produce_scenarios

logger = logging.getLogger(__name__)


async def estimate_bench(
    tools: list[ToolDefinition],
    config: BenchConfig,
    adapter: LLMAdapter,
) -> BenchEstimate:
    """Produce the scenario corpus and project the run's cost.

    Args:
        tools: Tool catalog
        config: Run settings
        adapter: Model adapter (used for generation and pricing)

    Returns:
        BenchEstimate whose scenarios are passed on to run_bench

    Raises:
        ScenarioLoadError: If the scenario file is invalid
        ScenarioParseError: If generated scenarios cannot be parsed
    """
    logger.info("Step 1/2: Producing scenarios...")
    scenarios = await produce_scenarios(tools, adapter, source=config.scenarios)
    logger.info(f"Scenario corpus ready: {len(scenarios)} scenario(s)")

    logger.info("Step 2/2: Estimating cost...")
    estimate = estimate_cost(scenarios, config, adapter)
    logger.info(f"Estimated {estimate.total_calls} call(s), ${estimate.estimated_cost:.4f}")
    return estimate


async def run_bench(
    tools: list[ToolDefinition],
    config: BenchConfig,
    adapter: LLMAdapter,
    scenarios: list[BenchScenario],
    progress_callback: Callable[[int, int], None] | None = None,
    weights: DimensionWeights | None = None,
) -> BenchReport:
    """Run evaluation, scoring and cost resolution over a prepared corpus.

    Args:
        tools: Tool catalog
        config: Run settings
        adapter: Model adapter
        scenarios: Scenarios from estimate_bench (not regenerated)
        progress_callback: Optional callback(completed_calls, total_calls)
        weights: Dimension weights (defaults to DimensionWeights())

    Returns:
        BenchReport with the DX score, aligned responses, tokens and cost

    Raises:
        AdapterCallError: If any evaluation call fails
    """
    start_time = time.time()
    context = EvalContext(tools=tools)
    registry = EvaluatorRegistry(weights)

    # Step 1: Drive the model
    logger.info("Step 1/3: Running scenarios...")
    runner = BenchRunner(adapter, config)
    run_result = await runner.run(tools, scenarios, progress_callback)

    # Step 2: Evaluate
    logger.info("Step 2/3: Evaluating dimensions...")
    if config.skip_error_recovery:
        logger.info("Skipping error recovery")
    results = await registry.evaluate_all(
        scenarios,
        run_result.responses,
        context,
        adapter=None if config.skip_error_recovery else adapter,
        usage=run_result.usage,
    )

    # Step 3: Aggregate
    logger.info("Step 3/3: Aggregating score...")
    score = calculate_dx_score(results)
    usage = run_result.usage
    total_cost = adapter.estimate_cost(usage.input_tokens, usage.output_tokens)
    duration = time.time() - start_time

    logger.info(
        f"Bench complete: {score.overall}/100 ({score.rating.value}), "
        f"{usage.total} tokens, ${total_cost:.4f}, {duration:.1f}s"
    )

    return BenchReport(
        score=score,
        scenarios=scenarios,
        responses=run_result.responses,
        config=config,
        tools=tools,
        total_input_tokens=usage.input_tokens,
        total_output_tokens=usage.output_tokens,
        total_cost=total_cost,
        duration_seconds=duration,
    )
