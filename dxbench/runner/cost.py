"""Pre-flight call volume and spend projection."""

from dxbench.consts import ESTIMATE_INPUT_TOKENS_PER_CALL, ESTIMATE_OUTPUT_TOKENS_PER_CALL
from dxbench.llm.base_adapter import LLMAdapter
from dxbench.models.model_bench import BenchConfig, BenchEstimate
from dxbench.models.model_scenario import BenchScenario


def count_calls(scenarios: list[BenchScenario], config: BenchConfig) -> int:
    """Count the model calls a run will make.

    Every scenario runs `runs` times. Unless error recovery is skipped, each
    scenario with an expected tool is budgeted one follow-up call per run.
    """
    eval_calls = len(scenarios) * config.runs
    if config.skip_error_recovery:
        return eval_calls
    recovery_candidates = sum(1 for s in scenarios if s.expected_tool is not None)
    return eval_calls + recovery_candidates * config.runs


def estimate_cost(
    scenarios: list[BenchScenario],
    config: BenchConfig,
    adapter: LLMAdapter,
) -> BenchEstimate:
    """Project call count and USD cost for a run.

    Args:
        scenarios: The scenario corpus that will be run
        config: Run settings
        adapter: Adapter whose pricing is used

    Returns:
        BenchEstimate carrying the scenarios for reuse by the run
    """
    total_calls = count_calls(scenarios, config)
    estimated_cost = adapter.estimate_cost(
        ESTIMATE_INPUT_TOKENS_PER_CALL * total_calls,
        ESTIMATE_OUTPUT_TOKENS_PER_CALL * total_calls,
    )
    return BenchEstimate(
        scenario_count=len(scenarios),
        runs=config.runs,
        total_calls=total_calls,
        estimated_cost=estimated_cost,
        scenarios=scenarios,
    )
