"""Base evaluator protocol and shared scoring helpers."""

import math
from typing import Protocol

from dxbench.models.model_eval import EvalContext, EvaluatorResult
from dxbench.models.model_scenario import BenchScenario
from dxbench.models.model_tool import LLMResponse


class BaseEvaluator(Protocol):
    """Protocol defining the synchronous evaluator contract.

    Evaluators take the full scenario list and the index-aligned list of
    representative responses and return one EvaluatorResult. They:
    - never mutate or reorder their inputs
    - only skip scenarios failing their own applicability check
    - score 100 with no details when nothing applies
    """

    dimension: str
    weight: float

    def evaluate(
        self,
        scenarios: list[BenchScenario],
        responses: list[LLMResponse],
        context: EvalContext,
    ) -> EvaluatorResult:
        """Evaluate all applicable scenarios on this dimension.

        Args:
            scenarios: Scenario corpus
            responses: Representative responses, index-aligned with scenarios
            context: Evaluation context with the tool catalog

        Returns:
            EvaluatorResult with a 0-100 score and per-scenario details
        """
        ...


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def mean_score(total: float, evaluated: int) -> int:
    """Convert summed 0-1 scenario scores into a 0-100 dimension score.

    A dimension with no applicable scenarios scores 100.
    """
    if evaluated == 0:
        return 100
    return round_half_up(total / evaluated * 100)


def check_aligned(scenarios: list[BenchScenario], responses: list[LLMResponse]) -> None:
    """Guard the 1:1 scenario/response alignment."""
    if len(scenarios) != len(responses):
        msg = f"{len(scenarios)} scenarios but {len(responses)} responses"
        raise ValueError(msg)
