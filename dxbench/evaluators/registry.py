"""Evaluator registry for orchestrating all dimension evaluators."""

import logging

from dxbench.evaluators.ambiguity import AmbiguityHandlingEvaluator
from dxbench.evaluators.error_recovery import ErrorRecoveryEvaluator
from dxbench.evaluators.multi_tool import MultiToolEvaluator
from dxbench.evaluators.parameters import ParameterAccuracyEvaluator
from dxbench.evaluators.tool_selection import ToolSelectionEvaluator
from dxbench.llm.base_adapter import LLMAdapter
from dxbench.models.model_eval import DimensionWeights, EvalContext, EvaluatorResult
from dxbench.models.model_scenario import BenchScenario
from dxbench.models.model_tool import LLMResponse, TokenUsage

logger = logging.getLogger(__name__)


class EvaluatorRegistry:
    """Orchestrates all evaluators to score a run.

    Runs the four synchronous evaluators in fixed order, then error recovery
    when an adapter is supplied. Each evaluator sees the same index-aligned
    scenario and response lists.
    """

    def __init__(self, weights: DimensionWeights | None = None) -> None:
        """Initialize registry with all synchronous evaluators.

        Args:
            weights: Dimension weights (defaults to DimensionWeights())
        """
        self.weights = weights or DimensionWeights()
        self.evaluators = {
            "tool_selection": ToolSelectionEvaluator(self.weights.tool_selection),
            "parameter_accuracy": ParameterAccuracyEvaluator(self.weights.parameter_accuracy),
            "ambiguity_handling": AmbiguityHandlingEvaluator(self.weights.ambiguity_handling),
            "multi_tool": MultiToolEvaluator(self.weights.multi_tool),
        }

    def error_recovery(self, adapter: LLMAdapter, usage: TokenUsage) -> ErrorRecoveryEvaluator:
        """Build the error recovery evaluator bound to a run's adapter and usage."""
        return ErrorRecoveryEvaluator(adapter, weight=self.weights.error_recovery, usage=usage)

    async def evaluate_all(
        self,
        scenarios: list[BenchScenario],
        responses: list[LLMResponse],
        context: EvalContext,
        adapter: LLMAdapter | None = None,
        usage: TokenUsage | None = None,
    ) -> list[EvaluatorResult]:
        """Evaluate every dimension.

        Args:
            scenarios: Scenario corpus
            responses: Representative responses, index-aligned with scenarios
            context: Evaluation context with the tool catalog
            adapter: Adapter for error recovery; None skips that dimension
            usage: Token totals that error recovery calls are added to

        Returns:
            Dimension results in fixed order
        """
        results = []
        for evaluator in self.evaluators.values():
            result = evaluator.evaluate(scenarios, responses, context)
            logger.info(f"{result.dimension}: {result.score}/100 ({len(result.details)} scenario(s))")
            results.append(result)

        if adapter is not None:
            evaluator = self.error_recovery(adapter, usage if usage is not None else TokenUsage())
            result = await evaluator.evaluate(scenarios, responses, context)
            logger.info(f"{result.dimension}: {result.score}/100 ({len(result.details)} scenario(s))")
            results.append(result)

        return results
