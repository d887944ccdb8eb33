"""Tool selection evaluator."""

from dxbench.evaluators.base import check_aligned, mean_score
from dxbench.models.model_eval import Dimension, EvalContext, EvalDetail, EvaluatorResult
from dxbench.models.model_scenario import BenchScenario
from dxbench.models.model_tool import LLMResponse

NO_TOOL_CALL = "no tool call"


class ToolSelectionEvaluator:
    """Compare the first tool call against the expected tool.

    Applies to every scenario. Outcomes:
    - negative scenario, no call: correct refusal
    - negative scenario, any call: wrong (valid tool) or hallucinated
    - positive scenario: correct, no call, hallucinated or wrong tool
    """

    dimension = Dimension.TOOL_SELECTION.value

    def __init__(self, weight: float = 0.35):
        self.weight = weight

    def evaluate(
        self,
        scenarios: list[BenchScenario],
        responses: list[LLMResponse],
        context: EvalContext,
    ) -> EvaluatorResult:
        """Score the share of scenarios where the right tool (or none) was chosen."""
        check_aligned(scenarios, responses)
        available = context.available_tools
        details: list[EvalDetail] = []
        passed = 0

        for scenario, response in zip(scenarios, responses):
            actual = response.first_tool_name
            expected = scenario.expected_tool

            if expected is None:
                if actual is None:
                    passed += 1
                    details.append(
                        EvalDetail(
                            scenario_id=scenario.id,
                            passed=True,
                            expected=NO_TOOL_CALL,
                            actual=NO_TOOL_CALL,
                            note="Correct refusal",
                        )
                    )
                else:
                    note = (
                        f"Wrong - called {actual} when no tool should be used"
                        if actual in available
                        else f'Hallucinated tool "{actual}" that doesn\'t exist'
                    )
                    details.append(
                        EvalDetail(
                            scenario_id=scenario.id,
                            passed=False,
                            expected=NO_TOOL_CALL,
                            actual=actual,
                            note=note,
                        )
                    )
                continue

            if actual == expected:
                passed += 1
                details.append(
                    EvalDetail(scenario_id=scenario.id, passed=True, expected=expected, actual=actual)
                )
            elif actual is None:
                details.append(
                    EvalDetail(
                        scenario_id=scenario.id,
                        passed=False,
                        expected=expected,
                        actual=NO_TOOL_CALL,
                        note="LLM did not call any tool",
                    )
                )
            elif actual not in available:
                details.append(
                    EvalDetail(
                        scenario_id=scenario.id,
                        passed=False,
                        expected=expected,
                        actual=actual,
                        note=f'Hallucinated tool "{actual}"',
                    )
                )
            else:
                details.append(
                    EvalDetail(
                        scenario_id=scenario.id,
                        passed=False,
                        expected=expected,
                        actual=actual,
                        note=f"Called {actual} instead of {expected}",
                    )
                )

        return EvaluatorResult(
            dimension=self.dimension,
            score=mean_score(passed, len(scenarios)),
            weight=self.weight,
            details=details,
        )
