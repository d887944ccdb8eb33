"""Multi-tool composition evaluator."""

import json

from dxbench.consts import MULTI_TOOL_PASS_THRESHOLD
from dxbench.evaluators.base import check_aligned, mean_score
from dxbench.models.model_eval import Dimension, EvalContext, EvalDetail, EvaluatorResult
from dxbench.models.model_scenario import BenchScenario, ScenarioTag
from dxbench.models.model_tool import LLMResponse, ToolCall

EXPECTED = "multiple tool calls"


def _call_key(call: ToolCall) -> str:
    return json.dumps({"name": call.name, "arguments": call.arguments}, sort_keys=True)


def has_duplicate_calls(calls: list[ToolCall]) -> bool:
    """True if two calls share the same name and structurally equal arguments."""
    return len({_call_key(call) for call in calls}) != len(calls)


class MultiToolEvaluator:
    """Check that multi-step tasks produce several valid, non-redundant calls.

    Only scenarios tagged 'multi-tool' are evaluated.
    """

    dimension = Dimension.MULTI_TOOL.value

    def __init__(self, weight: float = 0.10):
        self.weight = weight

    def evaluate(
        self,
        scenarios: list[BenchScenario],
        responses: list[LLMResponse],
        context: EvalContext,
    ) -> EvaluatorResult:
        check_aligned(scenarios, responses)
        available = context.available_tools
        details: list[EvalDetail] = []
        total = 0.0
        evaluated = 0

        for scenario, response in zip(scenarios, responses):
            if not scenario.has_tag(ScenarioTag.MULTI_TOOL):
                continue
            evaluated += 1

            calls = response.tool_calls

            if not calls:
                details.append(
                    EvalDetail(
                        scenario_id=scenario.id,
                        passed=False,
                        expected=EXPECTED,
                        actual="no tool calls",
                        note="LLM did not call any tools",
                    )
                )
                continue

            if len(calls) == 1:
                total += 0.3 if calls[0].name in available else 0.0
                details.append(
                    EvalDetail(
                        scenario_id=scenario.id,
                        passed=False,
                        expected=EXPECTED,
                        actual=f"1 call: {calls[0].name}",
                        note="Only made a single tool call",
                    )
                )
                continue

            all_valid = all(call.name in available for call in calls)
            duplicated = has_duplicate_calls(calls)

            score = 0.5
            if all_valid:
                score += 0.3
            if not duplicated:
                score += 0.2
            total += score

            if not all_valid:
                note = "Some tool calls reference non-existent tools"
            elif duplicated:
                note = "Contains redundant duplicate calls"
            else:
                note = None

            names = " → ".join(call.name for call in calls)
            details.append(
                EvalDetail(
                    scenario_id=scenario.id,
                    passed=score >= MULTI_TOOL_PASS_THRESHOLD,
                    expected=EXPECTED,
                    actual=f"{len(calls)} calls: {names}",
                    note=note,
                )
            )

        return EvaluatorResult(
            dimension=self.dimension,
            score=mean_score(total, evaluated),
            weight=self.weight,
            details=details,
        )
