"""Parameter accuracy evaluator."""

import json
from typing import Any

from dxbench.consts import PARAMETER_PASS_THRESHOLD
from dxbench.evaluators.base import check_aligned, mean_score
from dxbench.models.model_eval import Dimension, EvalContext, EvalDetail, EvaluatorResult
from dxbench.models.model_scenario import BenchScenario
from dxbench.models.model_tool import LLMResponse

# Partial credit per expected key
EXACT_CREDIT = 1.0
FUZZY_CREDIT = 0.8
COERCED_CREDIT = 0.5


def coerce_to_string(value: Any) -> str:
    """Render a JSON value as text the way a JSON-native runtime would print it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)


def normalize(value: Any) -> str:
    """Lowercase and trim for fuzzy comparison. None normalizes to ''."""
    if value is None:
        return ""
    return coerce_to_string(value).lower().strip()


def is_fuzzy_string_match(expected: Any, actual: Any) -> bool:
    """Case and whitespace insensitive match between two strings.

    Type drift ("10" vs 10) is not a fuzzy match; it only earns coerced credit.
    """
    if not isinstance(expected, str) or not isinstance(actual, str):
        return False
    return normalize(expected) == normalize(actual)


def values_equal(expected: Any, actual: Any) -> bool:
    """Exact, type-aware equality. Booleans never equal numbers."""
    if isinstance(expected, bool) or isinstance(actual, bool):
        return isinstance(expected, bool) and isinstance(actual, bool) and expected == actual
    if isinstance(expected, (int, float)) != isinstance(actual, (int, float)):
        return False
    return expected == actual


def compare_params(expected: dict[str, Any], actual: dict[str, Any]) -> tuple[float, list[str]]:
    """Score actual arguments against the expected subset.

    Args:
        expected: Expected argument values (only these keys are scored)
        actual: Arguments the model sent

    Returns:
        Tuple of (score in 0-1, mismatch notes). Extra actual keys are noted
        but do not lower the score.
    """
    if not expected:
        return 1.0, []

    matched = 0.0
    mismatches: list[str] = []

    for key, expected_value in expected.items():
        if key not in actual:
            mismatches.append(f'missing "{key}"')
            continue

        actual_value = actual[key]
        if values_equal(expected_value, actual_value):
            matched += EXACT_CREDIT
        elif is_fuzzy_string_match(expected_value, actual_value):
            matched += FUZZY_CREDIT
        elif coerce_to_string(expected_value) == coerce_to_string(actual_value):
            matched += COERCED_CREDIT
        else:
            mismatches.append(
                f'"{key}": expected {json.dumps(expected_value)}, got {json.dumps(actual_value)}'
            )

    extra_keys = [k for k in actual if k not in expected]
    if extra_keys:
        mismatches.append(f"unexpected params: {', '.join(extra_keys)}")

    return matched / len(expected), mismatches


class ParameterAccuracyEvaluator:
    """Compare the first tool call's arguments with expected_params.

    Only scenarios that define expected_params are evaluated.
    """

    dimension = Dimension.PARAMETER_ACCURACY.value

    def __init__(self, weight: float = 0.30):
        self.weight = weight

    def evaluate(
        self,
        scenarios: list[BenchScenario],
        responses: list[LLMResponse],
        context: EvalContext,
    ) -> EvaluatorResult:
        check_aligned(scenarios, responses)
        details: list[EvalDetail] = []
        total = 0.0
        evaluated = 0

        for scenario, response in zip(scenarios, responses):
            if scenario.expected_params is None:
                continue
            evaluated += 1

            actual_args = response.tool_calls[0].arguments if response.tool_calls else {}
            score, mismatches = compare_params(scenario.expected_params, actual_args)
            total += score

            details.append(
                EvalDetail(
                    scenario_id=scenario.id,
                    passed=score >= PARAMETER_PASS_THRESHOLD,
                    expected=json.dumps(scenario.expected_params),
                    actual=json.dumps(actual_args),
                    note="; ".join(mismatches) if mismatches else None,
                )
            )

        return EvaluatorResult(
            dimension=self.dimension,
            score=mean_score(total, evaluated),
            weight=self.weight,
            details=details,
        )
