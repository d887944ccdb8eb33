"""Ambiguity handling evaluator."""

import re

from dxbench.consts import AMBIGUITY_EXPLANATION_MIN_CHARS
from dxbench.evaluators.base import check_aligned, mean_score
from dxbench.models.model_eval import Dimension, EvalContext, EvalDetail, EvaluatorResult
from dxbench.models.model_scenario import BenchScenario, ScenarioTag
from dxbench.models.model_tool import LLMResponse

CLARIFICATION_PATTERNS = [
    re.compile(r"could you (please )?(clarify|specify|tell me|provide)", re.IGNORECASE),
    re.compile(r"which (one|tool|option)", re.IGNORECASE),
    re.compile(r"do you mean", re.IGNORECASE),
    re.compile(r"i'?m not sure (which|what|if)", re.IGNORECASE),
    re.compile(r"can you be more specific", re.IGNORECASE),
    re.compile(r"there are (multiple|several|a few)", re.IGNORECASE),
    re.compile(r"did you mean", re.IGNORECASE),
    re.compile(r"i need more (information|details|context)", re.IGNORECASE),
    re.compile(r"please (specify|clarify|provide)", re.IGNORECASE),
    # A line ending in a question mark
    re.compile(r"\?$", re.MULTILINE),
]

EXPECTED = "clarification or reasonable default"


def asks_for_clarification(content: str) -> bool:
    """Check whether text contains clarification-seeking language."""
    return any(pattern.search(content) for pattern in CLARIFICATION_PATTERNS)


class AmbiguityHandlingEvaluator:
    """Reward asking for clarification over silently guessing.

    Only scenarios tagged 'ambiguous' are evaluated. Ladder:
    1.0 clarification without a call, 0.7 clarification with a call,
    0.5 a call with a substantive explanation, else 0.
    """

    dimension = Dimension.AMBIGUITY_HANDLING.value

    def __init__(self, weight: float = 0.15):
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
            if not scenario.has_tag(ScenarioTag.AMBIGUOUS):
                continue
            evaluated += 1

            content = response.content
            called = response.first_tool_name
            asked = asks_for_clarification(content)

            if asked and called is None:
                total += 1.0
                details.append(
                    EvalDetail(
                        scenario_id=scenario.id,
                        passed=True,
                        expected=EXPECTED,
                        actual="asked for clarification",
                    )
                )
            elif asked:
                total += 0.7
                details.append(
                    EvalDetail(
                        scenario_id=scenario.id,
                        passed=True,
                        expected=EXPECTED,
                        actual="made tool call with clarification note",
                        note="Acknowledged ambiguity while making a default choice",
                    )
                )
            elif called is not None and len(content) > AMBIGUITY_EXPLANATION_MIN_CHARS:
                total += 0.5
                details.append(
                    EvalDetail(
                        scenario_id=scenario.id,
                        passed=False,
                        expected=EXPECTED,
                        actual=f"called {called} with explanation",
                        note="Made assumption without acknowledging ambiguity",
                    )
                )
            else:
                details.append(
                    EvalDetail(
                        scenario_id=scenario.id,
                        passed=False,
                        expected=EXPECTED,
                        actual=f"silently called {called}" if called is not None else "no response",
                        note="Did not acknowledge ambiguity",
                    )
                )

        return EvaluatorResult(
            dimension=self.dimension,
            score=mean_score(total, evaluated),
            weight=self.weight,
            details=details,
        )
