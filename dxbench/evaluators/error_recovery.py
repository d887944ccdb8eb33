"""Error recovery evaluator.

Needs one extra model round-trip per applicable scenario, so unlike the other
evaluators it is async and holds the adapter.
"""

import logging
import re

from dxbench.consts import ERROR_RECOVERY_SYSTEM_PROMPT, SIMULATED_TOOL_ERROR
from dxbench.evaluators.base import check_aligned, mean_score
from dxbench.llm.base_adapter import LLMAdapter
from dxbench.models.model_eval import Dimension, EvalContext, EvalDetail, EvaluatorResult
from dxbench.models.model_scenario import BenchScenario
from dxbench.models.model_tool import LLMResponse, Message, MessageRole, TokenUsage

logger = logging.getLogger(__name__)

RECOVERY_PATTERNS = [
    re.compile(r"try (again|a different|another)", re.IGNORECASE),
    re.compile(r"let me (retry|try|attempt)", re.IGNORECASE),
    re.compile(r"error|failed|issue|problem", re.IGNORECASE),
    re.compile(r"apologize|sorry", re.IGNORECASE),
    re.compile(r"alternative|instead", re.IGNORECASE),
    re.compile(r"couldn'?t|unable|cannot", re.IGNORECASE),
]

EXPECTED = "retry or explain error"


def acknowledges_error(content: str) -> bool:
    """Check whether text contains recovery or failure-acknowledgment language."""
    return any(pattern.search(content) for pattern in RECOVERY_PATTERNS)


def build_recovery_messages(scenario: BenchScenario, response: LLMResponse) -> list[Message]:
    """Replay the scenario exchange and append a simulated tool failure."""
    tool_name = response.tool_calls[0].name
    return [
        Message(role=MessageRole.USER, content=scenario.task),
        Message(
            role=MessageRole.ASSISTANT,
            content=response.content or f"I'll use {tool_name} to help with that.",
        ),
        Message(
            role=MessageRole.USER,
            content=f'Error: The tool "{tool_name}" returned an error: "{SIMULATED_TOOL_ERROR}"',
        ),
    ]


def score_recovery(scenario_id: str, recovery: LLMResponse) -> tuple[float, EvalDetail]:
    """Score a follow-up reply to a simulated tool error.

    Returns:
        Tuple of (score, detail): 1.0 retry with explanation, 0.8 retry only,
        0.5 explanation only, else 0.
    """
    retried = recovery.first_tool_name
    acknowledged = acknowledges_error(recovery.content)

    if retried is not None and acknowledged:
        return 1.0, EvalDetail(
            scenario_id=scenario_id,
            passed=True,
            expected=EXPECTED,
            actual=f"retried {retried} with explanation",
        )
    if retried is not None:
        return 0.8, EvalDetail(
            scenario_id=scenario_id,
            passed=True,
            expected=EXPECTED,
            actual=f"retried {retried}",
            note="Retried but did not explain the error",
        )
    if acknowledged:
        return 0.5, EvalDetail(
            scenario_id=scenario_id,
            passed=False,
            expected=EXPECTED,
            actual="explained error without retry",
            note="Acknowledged error but did not attempt recovery",
        )
    return 0.0, EvalDetail(
        scenario_id=scenario_id,
        passed=False,
        expected=EXPECTED,
        actual="no recovery attempt",
        note="Did not acknowledge or recover from error",
    )


class ErrorRecoveryEvaluator:
    """Simulate a tool failure and check whether the model retries or explains.

    Applies to scenarios whose representative response called a tool and whose
    expected_tool is set. Scenarios are replayed one at a time. A failed
    round-trip is recorded as a failed detail and does not abort the dimension.
    """

    dimension = Dimension.ERROR_RECOVERY.value

    def __init__(self, adapter: LLMAdapter, weight: float = 0.10, usage: TokenUsage | None = None):
        """Initialize the evaluator.

        Args:
            adapter: Adapter used for the follow-up calls
            weight: Dimension weight
            usage: Run-wide token totals to add follow-up usage to
        """
        self.adapter = adapter
        self.weight = weight
        self.usage = usage if usage is not None else TokenUsage()

    async def evaluate(
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
            if not response.tool_calls or scenario.expected_tool is None:
                continue
            evaluated += 1

            try:
                recovery = await self.adapter.chat(
                    system=ERROR_RECOVERY_SYSTEM_PROMPT,
                    messages=build_recovery_messages(scenario, response),
                    tools=context.tools,
                    temperature=0,
                )
            except Exception as e:
                logger.warning(f"Error recovery call failed for scenario {scenario.id}: {e}")
                details.append(
                    EvalDetail(
                        scenario_id=scenario.id,
                        passed=False,
                        expected=EXPECTED,
                        actual="evaluation failed",
                        note="LLM call failed during error recovery test",
                    )
                )
                continue

            self.usage.add(recovery)
            score, detail = score_recovery(scenario.id, recovery)
            total += score
            details.append(detail)

        return EvaluatorResult(
            dimension=self.dimension,
            score=mean_score(total, evaluated),
            weight=self.weight,
            details=details,
        )
