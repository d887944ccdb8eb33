"""Data models for the evaluation driver."""

from dataclasses import dataclass

from dxbench.models.model_tool import LLMResponse, TokenUsage


@dataclass
class RunResult:
    """Result of driving the model through every scenario."""

    responses: list[LLMResponse]  # Representative response per scenario, index-aligned
    usage: TokenUsage
    total_calls: int
    duration_seconds: float
