"""Pydantic models for dxbench."""

from dxbench.models.model_bench import (
    BenchConfig,
    BenchEstimate,
    BenchReport,
    ProviderType,
)
from dxbench.models.model_eval import (
    Dimension,
    DimensionWeights,
    DXScore,
    EvalContext,
    EvalDetail,
    EvaluatorResult,
    Rating,
    TopIssue,
)
from dxbench.models.model_runner import RunResult
from dxbench.models.model_scenario import BenchScenario, Difficulty, ScenarioTag
from dxbench.models.model_tool import (
    LLMResponse,
    Message,
    MessageRole,
    TokenUsage,
    ToolCall,
    ToolDefinition,
    ToolInputSchema,
)

__all__ = [
    # Tool catalog and model exchange
    "LLMResponse",
    "Message",
    "MessageRole",
    "TokenUsage",
    "ToolCall",
    "ToolDefinition",
    "ToolInputSchema",
    # Scenarios
    "BenchScenario",
    "Difficulty",
    "ScenarioTag",
    # Evaluation
    "Dimension",
    "DimensionWeights",
    "DXScore",
    "EvalContext",
    "EvalDetail",
    "EvaluatorResult",
    "Rating",
    "TopIssue",
    # Run configuration and report
    "BenchConfig",
    "BenchEstimate",
    "BenchReport",
    "ProviderType",
    "RunResult",
]
