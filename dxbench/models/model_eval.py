"""Evaluation result and scoring models."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from dxbench.models.common import CamelModel
from dxbench.models.model_tool import ToolDefinition


class Dimension(str, Enum):
    """Evaluation dimensions, valued by their display name."""

    TOOL_SELECTION = "Tool Selection"
    PARAMETER_ACCURACY = "Parameter Accuracy"
    AMBIGUITY_HANDLING = "Ambiguity Handling"
    MULTI_TOOL = "Multi-tool"
    ERROR_RECOVERY = "Error Recovery"


class Rating(str, Enum):
    """Qualitative rating bands for the overall DX score."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    NEEDS_WORK = "Needs work"
    POOR = "Poor"


class DimensionWeights(BaseModel):
    """Per-dimension weights.

    All weights must sum to 1.0. When error recovery is skipped the aggregator
    renormalises over the remaining dimensions.
    """

    tool_selection: float = Field(default=0.35, ge=0.0, le=1.0)
    parameter_accuracy: float = Field(default=0.30, ge=0.0, le=1.0)
    ambiguity_handling: float = Field(default=0.15, ge=0.0, le=1.0)
    multi_tool: float = Field(default=0.10, ge=0.0, le=1.0)
    error_recovery: float = Field(default=0.10, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def weights_sum_to_one(self) -> "DimensionWeights":
        """Validate that weights sum to 1.0."""
        total = (
            self.tool_selection
            + self.parameter_accuracy
            + self.ambiguity_handling
            + self.multi_tool
            + self.error_recovery
        )
        if abs(total - 1.0) > 0.001:
            msg = f"Weights must sum to 1.0, got {total}"
            raise ValueError(msg)
        return self


class EvalDetail(CamelModel):
    """Outcome of one scenario on one dimension."""

    scenario_id: str
    passed: bool
    expected: str
    actual: str
    note: str | None = None


class EvaluatorResult(CamelModel):
    """Score and per-scenario details for one dimension."""

    dimension: str
    score: int = Field(ge=0, le=100)
    weight: float = Field(ge=0.0, le=1.0)
    details: list[EvalDetail] = Field(default_factory=list)

    @property
    def passed_count(self) -> int:
        return sum(1 for d in self.details if d.passed)

    @property
    def failed_details(self) -> list[EvalDetail]:
        return [d for d in self.details if not d.passed]


class TopIssue(CamelModel):
    """A weak dimension paired with an actionable fix."""

    dimension: str
    description: str
    suggestion: str


class DXScore(CamelModel):
    """The aggregate Agent DX score."""

    overall: int = Field(ge=0, le=100)
    rating: Rating
    dimensions: list[EvaluatorResult]
    top_issues: list[TopIssue] = Field(default_factory=list)


class EvalContext(BaseModel):
    """Read-only context shared by all evaluators.

    Evaluators never call back into the catalog source; everything they need
    about the tools comes through here.
    """

    tools: list[ToolDefinition] = Field(default_factory=list)

    @property
    def available_tools(self) -> set[str]:
        """Names of every tool in the catalog."""
        return {tool.name for tool in self.tools}
