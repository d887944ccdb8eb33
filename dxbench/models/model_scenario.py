"""Benchmark scenario models."""

from enum import Enum
from typing import Any

from pydantic import ConfigDict, Field

from dxbench.models.common import CamelModel


class Difficulty(str, Enum):
    """Scenario difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ScenarioTag(str, Enum):
    """Known scenario category labels.

    Tags on a scenario are kept as plain strings so that hand-written files may
    carry extra labels; these are the ones evaluators look at.
    """

    POSITIVE = "positive"
    NEGATIVE = "negative"
    AMBIGUOUS = "ambiguous"
    MULTI_TOOL = "multi-tool"
    OPTIONAL_PARAMS = "optional-params"
    DISAMBIGUATION = "disambiguation"


class BenchScenario(CamelModel):
    """One test case: a task plus the expected tool call (or none).

    Created once per run (loaded or generated) and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique within a run")
    task: str = Field(description="Natural-language instruction sent to the model")
    expected_tool: str | None = Field(
        default=None, description="Tool that should be called; None means no call is correct"
    )
    expected_params: dict[str, Any] | None = Field(
        default=None, description="Partial expected arguments; only present keys are checked"
    )
    tags: list[str] = Field(default_factory=list)
    difficulty: Difficulty = Difficulty.MEDIUM

    def has_tag(self, tag: ScenarioTag) -> bool:
        return tag.value in self.tags
