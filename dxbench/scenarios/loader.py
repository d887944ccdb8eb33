"""Load hand-written scenario files (YAML).

File layout:

    scenarios:
      - id: weather-tokyo            # optional, defaults to scenario-N
        task: What's the weather in Tokyo?
        expect:
          tool: get_weather          # "none" = no tool should be called
          params: {city: Tokyo}      # optional, partial
        tags: [positive]             # optional
        difficulty: easy             # optional, defaults to medium
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from dxbench.errors import ScenarioLoadError
from dxbench.models.model_scenario import BenchScenario, Difficulty, ScenarioTag

logger = logging.getLogger(__name__)

NO_TOOL_SENTINEL = "none"


class ScenarioExpectation(BaseModel):
    """The `expect` block of a scenario entry."""

    model_config = ConfigDict(extra="forbid")

    tool: str | None = None
    tools: list[str] | None = None
    params: dict[str, Any] | None = None
    description: str | None = None


class ScenarioEntry(BaseModel):
    """One scenario as written in the file."""

    model_config = ConfigDict(extra="forbid")

    id: str | None = None
    task: str
    expect: ScenarioExpectation
    tags: list[str] | None = None
    difficulty: Difficulty | None = None


class ScenarioFile(BaseModel):
    """Top-level scenario file."""

    model_config = ConfigDict(extra="forbid")

    scenarios: list[ScenarioEntry]


def _to_bench_scenario(entry: ScenarioEntry, index: int) -> BenchScenario:
    expect = entry.expect
    is_negative = expect.tool == NO_TOOL_SENTINEL

    if is_negative:
        expected_tool = None
    elif expect.tool is not None:
        expected_tool = expect.tool
    elif expect.tools:
        expected_tool = expect.tools[0]
    else:
        expected_tool = None

    if entry.tags is not None:
        tags = entry.tags
    else:
        tags = [ScenarioTag.NEGATIVE.value if is_negative else ScenarioTag.POSITIVE.value]

    return BenchScenario(
        id=entry.id or f"scenario-{index + 1}",
        task=entry.task,
        expected_tool=expected_tool,
        expected_params=expect.params,
        tags=tags,
        difficulty=entry.difficulty or Difficulty.MEDIUM,
    )


def load_scenarios(path: Path | str) -> list[BenchScenario]:
    """Load and validate a scenario file.

    Args:
        path: Path to the YAML scenario file.

    Returns:
        Normalized scenarios in file order.

    Raises:
        ScenarioLoadError: If the file is missing, is not valid YAML, or fails
            schema validation (unknown fields, missing task/expect, bad difficulty).
    """
    path = Path(path)
    if not path.exists():
        raise ScenarioLoadError(f"Scenario file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ScenarioLoadError(f"Invalid YAML in {path}: {e}") from e

    try:
        parsed = ScenarioFile.model_validate(raw)
    except ValidationError as e:
        raise ScenarioLoadError(f"Invalid scenario file {path}:\n{e}") from e

    scenarios = [_to_bench_scenario(entry, i) for i, entry in enumerate(parsed.scenarios)]
    logger.info(f"Loaded {len(scenarios)} scenario(s) from {path}")
    return scenarios
