"""Scenario corpus production: load a file or generate from the catalog."""

import logging
from pathlib import Path

from dxbench.consts import DEFAULT_SCENARIOS
from dxbench.llm.base_adapter import LLMAdapter
from dxbench.models.model_scenario import BenchScenario
from dxbench.models.model_tool import ToolDefinition
from dxbench.scenarios.generator import generate_scenarios
from dxbench.scenarios.loader import load_scenarios

logger = logging.getLogger(__name__)


async def produce_scenarios(
    tools: list[ToolDefinition],
    adapter: LLMAdapter,
    source: str = DEFAULT_SCENARIOS,
) -> list[BenchScenario]:
    """Produce the scenario corpus for a run.

    Args:
        tools: Tool catalog.
        adapter: Model adapter, used only when generating.
        source: "auto" to generate, otherwise a scenario file path. A path
            that does not exist falls back to generation.

    Returns:
        Scenario list for the run.

    Raises:
        ScenarioLoadError: If an existing scenario file is invalid.
        ScenarioParseError: If generated output cannot be parsed.
    """
    if source != DEFAULT_SCENARIOS:
        path = Path(source)
        if path.exists():
            return load_scenarios(path)
        logger.warning(f"Scenario file {path} not found, generating scenarios instead")

    return await generate_scenarios(tools, adapter)
