"""Scenario synthesis: prompt the model with the catalog and parse its JSON reply.

Model output is unreliable, so parsing goes through the repair stages in
json_repair, then truncation salvage, then one stricter retry before giving up.
"""

import json
import logging
from typing import Any

from dxbench.consts import GENERATION_MAX_TOKENS
from dxbench.errors import ScenarioParseError
from dxbench.llm.base_adapter import LLMAdapter
from dxbench.models.model_scenario import BenchScenario, Difficulty
from dxbench.models.model_tool import Message, MessageRole, ToolDefinition
from dxbench.scenarios.json_repair import clean_json_text, salvage_truncated_array

logger = logging.getLogger(__name__)

GENERATOR_SYSTEM_PROMPT = "You are a test scenario generator. Output only valid JSON."

STRICT_GENERATOR_SYSTEM_PROMPT = (
    "You are a test scenario generator. Output ONLY a valid JSON array, "
    "no text, no markdown, no comments, no trailing commas."
)

RETRY_NOTE = (
    "\n\nIMPORTANT: Your previous response could not be parsed as JSON. "
    "Output ONLY a valid JSON array, no text, no markdown, no comments, no trailing commas."
)

_NULL_TOOL_SENTINELS = {"", "none", "null"}


def _describe_tool(tool: ToolDefinition) -> str:
    """Render one tool for the generation prompt."""
    schema = tool.input_schema
    if schema and schema.properties:
        params = "\n".join(
            f"    {name}: {_prop_field(prop, 'type', 'unknown')} - "
            f"{_prop_field(prop, 'description', 'no description')}"
            for name, prop in schema.properties.items()
        )
    else:
        params = "    (no parameters)"

    required = ", ".join(schema.required) if schema and schema.required else "none"

    return (
        f"Tool: {tool.name}\n"
        f"Description: {tool.description or 'no description'}\n"
        f"Parameters:\n{params}\n"
        f"Required: {required}"
    )


def _prop_field(prop: Any, key: str, default: str) -> str:
    if isinstance(prop, dict) and prop.get(key):
        value = prop[key]
        return value if isinstance(value, str) else json.dumps(value)
    return default


def build_generation_prompt(tools: list[ToolDefinition]) -> str:
    """Build the single prompt asking for the whole scenario corpus."""
    tool_descriptions = "\n\n".join(_describe_tool(t) for t in tools)

    multi_tool_block = ""
    if len(tools) >= 2:
        multi_tool_block = (
            f"Since there are {len(tools)} tools, also generate:\n"
            '- 2 "multi-tool" scenarios (medium difficulty) - tasks requiring multiple tool calls in sequence\n'
            '- 1 "disambiguation" scenario (hard difficulty) - a task where the LLM must choose between similar tools\n'
        )

    return f"""You are generating test scenarios for an MCP (Model Context Protocol) server benchmark.

Given the following tool definitions, generate realistic test scenarios that a user might ask an AI agent to perform.

{tool_descriptions}

For EACH tool, generate exactly:
- 2 "positive" scenarios (easy difficulty) - straightforward tasks that clearly map to this tool
- 1 "optional-params" scenario (medium difficulty) - a task that requires filling optional parameters
- 1 "ambiguous" scenario (medium difficulty) - a task that could be interpreted in multiple ways
- 1 "negative" scenario (hard difficulty) - a task that sounds related but no tool should handle it (expectedTool: null)

{multi_tool_block}
Return ONLY a JSON array of scenario objects with this exact schema:
[
  {{
    "id": "unique-id",
    "task": "Natural language task description",
    "expectedTool": "tool_name or null for negative scenarios",
    "expectedParams": {{ "param": "value" }},
    "tags": ["positive"|"negative"|"ambiguous"|"multi-tool"|"optional-params"|"disambiguation"],
    "difficulty": "easy"|"medium"|"hard"
  }}
]

Return ONLY the JSON array, no markdown fences, no explanation."""


def _coerce_expected_tool(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return None if text.lower() in _NULL_TOOL_SENTINELS else text


def _coerce_tags(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(tag) for tag in value if isinstance(tag, (str, int, float)) and str(tag)]


def _coerce_difficulty(value: Any) -> Difficulty:
    try:
        return Difficulty(str(value).lower())
    except ValueError:
        return Difficulty.MEDIUM


def to_scenario(item: dict[str, Any], index: int) -> BenchScenario:
    """Map one generated JSON object into a BenchScenario.

    Args:
        item: Decoded JSON object from the model.
        index: 0-based position, used for a default id.

    Returns:
        A normalized scenario. Malformed optional fields fall back to defaults.
    """
    raw_id = item.get("id")
    expected_params = item.get("expectedParams", item.get("expected_params"))

    return BenchScenario(
        id=str(raw_id) if raw_id not in (None, "") else f"scenario-{index + 1}",
        task=str(item.get("task") or ""),
        expected_tool=_coerce_expected_tool(item.get("expectedTool", item.get("expected_tool"))),
        expected_params=expected_params if isinstance(expected_params, dict) else None,
        tags=_coerce_tags(item.get("tags")),
        difficulty=_coerce_difficulty(item.get("difficulty")),
    )


def to_scenarios(parsed: Any) -> list[BenchScenario]:
    """Map a decoded JSON value (array, or object with a 'scenarios' array) to scenarios.

    Raises:
        ValueError: If the value has no usable array shape.
    """
    if isinstance(parsed, dict):
        if isinstance(parsed.get("scenarios"), list):
            parsed = parsed["scenarios"]
        else:
            parsed = [parsed]
    if not isinstance(parsed, list):
        raise ValueError(f"Expected a JSON array, got {type(parsed).__name__}")

    scenarios = []
    for index, item in enumerate(parsed):
        if not isinstance(item, dict):
            logger.warning(f"Skipping non-object scenario at index {index}: {str(item)[:60]}")
            continue
        scenarios.append(to_scenario(item, index))
    return scenarios


def parse_generated_scenarios(raw: str) -> list[BenchScenario] | None:
    """Parse a raw model reply into scenarios.

    Tries the cleanup pipeline first, then truncation salvage on the raw text.

    Returns:
        Parsed scenarios, or None if neither strategy worked.
    """
    try:
        return to_scenarios(json.loads(clean_json_text(raw)))
    except (json.JSONDecodeError, ValueError) as e:
        logger.debug(f"Cleaned scenario JSON did not parse: {e}")

    salvaged = salvage_truncated_array(raw)
    if salvaged is None:
        return None

    scenarios = to_scenarios(salvaged)
    logger.warning(
        f"Scenario output was truncated; salvaged {len(scenarios)} complete scenario(s)"
    )
    return scenarios


async def generate_scenarios(
    tools: list[ToolDefinition],
    adapter: LLMAdapter,
) -> list[BenchScenario]:
    """Generate a scenario corpus from the tool catalog.

    Args:
        tools: Tool catalog to write scenarios for.
        adapter: Model adapter used for generation.

    Returns:
        Generated scenarios.

    Raises:
        ScenarioParseError: If neither the first reply nor the stricter retry
            could be parsed.
        AdapterCallError: If a generation call fails.
    """
    prompt = build_generation_prompt(tools)
    logger.info(f"Generating scenarios for {len(tools)} tool(s)")

    response = await adapter.chat(
        system=GENERATOR_SYSTEM_PROMPT,
        messages=[Message(role=MessageRole.USER, content=prompt)],
        tools=[],
        temperature=0,
        max_tokens=GENERATION_MAX_TOKENS,
    )
    scenarios = parse_generated_scenarios(response.content)
    if scenarios is not None:
        logger.info(f"Generated {len(scenarios)} scenario(s)")
        return scenarios

    logger.warning("Scenario generation returned unparseable JSON, retrying with stricter prompt")

    retry = await adapter.chat(
        system=STRICT_GENERATOR_SYSTEM_PROMPT,
        messages=[Message(role=MessageRole.USER, content=prompt + RETRY_NOTE)],
        tools=[],
        temperature=0,
        max_tokens=GENERATION_MAX_TOKENS,
    )
    scenarios = parse_generated_scenarios(retry.content)
    if scenarios is None:
        raise ScenarioParseError(
            "Could not parse generated scenarios after retry", raw_response=retry.content
        )

    logger.info(f"Generated {len(scenarios)} scenario(s) on retry")
    return scenarios
