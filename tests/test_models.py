"""Tests for data models."""

import pytest
from pydantic import ValidationError

from dxbench.models import (
    BenchConfig,
    BenchScenario,
    Difficulty,
    DimensionWeights,
    EvalContext,
    EvalDetail,
    EvaluatorResult,
    LLMResponse,
    ProviderType,
    ScenarioTag,
    TokenUsage,
    ToolCall,
    ToolDefinition,
)


class TestToolDefinition:
    """Tests for ToolDefinition."""

    def test_accepts_camel_case_schema_key(self):
        tool = ToolDefinition.model_validate(
            {
                "name": "get_weather",
                "description": "Current weather",
                "inputSchema": {"type": "object", "properties": {"city": {"type": "string"}}},
            }
        )
        assert tool.input_schema is not None
        assert "city" in tool.input_schema.properties
        assert tool.input_schema.required == []

    def test_is_frozen(self):
        tool = ToolDefinition(name="get_weather")
        with pytest.raises(ValidationError):
            tool.name = "other"


class TestLLMResponse:
    """Tests for LLMResponse."""

    def test_first_tool_name(self):
        response = LLMResponse(
            tool_calls=[ToolCall(name="a", arguments={}), ToolCall(name="b", arguments={})]
        )
        assert response.first_tool_name == "a"

    def test_first_tool_name_none_without_calls(self):
        assert LLMResponse(content="hello").first_tool_name is None

    def test_token_usage_accumulates(self):
        usage = TokenUsage()
        usage.add(LLMResponse(input_tokens=10, output_tokens=5))
        usage.add(LLMResponse(input_tokens=3, output_tokens=2))
        assert usage.input_tokens == 13
        assert usage.output_tokens == 7
        assert usage.total == 20


class TestBenchScenario:
    """Tests for BenchScenario."""

    def test_defaults(self):
        scenario = BenchScenario(id="s1", task="do something")
        assert scenario.expected_tool is None
        assert scenario.expected_params is None
        assert scenario.tags == []
        assert scenario.difficulty == Difficulty.MEDIUM

    def test_has_tag(self):
        scenario = BenchScenario(id="s1", task="t", tags=["ambiguous", "custom-label"])
        assert scenario.has_tag(ScenarioTag.AMBIGUOUS)
        assert not scenario.has_tag(ScenarioTag.MULTI_TOOL)

    def test_serializes_camel_case(self):
        scenario = BenchScenario(id="s1", task="t", expected_tool="x", expected_params={"a": 1})
        data = scenario.model_dump(by_alias=True)
        assert data["expectedTool"] == "x"
        assert data["expectedParams"] == {"a": 1}


class TestDimensionWeights:
    """Tests for DimensionWeights."""

    def test_defaults_sum_to_one(self):
        weights = DimensionWeights()
        assert weights.tool_selection == 0.35
        assert weights.parameter_accuracy == 0.30
        assert weights.ambiguity_handling == 0.15
        assert weights.multi_tool == 0.10
        assert weights.error_recovery == 0.10

    def test_rejects_weights_not_summing_to_one(self):
        with pytest.raises(ValidationError, match="sum to 1.0"):
            DimensionWeights(tool_selection=0.5)


class TestEvaluatorResult:
    """Tests for EvaluatorResult."""

    def test_counts(self):
        result = EvaluatorResult(
            dimension="Tool Selection",
            score=50,
            weight=0.35,
            details=[
                EvalDetail(scenario_id="a", passed=True, expected="x", actual="x"),
                EvalDetail(scenario_id="b", passed=False, expected="x", actual="y", note="bad"),
            ],
        )
        assert result.passed_count == 1
        assert [d.scenario_id for d in result.failed_details] == ["b"]

    def test_score_bounds(self):
        with pytest.raises(ValidationError):
            EvaluatorResult(dimension="x", score=101, weight=0.1)


class TestBenchConfig:
    """Tests for BenchConfig."""

    def test_defaults(self):
        config = BenchConfig()
        assert config.provider == ProviderType.ANTHROPIC
        assert config.model == "claude-sonnet-4-5-20250929"
        assert config.scenarios == "auto"
        assert config.runs == 3
        assert config.temperature == 0.0
        assert config.concurrency == 5
        assert config.skip_error_recovery is False

    @pytest.mark.parametrize("field, value", [("runs", 0), ("concurrency", 0), ("temperature", 3.0)])
    def test_rejects_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            BenchConfig(**{field: value})

    def test_rejects_unknown_provider(self):
        with pytest.raises(ValidationError):
            BenchConfig(provider="mystery")


def test_eval_context_available_tools():
    context = EvalContext(tools=[ToolDefinition(name="a"), ToolDefinition(name="b")])
    assert context.available_tools == {"a", "b"}
