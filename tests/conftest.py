"""Pytest configuration and fixtures."""

import asyncio
from collections.abc import Callable

import pytest

from dxbench.consts import ERROR_RECOVERY_SYSTEM_PROMPT
from dxbench.llm.base_adapter import LLMAdapter, price_per_million
from dxbench.models.model_bench import BenchConfig
from dxbench.models.model_scenario import BenchScenario, Difficulty
from dxbench.models.model_tool import (
    LLMResponse,
    Message,
    ToolCall,
    ToolDefinition,
    ToolInputSchema,
)

Handler = Callable[[str, list[Message], list[ToolDefinition]], LLMResponse]


class StubAdapter(LLMAdapter):
    """Deterministic in-memory adapter.

    Replies come from a handler(system, messages, tools). Every call is
    recorded, and in-flight calls are counted so tests can check concurrency.
    """

    def __init__(
        self,
        handler: Handler,
        pricing: tuple[float, float] = (0.0, 0.0),
        delay: float | Callable[[list[Message]], float] = 0.0,
    ):
        self.handler = handler
        self.pricing = pricing
        self.delay = delay
        self.calls: list[dict] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    @property
    def provider_name(self) -> str:
        return "stub"

    async def chat(self, system, messages, tools, temperature, max_tokens=None) -> LLMResponse:
        self.calls.append(
            {
                "system": system,
                "messages": list(messages),
                "tools": list(tools),
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delay(messages) if callable(self.delay) else self.delay
            # Always yield so workers interleave
            await asyncio.sleep(delay)
            return self.handler(system, messages, tools)
        finally:
            self.in_flight -= 1

    def estimate_cost(self, input_tokens: int, output_tokens: int) -> float:
        return price_per_million(input_tokens, output_tokens, self.pricing)

    async def aclose(self) -> None:
        self.closed = True


def reply(content: str = "", *calls: tuple[str, dict]) -> LLMResponse:
    """Build a response with fixed token usage."""
    return LLMResponse(
        content=content,
        tool_calls=[ToolCall(name=name, arguments=args) for name, args in calls],
        input_tokens=100,
        output_tokens=20,
    )


@pytest.fixture
def weather_tools() -> list[ToolDefinition]:
    """Two-tool weather catalog."""
    return [
        ToolDefinition(
            name="get_weather",
            description="Get the current weather for a city",
            input_schema=ToolInputSchema(
                properties={"city": {"type": "string", "description": "City name"}},
                required=["city"],
            ),
        ),
        ToolDefinition(
            name="get_forecast",
            description="Get a 5-day forecast for a city",
            input_schema=ToolInputSchema(
                properties={
                    "city": {"type": "string", "description": "City name"},
                    "days": {"type": "integer", "description": "Number of days"},
                },
                required=["city"],
            ),
        ),
    ]


@pytest.fixture
def weather_scenarios() -> list[BenchScenario]:
    """Five scenarios: 2 positive, 1 ambiguous, 1 negative, 1 multi-tool."""
    return [
        BenchScenario(
            id="weather-tokyo",
            task="What's the weather in Tokyo right now?",
            expected_tool="get_weather",
            expected_params={"city": "Tokyo"},
            tags=["positive"],
            difficulty=Difficulty.EASY,
        ),
        BenchScenario(
            id="forecast-paris",
            task="Give me the forecast for Paris",
            expected_tool="get_forecast",
            expected_params={"city": "Paris"},
            tags=["positive"],
            difficulty=Difficulty.EASY,
        ),
        BenchScenario(
            id="london-ambiguous",
            task="What's it like in London?",
            expected_tool="get_weather",
            tags=["ambiguous"],
        ),
        BenchScenario(
            id="book-flight",
            task="Book me a flight to Berlin",
            expected_tool=None,
            tags=["negative"],
            difficulty=Difficulty.HARD,
        ),
        BenchScenario(
            id="compare-cities",
            task="Compare the weather in Tokyo and Osaka",
            expected_tool="get_weather",
            tags=["multi-tool"],
        ),
    ]


WEATHER_REPLIES = {
    "What's the weather in Tokyo right now?": reply("", ("get_weather", {"city": "Tokyo"})),
    "Give me the forecast for Paris": reply("", ("get_forecast", {"city": "paris"})),
    "What's it like in London?": reply("Do you mean the current weather or the forecast?"),
    "Book me a flight to Berlin": reply("I can't book flights with the tools I have."),
    "Compare the weather in Tokyo and Osaka": reply(
        "",
        ("get_weather", {"city": "Tokyo"}),
        ("get_weather", {"city": "Osaka"}),
    ),
}


def weather_handler(system: str, messages: list[Message], tools: list[ToolDefinition]) -> LLMResponse:
    """Scripted model for the weather scenarios.

    Scenario tasks get fixed replies; simulated tool errors get an apology
    plus a retry.
    """
    if system == ERROR_RECOVERY_SYSTEM_PROMPT:
        return reply("Sorry, that failed. Let me try again.", ("get_weather", {"city": "Tokyo"}))
    return WEATHER_REPLIES[messages[0].content]


@pytest.fixture
def weather_adapter() -> StubAdapter:
    """Stub adapter answering the weather scenarios."""
    return StubAdapter(weather_handler)


@pytest.fixture
def bench_config() -> BenchConfig:
    """Single-run config with error recovery enabled."""
    return BenchConfig(provider="anthropic", model="stub-model", runs=1, concurrency=2)
