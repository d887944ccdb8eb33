"""Tests for the evaluation driver and cost estimation."""

import asyncio

import pytest
from conftest import StubAdapter, reply

from dxbench.consts import BENCH_SYSTEM_PROMPT
from dxbench.errors import AdapterCallError
from dxbench.models.model_bench import BenchConfig
from dxbench.models.model_scenario import BenchScenario
from dxbench.runner.bench_runner import BenchRunner, majority_vote
from dxbench.runner.cost import count_calls, estimate_cost


def scenarios_for(n: int) -> list[BenchScenario]:
    return [BenchScenario(id=f"s{i}", task=f"task {i}", expected_tool="get_weather") for i in range(n)]


def echo_handler(system, messages, tools):
    """Reply with the task text so responses can be matched to scenarios."""
    return reply(messages[0].content, ("get_weather", {"task": messages[0].content}))


class TestMajorityVote:
    """Tests for majority_vote."""

    def test_most_common_first_tool(self):
        a1 = reply("first a", ("A", {}))
        b = reply("b", ("B", {}))
        a2 = reply("second a", ("A", {}))
        assert majority_vote([a1, b, a2]) is a1

    def test_no_tool_counts_as_a_value(self):
        none1 = reply("no")
        a = reply("", ("A", {}))
        none2 = reply("still no")
        assert majority_vote([a, none1, none2]) is none1

    def test_tie_goes_to_first_seen(self):
        b = reply("", ("B", {}))
        a = reply("", ("A", {}))
        assert majority_vote([b, a]) is b

    def test_single_response(self):
        only = reply("x")
        assert majority_vote([only]) is only

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            majority_vote([])


class TestBenchRunner:
    """Tests for BenchRunner."""

    @pytest.mark.asyncio
    async def test_calls_per_scenario_and_prompt(self, weather_tools):
        adapter = StubAdapter(echo_handler)
        config = BenchConfig(runs=3, temperature=0.4, concurrency=2)

        result = await BenchRunner(adapter, config).run(weather_tools, scenarios_for(2))

        assert len(adapter.calls) == 6
        assert result.total_calls == 6
        call = adapter.calls[0]
        assert call["system"] == BENCH_SYSTEM_PROMPT
        assert call["temperature"] == 0.4
        assert call["tools"] == weather_tools
        assert len(call["messages"]) == 1
        assert call["messages"][0].role.value == "user"
        assert result.usage.input_tokens == 600
        assert result.usage.output_tokens == 120

    @pytest.mark.asyncio
    async def test_order_preserved_under_out_of_order_completion(self, weather_tools):
        # Earlier scenarios take longer, so they finish last
        def delay(messages):
            index = int(messages[0].content.split()[-1])
            return 0.05 * (5 - index)

        adapter = StubAdapter(echo_handler, delay=delay)
        config = BenchConfig(runs=1, concurrency=5)

        result = await BenchRunner(adapter, config).run(weather_tools, scenarios_for(5))

        assert [r.content for r in result.responses] == [f"task {i}" for i in range(5)]

    @pytest.mark.asyncio
    async def test_concurrency_cap(self, weather_tools):
        adapter = StubAdapter(echo_handler, delay=0.01)
        config = BenchConfig(runs=2, concurrency=3)

        result = await BenchRunner(adapter, config).run(weather_tools, scenarios_for(10))

        assert len(result.responses) == 10
        assert adapter.max_in_flight <= 3
        assert adapter.max_in_flight > 1

    @pytest.mark.asyncio
    async def test_pool_smaller_than_concurrency(self, weather_tools):
        adapter = StubAdapter(echo_handler, delay=0.01)
        config = BenchConfig(runs=1, concurrency=10)

        await BenchRunner(adapter, config).run(weather_tools, scenarios_for(2))

        assert adapter.max_in_flight <= 2

    @pytest.mark.asyncio
    async def test_progress_reaches_total(self, weather_tools):
        adapter = StubAdapter(echo_handler)
        config = BenchConfig(runs=3, concurrency=2)
        progress: list[tuple[int, int]] = []

        await BenchRunner(adapter, config).run(
            weather_tools, scenarios_for(4), lambda done, total: progress.append((done, total))
        )

        assert progress[-1] == (12, 12)
        assert [done for done, _ in progress] == list(range(1, 13))

    @pytest.mark.asyncio
    async def test_majority_vote_per_scenario(self, weather_tools):
        replies = iter([reply("", ("A", {})), reply("", ("B", {})), reply("", ("B", {}))])
        adapter = StubAdapter(lambda system, messages, tools: next(replies))
        config = BenchConfig(runs=3, concurrency=1)

        result = await BenchRunner(adapter, config).run(weather_tools, scenarios_for(1))

        assert result.responses[0].first_tool_name == "B"

    @pytest.mark.asyncio
    async def test_adapter_failure_aborts_run(self, weather_tools):
        def handler(system, messages, tools):
            if messages[0].content == "task 2":
                raise AdapterCallError("rate limited", provider="stub", status_code=429)
            return echo_handler(system, messages, tools)

        adapter = StubAdapter(handler)
        config = BenchConfig(runs=1, concurrency=2)

        with pytest.raises(AdapterCallError):
            await BenchRunner(adapter, config).run(weather_tools, scenarios_for(5))

    @pytest.mark.asyncio
    async def test_failure_leaves_no_pending_workers(self, weather_tools):
        def handler(system, messages, tools):
            if messages[0].content == "task 0":
                raise AdapterCallError("bad request", provider="stub", status_code=400)
            return echo_handler(system, messages, tools)

        # task 0 fails at once while the other workers are still waiting
        adapter = StubAdapter(handler, delay=lambda messages: 0.0 if messages[0].content == "task 0" else 1.0)
        config = BenchConfig(runs=1, concurrency=3)

        with pytest.raises(AdapterCallError):
            await BenchRunner(adapter, config).run(weather_tools, scenarios_for(3))

        assert asyncio.all_tasks() == {asyncio.current_task()}
        assert adapter.in_flight == 0

    @pytest.mark.asyncio
    async def test_empty_corpus(self, weather_tools):
        adapter = StubAdapter(echo_handler)
        result = await BenchRunner(adapter, BenchConfig()).run(weather_tools, [])
        assert result.responses == []
        assert adapter.calls == []


class TestEstimateCost:
    """Tests for the pre-flight cost estimate."""

    def test_call_count_with_error_recovery(self):
        scenarios = scenarios_for(3) + [BenchScenario(id="neg", task="t", expected_tool=None)]
        config = BenchConfig(runs=2)
        # 4*2 eval calls + 3*2 recovery calls
        assert count_calls(scenarios, config) == 14

    def test_call_count_without_error_recovery(self):
        scenarios = scenarios_for(3) + [BenchScenario(id="neg", task="t", expected_tool=None)]
        config = BenchConfig(runs=2, skip_error_recovery=True)
        assert count_calls(scenarios, config) == 8

    def test_estimate(self):
        adapter = StubAdapter(echo_handler, pricing=(3.0, 15.0))
        scenarios = scenarios_for(5)
        config = BenchConfig(runs=3, skip_error_recovery=True)

        estimate = estimate_cost(scenarios, config, adapter)

        assert estimate.scenario_count == 5
        assert estimate.runs == 3
        assert estimate.total_calls == 15
        # 15 * (800 * 3 + 200 * 15) / 1M
        assert estimate.estimated_cost == pytest.approx(0.081)
        assert estimate.scenarios == scenarios
        assert adapter.calls == []

    def test_free_provider(self):
        adapter = StubAdapter(echo_handler)
        estimate = estimate_cost(scenarios_for(2), BenchConfig(runs=1), adapter)
        assert estimate.estimated_cost == 0.0
