"""Drives the model through every scenario with bounded concurrency and majority voting."""

import asyncio
import logging
import time
from collections import Counter
from collections.abc import Callable

from dxbench.consts import BENCH_SYSTEM_PROMPT
from dxbench.llm.base_adapter import LLMAdapter
from dxbench.models.model_bench import BenchConfig
from dxbench.models.model_runner import RunResult
from dxbench.models.model_scenario import BenchScenario
from dxbench.models.model_tool import LLMResponse, Message, MessageRole, TokenUsage, ToolDefinition

logger = logging.getLogger(__name__)


def majority_vote(responses: list[LLMResponse]) -> LLMResponse:
    """Pick the representative response by the most common first tool name.

    "No tool call" counts as its own value. Ties go to the value seen first,
    and the representative is the first response carrying the winning value.

    Args:
        responses: Responses from repeated runs of one scenario

    Returns:
        The representative response

    Raises:
        ValueError: If responses is empty
    """
    if not responses:
        raise ValueError("majority_vote needs at least one response")

    # Counter preserves first-seen order, and max() keeps the first maximum
    counts = Counter(r.first_tool_name for r in responses)
    winner = max(counts, key=lambda name: counts[name])
    return next(r for r in responses if r.first_tool_name == winner)


class BenchRunner:
    """Runs each scenario `runs` times and keeps one representative response each."""

    def __init__(self, adapter: LLMAdapter, config: BenchConfig):
        """Initialize BenchRunner.

        Args:
            adapter: Model adapter used for every call
            config: Run settings (runs, temperature, concurrency)
        """
        self.adapter = adapter
        self.config = config

    async def _run_scenario(
        self,
        scenario: BenchScenario,
        tools: list[ToolDefinition],
        usage: TokenUsage,
        on_call_done: Callable[[], None],
    ) -> LLMResponse:
        """Run one scenario sequentially `runs` times and vote."""
        runs: list[LLMResponse] = []
        for _ in range(self.config.runs):
            response = await self.adapter.chat(
                system=BENCH_SYSTEM_PROMPT,
                messages=[Message(role=MessageRole.USER, content=scenario.task)],
                tools=tools,
                temperature=self.config.temperature,
            )
            runs.append(response)
            usage.add(response)
            on_call_done()

        return majority_vote(runs)

    async def run(
        self,
        tools: list[ToolDefinition],
        scenarios: list[BenchScenario],
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> RunResult:
        """Evaluate all scenarios with a pool of workers.

        Workers claim the next scenario index from a shared cursor, so at most
        `concurrency` scenarios are in flight. Output order always matches
        scenario order. Any adapter failure aborts the whole run; repeating a
        call would change the sample behind a scenario's vote.

        Args:
            tools: Tool catalog offered on every call
            scenarios: Scenarios to evaluate
            progress_callback: Optional callback(completed_calls, total_calls)

        Returns:
            RunResult with index-aligned representative responses and token usage

        Raises:
            AdapterCallError: If any model call fails
        """
        start_time = time.time()
        total_calls = len(scenarios) * self.config.runs
        usage = TokenUsage()
        responses: list[LLMResponse | None] = [None] * len(scenarios)
        cursor = 0
        completed = 0

        def on_call_done() -> None:
            nonlocal completed
            completed += 1
            if progress_callback:
                progress_callback(completed, total_calls)

        async def worker() -> None:
            nonlocal cursor
            while cursor < len(scenarios):
                index = cursor
                cursor += 1
                responses[index] = await self._run_scenario(
                    scenarios[index], tools, usage, on_call_done
                )

        pool_size = min(self.config.concurrency, len(scenarios))
        logger.info(
            f"Running {len(scenarios)} scenario(s) x {self.config.runs} run(s) "
            f"with {pool_size} worker(s)"
        )

        tasks = [asyncio.create_task(worker()) for _ in range(pool_size)]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            # Collect sibling outcomes so no task exception goes unretrieved
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        duration = time.time() - start_time
        logger.info(f"Completed {completed} call(s) in {duration:.1f}s")

        return RunResult(
            responses=[r for r in responses if r is not None],
            usage=usage,
            total_calls=completed,
            duration_seconds=duration,
        )
