"""Evaluation driver and cost estimation."""

from dxbench.runner.bench_runner import BenchRunner, majority_vote
from dxbench.runner.cost import count_calls, estimate_cost

__all__ = ["BenchRunner", "count_calls", "estimate_cost", "majority_vote"]
