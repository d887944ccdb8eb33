"""Dimension evaluators and score aggregation."""

from dxbench.evaluators.ambiguity import AmbiguityHandlingEvaluator
from dxbench.evaluators.base import BaseEvaluator, round_half_up
from dxbench.evaluators.composite import calculate_dx_score, extract_top_issues, score_to_rating
from dxbench.evaluators.error_recovery import ErrorRecoveryEvaluator
from dxbench.evaluators.multi_tool import MultiToolEvaluator
from dxbench.evaluators.parameters import ParameterAccuracyEvaluator
from dxbench.evaluators.registry import EvaluatorRegistry
from dxbench.evaluators.tool_selection import ToolSelectionEvaluator

__all__ = [
    "AmbiguityHandlingEvaluator",
    "BaseEvaluator",
    "ErrorRecoveryEvaluator",
    "EvaluatorRegistry",
    "MultiToolEvaluator",
    "ParameterAccuracyEvaluator",
    "ToolSelectionEvaluator",
    "calculate_dx_score",
    "extract_top_issues",
    "round_half_up",
    "score_to_rating",
]
