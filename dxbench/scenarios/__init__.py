"""Scenario corpus production (file loading and model-driven generation)."""

from dxbench.scenarios.generator import (
    build_generation_prompt,
    generate_scenarios,
    parse_generated_scenarios,
)
from dxbench.scenarios.json_repair import (
    clean_json_text,
    extract_json_span,
    salvage_truncated_array,
    strip_code_fence,
    strip_comments,
    strip_trailing_commas,
)
from dxbench.scenarios.loader import load_scenarios
from dxbench.scenarios.producer import produce_scenarios

__all__ = [
    # Entry point
    "produce_scenarios",
    # Loading
    "load_scenarios",
    # Generation
    "build_generation_prompt",
    "generate_scenarios",
    "parse_generated_scenarios",
    # JSON repair stages
    "strip_code_fence",
    "extract_json_span",
    "strip_comments",
    "strip_trailing_commas",
    "clean_json_text",
    "salvage_truncated_array",
]
