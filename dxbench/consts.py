"""Defaults and fixed tables for the benchmark engine."""

# Bench defaults (overridable via dxbench.config.yaml or CLI flags)
DEFAULT_PROVIDER = "anthropic"
DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_SCENARIOS = "auto"  # "auto" = generate with the model, otherwise a YAML path
DEFAULT_RUNS = 3
DEFAULT_TEMPERATURE = 0.0
DEFAULT_CONCURRENCY = 5
CONFIG_FILENAME = "dxbench.config.yaml"

# Rough per-call token volume used for the pre-flight cost estimate
ESTIMATE_INPUT_TOKENS_PER_CALL = 800
ESTIMATE_OUTPUT_TOKENS_PER_CALL = 200

# Scenario generation
GENERATION_MAX_TOKENS = 8192
RAW_RESPONSE_PREVIEW_CHARS = 500  # Chars of unparseable output kept for diagnostics

BENCH_SYSTEM_PROMPT = (
    "You are an AI assistant with access to tools. When a user gives you a task, "
    "decide which tool(s) to call and with what parameters. If no tool is appropriate, "
    "explain why you cannot help. If the task is ambiguous, ask for clarification."
)

ERROR_RECOVERY_SYSTEM_PROMPT = "You are a helpful assistant that uses tools to complete tasks."

SIMULATED_TOOL_ERROR = (
    "Invalid parameters: the request could not be processed. "
    "Please check your inputs and try again."
)

# Rating bands (inclusive lower bounds)
RATING_EXCELLENT = 90
RATING_GOOD = 75
RATING_NEEDS_WORK = 50

# Dimensions at or above this score never produce a top issue
TOP_ISSUE_SCORE_CEILING = 90
MAX_TOP_ISSUES = 3

# Pass thresholds for partial-credit dimensions
PARAMETER_PASS_THRESHOLD = 0.8
MULTI_TOOL_PASS_THRESHOLD = 0.8
AMBIGUITY_EXPLANATION_MIN_CHARS = 20

# HTTP adapter behaviour
ADAPTER_TIMEOUT_SECONDS = 120.0
ADAPTER_MAX_RETRIES = 3
ADAPTER_DEFAULT_MAX_TOKENS = 1024
ANTHROPIC_API_URL = "https://api.anthropic.com/v1"
ANTHROPIC_API_VERSION = "2023-06-01"
OPENAI_API_URL = "https://api.openai.com/v1"
OLLAMA_API_URL = "http://localhost:11434/v1"

# Per-million-token pricing: model -> (input, output) in USD
ANTHROPIC_PRICING: dict[str, tuple[float, float]] = {
    "claude-sonnet-4-5-20250929": (3.0, 15.0),
    "claude-haiku-3-5-20241022": (0.8, 4.0),
    "claude-opus-4-20250514": (15.0, 75.0),
}
ANTHROPIC_FALLBACK_PRICING = (3.0, 15.0)  # Sonnet pricing for unknown models

OPENAI_PRICING: dict[str, tuple[float, float]] = {
    "gpt-4o": (2.5, 10.0),
    "gpt-4o-mini": (0.15, 0.6),
    "gpt-4-turbo": (10.0, 30.0),
    "gpt-4": (30.0, 60.0),
}
OPENAI_FALLBACK_PRICING = (2.5, 10.0)  # GPT-4o pricing for unknown models
