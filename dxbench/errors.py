"""Exception hierarchy for the benchmark engine.

Only conditions that make a run impossible are exceptions. A model picking the
wrong tool or dropping a parameter is a scored outcome, never raised.
"""

from dxbench.consts import RAW_RESPONSE_PREVIEW_CHARS


class DxBenchError(Exception):
    """Base exception for dxbench errors."""


class ConfigError(DxBenchError):
    """Configuration file could not be read or failed validation."""


class ScenarioLoadError(DxBenchError):
    """Scenario file is missing, is not valid YAML, or fails validation."""


class ScenarioParseError(DxBenchError):
    """Generated scenarios could not be parsed after every recovery attempt."""

    def __init__(self, message: str, raw_response: str = ""):
        self.raw_response = raw_response[:RAW_RESPONSE_PREVIEW_CHARS]
        super().__init__(f"{message}\nRaw response (first {RAW_RESPONSE_PREVIEW_CHARS} chars):\n{self.raw_response}")


class AdapterCallError(DxBenchError):
    """A model adapter call failed (transport error or non-retryable HTTP status)."""

    def __init__(self, message: str, provider: str = "", status_code: int | None = None):
        self.provider = provider
        self.status_code = status_code
        super().__init__(message)
