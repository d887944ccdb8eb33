"""Project configuration file (dxbench.config.yaml).

Example:

    server:
      name: weather-server
    bench:
      provider: openai
      model: gpt-4o-mini
      runs: 1
      concurrency: 10

Precedence when resolving a run's settings: CLI flag > config file > defaults.
API keys are never read from this file, only from the environment.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dxbench.consts import CONFIG_FILENAME
from dxbench.errors import ConfigError
from dxbench.models.model_bench import BenchConfig, ProviderType

logger = logging.getLogger(__name__)


class ServerSection(BaseModel):
    """Information about the server under test."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None


class BenchSection(BaseModel):
    """Benchmark defaults. Unset fields fall through to built-in defaults."""

    model_config = ConfigDict(extra="ignore")

    provider: ProviderType | None = None
    model: str | None = None
    scenarios: str | None = None
    runs: int | None = Field(default=None, ge=1)
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    concurrency: int | None = Field(default=None, ge=1)


class RawConfig(BaseModel):
    """Parsed config file. Unknown top-level sections are ignored."""

    model_config = ConfigDict(extra="ignore")

    server: ServerSection = Field(default_factory=ServerSection)
    bench: BenchSection = Field(default_factory=BenchSection)


def load_config(path: Path | str | None = None) -> RawConfig | None:
    """Load and validate the config file.

    Args:
        path: A config file, or a directory containing dxbench.config.yaml.
            Defaults to the current working directory.

    Returns:
        The parsed config, or None if no config file exists.

    Raises:
        ConfigError: If the file is not valid YAML or fails validation.
    """
    path = Path(path) if path is not None else Path.cwd()
    if path.is_dir():
        path = path / CONFIG_FILENAME
    if not path.exists():
        logger.debug(f"No config file at {path}")
        return None

    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    try:
        config = RawConfig.model_validate(raw or {})
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}:\n{e}") from e

    logger.info(f"Loaded config from {path}")
    return config


def resolve_bench_config(raw: RawConfig | None = None, **overrides: Any) -> BenchConfig:
    """Merge CLI overrides, the config file and defaults into a BenchConfig.

    Args:
        raw: Parsed config file, if any.
        **overrides: BenchConfig fields from the command line. None means
            "not given" and falls through to the file or default.

    Returns:
        Fully resolved BenchConfig.

    Raises:
        ConfigError: If the merged values are invalid.
    """
    values: dict[str, Any] = {}
    if raw is not None:
        values.update(raw.bench.model_dump(exclude_none=True))
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return BenchConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid bench settings:\n{e}") from e
