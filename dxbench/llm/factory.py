"""Adapter selection by provider."""

import logging

from dxbench.llm.anthropic import AnthropicAdapter
from dxbench.llm.base_adapter import LLMAdapter
from dxbench.llm.ollama import OllamaAdapter
from dxbench.llm.openai import OpenAIAdapter
from dxbench.models.model_bench import ProviderType

logger = logging.getLogger(__name__)


def create_adapter(provider: ProviderType | str, model: str) -> LLMAdapter:
    """Create the adapter for a provider.

    This is the only place that branches on provider identity; the rest of the
    engine sees the LLMAdapter contract.

    Args:
        provider: Provider name or ProviderType.
        model: Model identifier passed to the provider.

    Returns:
        A ready-to-use adapter.

    Raises:
        ValueError: If the provider is not supported.
    """
    try:
        provider_type = provider if isinstance(provider, ProviderType) else ProviderType(provider)
    except ValueError:
        supported = ", ".join(p.value for p in ProviderType)
        raise ValueError(f'Unknown LLM provider: "{provider}". Supported: {supported}') from None

    logger.info(f"Using {provider_type.value} adapter with model {model}")

    if provider_type == ProviderType.ANTHROPIC:
        return AnthropicAdapter(model)
    if provider_type == ProviderType.OPENAI:
        return OpenAIAdapter(model)
    return OllamaAdapter(model)
