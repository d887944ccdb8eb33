"""Model adapters.

The engine depends only on the LLMAdapter contract. Concrete providers:
- Anthropic (Messages API)
- OpenAI (Chat Completions)
- Ollama (OpenAI-compatible local server)
"""

from dxbench.llm.anthropic import AnthropicAdapter
from dxbench.llm.backoff import Backoff
from dxbench.llm.base_adapter import BaseHTTPAdapter, LLMAdapter
from dxbench.llm.factory import create_adapter
from dxbench.llm.ollama import OllamaAdapter
from dxbench.llm.openai import OpenAIAdapter

__all__ = [
    # Contract
    "LLMAdapter",
    "BaseHTTPAdapter",
    "Backoff",
    # Providers
    "AnthropicAdapter",
    "OpenAIAdapter",
    "OllamaAdapter",
    # Factory
    "create_adapter",
]
