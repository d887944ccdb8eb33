"""Ollama adapter over its OpenAI-compatible endpoint."""

import os

import httpx

from dxbench.consts import OLLAMA_API_URL
from dxbench.llm.backoff import Backoff
from dxbench.llm.openai import OpenAIAdapter


class OllamaAdapter(OpenAIAdapter):
    """Local models served by Ollama. Same wire format as OpenAI, always free."""

    def __init__(
        self,
        model: str,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        backoff: Backoff | None = None,
    ):
        # Ollama ignores the key, but the endpoint expects an Authorization header
        super().__init__(
            model=model,
            api_key="ollama",
            base_url=base_url or os.getenv("OLLAMA_BASE_URL", OLLAMA_API_URL),
            client=client,
            backoff=backoff,
        )

    @property
    def provider_name(self) -> str:
        """Return provider identifier."""
        return "ollama"

    def estimate_cost(self, input_tokens: int, output_tokens: int) -> float:
        """Local models cost nothing."""
        return 0.0
