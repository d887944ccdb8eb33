"""OpenAI Chat Completions adapter."""

import json
import logging
import os
from typing import Any

import httpx

from dxbench.consts import OPENAI_API_URL, OPENAI_FALLBACK_PRICING, OPENAI_PRICING
from dxbench.llm.backoff import Backoff
from dxbench.llm.base_adapter import BaseHTTPAdapter, price_per_million
from dxbench.models.model_tool import LLMResponse, Message, ToolCall, ToolDefinition

logger = logging.getLogger(__name__)


def convert_tools(tools: list[ToolDefinition]) -> list[dict[str, Any]]:
    """Convert catalog tools to OpenAI function tools."""
    converted = []
    for tool in tools:
        schema = tool.input_schema
        parameters: dict[str, Any] = {
            "type": "object",
            "properties": schema.properties if schema else {},
        }
        if schema and schema.required:
            parameters["required"] = schema.required
        converted.append(
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description or "",
                    "parameters": parameters,
                },
            }
        )
    return converted


def _parse_arguments(raw: Any, tool_name: str) -> dict[str, Any]:
    """Decode the JSON-encoded argument string of a function call."""
    if isinstance(raw, dict):
        return raw
    if not raw:
        return {}
    try:
        decoded = json.loads(raw)
    except (TypeError, json.JSONDecodeError):
        logger.warning(f"Undecodable arguments for {tool_name}: {str(raw)[:80]}")
        return {}
    return decoded if isinstance(decoded, dict) else {}


def parse_response(data: dict[str, Any]) -> LLMResponse:
    """Normalize a Chat Completions body from its first choice."""
    choices = data.get("choices") or [{}]
    message = choices[0].get("message") or {}
    tool_calls = []
    for call in message.get("tool_calls") or []:
        function = call.get("function") or {}
        name = function.get("name", "")
        tool_calls.append(
            ToolCall(name=name, arguments=_parse_arguments(function.get("arguments"), name))
        )

    usage = data.get("usage") or {}
    return LLMResponse(
        content=message.get("content") or "",
        tool_calls=tool_calls,
        input_tokens=usage.get("prompt_tokens", 0),
        output_tokens=usage.get("completion_tokens", 0),
    )


class OpenAIAdapter(BaseHTTPAdapter):
    """Adapter for OpenAI chat models and OpenAI-compatible servers."""

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        base_url: str = OPENAI_API_URL,
        client: httpx.AsyncClient | None = None,
        backoff: Backoff | None = None,
    ):
        """Initialize OpenAI adapter.

        Args:
            model: Model identifier.
            api_key: API key. Defaults to the OPENAI_API_KEY env var.
            base_url: API base URL (override for compatible servers).
            client: Optional pre-built HTTP client.
            backoff: Optional retry delay policy.
        """
        key = api_key or os.getenv("OPENAI_API_KEY", "not-configured")
        super().__init__(
            model=model,
            base_url=base_url,
            headers={"Authorization": f"Bearer {key}"},
            client=client,
            backoff=backoff,
        )

    @property
    def provider_name(self) -> str:
        """Return provider identifier."""
        return "openai"

    async def chat(
        self,
        system: str,
        messages: list[Message],
        tools: list[ToolDefinition],
        temperature: float,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Send a Chat Completions request."""
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                *({"role": m.role.value, "content": m.content} for m in messages),
            ],
            "temperature": temperature,
        }
        if tools:
            payload["tools"] = convert_tools(tools)
        if max_tokens:
            payload["max_tokens"] = max_tokens

        data = await self._post("/chat/completions", payload)
        return self._decode(parse_response, data)

    def estimate_cost(self, input_tokens: int, output_tokens: int) -> float:
        """Price tokens by model, falling back to GPT-4o pricing."""
        pricing = OPENAI_PRICING.get(self.model, OPENAI_FALLBACK_PRICING)
        return price_per_million(input_tokens, output_tokens, pricing)
