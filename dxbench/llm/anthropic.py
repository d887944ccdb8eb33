"""Anthropic Messages API adapter."""

import os
from typing import Any

import httpx

from dxbench.consts import (
    ADAPTER_DEFAULT_MAX_TOKENS,
    ANTHROPIC_API_URL,
    ANTHROPIC_API_VERSION,
    ANTHROPIC_FALLBACK_PRICING,
    ANTHROPIC_PRICING,
)
from dxbench.llm.backoff import Backoff
from dxbench.llm.base_adapter import BaseHTTPAdapter, price_per_million
from dxbench.models.model_tool import LLMResponse, Message, ToolCall, ToolDefinition


def convert_tools(tools: list[ToolDefinition]) -> list[dict[str, Any]]:
    """Convert catalog tools to Anthropic tool definitions."""
    converted = []
    for tool in tools:
        schema = tool.input_schema
        input_schema: dict[str, Any] = {
            "type": "object",
            "properties": schema.properties if schema else {},
        }
        if schema and schema.required:
            input_schema["required"] = schema.required
        converted.append(
            {
                "name": tool.name,
                "description": tool.description or "",
                "input_schema": input_schema,
            }
        )
    return converted


def parse_response(data: dict[str, Any]) -> LLMResponse:
    """Normalize a Messages API body: text blocks joined, tool_use blocks in order."""
    content = ""
    tool_calls: list[ToolCall] = []
    for block in data.get("content", []) or []:
        if block.get("type") == "text":
            content += block.get("text", "")
        elif block.get("type") == "tool_use":
            arguments = block.get("input")
            tool_calls.append(
                ToolCall(
                    name=block.get("name", ""),
                    arguments=arguments if isinstance(arguments, dict) else {},
                )
            )

    usage = data.get("usage", {}) or {}
    return LLMResponse(
        content=content,
        tool_calls=tool_calls,
        input_tokens=usage.get("input_tokens", 0),
        output_tokens=usage.get("output_tokens", 0),
    )


class AnthropicAdapter(BaseHTTPAdapter):
    """Adapter for Claude models via the Messages API."""

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        base_url: str = ANTHROPIC_API_URL,
        client: httpx.AsyncClient | None = None,
        backoff: Backoff | None = None,
    ):
        """Initialize Anthropic adapter.

        Args:
            model: Claude model identifier.
            api_key: API key. Defaults to the ANTHROPIC_API_KEY env var.
            base_url: API base URL.
            client: Optional pre-built HTTP client.
            backoff: Optional retry delay policy.
        """
        key = api_key or os.getenv("ANTHROPIC_API_KEY", "")
        super().__init__(
            model=model,
            base_url=base_url,
            headers={"x-api-key": key, "anthropic-version": ANTHROPIC_API_VERSION},
            client=client,
            backoff=backoff,
        )

    @property
    def provider_name(self) -> str:
        """Return provider identifier."""
        return "anthropic"

    async def chat(
        self,
        system: str,
        messages: list[Message],
        tools: list[ToolDefinition],
        temperature: float,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Send a Messages API request."""
        payload: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens or ADAPTER_DEFAULT_MAX_TOKENS,
            "system": system,
            "messages": [{"role": m.role.value, "content": m.content} for m in messages],
            "temperature": temperature,
        }
        if tools:
            payload["tools"] = convert_tools(tools)

        data = await self._post("/messages", payload)
        return self._decode(parse_response, data)

    def estimate_cost(self, input_tokens: int, output_tokens: int) -> float:
        """Price tokens by model, falling back to Sonnet pricing."""
        pricing = ANTHROPIC_PRICING.get(self.model, ANTHROPIC_FALLBACK_PRICING)
        return price_per_million(input_tokens, output_tokens, pricing)
