"""Tool catalog and model exchange models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dxbench.models.common import CamelModel


class ToolInputSchema(BaseModel):
    """JSON-schema-shaped parameter contract of a tool."""

    model_config = ConfigDict(extra="allow")

    type: str = Field(default="object", description="Schema type, always 'object' for tools")
    properties: dict[str, Any] = Field(default_factory=dict, description="Parameter name -> schema")
    required: list[str] = Field(default_factory=list, description="Required parameter names")


class ToolDefinition(CamelModel):
    """A named operation the model may invoke.

    Supplied by an external discovery mechanism and never modified here.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Unique tool identifier")
    description: str | None = Field(default=None, description="Human-readable purpose")
    input_schema: ToolInputSchema | None = Field(default=None, description="Parameter contract")


class MessageRole(str, Enum):
    """Conversation roles sent to the model (system prompt is passed separately)."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single conversation turn."""

    role: MessageRole
    content: str


class ToolCall(BaseModel):
    """A tool invocation made by the model."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class LLMResponse(CamelModel):
    """One model reply: free text plus ordered tool calls and token usage."""

    content: str = ""
    tool_calls: list[ToolCall] = Field(default_factory=list)
    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)

    @property
    def first_tool_name(self) -> str | None:
        """Name of the first tool call, or None when the model called nothing."""
        return self.tool_calls[0].name if self.tool_calls else None


class TokenUsage(BaseModel):
    """Running token totals for a benchmark run.

    Only mutated from the event loop thread, between awaits.
    """

    input_tokens: int = 0
    output_tokens: int = 0

    def add(self, response: LLMResponse) -> None:
        """Accumulate the usage reported by a single response."""
        self.input_tokens += response.input_tokens
        self.output_tokens += response.output_tokens

    @property
    def total(self) -> int:
        return self.input_tokens + self.output_tokens
