"""Model adapter contract and shared HTTP plumbing.

The benchmark engine only ever talks to ``LLMAdapter``. Provider specifics
(authentication, wire format, pricing) stay inside the concrete subclasses.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import httpx

from dxbench.consts import ADAPTER_MAX_RETRIES, ADAPTER_TIMEOUT_SECONDS
from dxbench.errors import AdapterCallError
from dxbench.llm.backoff import Backoff
from dxbench.models.model_tool import LLMResponse, Message, ToolDefinition

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504, 529)


class LLMAdapter(ABC):
    """Abstract base class for model providers."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider identifier (e.g., 'anthropic', 'openai')."""
        ...

    @abstractmethod
    async def chat(
        self,
        system: str,
        messages: list[Message],
        tools: list[ToolDefinition],
        temperature: float,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Send one chat request and return the normalized response.

        Args:
            system: System prompt.
            messages: Conversation turns, oldest first.
            tools: Tool catalog offered to the model (may be empty).
            temperature: Sampling temperature.
            max_tokens: Optional cap on output tokens.

        Returns:
            LLMResponse with text content, ordered tool calls and token usage.

        Raises:
            AdapterCallError: If the provider call fails.
        """
        ...

    @abstractmethod
    def estimate_cost(self, input_tokens: int, output_tokens: int) -> float:
        """Return the USD cost of the given token volume."""
        ...

    async def aclose(self) -> None:
        """Release any held resources."""
        return None


def price_per_million(
    input_tokens: int,
    output_tokens: int,
    pricing: tuple[float, float],
) -> float:
    """Apply a (input, output) per-million-token price pair."""
    input_rate, output_rate = pricing
    return (input_tokens * input_rate + output_tokens * output_rate) / 1_000_000


class BaseHTTPAdapter(LLMAdapter):
    """Adapter base for providers reached over a JSON HTTP API.

    Resilience:
    - Exponential backoff with jitter on 429 and 5xx responses
    - Honors Retry-After when the provider sends it
    - Everything else (4xx, transport errors, exhausted retries) raises
      AdapterCallError
    """

    def __init__(
        self,
        model: str,
        base_url: str,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
        max_retries: int = ADAPTER_MAX_RETRIES,
        backoff: Backoff | None = None,
    ):
        """Initialize HTTP adapter.

        Args:
            model: Provider model identifier.
            base_url: API base URL.
            headers: Extra headers (auth, versioning) for every request.
            client: Pre-built client, mainly for tests. Created lazily if None.
            max_retries: Retries on retryable statuses before giving up.
            backoff: Delay policy between retries.
        """
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.headers = headers or {}
        self.max_retries = max_retries
        self._backoff = backoff or Backoff()
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(ADAPTER_TIMEOUT_SECONDS),
                headers={"Accept": "application/json"},
            )
        return self._client

    async def _post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON payload, retrying on rate limits and server errors.

        Args:
            endpoint: API endpoint relative to the base URL.
            payload: JSON body.

        Returns:
            Decoded JSON response.

        Raises:
            AdapterCallError: On non-retryable status, transport failure,
                undecodable body or exhausted retries.
        """
        client = self._get_client()
        attempt = 0

        while True:
            try:
                response = await client.post(endpoint, json=payload, headers=self.headers)
            except httpx.HTTPError as e:
                raise AdapterCallError(
                    f"{self.provider_name} request failed: {e}", provider=self.provider_name
                ) from e

            if response.status_code in RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                delay = self._backoff.delay(attempt, _retry_after(response))
                attempt += 1
                logger.warning(
                    f"{self.provider_name} returned {response.status_code}, "
                    f"retry {attempt}/{self.max_retries} in {delay:.1f}s"
                )
                await asyncio.sleep(delay)
                continue

            if response.is_error:
                raise AdapterCallError(
                    f"{self.provider_name} returned HTTP {response.status_code}: "
                    f"{response.text[:300]}",
                    provider=self.provider_name,
                    status_code=response.status_code,
                )

            try:
                return response.json()
            except ValueError as e:
                raise AdapterCallError(
                    f"{self.provider_name} returned a non-JSON body",
                    provider=self.provider_name,
                    status_code=response.status_code,
                ) from e

    def _decode(
        self,
        parser: Callable[[dict[str, Any]], LLMResponse],
        data: Any,
    ) -> LLMResponse:
        """Run a provider body parser, turning any shape mismatch into AdapterCallError.

        Args:
            parser: Provider-specific body to LLMResponse conversion.
            data: Decoded JSON body.

        Raises:
            AdapterCallError: If the body does not have the expected shape
                (wrong types, null usage counts, a non-object body).
        """
        try:
            return parser(data)
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
            raise AdapterCallError(
                f"{self.provider_name} returned a malformed body: {e}",
                provider=self.provider_name,
            ) from e

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()


def _retry_after(response: httpx.Response) -> float | None:
    """Parse a numeric Retry-After header, if any."""
    value = response.headers.get("retry-after")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None
