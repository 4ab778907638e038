"""OpenAI-compatible chat completions client (Groq, OpenRouter)."""

import logging
from typing import Optional

import httpx

from ..errors import AIProcessingError
from .base import CompletionOptions, LLMClient, LLMUsage

logger = logging.getLogger(__name__)


class OpenAICompatibleClient(LLMClient):
    """HTTP client for providers exposing ``/chat/completions``."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.groq.com/openai/v1",
        provider: str = "groq",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__()
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.provider = provider
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.provider == "openrouter":
            headers["X-Title"] = "SheetCraft"
        return headers

    def _build_payload(self, prompt: str, options: CompletionOptions) -> dict:
        payload = {
            "model": options.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": options.temperature,
            "max_tokens": options.max_tokens,
        }
        if options.json_mode:
            payload["response_format"] = {"type": "json_object"}
        return payload

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        """Create a chat completion and return the first choice's content."""
        payload = self._build_payload(prompt, options)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers=self._headers(),
                    json=payload,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"{self.provider} API error {e.response.status_code}: {e.response.text[:500]}")
            raise AIProcessingError(
                f"{self.provider} API error: HTTP {e.response.status_code}", cause=e
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"{self.provider} request failed: {e}")
            raise AIProcessingError(f"{self.provider} request failed: {e}", cause=e) from e
        except ValueError as e:
            raise AIProcessingError(f"Invalid response body from {self.provider}", cause=e) from e

        return self._extract_content(data)

    def _extract_content(self, data: dict) -> str:
        try:
            content = data["choices"][0]["message"].get("content")
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise AIProcessingError("No content received from AI", cause=e) from e
        if not content:
            raise AIProcessingError("No content received from AI")

        usage = data.get("usage")
        if isinstance(usage, dict):
            self.last_usage = LLMUsage(
                input_tokens=usage.get("prompt_tokens", 0),
                output_tokens=usage.get("completion_tokens", 0),
            )
            logger.info(
                f"{self.provider} usage: {self.last_usage.input_tokens} in / "
                f"{self.last_usage.output_tokens} out"
            )
        return content
