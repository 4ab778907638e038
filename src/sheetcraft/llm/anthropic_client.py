"""Anthropic LLM client."""

import logging

from anthropic import AsyncAnthropic, APIError

from ..errors import AIProcessingError
from .base import CompletionOptions, LLMClient, LLMUsage

logger = logging.getLogger(__name__)

JSON_ONLY_SYSTEM = "Respond with a single valid JSON object and nothing else."


class AnthropicClient(LLMClient):
    """Anthropic Claude client."""

    provider = "anthropic"

    def __init__(self, api_key: str, timeout: float = 60.0):
        super().__init__()
        self.client = AsyncAnthropic(api_key=api_key, timeout=timeout)

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        """Create a message with Claude and return its text."""
        kwargs = {
            "model": options.model,
            "max_tokens": options.max_tokens,
            "temperature": options.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if options.json_mode:
            kwargs["system"] = JSON_ONLY_SYSTEM

        try:
            response = await self.client.messages.create(**kwargs)
        except APIError as e:
            logger.error(f"Anthropic request failed: {e}")
            raise AIProcessingError(f"anthropic request failed: {e}", cause=e) from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        if not text:
            raise AIProcessingError("No content received from AI")

        self.last_usage = LLMUsage(
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )
        return text
