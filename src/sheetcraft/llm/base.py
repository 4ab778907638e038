"""Base LLM client interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class CompletionOptions:
    """Options for a single completion request."""

    model: str
    temperature: float = 0.5
    max_tokens: int = 4096
    json_mode: bool = True


@dataclass
class LLMUsage:
    """Token usage reported by the provider, when available."""

    input_tokens: int = 0
    output_tokens: int = 0


class LLMClient(ABC):
    """Text-completion collaborator used by generation and transformation."""

    provider: str = "unknown"

    def __init__(self):
        self.last_usage: Optional[LLMUsage] = None

    @abstractmethod
    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        """Send a single user prompt and return the completion text.

        Raises:
            AIProcessingError: On transport failure, non-2xx status or empty content.
        """
        pass
