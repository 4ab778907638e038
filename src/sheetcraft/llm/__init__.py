"""LLM client module."""

from ..config import Settings
from ..errors import ConfigurationError
from .base import CompletionOptions, LLMClient, LLMUsage
from .anthropic_client import AnthropicClient
from .openai_client import OpenAICompatibleClient
from .parsing import extract_json_object
from .prompts import build_generation_prompt, build_transform_prompt


def create_llm_client(settings: Settings) -> LLMClient:
    """Create the LLM client selected by ``settings.llm_provider``."""
    provider = settings.llm_provider.lower()
    if provider == "groq":
        if not settings.groq_api_key:
            raise ConfigurationError("GROQ_API_KEY is required when LLM_PROVIDER is 'groq'")
        return OpenAICompatibleClient(
            api_key=settings.groq_api_key,
            base_url=settings.groq_base_url,
            provider="groq",
            timeout=settings.llm_timeout_seconds,
        )
    if provider == "openrouter":
        if not settings.openrouter_api_key:
            raise ConfigurationError("OPENROUTER_API_KEY is required when LLM_PROVIDER is 'openrouter'")
        return OpenAICompatibleClient(
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            provider="openrouter",
            timeout=settings.llm_timeout_seconds,
        )
    if provider == "anthropic":
        if not settings.anthropic_api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY is required when LLM_PROVIDER is 'anthropic'")
        return AnthropicClient(api_key=settings.anthropic_api_key, timeout=settings.llm_timeout_seconds)
    raise ConfigurationError(f"Unknown LLM_PROVIDER: {settings.llm_provider}")


__all__ = [
    "CompletionOptions",
    "LLMClient",
    "LLMUsage",
    "AnthropicClient",
    "OpenAICompatibleClient",
    "create_llm_client",
    "extract_json_object",
    "build_generation_prompt",
    "build_transform_prompt",
]
