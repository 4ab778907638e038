"""Configuration management for SheetCraft."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


class Settings(BaseModel):
    """Application settings."""

    # LLM Provider settings ('groq', 'openrouter' or 'anthropic')
    llm_provider: str = os.getenv("LLM_PROVIDER", "groq")

    # Groq OpenAI-compatible endpoint (required when LLM_PROVIDER=groq)
    groq_api_key: Optional[str] = os.getenv("GROQ_API_KEY")
    groq_base_url: str = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")

    # OpenRouter API configuration (required when LLM_PROVIDER=openrouter)
    openrouter_api_key: Optional[str] = os.getenv("OPENROUTER_API_KEY")
    openrouter_base_url: str = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")

    # Anthropic API key (required when LLM_PROVIDER=anthropic)
    anthropic_api_key: Optional[str] = os.getenv("ANTHROPIC_API_KEY")

    # Model configuration
    model_name: str = os.getenv("MODEL_NAME", "llama-3.3-70b-versatile")
    max_tokens: int = int(os.getenv("MAX_TOKENS", "4096"))
    generation_temperature: float = float(os.getenv("GENERATION_TEMPERATURE", "0.5"))
    transform_temperature: float = float(os.getenv("TRANSFORM_TEMPERATURE", "0.1"))
    llm_timeout_seconds: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))

    # Payload bounds
    transform_sample_rows: int = int(os.getenv("TRANSFORM_SAMPLE_ROWS", "50"))
    max_upload_bytes: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()


settings = Settings()
