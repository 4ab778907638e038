"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import settings
from ..errors import ConfigurationError
from ..generation import GenerationEngine
from ..llm import create_llm_client
from ..session import Session
from ..transform import TransformationBuilder
from .routes import router

logger = logging.getLogger(__name__)

# Global session instance
_session: Optional[Session] = None


def build_session() -> Session:
    """Create a session wired to the configured LLM provider.

    Without provider credentials the session still serves offline generation
    and editing; AI endpoints then report the configuration problem.
    """
    try:
        client = create_llm_client(settings)
    except ConfigurationError as e:
        logger.warning(f"AI features disabled: {e}")
        return Session(generation_engine=GenerationEngine())

    return Session(
        generation_engine=GenerationEngine(llm_client=client),
        transformation_builder=TransformationBuilder(client),
    )


def get_session() -> Session:
    """Get the global session instance."""
    global _session
    if _session is None:
        _session = build_session()
    return _session


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="SheetCraft",
        description="AI-assisted spreadsheet generation and editing",
        version="0.1.0",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes
    app.include_router(router, prefix="/api")

    return app
