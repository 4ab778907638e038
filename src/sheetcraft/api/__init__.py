"""HTTP API for SheetCraft."""

from .app import create_app, get_session

__all__ = ["create_app", "get_session"]
