"""Error types for SheetCraft."""

from typing import Optional


class SheetCraftError(Exception):
    """Base class for all SheetCraft errors."""


class ValidationError(SheetCraftError):
    """Raised when a request fails validation.

    The individual messages are kept on ``errors`` and joined for display.
    """

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class ParseError(SheetCraftError):
    """Raised when an uploaded file cannot be read as a spreadsheet."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class AIProcessingError(SheetCraftError):
    """Raised when the LLM call fails or returns unusable content."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class SheetIndexError(SheetCraftError, IndexError):
    """Raised when a row or column index is outside the sheet."""


class BusyError(SheetCraftError):
    """Raised when an LLM operation is already in flight for the session."""


class ConfigurationError(SheetCraftError):
    """Raised when required settings are missing."""
