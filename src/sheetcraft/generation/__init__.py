"""Dataset generation from a column specification."""

from .models import (
    GenerationRequest,
    GenerationResult,
    GenerationSuccess,
    GenerationError,
    AIGenerationResult,
)
from .engine import GenerationEngine
from .validator import validate_request, ensure_valid
from .sample_data import generate_sample_data, sample_value
from .naming import make_excel_name, make_sheet_title
from .text_import import parse_pasted_rows, fit_rows

__all__ = [
    "GenerationRequest",
    "GenerationResult",
    "GenerationSuccess",
    "GenerationError",
    "AIGenerationResult",
    "GenerationEngine",
    "validate_request",
    "ensure_valid",
    "generate_sample_data",
    "sample_value",
    "make_excel_name",
    "make_sheet_title",
    "parse_pasted_rows",
    "fit_rows",
]
