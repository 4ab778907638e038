"""Validation of generation requests."""

from ..errors import ValidationError
from .models import GenerationRequest


def validate_request(request: GenerationRequest) -> list[str]:
    """Return every problem with ``request``; an empty list means valid."""
    errors: list[str] = []

    if request.column_count <= 0:
        errors.append("Column count must be greater than 0")

    if request.row_count <= 0:
        errors.append("Row count must be greater than 0")

    if len(request.column_names) != request.column_count:
        errors.append(
            f"Column names count ({len(request.column_names)}) doesn't match "
            f"column count ({request.column_count})"
        )

    if any(not name.strip() for name in request.column_names):
        errors.append("All column names must be non-empty")

    if request.row_data:
        if any(len(row) != request.column_count for row in request.row_data):
            errors.append(
                f"Some rows have mismatched column count. Expected {request.column_count} columns"
            )

    return errors


def ensure_valid(request: GenerationRequest):
    """Raise ValidationError listing every problem with ``request``."""
    errors = validate_request(request)
    if errors:
        raise ValidationError(errors)
