"""Natural-language transformation of an existing sheet."""

from .models import TransformRequest, TransformResponse
from .builder import TransformationBuilder

__all__ = [
    "TransformRequest",
    "TransformResponse",
    "TransformationBuilder",
]
