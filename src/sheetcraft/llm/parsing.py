"""Helpers for reading JSON out of completion text."""

import json
import re

from ..errors import AIProcessingError

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: str) -> dict:
    """Parse the JSON object contained in a completion.

    Markdown code fences are stripped. When the text is not pure JSON, the
    span from the first ``{`` to the last ``}`` is parsed instead.

    Raises:
        AIProcessingError: If no JSON object can be parsed.
    """
    if not text or not text.strip():
        raise AIProcessingError("No content received from AI")

    cleaned = _FENCE_RE.sub("", text.strip())
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        match = _OBJECT_RE.search(cleaned)
        if not match:
            raise AIProcessingError("Could not parse AI response")
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise AIProcessingError(f"Could not parse AI response: {e.msg}", cause=e) from e

    if not isinstance(data, dict):
        raise AIProcessingError("AI response is not a JSON object")
    return data
