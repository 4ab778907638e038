"""File and sheet names derived from a task description."""

import re

DEFAULT_EXCEL_NAME = "generated_excel"
EXCEL_NAME_MAX_CHARS = 25
EXCEL_NAME_WORDS = 4
SHEET_TITLE_MAX_CHARS = 30

_NAME_ILLEGAL_RE = re.compile(r"[^a-z0-9_]+")
_UNDERSCORES_RE = re.compile(r"_+")
_SHEET_TITLE_ILLEGAL_RE = re.compile(r"[:/\\?*\[\]]")


def make_excel_name(description: str) -> str:
    """Build a short ``.xlsx`` file name from the first words of ``description``."""
    words = description.split()[:EXCEL_NAME_WORDS]
    name = _NAME_ILLEGAL_RE.sub("", "_".join(words).lower())
    name = _UNDERSCORES_RE.sub("_", name)[:EXCEL_NAME_MAX_CHARS]
    return f"{name or DEFAULT_EXCEL_NAME}.xlsx"


def make_sheet_title(description: str) -> str:
    """Truncate ``description`` and drop characters Excel forbids in sheet names."""
    return _SHEET_TITLE_ILLEGAL_RE.sub("", description[:SHEET_TITLE_MAX_CHARS])
