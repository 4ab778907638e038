"""Parsing of pasted tabular text into generation rows."""

import re

from ..workbook.models import Cell, fit_row

_WIDE_SPACE_RE = re.compile(r"\s{2,}")


def split_line(line: str) -> list[str]:
    """Split one pasted line on tabs, else commas, else runs of spaces."""
    if "\t" in line:
        return line.split("\t")
    if "," in line:
        return [v.strip() for v in line.split(",")]
    return [v.strip() for v in _WIDE_SPACE_RE.split(line)]


def fit_rows(rows: list[list[Cell]], column_count: int, row_count: int) -> list[list[Cell]]:
    """Fit rows to ``column_count`` cells and exactly ``row_count`` rows."""
    fitted = [fit_row(row, column_count) for row in rows[:row_count]]
    while len(fitted) < row_count:
        fitted.append([""] * column_count)
    return fitted


def parse_pasted_rows(text: str, column_count: int, row_count: int) -> list[list[Cell]]:
    """Turn pasted spreadsheet text into a ``row_count`` x ``column_count`` grid.

    Blank lines are ignored. Returns an empty list for blank input.
    """
    if not text.strip():
        return []
    lines = [line for line in text.split("\n") if line.strip()]
    return fit_rows([split_line(line.rstrip("\r")) for line in lines], column_count, row_count)
