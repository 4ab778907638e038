"""Pure grid mutations on a Sheet.

Every function returns a new Sheet and leaves its input untouched. Indices are
bounds-checked; an invalid index raises SheetIndexError instead of creating
sparse cells.
"""

from typing import Optional

from ..errors import SheetIndexError
from .models import Cell, Sheet, fit_row


def _check_column(sheet: Sheet, index: int):
    if not 0 <= index < len(sheet.headers):
        raise SheetIndexError(f"Invalid column index: {index}")


def _check_row(sheet: Sheet, index: int):
    if not 0 <= index < len(sheet.rows):
        raise SheetIndexError(f"Invalid row index: {index}")


def default_column_name(sheet: Sheet) -> str:
    """Name given to a column added without an explicit name."""
    return f"Column {len(sheet.headers) + 1}"


def add_column(sheet: Sheet, name: str, default: Cell = "") -> Sheet:
    """Append a column, filling every row with ``default``."""
    return Sheet(
        name=sheet.name,
        headers=[*sheet.headers, name],
        rows=[[*row, default] for row in sheet.rows],
    )


def remove_column(sheet: Sheet, index: int) -> Sheet:
    """Remove the header and every cell at ``index``."""
    _check_column(sheet, index)
    return Sheet(
        name=sheet.name,
        headers=[h for i, h in enumerate(sheet.headers) if i != index],
        rows=[[c for i, c in enumerate(row) if i != index] for row in sheet.rows],
    )


def rename_column(sheet: Sheet, index: int, name: str) -> Sheet:
    _check_column(sheet, index)
    headers = list(sheet.headers)
    headers[index] = name
    return Sheet(name=sheet.name, headers=headers, rows=[list(row) for row in sheet.rows])


def update_cell(sheet: Sheet, row_index: int, col_index: int, value: Cell) -> Sheet:
    """Replace the single cell at ``(row_index, col_index)``."""
    _check_row(sheet, row_index)
    _check_column(sheet, col_index)
    rows = [list(row) for row in sheet.rows]
    rows[row_index][col_index] = value
    return Sheet(name=sheet.name, headers=list(sheet.headers), rows=rows)


def insert_row(sheet: Sheet, row_index: int, values: Optional[list[Cell]] = None) -> Sheet:
    """Insert a row before ``row_index``.

    ``row_index`` may equal the row count to append. Without values, a row of
    empty strings is inserted; given values are fitted to the header width.
    """
    if not 0 <= row_index <= len(sheet.rows):
        raise SheetIndexError(f"Invalid row index: {row_index}")
    width = len(sheet.headers)
    new_row = fit_row(values, width) if values else [""] * width
    rows = [list(row) for row in sheet.rows]
    rows.insert(row_index, new_row)
    return Sheet(name=sheet.name, headers=list(sheet.headers), rows=rows)


def delete_row(sheet: Sheet, row_index: int) -> Sheet:
    _check_row(sheet, row_index)
    return Sheet(
        name=sheet.name,
        headers=list(sheet.headers),
        rows=[list(row) for i, row in enumerate(sheet.rows) if i != row_index],
    )
