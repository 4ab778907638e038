"""Data models for the spreadsheet document."""

from typing import Union

from pydantic import BaseModel, Field, model_validator

from ..errors import SheetIndexError

Cell = Union[str, int, float, None]


def fit_row(row: list[Cell], width: int, fill: Cell = "") -> list[Cell]:
    """Pad or truncate a row to exactly ``width`` cells."""
    row = list(row[:width])
    if len(row) < width:
        row.extend([fill] * (width - len(row)))
    return row


class Sheet(BaseModel):
    """One named grid of headers and rows.

    Rows are normalised on construction so that every row is exactly as wide
    as the header list. Missing cells become empty strings.
    """

    name: str
    headers: list[str] = Field(default_factory=list)
    rows: list[list[Cell]] = Field(default_factory=list)

    @model_validator(mode="after")
    def _normalise_rows(self) -> "Sheet":
        width = len(self.headers)
        self.rows = [fit_row(row, width) for row in self.rows]
        return self

    @property
    def column_count(self) -> int:
        return len(self.headers)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def cell(self, row_index: int, col_index: int) -> Cell:
        """Return the value at ``(row_index, col_index)``."""
        if not 0 <= row_index < len(self.rows):
            raise SheetIndexError(f"Invalid row index: {row_index}")
        if not 0 <= col_index < len(self.headers):
            raise SheetIndexError(f"Invalid column index: {col_index}")
        return self.rows[row_index][col_index]


class Workbook(BaseModel):
    """An ordered collection of sheets plus the index of the active one."""

    filename: str
    sheets: list[Sheet]
    current_sheet_index: int = 0

    @model_validator(mode="after")
    def _check_index(self) -> "Workbook":
        if not self.sheets:
            raise ValueError("A workbook must contain at least one sheet")
        if not 0 <= self.current_sheet_index < len(self.sheets):
            raise ValueError(
                f"current_sheet_index {self.current_sheet_index} is out of range "
                f"for {len(self.sheets)} sheet(s)"
            )
        return self

    @property
    def current_sheet(self) -> Sheet:
        return self.sheets[self.current_sheet_index]

    def replace_current_sheet(self, sheet: Sheet) -> "Workbook":
        """Return a new workbook with the active sheet replaced."""
        sheets = list(self.sheets)
        sheets[self.current_sheet_index] = sheet
        return Workbook(
            filename=self.filename,
            sheets=sheets,
            current_sheet_index=self.current_sheet_index,
        )

    def select_sheet(self, index: int) -> "Workbook":
        """Return a new workbook with a different active sheet."""
        if not 0 <= index < len(self.sheets):
            raise SheetIndexError(f"Invalid sheet index: {index}")
        return Workbook(
            filename=self.filename,
            sheets=list(self.sheets),
            current_sheet_index=index,
        )

    def summary(self) -> dict:
        """Describe the workbook without its cell data."""
        return {
            "filename": self.filename,
            "current_sheet_index": self.current_sheet_index,
            "sheets": [
                {
                    "name": sheet.name,
                    "column_count": sheet.column_count,
                    "row_count": sheet.row_count,
                }
                for sheet in self.sheets
            ],
        }


def sheet_from_values(name: str, values: list[list[Cell]], fill: Cell = None) -> Sheet:
    """Build a sheet from an array whose first row holds the headers.

    Data rows shorter than the header row are padded with ``fill``.
    """
    if not values:
        return Sheet(name=name)
    headers = ["" if h is None else str(h) for h in values[0]]
    width = len(headers)
    return Sheet(name=name, headers=headers, rows=[fit_row(row, width, fill) for row in values[1:]])
