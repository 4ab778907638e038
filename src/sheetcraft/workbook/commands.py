"""Typed edit commands applied to the active sheet of a workbook."""

import logging
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from .models import Cell, Workbook
from . import operations

logger = logging.getLogger(__name__)


class AddColumn(BaseModel):
    """Append a column. Without a name the editor's default name is used."""

    op: Literal["add_column"] = "add_column"
    name: Optional[str] = None
    default: Cell = ""


class RemoveColumn(BaseModel):
    op: Literal["remove_column"] = "remove_column"
    index: int


class RenameColumn(BaseModel):
    op: Literal["rename_column"] = "rename_column"
    index: int
    name: str


class UpdateCell(BaseModel):
    op: Literal["update_cell"] = "update_cell"
    row: int
    col: int
    value: Cell = None


class InsertRow(BaseModel):
    """Insert a row. Without an index the row is appended."""

    op: Literal["insert_row"] = "insert_row"
    index: Optional[int] = None
    values: list[Cell] = Field(default_factory=list)


class DeleteRow(BaseModel):
    op: Literal["delete_row"] = "delete_row"
    index: int


class SelectSheet(BaseModel):
    op: Literal["select_sheet"] = "select_sheet"
    index: int


EditCommand = Annotated[
    Union[AddColumn, RemoveColumn, RenameColumn, UpdateCell, InsertRow, DeleteRow, SelectSheet],
    Field(discriminator="op"),
]


def apply_command(workbook: Workbook, command: EditCommand) -> Workbook:
    """Apply one command and return the resulting workbook.

    The input workbook is never modified. Index errors propagate as
    SheetIndexError.
    """
    if isinstance(command, SelectSheet):
        return workbook.select_sheet(command.index)

    sheet = workbook.current_sheet
    if isinstance(command, AddColumn):
        name = command.name if command.name is not None else operations.default_column_name(sheet)
        updated = operations.add_column(sheet, name, command.default)
    elif isinstance(command, RemoveColumn):
        updated = operations.remove_column(sheet, command.index)
    elif isinstance(command, RenameColumn):
        updated = operations.rename_column(sheet, command.index, command.name)
    elif isinstance(command, UpdateCell):
        updated = operations.update_cell(sheet, command.row, command.col, command.value)
    elif isinstance(command, InsertRow):
        index = command.index if command.index is not None else sheet.row_count
        updated = operations.insert_row(sheet, index, command.values)
    elif isinstance(command, DeleteRow):
        updated = operations.delete_row(sheet, command.index)
    else:
        raise TypeError(f"Unsupported command: {command!r}")

    logger.debug(f"Applied {command.op} to sheet '{sheet.name}'")
    return workbook.replace_current_sheet(updated)
