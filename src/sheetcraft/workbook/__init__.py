"""Spreadsheet document model, edit operations and file adapters."""

from .models import Cell, Sheet, Workbook, fit_row, sheet_from_values
from .operations import (
    add_column,
    remove_column,
    rename_column,
    update_cell,
    insert_row,
    delete_row,
    default_column_name,
)
from .commands import (
    EditCommand,
    AddColumn,
    RemoveColumn,
    RenameColumn,
    UpdateCell,
    InsertRow,
    DeleteRow,
    SelectSheet,
    apply_command,
)
from .io import parse_workbook, export_workbook, export_csv, csv_filename, safe_sheet_title

__all__ = [
    "Cell",
    "Sheet",
    "Workbook",
    "fit_row",
    "sheet_from_values",
    "add_column",
    "remove_column",
    "rename_column",
    "update_cell",
    "insert_row",
    "delete_row",
    "default_column_name",
    # Commands
    "EditCommand",
    "AddColumn",
    "RemoveColumn",
    "RenameColumn",
    "UpdateCell",
    "InsertRow",
    "DeleteRow",
    "SelectSheet",
    "apply_command",
    # File adapters
    "parse_workbook",
    "export_workbook",
    "export_csv",
    "csv_filename",
    "safe_sheet_title",
]
