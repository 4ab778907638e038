"""Spreadsheet import and export.

Binary workbooks are read and written with openpyxl; delimited text files are
read with the csv module. Generated datasets can also be rendered as CSV text.
"""

import csv
import io
import logging
import zipfile
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any, Iterable, Optional

import openpyxl
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils.exceptions import InvalidFileException

from ..errors import ParseError
from .models import Cell, Sheet, Workbook, fit_row, sheet_from_values

logger = logging.getLogger(__name__)

ZIP_MAGIC = b"PK\x03\x04"
OLE_MAGIC = b"\xd0\xcf\x11\xe0"

SHEET_TITLE_MAX_CHARS = 31
_SHEET_TITLE_ILLEGAL = str.maketrans("", "", ":/\\?*[]")


def _to_cell(value: Any) -> Cell:
    """Convert a value read by openpyxl into a document cell."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return str(value)
    return str(value)


def _drop_trailing_empty(rows: list[list[Cell]]) -> list[list[Cell]]:
    while rows and all(cell is None or cell == "" for cell in rows[-1]):
        rows.pop()
    return rows


def _read_xlsx(data: bytes) -> list[Sheet]:
    wb = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    try:
        sheets = []
        for ws in wb.worksheets:
            values = [[_to_cell(v) for v in row] for row in ws.iter_rows(values_only=True)]
            values = _drop_trailing_empty(values)
            width = max((len(row) for row in values), default=0)
            values = [fit_row(row, width, None) for row in values]
            sheets.append(sheet_from_values(ws.title, values))
        return sheets
    finally:
        wb.close()


def _read_delimited(data: bytes, name: str) -> Sheet:
    if b"\x00" in data:
        raise ParseError("File is not a recognized spreadsheet format")
    text = data.decode("utf-8-sig")
    try:
        dialect = csv.Sniffer().sniff(text[:4096], delimiters=",\t;")
    except csv.Error:
        dialect = csv.excel
    values: list[list[Cell]] = [list(row) for row in csv.reader(io.StringIO(text), dialect)]
    values = _drop_trailing_empty(values)
    return sheet_from_values(name, values)


def parse_workbook(data: bytes, filename: str = "upload.xlsx") -> Workbook:
    """Parse uploaded file content into a workbook.

    The first row of each sheet becomes the headers and the remaining rows
    the data. Sheet order and names are preserved.

    Raises:
        ParseError: If the content is empty or not a readable spreadsheet.
    """
    if not data:
        raise ParseError("Failed to parse Excel file: file is empty")

    try:
        if data.startswith(ZIP_MAGIC):
            sheets = _read_xlsx(data)
        elif data.startswith(OLE_MAGIC):
            raise ParseError(
                "Failed to parse Excel file: legacy .xls workbooks are not supported, "
                "save the file as .xlsx"
            )
        else:
            sheets = [_read_delimited(data, Path(filename).stem or "Sheet1")]
    except ParseError:
        raise
    except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as e:
        # UnicodeDecodeError is a ValueError
        logger.warning(f"Could not parse '{filename}': {e}")
        raise ParseError(f"Failed to parse Excel file: {e}", cause=e) from e

    if not sheets:
        raise ParseError("Failed to parse Excel file: no sheets found")

    logger.info(f"Parsed '{filename}' with {len(sheets)} sheet(s)")
    return Workbook(filename=filename, sheets=sheets, current_sheet_index=0)


def safe_sheet_title(title: str, taken: Iterable[str] = (), fallback: str = "Sheet1") -> str:
    """Make ``title`` valid as an Excel worksheet title and unique within ``taken``."""
    clean = title.translate(_SHEET_TITLE_ILLEGAL).strip().strip("'")[:SHEET_TITLE_MAX_CHARS]
    clean = clean or fallback
    existing = {t.lower() for t in taken}
    candidate = clean
    n = 2
    while candidate.lower() in existing:
        suffix = f" ({n})"
        candidate = clean[: SHEET_TITLE_MAX_CHARS - len(suffix)] + suffix
        n += 1
    return candidate


def _write_value(ws, row: int, col: int, value: Cell):
    if isinstance(value, str):
        value = ILLEGAL_CHARACTERS_RE.sub("", value)
    cell = ws.cell(row=row, column=col, value=value)
    if isinstance(value, str) and value.startswith("="):
        # keep as literal text, there is no formula engine
        cell.data_type = "s"


def export_workbook(workbook: Workbook) -> bytes:
    """Serialize a workbook to .xlsx bytes, one worksheet per sheet."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)

    titles: list[str] = []
    for i, sheet in enumerate(workbook.sheets, start=1):
        title = safe_sheet_title(sheet.name, titles, fallback=f"Sheet{i}")
        titles.append(title)
        ws = wb.create_sheet(title=title)
        for r, values in enumerate([sheet.headers, *sheet.rows], start=1):
            for c, value in enumerate(values, start=1):
                if value is not None:
                    _write_value(ws, r, c, value)

    buffer = io.BytesIO()
    wb.save(buffer)
    logger.info(f"Exported '{workbook.filename}' with {len(workbook.sheets)} sheet(s)")
    return buffer.getvalue()


def _csv_text(value: Cell) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _csv_field(value: Cell) -> str:
    text = _csv_text(value)
    if "," in text or '"' in text or "\n" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def export_csv(columns: list[str], rows: list[list[Cell]]) -> str:
    """Render headers and rows as CSV text.

    Lines are joined with a bare newline and there is no trailing newline.
    """
    lines = [",".join(columns)]
    lines.extend(",".join(_csv_field(cell) for cell in row) for row in rows)
    return "\n".join(lines)


def csv_filename(excel_name: Optional[str]) -> str:
    """Derive the CSV download name from a generated .xlsx name."""
    return (excel_name or "generated_excel.xlsx").replace(".xlsx", ".csv")
