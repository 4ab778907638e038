"""Data models for dataset generation."""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..workbook.io import csv_filename, export_csv
from ..workbook.models import Cell, Sheet, Workbook


class GenerationRequest(BaseModel):
    """A column/row specification for a new dataset.

    Counts are not constrained here; the engine validates them so that every
    problem is reported together.
    """

    column_count: int
    row_count: int
    column_names: list[str]
    task_description: str = ""
    auto_fill: bool = True
    row_data: Optional[list[list[Cell]]] = None


class GenerationSuccess(BaseModel):
    """A generated dataset ready for preview and download."""

    status: Literal["success"] = "success"
    excel_name: str
    sheet_title: str
    columns: list[str]
    rows: list[list[Cell]]

    @property
    def csv_name(self) -> str:
        return csv_filename(self.excel_name)

    def to_csv(self) -> str:
        return export_csv(self.columns, self.rows)

    def to_workbook(self) -> Workbook:
        """Wrap the dataset in a single-sheet workbook."""
        sheet = Sheet(name=self.sheet_title or "Sheet1", headers=self.columns, rows=self.rows)
        return Workbook(filename=self.excel_name, sheets=[sheet])


class GenerationError(BaseModel):
    """A rejected generation request."""

    status: Literal["error"] = "error"
    message: str


GenerationResult = Annotated[Union[GenerationSuccess, GenerationError], Field(discriminator="status")]


class AIGenerationPayload(BaseModel):
    """Expected JSON body of a generation completion."""

    model_config = ConfigDict(populate_by_name=True)

    rows: list[list[Cell]]
    is_data: bool = Field(default=True, alias="isData")
    message: str = ""


class AIGenerationResult(BaseModel):
    """Rows proposed by the LLM, fitted to the requested shape."""

    rows: list[list[Cell]]
    is_data: bool
    message: str
