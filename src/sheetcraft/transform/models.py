"""Data models for sheet transformations."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..workbook.models import Cell


class TransformRequest(BaseModel):
    """A bounded excerpt of a sheet plus the instruction to apply."""

    instruction: str
    headers: list[str]
    rows: list[list[Cell]]
    total_rows: int

    @property
    def is_truncated(self) -> bool:
        return len(self.rows) < self.total_rows


class TransformResponse(BaseModel):
    """Expected JSON body of a transformation completion."""

    model_config = ConfigDict(populate_by_name=True)

    headers: list[str] = Field(min_length=1)
    rows: list[list[Cell]]
    new_columns: list[str] = Field(default_factory=list, alias="newColumns")
    message: str = ""

    @field_validator("headers", "new_columns", mode="before")
    @classmethod
    def _stringify_names(cls, value: Any) -> Any:
        if isinstance(value, list):
            return ["" if v is None else str(v) for v in value]
        return value
