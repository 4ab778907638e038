"""Prompt templates for generation and transformation."""

import json

from ..workbook.models import Cell

GENERATION_PROMPT = """You are an Excel data generator.

Column names: {column_names}
Number of columns: {column_count}

User's request: "{description}"

Your task:
1. If the user pasted data, parse it and return it as a JSON array of rows
2. If the user described a task, generate realistic sample data based on the description
3. Ensure each row has exactly {column_count} columns, in the order of the column names
4. Return ONLY valid JSON in this format:
{{
  "rows": [["value1", "value2", ...], ["value1", "value2", ...]],
  "isData": true/false,
  "message": "Brief explanation"
}}

IMPORTANT: Return ONLY the JSON, no other text."""


TRANSFORM_PROMPT = """You are an Excel data transformation assistant.

Current data structure:
Headers: {headers}

Current rows ({row_count} rows):
```
{rows}
```

User's instruction: "{instruction}"

Your task:
1. Parse the instruction and apply the transformation
2. Return modified rows with any new columns added
3. For formulas like "Price x 0.10", calculate actual values
4. For conditions like "where Age > 18", evaluate and fill appropriately
5. Ensure "rows" contains ALL {row_count} rows provided above, in the same order
6. Return ONLY valid JSON in this format:
{{
  "headers": ["Header1", "Header2", ..., "NewHeader"],
  "rows": [["val1", "val2", ..., "newVal"], ...],
  "newColumns": ["NewHeader"],
  "message": "Description of changes made"
}}

IMPORTANT: Return ONLY the JSON, no other text."""


def _format_value(value: Cell) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def format_rows(headers: list[str], rows: list[list[Cell]]) -> str:
    """Render rows as ``Row n: header=value, ...`` lines."""
    lines = []
    for idx, row in enumerate(rows, start=1):
        pairs = ", ".join(f"{h}={_format_value(v)}" for h, v in zip(headers, row))
        lines.append(f"Row {idx}: {pairs}")
    return "\n".join(lines)


def build_generation_prompt(description: str, column_count: int, column_names: list[str]) -> str:
    return GENERATION_PROMPT.format(
        column_names=", ".join(column_names) or "N/A",
        column_count=column_count,
        description=description,
    )


def build_transform_prompt(instruction: str, headers: list[str], rows: list[list[Cell]]) -> str:
    return TRANSFORM_PROMPT.format(
        headers=", ".join(headers),
        row_count=len(rows),
        rows=format_rows(headers, rows),
        instruction=instruction,
    )
