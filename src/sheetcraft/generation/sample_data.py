"""Deterministic offline sample data.

Each column is filled according to the first keyword found in its lower-cased
name. Values depend only on the row index and the reference date, so the same
inputs always produce the same rows.
"""

from datetime import date, timedelta
from typing import Callable, Optional

from ..workbook.models import Cell

NAMES = ["Aarav", "Priya", "Rahul", "Sneha", "Vikram", "Anjali", "Rohan", "Kavya", "Aditya", "Mira"]
CITIES = ["Mumbai", "Delhi", "Bangalore", "Hyderabad", "Chennai", "Pune", "Kolkata", "Jaipur"]
STATUSES = ["Active", "Inactive", "Pending", "Completed"]

ValueFactory = Callable[[int, date], Cell]

# Checked in order; the first matching keyword wins.
KEYWORD_RULES: list[tuple[tuple[str, ...], ValueFactory]] = [
    (("name",), lambda i, today: NAMES[i % len(NAMES)]),
    (("age",), lambda i, today: 20 + (i % 30)),
    (("city",), lambda i, today: CITIES[i % len(CITIES)]),
    (("email",), lambda i, today: f"user{i + 1}@example.com"),
    (("phone", "mobile"), lambda i, today: f"+91 {9000000000 + i}"),
    (("salary", "price", "amount"), lambda i, today: 30000 + i * 5000),
    (("date",), lambda i, today: (today + timedelta(days=i)).isoformat()),
    (("status",), lambda i, today: STATUSES[i % len(STATUSES)]),
    (("id", "number", "count"), lambda i, today: i + 1),
]


def sample_value(column_name: str, index: int, today: date) -> Cell:
    """Value for row ``index`` of a column called ``column_name``."""
    lower = column_name.lower()
    for keywords, factory in KEYWORD_RULES:
        if any(keyword in lower for keyword in keywords):
            return factory(index, today)
    return f"Data {index + 1}"


def generate_sample_data(
    column_names: list[str], row_count: int, today: Optional[date] = None
) -> list[list[Cell]]:
    """Synthesize ``row_count`` rows for the given columns."""
    today = today or date.today()
    return [[sample_value(name, i, today) for name in column_names] for i in range(row_count)]
