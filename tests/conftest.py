"""Pytest configuration and shared fixtures."""

import json
from datetime import date
from typing import Optional

import pytest

from sheetcraft.config import Settings
from sheetcraft.generation import GenerationEngine
from sheetcraft.llm import CompletionOptions, LLMClient
from sheetcraft.session import Session
from sheetcraft.transform import TransformationBuilder
from sheetcraft.workbook import Sheet, Workbook

FIXED_TODAY = date(2024, 1, 30)


class FakeLLMClient(LLMClient):
    """LLM client returning canned completions and recording prompts."""

    provider = "fake"

    def __init__(self, responses: Optional[list] = None, error: Optional[Exception] = None):
        super().__init__()
        self.responses = list(responses or [])
        self.error = error
        self.prompts: list[str] = []
        self.options: list[CompletionOptions] = []

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        self.prompts.append(prompt)
        self.options.append(options)
        if self.error is not None:
            raise self.error
        response = self.responses.pop(0)
        if isinstance(response, dict):
            return json.dumps(response)
        return response


@pytest.fixture
def mock_settings() -> Settings:
    """Create settings with test values."""
    return Settings(
        llm_provider="groq",
        groq_api_key="gsk-test-123",
        model_name="llama-3.3-70b-versatile",
        max_tokens=1024,
        transform_sample_rows=50,
        host="127.0.0.1",
        port=8000,
        debug=False,
        cors_allow_origins=["*"],
    )


@pytest.fixture
def people_sheet() -> Sheet:
    """A small sheet of people."""
    return Sheet(
        name="People",
        headers=["Name", "Age", "City"],
        rows=[
            ["Aarav", 25, "Mumbai"],
            ["Priya", 17, "Delhi"],
            ["Rahul", 32, "Pune"],
        ],
    )


@pytest.fixture
def workbook(people_sheet) -> Workbook:
    """A two-sheet workbook with the people sheet active."""
    totals = Sheet(name="Totals", headers=["Metric", "Value"], rows=[["count", 3]])
    return Workbook(filename="people.xlsx", sheets=[people_sheet, totals], current_sheet_index=0)


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def engine(fake_llm) -> GenerationEngine:
    """Generation engine with a fixed reference date and a fake LLM."""
    return GenerationEngine(llm_client=fake_llm, model="test-model", today=lambda: FIXED_TODAY)


@pytest.fixture
def session(engine, fake_llm) -> Session:
    return Session(
        generation_engine=engine,
        transformation_builder=TransformationBuilder(fake_llm, sample_limit=50, model="test-model"),
    )
