"""Tests for the editing session."""

import asyncio
import io

import openpyxl
import pytest

from sheetcraft.errors import AIProcessingError, BusyError, ConfigurationError, ParseError, SheetIndexError
from sheetcraft.generation import GenerationError, GenerationRequest, GenerationSuccess
from sheetcraft.session import Session, SessionMode
from sheetcraft.transform import TransformationBuilder
from sheetcraft.workbook import AddColumn, DeleteRow, SelectSheet

from conftest import FakeLLMClient

ADULT_RESPONSE = {
    "headers": ["Name", "Age", "City", "Adult"],
    "rows": [
        ["Aarav", 25, "Mumbai", "Yes"],
        ["Priya", 17, "Delhi", "No"],
        ["Rahul", 32, "Pune", "Yes"],
    ],
    "newColumns": ["Adult"],
    "message": "Added Adult column",
}


class BlockingLLMClient(FakeLLMClient):
    """Fake client that waits for ``release`` before answering."""

    def __init__(self, responses=None):
        super().__init__(responses)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def complete(self, prompt, options):
        self.started.set()
        await self.release.wait()
        return await super().complete(prompt, options)


def _xlsx_bytes(rows) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Data"
    for row in rows:
        ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


class TestGeneration:
    """Tests for generation through the session."""

    def test_generate_stores_result(self, session):
        request = GenerationRequest(column_count=2, row_count=3, column_names=["Name", "City"])

        result = session.generate(request)

        assert isinstance(result, GenerationSuccess)
        assert session.generated is result
        assert session.mode == SessionMode.GENERATE

    def test_generate_error_is_stored(self, session):
        result = session.generate(GenerationRequest(column_count=0, row_count=1, column_names=[]))

        assert isinstance(result, GenerationError)
        assert session.generated is result

    @pytest.mark.asyncio
    async def test_fetch_ai_rows_records_message(self, session, fake_llm):
        fake_llm.responses.append({"rows": [["a", "b"]], "isData": False, "message": "Made up"})

        result = await session.fetch_ai_rows("anything", 2, ["A", "B"], 1)

        assert result.rows == [["a", "b"]]
        assert session.ai_message == "Made up"
        assert session.processing is False

    @pytest.mark.asyncio
    async def test_failed_ai_generation_sets_error_and_keeps_previous(self, session, fake_llm):
        previous = session.generate(GenerationRequest(column_count=1, row_count=1, column_names=["Name"]))
        fake_llm.error = AIProcessingError("AI processing failed: timeout")
        request = GenerationRequest(column_count=1, row_count=1, column_names=["Name"], task_description="x")

        with pytest.raises(AIProcessingError):
            await session.generate_with_ai(request)

        assert session.generated is previous
        assert session.error_message == "AI processing failed: timeout"
        assert session.processing is False


class TestWorkbook:
    """Tests for loading and editing the active workbook."""

    def test_load_file(self, session):
        workbook = session.load_file(_xlsx_bytes([["Name", "Age"], ["Aarav", 25]]), "team.xlsx")

        assert session.workbook is workbook
        assert session.mode == SessionMode.UPLOAD
        assert workbook.current_sheet.headers == ["Name", "Age"]

    def test_failed_load_keeps_previous_workbook(self, session, workbook):
        session.workbook = workbook

        with pytest.raises(ParseError):
            session.load_file(b"", "empty.xlsx")

        assert session.workbook is workbook

    def test_apply_without_workbook(self, session):
        with pytest.raises(LookupError):
            session.apply(AddColumn())

    def test_apply_replaces_workbook(self, session, workbook):
        session.workbook = workbook

        updated = session.apply(AddColumn(name="Email"))

        assert session.workbook is updated
        assert updated.current_sheet.headers[-1] == "Email"
        assert workbook.current_sheet.headers == ["Name", "Age", "City"]

    def test_invalid_command_keeps_workbook(self, session, workbook):
        session.workbook = workbook

        with pytest.raises(SheetIndexError):
            session.apply(DeleteRow(index=10))

        assert session.workbook is workbook

    def test_select_sheet(self, session, workbook):
        session.workbook = workbook

        session.apply(SelectSheet(index=1))

        assert session.workbook.current_sheet.name == "Totals"


class TestTransform:
    """Tests for AI transformation through the session."""

    @pytest.mark.asyncio
    async def test_transform_replaces_current_sheet(self, session, workbook, fake_llm):
        session.workbook = workbook
        fake_llm.responses.append(
            {
                "headers": ["Name", "Age", "City", "Adult"],
                "rows": [
                    ["Aarav", 25, "Mumbai", "Yes"],
                    ["Priya", 17, "Delhi", "No"],
                    ["Rahul", 32, "Pune", "Yes"],
                ],
                "newColumns": ["Adult"],
                "message": "Added Adult column",
            }
        )

        response = await session.transform("Add Adult column where Age > 18")

        assert response.new_columns == ["Adult"]
        sheet = session.workbook.current_sheet
        assert sheet.name == "People"
        assert sheet.headers == ["Name", "Age", "City", "Adult"]
        assert session.workbook.sheets[1].name == "Totals"
        assert session.ai_message == "Added Adult column"

    @pytest.mark.asyncio
    async def test_failed_transform_keeps_workbook(self, session, workbook, fake_llm):
        session.workbook = workbook
        fake_llm.responses.append({"headers": ["Name"], "rows": [["Aarav"]], "message": "oops"})

        with pytest.raises(AIProcessingError):
            await session.transform("Drop everything")

        assert session.workbook is workbook
        assert "returned 1 rows but the sheet has 3" in session.error_message
        assert session.processing is False

    @pytest.mark.asyncio
    async def test_busy_session_rejects_second_operation(self, session, workbook, fake_llm):
        session.workbook = workbook
        session.processing = True

        with pytest.raises(BusyError):
            await session.transform("Anything")

        assert fake_llm.prompts == []
        assert session.processing is True

    @pytest.mark.asyncio
    async def test_transform_without_builder(self, engine, workbook):
        session = Session(generation_engine=engine)
        session.workbook = workbook

        with pytest.raises(ConfigurationError):
            await session.transform("Anything")


class TestReset:
    """Tests for session reset."""

    def test_reset_clears_state(self, session, workbook):
        session.workbook = workbook
        session.generate(GenerationRequest(column_count=1, row_count=1, column_names=["Name"]))
        session.error_message = "old error"

        session.reset()

        assert session.workbook is None
        assert session.generated is None
        assert session.error_message == ""
        assert session.mode == SessionMode.HOME


class TestConcurrentChanges:
    """Tests for state changes attempted while an LLM call is in flight."""

    @pytest.fixture
    def blocking_llm(self):
        return BlockingLLMClient([ADULT_RESPONSE])

    @pytest.fixture
    def blocking_session(self, engine, blocking_llm, workbook):
        session = Session(
            generation_engine=engine,
            transformation_builder=TransformationBuilder(blocking_llm, sample_limit=50, model="test-model"),
        )
        session.workbook = workbook
        return session

    @pytest.mark.asyncio
    async def test_edits_and_reset_are_refused_while_transforming(self, blocking_session, blocking_llm, workbook):
        task = asyncio.create_task(blocking_session.transform("Add Adult column"))
        await blocking_llm.started.wait()

        with pytest.raises(BusyError):
            blocking_session.apply(DeleteRow(index=0))
        with pytest.raises(BusyError):
            blocking_session.reset()
        with pytest.raises(BusyError):
            blocking_session.load_file(b"Name\nZoe\n", "other.csv")
        assert blocking_session.workbook is workbook

        blocking_llm.release.set()
        await task

        assert blocking_session.workbook.current_sheet.headers[-1] == "Adult"
        assert blocking_session.workbook.current_sheet.row_count == 3
        assert blocking_session.processing is False

    @pytest.mark.asyncio
    async def test_transform_does_not_overwrite_replaced_workbook(self, blocking_session, blocking_llm):
        task = asyncio.create_task(blocking_session.transform("Add Adult column"))
        await blocking_llm.started.wait()
        replacement = blocking_session.workbook.select_sheet(1)
        blocking_session.workbook = replacement

        blocking_llm.release.set()
        with pytest.raises(BusyError):
            await task

        assert blocking_session.workbook is replacement
        assert blocking_session.processing is False

    @pytest.mark.asyncio
    async def test_reset_allowed_after_transform(self, blocking_session, blocking_llm):
        blocking_llm.release.set()
        await blocking_session.transform("Add Adult column")

        blocking_session.reset()

        assert blocking_session.workbook is None
