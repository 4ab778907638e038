"""In-memory editing session: the state a single user works against."""

import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import Optional

from .errors import BusyError, ConfigurationError, SheetCraftError
from .generation import GenerationEngine, GenerationRequest, GenerationResult
from .transform import TransformationBuilder, TransformResponse
from .workbook import EditCommand, Workbook, apply_command, parse_workbook

logger = logging.getLogger(__name__)


class SessionMode(str, Enum):
    """Which screen the session is on."""

    HOME = "home"
    GENERATE = "generate"
    UPLOAD = "upload"


class Session:
    """
    Holds the active workbook, the last generated dataset and the LLM gate.

    Every change replaces the stored value as a whole, so a failed operation
    leaves the previous state in place. Only one LLM operation may be in
    flight at a time; a second one raises BusyError instead of queueing.
    While it runs, edits, uploads, generation and resets raise BusyError too.
    """

    def __init__(
        self,
        generation_engine: Optional[GenerationEngine] = None,
        transformation_builder: Optional[TransformationBuilder] = None,
    ):
        self.generation_engine = generation_engine or GenerationEngine()
        self.transformation_builder = transformation_builder
        self.mode = SessionMode.HOME
        self.workbook: Optional[Workbook] = None
        self.generated: Optional[GenerationResult] = None
        self.processing = False
        self.error_message = ""
        self.ai_message = ""

    def _ensure_idle(self):
        if self.processing:
            raise BusyError("An AI request is being processed, try again when it finishes")

    @asynccontextmanager
    async def llm_operation(self):
        """Hold the in-flight flag for the duration of one LLM call."""
        if self.processing:
            raise BusyError("An AI request is already being processed")
        self.processing = True
        self.error_message = ""
        try:
            yield
        except SheetCraftError as e:
            self.error_message = str(e)
            raise
        finally:
            self.processing = False

    def generate(self, request: GenerationRequest) -> GenerationResult:
        self._ensure_idle()
        result = self.generation_engine.generate(request)
        self.generated = result
        self.mode = SessionMode.GENERATE
        return result

    async def generate_with_ai(self, request: GenerationRequest) -> GenerationResult:
        async with self.llm_operation():
            result = await self.generation_engine.generate_with_ai(request)
        self.generated = result
        self.mode = SessionMode.GENERATE
        return result

    async def fetch_ai_rows(self, description: str, column_count: int, column_names: list[str], row_count: int):
        async with self.llm_operation():
            result = await self.generation_engine.fetch_ai_rows(
                description, column_count, column_names, row_count
            )
        self.ai_message = result.message
        return result

    def load_file(self, data: bytes, filename: str) -> Workbook:
        """Parse an uploaded file and make it the active workbook."""
        self._ensure_idle()
        workbook = parse_workbook(data, filename)
        self.workbook = workbook
        self.mode = SessionMode.UPLOAD
        return workbook

    def require_workbook(self) -> Workbook:
        if self.workbook is None:
            raise LookupError("No workbook loaded")
        return self.workbook

    def apply(self, command: EditCommand) -> Workbook:
        self._ensure_idle()
        self.workbook = apply_command(self.require_workbook(), command)
        return self.workbook

    async def transform(self, instruction: str) -> TransformResponse:
        """Apply an AI instruction to the active sheet."""
        workbook = self.require_workbook()
        if self.transformation_builder is None:
            raise ConfigurationError("AI transformation is not configured")

        async with self.llm_operation():
            sheet, response = await self.transformation_builder.transform(
                workbook.current_sheet, instruction
            )
            if self.workbook is not workbook:
                raise BusyError("The workbook changed while the AI request was running")
        self.workbook = workbook.replace_current_sheet(sheet)
        self.ai_message = response.message
        return response

    def reset_generated(self):
        self._ensure_idle()
        self.generated = None
        self.mode = SessionMode.HOME

    def reset_workbook(self):
        self._ensure_idle()
        self.workbook = None
        self.mode = SessionMode.HOME

    def reset(self):
        self._ensure_idle()
        self.reset_generated()
        self.reset_workbook()
        self.error_message = ""
        self.ai_message = ""
        logger.info("Session reset")
