"""Dataset generation engine."""

import logging
from datetime import date
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from ..config import settings
from ..errors import AIProcessingError, ConfigurationError, ValidationError
from ..llm import CompletionOptions, LLMClient, build_generation_prompt, extract_json_object
from ..workbook.models import Cell
from .models import (
    AIGenerationPayload,
    AIGenerationResult,
    GenerationError,
    GenerationRequest,
    GenerationResult,
    GenerationSuccess,
)
from .naming import make_excel_name, make_sheet_title
from .sample_data import generate_sample_data
from .text_import import fit_rows
from .validator import ensure_valid

logger = logging.getLogger(__name__)


class GenerationEngine:
    """
    Turns a column/row specification into a populated dataset.

    Rows come from one of three places: rows supplied with the request, the
    deterministic offline filler, or the LLM collaborator. The LLM client is
    optional; without one only the offline paths are available.
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self.llm_client = llm_client
        self.model = model or settings.model_name
        self.temperature = settings.generation_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.max_tokens
        self._today = today or date.today

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Validate ``request`` and build the dataset.

        Supplied ``row_data`` is used verbatim unless ``auto_fill`` is set or
        no rows were supplied, in which case rows are synthesized offline.

        Returns:
            GenerationSuccess, or GenerationError with the joined validation messages
        """
        try:
            ensure_valid(request)
        except ValidationError as e:
            logger.warning(f"Rejected generation request: {e}")
            return GenerationError(message=str(e))

        if request.row_data and not request.auto_fill:
            rows = request.row_data
        else:
            rows = generate_sample_data(request.column_names, request.row_count, self._today())

        return self._build_result(request, rows)

    async def fetch_ai_rows(
        self,
        description: str,
        column_count: int,
        column_names: list[str],
        row_count: int,
    ) -> AIGenerationResult:
        """
        Ask the LLM for rows matching ``column_names``.

        The returned rows are fitted to ``column_count`` cells and ``row_count``
        rows so they can be fed back as a request's ``row_data``.

        Raises:
            ValidationError: If the description is blank or the counts are not positive
            ConfigurationError: If no LLM client is configured
            AIProcessingError: If the call fails or the response is malformed
        """
        errors = []
        if not description.strip():
            errors.append("Task description must be non-empty")
        if column_count <= 0:
            errors.append("Column count must be greater than 0")
        if row_count <= 0:
            errors.append("Row count must be greater than 0")
        if errors:
            raise ValidationError(errors)

        if self.llm_client is None:
            raise ConfigurationError("AI generation is not configured")

        prompt = build_generation_prompt(description, column_count, column_names)
        options = CompletionOptions(
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

        logger.info(f"Requesting {column_count}-column sample data from {self.llm_client.provider}")
        text = await self.llm_client.complete(prompt, options)
        payload = self._parse_payload(text)

        return AIGenerationResult(
            rows=fit_rows(payload.rows, column_count, row_count),
            is_data=payload.is_data,
            message=payload.message,
        )

    async def generate_with_ai(self, request: GenerationRequest) -> GenerationResult:
        """
        Validate ``request`` and fill it with LLM rows instead of the offline filler.

        Raises:
            AIProcessingError: If the LLM call fails; validation problems are
                returned as GenerationError like in ``generate``
            ConfigurationError: If no LLM client is configured
        """
        try:
            ensure_valid(request)
        except ValidationError as e:
            logger.warning(f"Rejected generation request: {e}")
            return GenerationError(message=str(e))

        description = request.task_description.strip() or ", ".join(request.column_names)
        ai_rows = await self.fetch_ai_rows(
            description, request.column_count, request.column_names, request.row_count
        )
        return self._build_result(request, ai_rows.rows)

    def _parse_payload(self, text: str) -> AIGenerationPayload:
        data = extract_json_object(text)
        try:
            payload = AIGenerationPayload.model_validate(data)
        except PydanticValidationError as e:
            logger.warning(f"Malformed generation response: {e}")
            raise AIProcessingError(
                f"AI processing failed: malformed response ({e.error_count()} error(s))",
                cause=e,
            ) from e
        if not payload.rows:
            raise AIProcessingError("AI processing failed: no rows returned")
        return payload

    def _build_result(self, request: GenerationRequest, rows: list[list[Cell]]) -> GenerationSuccess:
        result = GenerationSuccess(
            excel_name=make_excel_name(request.task_description),
            sheet_title=make_sheet_title(request.task_description),
            columns=list(request.column_names),
            rows=fit_rows(rows, request.column_count, request.row_count),
        )
        logger.info(
            f"Generated '{result.excel_name}' with {len(result.rows)} rows x "
            f"{len(result.columns)} columns"
        )
        return result
