"""Builds transformation requests and reconciles the LLM's answer."""

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from ..config import settings
from ..errors import AIProcessingError, ValidationError
from ..llm import CompletionOptions, LLMClient, build_transform_prompt, extract_json_object
from ..workbook.models import Sheet
from .models import TransformRequest, TransformResponse

logger = logging.getLogger(__name__)


class TransformationBuilder:
    """
    Applies a natural-language edit instruction to a sheet via the LLM.

    Only the first ``sample_limit`` rows are sent. The answer must still
    contain exactly as many rows as the whole sheet; any other count is
    rejected rather than merged.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        sample_limit: Optional[int] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ):
        self.llm_client = llm_client
        self.sample_limit = sample_limit or settings.transform_sample_rows
        self.model = model or settings.model_name
        self.temperature = settings.transform_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.max_tokens

    def build_request(self, sheet: Sheet, instruction: str) -> TransformRequest:
        """Package the headers and a bounded row sample with the instruction."""
        if not instruction or not instruction.strip():
            raise ValidationError(["Instruction must be non-empty"])
        return TransformRequest(
            instruction=instruction.strip(),
            headers=list(sheet.headers),
            rows=[list(row) for row in sheet.rows[: self.sample_limit]],
            total_rows=sheet.row_count,
        )

    def build_prompt(self, request: TransformRequest) -> str:
        return build_transform_prompt(request.instruction, request.headers, request.rows)

    def parse_response(self, text: str, expected_rows: int) -> TransformResponse:
        """
        Validate a completion against the response schema and row contract.

        Args:
            text: Raw completion text
            expected_rows: Row count of the full original sheet

        Raises:
            AIProcessingError: If the JSON is missing or malformed, the row count
                differs from ``expected_rows``, or a row is not as wide as the headers
        """
        data = extract_json_object(text)
        try:
            response = TransformResponse.model_validate(data)
        except PydanticValidationError as e:
            logger.warning(f"Malformed transform response: {e}")
            raise AIProcessingError(
                f"AI transformation failed: malformed response ({e.error_count()} error(s))",
                cause=e,
            ) from e

        if len(response.rows) != expected_rows:
            logger.warning(
                f"Rejected transform response: {len(response.rows)} rows returned, "
                f"{expected_rows} expected"
            )
            raise AIProcessingError(
                f"AI transformation failed: returned {len(response.rows)} rows "
                f"but the sheet has {expected_rows}"
            )

        width = len(response.headers)
        for idx, row in enumerate(response.rows, start=1):
            if len(row) != width:
                raise AIProcessingError(
                    f"AI transformation failed: row {idx} has {len(row)} cells "
                    f"but there are {width} headers"
                )

        return response

    async def transform(self, sheet: Sheet, instruction: str) -> tuple[Sheet, TransformResponse]:
        """
        Run ``instruction`` against ``sheet`` and return the updated sheet.

        The input sheet is left untouched; on any failure nothing is returned.
        """
        request = self.build_request(sheet, instruction)
        if request.is_truncated:
            logger.warning(
                f"Sheet '{sheet.name}' has {request.total_rows} rows, "
                f"sending the first {len(request.rows)}"
            )

        options = CompletionOptions(
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        logger.info(f"Transforming sheet '{sheet.name}' via {self.llm_client.provider}")
        text = await self.llm_client.complete(self.build_prompt(request), options)

        response = self.parse_response(text, expected_rows=request.total_rows)
        updated = Sheet(name=sheet.name, headers=response.headers, rows=response.rows)
        logger.info(f"Transform applied: {response.message or 'no message'}")
        return updated, response
