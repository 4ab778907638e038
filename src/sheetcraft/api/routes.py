"""API routes for SheetCraft."""

import logging

from fastapi import APIRouter, Body, File, HTTPException, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..config import settings
from ..errors import (
    AIProcessingError,
    BusyError,
    ConfigurationError,
    ParseError,
    SheetIndexError,
    ValidationError,
)
from ..generation import GenerationRequest, GenerationSuccess, parse_pasted_rows
from ..workbook import EditCommand, export_workbook

logger = logging.getLogger(__name__)

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_command_adapter = TypeAdapter(EditCommand)


def get_session():
    """Get the global session instance."""
    from .app import get_session as _get_session

    return _get_session()


def _ai_error(e: Exception) -> HTTPException:
    """Map a failed AI operation to an HTTP error."""
    if isinstance(e, BusyError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, ConfigurationError):
        return HTTPException(status_code=503, detail=str(e))
    return HTTPException(status_code=502, detail=str(e))


def _download(content: bytes, filename: str, media_type: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


class AIRowsRequest(BaseModel):
    """Request for LLM-proposed rows."""

    description: str
    column_count: int
    column_names: list[str]
    row_count: int


class PastedTextRequest(BaseModel):
    """Request to split pasted tabular text."""

    text: str
    column_count: int
    row_count: int


class TransformInstruction(BaseModel):
    """Request to transform the active sheet."""

    instruction: str


class TransformResult(BaseModel):
    """Response after an AI transformation."""

    message: str
    new_columns: list[str]
    workbook: dict


# Generation endpoints


@router.post("/generate")
async def generate(request: GenerationRequest):
    """Generate a dataset from the request, offline."""
    session = get_session()
    try:
        result = session.generate(request)
    except BusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return result.model_dump()


@router.post("/generate/ai")
async def generate_with_ai(request: GenerationRequest):
    """Generate a dataset with rows produced by the LLM."""
    session = get_session()
    try:
        result = await session.generate_with_ai(request)
    except (AIProcessingError, BusyError, ConfigurationError, ValidationError) as e:
        logger.error(f"AI generation failed: {e}")
        raise _ai_error(e)
    return result.model_dump()


@router.post("/generate/ai-rows")
async def fetch_ai_rows(request: AIRowsRequest):
    """Ask the LLM for rows to pre-fill the generation form."""
    session = get_session()
    try:
        result = await session.fetch_ai_rows(
            request.description,
            request.column_count,
            request.column_names,
            request.row_count,
        )
    except (AIProcessingError, BusyError, ConfigurationError, ValidationError) as e:
        logger.error(f"AI row generation failed: {e}")
        raise _ai_error(e)
    return result.model_dump()


@router.post("/generate/parse-text")
async def parse_text(request: PastedTextRequest):
    """Split pasted spreadsheet text into form rows."""
    if request.column_count <= 0 or request.row_count <= 0:
        raise HTTPException(status_code=400, detail="Column and row counts must be greater than 0")
    rows = parse_pasted_rows(request.text, request.column_count, request.row_count)
    return {"rows": rows, "row_count": len(rows)}


def _last_success() -> GenerationSuccess:
    session = get_session()
    if not isinstance(session.generated, GenerationSuccess):
        raise HTTPException(status_code=404, detail="No generated dataset available")
    return session.generated


@router.get("/generate/csv")
async def download_csv():
    """Download the last generated dataset as CSV."""
    result = _last_success()
    return _download(result.to_csv().encode("utf-8"), result.csv_name, "text/csv; charset=utf-8")


@router.get("/generate/xlsx")
async def download_generated_xlsx():
    """Download the last generated dataset as an Excel workbook."""
    result = _last_success()
    return _download(export_workbook(result.to_workbook()), result.excel_name, XLSX_MEDIA_TYPE)


# Workbook endpoints


@router.post("/workbook/upload")
async def upload_workbook(file: UploadFile = File(...)):
    """Load an uploaded spreadsheet as the active workbook."""
    session = get_session()
    data = await file.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File is too large")
    try:
        workbook = session.load_file(data, file.filename or "upload.xlsx")
    except ParseError as e:
        logger.error(f"Upload rejected: {e}")
        raise HTTPException(status_code=400, detail=f"Error loading file: {e}")
    except BusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return workbook.summary()


def _require_workbook():
    session = get_session()
    if session.workbook is None:
        raise HTTPException(status_code=404, detail="No workbook loaded")
    return session.workbook


@router.get("/workbook")
async def get_workbook():
    """Return the active workbook with its cell data."""
    return _require_workbook().model_dump()


@router.post("/workbook/commands")
async def apply_command(payload: dict = Body(...)):
    """Apply an edit command to the active sheet."""
    _require_workbook()
    session = get_session()
    try:
        command = _command_adapter.validate_python(payload)
    except PydanticValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    try:
        workbook = session.apply(command)
    except SheetIndexError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except BusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return workbook.model_dump()


@router.post("/workbook/transform", response_model=TransformResult)
async def transform_workbook(request: TransformInstruction):
    """Apply a natural-language instruction to the active sheet via the LLM."""
    _require_workbook()
    session = get_session()
    try:
        response = await session.transform(request.instruction)
    except (AIProcessingError, BusyError, ConfigurationError, ValidationError) as e:
        logger.error(f"AI transformation failed: {e}")
        raise _ai_error(e)
    return TransformResult(
        message=response.message,
        new_columns=response.new_columns,
        workbook=session.workbook.model_dump(),
    )


@router.get("/workbook/export")
async def export_active_workbook():
    """Download the active workbook as .xlsx."""
    workbook = _require_workbook()
    filename = workbook.filename if workbook.filename.lower().endswith(".xlsx") else "export.xlsx"
    return _download(export_workbook(workbook), filename, XLSX_MEDIA_TYPE)


# Session endpoints


@router.get("/session")
async def get_session_state():
    """Describe the current session without cell data."""
    session = get_session()
    return {
        "mode": session.mode.value,
        "processing": session.processing,
        "error_message": session.error_message,
        "ai_message": session.ai_message,
        "has_generated": session.generated is not None,
        "workbook": session.workbook.summary() if session.workbook else None,
    }


@router.post("/session/reset")
async def reset_session():
    """Clear the generated dataset and the active workbook."""
    try:
        get_session().reset()
    except BusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"status": "ok", "message": "Session reset"}


# Health check


@router.get("/health")
async def health_check():
    """Health check endpoint with diagnostics."""
    session = get_session()
    config = {
        "llm_provider": settings.llm_provider,
        "model_name": settings.model_name,
        "groq_key_present": bool(settings.groq_api_key),
        "openrouter_key_present": bool(settings.openrouter_api_key),
        "anthropic_key_present": bool(settings.anthropic_api_key),
        "ai_enabled": session.transformation_builder is not None,
    }
    return {"status": "ok", "service": "sheetcraft", "config": config}
