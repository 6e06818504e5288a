"""FastAPI application entry point for the Call Analyzer service."""

import logging

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.exception_handlers import http_exception_handler as default_http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import get_settings
from app.schemas import AnalysisJSONResponse, HealthResponse, error_response
from app.security import MaxBodySizeMiddleware, RequestIDMiddleware
from call_analyzer.core.exceptions import AnalyzerError
from call_analyzer.core.logging import setup_logging
from call_analyzer.core.operations import request_analysis
from call_analyzer.core.prompt import MP3_MIME_TYPE
from call_analyzer.core.schemas import ErrorKind
from call_analyzer.core.validation import ValidationFailure, ValidationOutcome, validate_model_output

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = "Ocurrió un error durante el análisis."
MALFORMED_JSON_MESSAGE = "No se pudo parsear la respuesta de Gemini."
SCHEMA_VIOLATION_MESSAGE = "La respuesta de Gemini no cumple con el esquema esperado."


def _load_settings_safe():
    """Load settings, returning None when config is unavailable (e.g. tests)."""
    try:
        return get_settings()
    except ValueError:
        return None


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Give routing-level 405s the same error body as every other failure."""
    if exc.status_code == 405:
        return error_response(
            405,
            ErrorKind.METHOD_NOT_ALLOWED,
            "Method not allowed",
            headers=exc.headers,
        )
    return await default_http_exception_handler(request, exc)


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
    """A form whose ``file`` field is not an upload counts as a missing file."""
    logger.info(f"Rejected malformed upload: {exc.errors()}")
    return error_response(400, ErrorKind.MISSING_FILE, "No file uploaded.")


def _outcome_response(outcome: ValidationOutcome) -> Response:
    """Map a validation outcome to the HTTP answer."""
    if isinstance(outcome, ValidationFailure):
        if outcome.error_kind == ErrorKind.MALFORMED_JSON:
            return error_response(
                500,
                ErrorKind.MALFORMED_JSON,
                MALFORMED_JSON_MESSAGE,
                raw_response=outcome.detail,
            )
        return error_response(
            500,
            ErrorKind.SCHEMA_VIOLATION,
            SCHEMA_VIOLATION_MESSAGE,
            issues=outcome.detail,
            raw=outcome.raw,
        )

    return AnalysisJSONResponse(status_code=200, content=outcome.value.to_payload())


def create_app() -> FastAPI:
    """Build and return the FastAPI application with all middleware configured."""
    settings = _load_settings_safe()

    if settings is not None:
        setup_logging(settings.log_level, settings.log_model_responses_bool)

    application = FastAPI(
        title="Call Analyzer",
        description="Transcription and analysis of customer service calls with Gemini",
        version=__version__,
    )

    application.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    application.add_exception_handler(RequestValidationError, _validation_exception_handler)

    # Middleware stack
    # 1. Request ID for log correlation
    application.add_middleware(RequestIDMiddleware)

    # 2. Body size guard for the upload endpoint
    application.add_middleware(
        MaxBodySizeMiddleware,
        max_bytes=settings.audio_max_upload_bytes if settings else 20_000_000,
    )

    # 3. CORS for the browser dashboard
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins_list if settings else [],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    return application


app = create_app()


@app.get("/health")
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(ok=True, version=__version__)


@app.post("/api/analyze", response_model=None)
async def analyze(file: UploadFile | None = File(default=None)) -> Response:
    """
    Analyze an uploaded MP3 call recording.

    Sends the fixed analysis prompt plus the audio to the model, validates the
    reply and returns the AnalysisResult JSON. Every failure is answered with
    a structured error body; nothing is retried.
    """
    if file is None:
        return error_response(400, ErrorKind.MISSING_FILE, "No file uploaded.")

    # Declared type only, no content sniffing
    if file.content_type != MP3_MIME_TYPE:
        logger.info(f"Rejected upload {file.filename!r} with content type {file.content_type!r}")
        return error_response(
            400,
            ErrorKind.INVALID_FILE_TYPE,
            "Invalid file type. Only MP3 files are accepted.",
        )

    try:
        settings = get_settings()
        audio_bytes = await file.read()
        text = await request_analysis(audio_bytes, settings.to_analyzer_config(), file.content_type)
        return _outcome_response(validate_model_output(text))
    except AnalyzerError as e:
        logger.error(f"Model invocation failed: {e.message}")
        return error_response(500, ErrorKind.MODEL_INVOCATION_FAILURE, ANALYSIS_FAILED_MESSAGE)
    except Exception as e:
        logger.exception(f"Unexpected error in analyze: {e}")
        return error_response(500, ErrorKind.UNKNOWN_FAILURE, ANALYSIS_FAILED_MESSAGE)


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run("app.main:app", host=_settings.analyzer_host, port=_settings.analyzer_port)
