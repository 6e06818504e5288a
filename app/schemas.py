"""Response schemas for the HTTP layer."""

import json
from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from call_analyzer.core.schemas import ErrorKind, SchemaIssue


class AnalysisJSONResponse(JSONResponse):
    """JSONResponse that escapes non-ASCII characters.

    Model text can carry lone surrogates, which UTF-8 cannot encode; as
    ``\\uXXXX`` escapes they reach the client intact.
    """

    def render(self, content: Any) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=True,
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
        ).encode("ascii")


class ErrorResponse(BaseModel):
    """Structured error body returned for every non-200 answer."""

    model_config = ConfigDict(populate_by_name=True)

    error: str = Field(description="Human-readable error message, shown as-is by the dashboard")
    error_kind: ErrorKind = Field(alias="errorKind", description="Error type identifier")
    raw_response: str | None = Field(default=None, alias="rawResponse", description="Raw model text (MalformedJSON)")
    issues: list[SchemaIssue] | None = Field(default=None, description="Validation diff (SchemaViolation)")
    raw: Any = Field(default=None, description="Parsed model reply that failed validation (SchemaViolation)")


class HealthResponse(BaseModel):
    """Response for /health."""

    ok: bool = True
    version: str


def error_response(
    status_code: int,
    error_kind: ErrorKind,
    message: str,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> JSONResponse:
    """Build a JSON response carrying an ErrorResponse body; only fields passed in are emitted."""
    body = ErrorResponse(error=message, error_kind=error_kind, **extra)
    return AnalysisJSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_unset=True),
        headers=headers,
    )
