"""Defensive parsing of the model's reply into an AnalysisResult."""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import ValidationError

from call_analyzer.core.schemas import AnalysisResult, ErrorKind, SchemaIssue

logger = logging.getLogger(__name__)

_OPENING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\r?\n?", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\r?\n?```$")


@dataclass(frozen=True)
class ValidationSuccess:
    """The reply was valid JSON and matched the schema."""

    value: AnalysisResult
    ok: Literal[True] = field(default=True, init=False)


@dataclass(frozen=True)
class ValidationFailure:
    """The reply could not be accepted.

    ``detail`` is the original text for ``MalformedJSON`` and a list of
    ``SchemaIssue`` for ``SchemaViolation``; ``raw`` holds the parsed value
    in the latter case.
    """

    error_kind: ErrorKind
    detail: Any
    raw: Any = None
    ok: Literal[False] = field(default=False, init=False)


ValidationOutcome = ValidationSuccess | ValidationFailure


def strip_code_fence(text: str) -> str:
    """Remove a markdown code fence wrapped around the text, if there is one."""
    cleaned = text.strip()
    cleaned = _OPENING_FENCE.sub("", cleaned, count=1)
    cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def _reject_constant(name: str) -> Any:
    """NaN and Infinity are not JSON; json.loads accepts them unless told otherwise."""
    raise ValueError(f"Non-standard JSON constant {name}")


def _format_loc(loc: tuple[int | str, ...]) -> str:
    if not loc:
        return "(root)"
    return ".".join(str(part) for part in loc)


def schema_issues(error: ValidationError) -> list[SchemaIssue]:
    """Flatten a pydantic ValidationError into SchemaIssue entries."""
    return [
        SchemaIssue(path=_format_loc(err["loc"]), message=err["msg"], type=err["type"])
        for err in error.errors(include_url=False)
    ]


def validate_model_output(text: str) -> ValidationOutcome:
    """
    Turn raw model text into a validated AnalysisResult or a failure.

    All-or-nothing: a reply with any missing, mistyped or out-of-range field is
    rejected entirely. Nothing is repaired.

    Args:
        text: The model's reply, as returned

    Returns:
        ValidationSuccess, or ValidationFailure tagged MalformedJSON / SchemaViolation
    """
    cleaned = strip_code_fence(text)

    try:
        parsed = json.loads(cleaned, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError is a ValueError; nesting too deep for the decoder is a RecursionError
        logger.warning(f"Model reply is not valid JSON: {e}")
        return ValidationFailure(error_kind=ErrorKind.MALFORMED_JSON, detail=text)

    try:
        result = AnalysisResult.model_validate(parsed)
    except ValidationError as e:
        issues = schema_issues(e)
        logger.warning(
            "Model reply violates the analysis schema: %s",
            "; ".join(f"{issue.path}: {issue.message}" for issue in issues),
        )
        return ValidationFailure(error_kind=ErrorKind.SCHEMA_VIOLATION, detail=issues, raw=parsed)

    return ValidationSuccess(value=result)
