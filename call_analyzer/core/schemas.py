"""Analysis result schema and error vocabulary."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, StrictBool, StrictStr


class ErrorKind(str, Enum):
    """Every failure the analysis flow can report to a caller."""

    METHOD_NOT_ALLOWED = "MethodNotAllowed"
    MISSING_FILE = "MissingFile"
    INVALID_FILE_TYPE = "InvalidFileType"
    REQUEST_TOO_LARGE = "RequestTooLarge"
    MODEL_INVOCATION_FAILURE = "ModelInvocationFailure"
    MALFORMED_JSON = "MalformedJSON"
    SCHEMA_VIOLATION = "SchemaViolation"
    UNKNOWN_FAILURE = "UnknownFailure"


class EmotionEvidence(BaseModel):
    """An emotion detected in the call and the text that shows it."""

    emotion: StrictStr
    evidence: StrictStr


class KeyInteraction(BaseModel):
    """A customer question paired with the agent's most relevant answer."""

    question: StrictStr
    response: StrictStr


class SentimentAnalysis(BaseModel):
    """Overall sentiment of the call plus the specific emotions behind it."""

    overall_sentiment: Literal["Positive", "Negative", "Neutral"] = Field(alias="overallSentiment")
    # May be omitted by the model, but never null
    specific_emotions: list[EmotionEvidence] = Field(default=None, alias="specificEmotions")


class AnalysisResult(BaseModel):
    """Validated analysis of one customer service call.

    Field names follow the JSON contract through aliases; validate with
    ``AnalysisResult.model_validate(data)`` and serialise with ``to_payload``.
    """

    transcription: StrictStr = Field(description="Diarized transcript, one 'Agente: ...' / 'Cliente: ...' turn per line")
    sentiment_analysis: SentimentAnalysis = Field(alias="sentimentAnalysis")
    puntos_doter_solved: StrictBool = Field(
        alias="puntosDoterSolved",
        description="Whether the customer's question about Doter points was resolved",
    )
    reason_for_call: StrictStr = Field(alias="reasonForCall", description="Prose summary of why the customer called")
    key_interactions: list[KeyInteraction] = Field(default=None, alias="keyInteractions")

    def to_payload(self) -> dict[str, Any]:
        """Serialise back to the JSON contract; omitted optional lists stay omitted."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class SchemaIssue(BaseModel):
    """One schema violation found in a model reply."""

    path: str = Field(description="Dotted location of the offending value, '(root)' for the top level")
    message: str = Field(description="Human-readable description of the violation")
    type: str = Field(description="Machine-readable violation type")
