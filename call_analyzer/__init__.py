"""Call Analyzer - customer service call analysis with a generative model.

Sends a call recording to Gemini with a fixed analysis prompt and validates
the JSON it returns against a strict schema.

Usage:
    >>> from call_analyzer import AnalyzerConfig, ValidationSuccess, analyze_call
    >>>
    >>> config = AnalyzerConfig(api_key="...")
    >>> audio_bytes = open("call.mp3", "rb").read()
    >>> outcome = await analyze_call(audio_bytes, config)
    >>> if isinstance(outcome, ValidationSuccess):
    ...     print(outcome.value.reason_for_call)
"""

__version__ = "0.1.0"

# Public library API exports
from call_analyzer.core.config import AnalyzerConfig
from call_analyzer.core.operations import analyze_call, request_analysis
from call_analyzer.core.prompt import ANALYSIS_PROMPT, MP3_MIME_TYPE, build_contents
from call_analyzer.core.schemas import AnalysisResult, ErrorKind, SchemaIssue
from call_analyzer.core.validation import (
    ValidationFailure,
    ValidationOutcome,
    ValidationSuccess,
    strip_code_fence,
    validate_model_output,
)

# Export exceptions for library users
from call_analyzer.core.exceptions import (
    AnalyzerError,
    ConfigurationError,
    ModelInvocationError,
    ModelResponseError,
    ModelTimeoutError,
    ModelUnreachableError,
)

__all__ = [
    "__version__",
    # Configuration
    "AnalyzerConfig",
    # Operations
    "analyze_call",
    "request_analysis",
    "build_contents",
    "validate_model_output",
    "strip_code_fence",
    # Schema
    "ANALYSIS_PROMPT",
    "MP3_MIME_TYPE",
    "AnalysisResult",
    "ErrorKind",
    "SchemaIssue",
    "ValidationOutcome",
    "ValidationSuccess",
    "ValidationFailure",
    # Exceptions
    "AnalyzerError",
    "ConfigurationError",
    "ModelInvocationError",
    "ModelResponseError",
    "ModelTimeoutError",
    "ModelUnreachableError",
]
