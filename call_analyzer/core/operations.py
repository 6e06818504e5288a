"""High-level operations API for the call analyzer library."""

import logging

from call_analyzer.core.client import generate_content
from call_analyzer.core.config import AnalyzerConfig
from call_analyzer.core.logging import log_model_reply
from call_analyzer.core.prompt import MP3_MIME_TYPE, build_contents
from call_analyzer.core.validation import ValidationOutcome, validate_model_output

logger = logging.getLogger(__name__)


async def request_analysis(
    audio_bytes: bytes,
    config: AnalyzerConfig,
    mime_type: str = MP3_MIME_TYPE,
) -> str:
    """Send the analysis prompt plus audio to the model and return its trimmed reply text."""
    contents = build_contents(audio_bytes, mime_type)
    logger.info(f"Requesting analysis of {len(audio_bytes)} bytes of {mime_type} from {config.model}")
    text = await generate_content(contents, config)
    log_model_reply(text)
    return text.strip()


async def analyze_call(
    audio_bytes: bytes,
    config: AnalyzerConfig,
    mime_type: str = MP3_MIME_TYPE,
) -> ValidationOutcome:
    """
    Analyze a call recording and validate the model's reply.

    Model call failures propagate as ``AnalyzerError`` subclasses; problems with
    the reply itself come back as a ``ValidationFailure``.
    """
    text = await request_analysis(audio_bytes, config, mime_type)
    return validate_model_output(text)
