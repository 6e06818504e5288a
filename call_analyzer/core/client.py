"""Gemini generateContent client."""

import logging
from typing import Any

import httpx

from call_analyzer.core.config import AnalyzerConfig
from call_analyzer.core.exceptions import (
    ConfigurationError,
    ModelResponseError,
    ModelTimeoutError,
    ModelUnreachableError,
)

logger = logging.getLogger(__name__)


def extract_response_text(payload: Any, model: str | None = None) -> str:
    """
    Pull the generated text out of a generateContent response body.

    The text of every part of the first candidate is concatenated, the same
    way the official SDKs build ``response.text``.

    Raises:
        ModelResponseError: If the body has no usable candidate text
    """
    try:
        candidates = payload.get("candidates") or []
    except AttributeError as e:
        raise ModelResponseError("Model returned an unexpected response structure", model=model) from e

    if not candidates:
        feedback = payload.get("promptFeedback") or {}
        block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if block_reason:
            raise ModelResponseError(f"Model blocked the request (blockReason={block_reason})", model=model)
        raise ModelResponseError("Model returned no candidates", model=model)

    try:
        parts = candidates[0]["content"]["parts"]
        texts = [part["text"] for part in parts if "text" in part]
        text = "".join(texts)
    except (KeyError, IndexError, TypeError) as e:
        raise ModelResponseError("Model returned an unexpected response structure", model=model) from e

    if not texts:
        finish_reason = candidates[0].get("finishReason", "unknown")
        raise ModelResponseError(f"Model returned no text (finishReason={finish_reason})", model=model)

    return text


async def generate_content(
    contents: list[dict[str, Any]],
    config: AnalyzerConfig,
) -> str:
    """
    Send a generateContent request and return the model's raw text.

    A new HTTP client is opened for the call and closed afterwards. No retry
    is attempted.

    Args:
        contents: Request ``contents`` (see ``prompt.build_contents``)
        config: Analyzer configuration with credential, model and timeouts

    Returns:
        The generated text, exactly as the model produced it

    Raises:
        ConfigurationError: If no API key is configured
        ModelUnreachableError: If connection to the model API fails
        ModelTimeoutError: If the model API does not answer in time
        ModelResponseError: On a non-2xx status or an unusable response body
    """
    if not config.api_key:
        raise ConfigurationError("GEMINI_API_KEY is not configured")

    url = config.generate_content_url
    request_body: dict[str, Any] = {
        "contents": contents,
        "generationConfig": {"responseMimeType": config.response_mime_type},
    }

    timeout = httpx.Timeout(
        config.timeout_s,
        connect=config.connect_timeout_s,
    )

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            logger.debug(f"Calling model {config.model} at {url}")
            response = await client.post(
                url,
                json=request_body,
                headers={"x-goog-api-key": config.api_key},
            )

    except (httpx.ConnectError, httpx.NetworkError) as e:
        logger.error(f"Connection error to model API {url}: {e}")
        raise ModelUnreachableError(
            f"Connection to model API failed: {str(e)}",
            model=config.model,
        ) from e

    except httpx.TimeoutException as e:
        logger.error(f"Timeout calling model API {url}: {e}")
        raise ModelTimeoutError(
            "Model API did not respond in time",
            model=config.model,
        ) from e

    if not response.is_success:
        logger.error(f"Model API returned HTTP {response.status_code}: {response.text[:500]}")
        raise ModelResponseError(
            f"Model API returned HTTP {response.status_code}",
            model=config.model,
            status_code=response.status_code,
        )

    try:
        payload = response.json()
    except ValueError as e:
        raise ModelResponseError(
            "Model API returned a non-JSON body",
            model=config.model,
            status_code=response.status_code,
        ) from e

    return extract_response_text(payload, model=config.model)
