"""Tests for the Gemini generateContent client."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from call_analyzer.core.client import extract_response_text, generate_content
from call_analyzer.core.config import AnalyzerConfig
from call_analyzer.core.exceptions import (
    ConfigurationError,
    ModelResponseError,
    ModelTimeoutError,
    ModelUnreachableError,
)
from call_analyzer.core.prompt import build_contents


@pytest.fixture
def config():
    """Create a test configuration."""
    return AnalyzerConfig(
        api_key="test-key",
        model="gemini-test",
        base_url="http://127.0.0.1:9999/",
        timeout_s=30.0,
        connect_timeout_s=5.0,
    )


@pytest.fixture
def contents():
    return build_contents(b"fake mp3")


def _candidate_response(*texts: str) -> httpx.Response:
    """Build a generateContent reply whose first candidate holds the given text parts."""
    return httpx.Response(
        200,
        json={
            "candidates": [
                {
                    "content": {"role": "model", "parts": [{"text": t} for t in texts]},
                    "finishReason": "STOP",
                }
            ]
        },
    )


def test_generate_content_url(config):
    """Trailing slashes on the base URL are tolerated."""
    assert config.generate_content_url == "http://127.0.0.1:9999/v1beta/models/gemini-test:generateContent"


@pytest.mark.asyncio
async def test_generate_content_success(config, contents):
    """The request carries contents, response MIME type and API key header."""
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock, return_value=_candidate_response('{"ok": true}')) as mock_post:
        text = await generate_content(contents, config)

    assert text == '{"ok": true}'
    mock_post.assert_called_once()
    url = mock_post.call_args[0][0]
    kwargs = mock_post.call_args[1]
    assert url == "http://127.0.0.1:9999/v1beta/models/gemini-test:generateContent"
    assert kwargs["json"]["contents"] == contents
    assert kwargs["json"]["generationConfig"] == {"responseMimeType": "text/plain"}
    assert kwargs["headers"] == {"x-goog-api-key": "test-key"}


@pytest.mark.asyncio
async def test_generate_content_joins_parts(config, contents):
    """Multiple text parts of the first candidate are concatenated."""
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock, return_value=_candidate_response('{"a":', " 1}")):
        text = await generate_content(contents, config)

    assert text == '{"a": 1}'


@pytest.mark.asyncio
async def test_generate_content_returns_text_unmodified(config, contents):
    """Fences and whitespace are left for the validator to deal with."""
    reply = "```json\n{}\n```\n"
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock, return_value=_candidate_response(reply)):
        text = await generate_content(contents, config)

    assert text == reply


@pytest.mark.asyncio
async def test_generate_content_without_api_key(contents):
    """No key means no HTTP call at all."""
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
            await generate_content(contents, AnalyzerConfig(api_key=None))

    mock_post.assert_not_called()


@pytest.mark.asyncio
async def test_generate_content_connection_error(config, contents):
    """Test handling of connection errors."""
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock, side_effect=httpx.ConnectError("Connection failed")):
        with pytest.raises(ModelUnreachableError) as exc_info:
            await generate_content(contents, config)

    assert "Connection to model API failed" in exc_info.value.message
    assert exc_info.value.model == "gemini-test"


@pytest.mark.asyncio
async def test_generate_content_timeout(config, contents):
    """Test handling of timeout errors."""
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock, side_effect=httpx.ReadTimeout("Timeout")):
        with pytest.raises(ModelTimeoutError) as exc_info:
            await generate_content(contents, config)

    assert "did not respond in time" in exc_info.value.message


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 403, 429, 500, 503])
async def test_generate_content_error_status(config, contents, status_code):
    """Non-2xx answers raise ModelResponseError carrying the status."""
    response = httpx.Response(status_code, json={"error": {"code": status_code, "message": "nope"}})
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock, return_value=response):
        with pytest.raises(ModelResponseError) as exc_info:
            await generate_content(contents, config)

    assert exc_info.value.status_code == status_code


@pytest.mark.asyncio
async def test_generate_content_non_json_body(config, contents):
    response = httpx.Response(200, text="<html>proxy error</html>")
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock, return_value=response):
        with pytest.raises(ModelResponseError, match="non-JSON"):
            await generate_content(contents, config)


# --- extract_response_text ---


def test_extract_blocked_prompt():
    """A prompt blocked by safety filters has no candidates."""
    with pytest.raises(ModelResponseError, match="blockReason=SAFETY"):
        extract_response_text({"promptFeedback": {"blockReason": "SAFETY"}})


def test_extract_no_candidates():
    with pytest.raises(ModelResponseError, match="no candidates"):
        extract_response_text({"candidates": []})


def test_extract_candidate_without_text():
    payload = {"candidates": [{"content": {"parts": [{"inlineData": {}}]}, "finishReason": "MAX_TOKENS"}]}
    with pytest.raises(ModelResponseError, match="finishReason=MAX_TOKENS"):
        extract_response_text(payload)


@pytest.mark.parametrize(
    "payload",
    [
        {"candidates": [{"finishReason": "SAFETY"}]},
        {"candidates": [{"content": {}}]},
        {"candidates": ["text"]},
        ["not", "an", "object"],
    ],
)
def test_extract_unexpected_structure(payload):
    with pytest.raises(ModelResponseError):
        extract_response_text(payload)


@pytest.mark.parametrize("text", [None, 42, {"nested": "value"}, ["a", "b"]])
def test_extract_non_string_text_part(text):
    """A text part that is not a string is a malformed body, not a crash."""
    payload = {"candidates": [{"content": {"parts": [{"text": "ok"}, {"text": text}]}}]}
    with pytest.raises(ModelResponseError, match="unexpected response structure"):
        extract_response_text(payload, model="gemini-test")
