"""Simple configuration for core library usage."""

from dataclasses import dataclass

DEFAULT_MODEL = "gemini-1.5-pro-latest"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"


@dataclass
class AnalyzerConfig:
    """Configuration for a single call analysis.

    Built fresh for every request (see ``app.config.Settings.to_analyzer_config``)
    so nothing about the model client lives at module level.

    Args:
        api_key: Gemini API key. ``None`` makes every model call fail with
            ``ConfigurationError``.
        model: Gemini model name used for ``generateContent``
        base_url: Root URL of the Generative Language API
        timeout_s: Total timeout for the model request in seconds
        connect_timeout_s: Connection timeout for the model request in seconds
        response_mime_type: ``generationConfig.responseMimeType`` sent to the model
    """

    api_key: str | None = None
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = 300.0
    connect_timeout_s: float = 10.0
    response_mime_type: str = "text/plain"

    @property
    def generate_content_url(self) -> str:
        """Full URL of the model's generateContent method."""
        return f"{self.base_url.rstrip('/')}/v1beta/models/{self.model}:generateContent"
