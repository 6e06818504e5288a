"""Configuration management - loads environment variables into typed settings."""

from functools import lru_cache
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from call_analyzer.core.config import DEFAULT_BASE_URL, DEFAULT_MODEL, AnalyzerConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server Configuration
    analyzer_host: str = Field(default="127.0.0.1", description="Host for the analyzer service to listen on")
    analyzer_port: int = Field(default=8000, description="Port for the analyzer service to listen on")

    # Model Configuration
    gemini_api_key: str | None = Field(
        default=None,
        description="Gemini API key. Requests fail with 500 while it is unset",
    )
    gemini_model: str = Field(default=DEFAULT_MODEL, description="Gemini model used for analysis")
    gemini_base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Root URL of the Generative Language API",
    )

    # Timeout Configuration
    gemini_timeout_s: float = Field(
        default=300.0,
        description="Total timeout for the model request (seconds)",
    )
    gemini_connect_timeout_s: float = Field(
        default=10.0,
        description="Connection timeout for the model request (seconds)",
    )

    # Upload / CORS Configuration
    allow_origins: str = Field(
        default="",
        description="CORS allowed origins for the dashboard (comma-separated list, empty = no CORS)",
    )
    audio_max_upload_bytes: int = Field(
        default=20_000_000,
        description="Maximum Content-Length accepted on /api/analyze (bytes)",
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_model_responses: str = Field(
        default="0",
        description="Log raw model replies at DEBUG (1 = enabled, 0 = disabled). Only enable in development",
    )

    @field_validator("analyzer_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not (1 <= v <= 65535):
            raise ValueError(f"analyzer_port must be between 1 and 65535, got {v}")
        return v

    @field_validator("gemini_timeout_s", "gemini_connect_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v

    @field_validator("audio_max_upload_bytes")
    @classmethod
    def validate_max_upload(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"audio_max_upload_bytes must be positive, got {v}")
        return v

    @field_validator("gemini_base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"URL must use http or https scheme, got {v}")
        if not parsed.netloc:
            raise ValueError(f"URL must have a valid host, got {v}")
        return v

    @field_validator("gemini_api_key")
    @classmethod
    def blank_key_is_unset(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}, got {v}")
        return v.upper()

    @field_validator("log_model_responses")
    @classmethod
    def validate_boolean_string(cls, v: str) -> str:
        """Validate boolean string format."""
        v_lower = v.lower().strip()
        if v_lower not in ("0", "1", "true", "false", "yes", "no"):
            raise ValueError(f"Boolean field must be '0', '1', 'true', 'false', 'yes', or 'no', got {v}")
        return v

    @property
    def allow_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if not self.allow_origins:
            return []
        return [origin.strip() for origin in self.allow_origins.split(",") if origin.strip()]

    @property
    def log_model_responses_bool(self) -> bool:
        """Convert log_model_responses string to boolean."""
        v = self.log_model_responses.lower().strip()
        return v in ("1", "true", "yes")

    def to_analyzer_config(self) -> AnalyzerConfig:
        """Build a fresh library config for one request."""
        return AnalyzerConfig(
            api_key=self.gemini_api_key,
            model=self.gemini_model,
            base_url=self.gemini_base_url,
            timeout_s=self.gemini_timeout_s,
            connect_timeout_s=self.gemini_connect_timeout_s,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Settings are loaded from environment variables and .env file on first call.
    Subsequent calls return the cached instance.

    Raises:
        ValueError: If settings are invalid.

    Returns:
        Settings: The validated settings instance.
    """
    try:
        return Settings()
    except Exception as e:
        raise ValueError(
            f"Failed to load configuration: {e}\n"
            "Please check your .env file and ensure all settings are valid."
        ) from e
