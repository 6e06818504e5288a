"""Logging for the analyzer: request correlation and raw model reply capture."""

import logging
import sys
import uuid
from contextvars import ContextVar

# Raw model text goes here so it can be switched on without raising the app's log level
MODEL_REPLY_LOGGER = "call_analyzer.model_replies"

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(request_id)s] %(name)s - %(message)s"

# Loggers that would otherwise echo every model request line at INFO
_CHATTY_LOGGERS = ("httpx", "httpcore")

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

_reply_logger = logging.getLogger(MODEL_REPLY_LOGGER)


class RequestIDFilter(logging.Filter):
    """Stamp each record with the id of the upload being analyzed."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()  # type: ignore[attr-defined]
        return True


def generate_request_id() -> str:
    return uuid.uuid4().hex[:12]


def log_model_reply(text: str) -> None:
    """Record the model's raw reply; only emitted when enabled in ``setup_logging``."""
    _reply_logger.debug("Raw model reply (%d chars): %s", len(text), text)


def setup_logging(level: str = "INFO", log_model_responses: bool = False) -> None:
    """Configure logging for the analyzer service.

    Args:
        level: Log level name for the service (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_model_responses: Emit raw model replies through ``MODEL_REPLY_LOGGER``
            regardless of ``level``. Replies can hold customer data; development only.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIDFilter())

    root = logging.getLogger()
    root.setLevel(numeric_level)
    # Uvicorn reload re-imports the app; avoid stacking handlers
    root.handlers.clear()
    root.addHandler(handler)

    _reply_logger.setLevel(logging.DEBUG if log_model_responses else max(numeric_level, logging.INFO))

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
