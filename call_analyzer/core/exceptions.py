"""Custom exceptions for the call analyzer core library."""


class AnalyzerError(Exception):
    """Base exception for all analyzer errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(AnalyzerError):
    """Raised when there is a configuration problem (e.g. missing API key)."""

    pass


class ModelInvocationError(AnalyzerError):
    """Base class for failures while calling the generative model."""

    def __init__(self, message: str, model: str | None = None):
        self.model = model
        super().__init__(message)


class ModelUnreachableError(ModelInvocationError):
    """Raised when the model API cannot be reached."""

    pass


class ModelTimeoutError(ModelInvocationError):
    """Raised when the model API does not answer in time."""

    pass


class ModelResponseError(ModelInvocationError):
    """Raised when the model API answers with an error or an unusable envelope."""

    def __init__(self, message: str, model: str | None = None, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message, model=model)
