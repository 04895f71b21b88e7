# ruff: noqa: D107
"""Text generation (Gemini) exceptions.

Every generation failure is reported to clients as a server error; the
``error_code`` tells the failure kinds apart.
"""

from typing import Any

from .base import BaseAppException


class GenerationError(BaseAppException):
    """Base exception for generation provider errors."""

    def __init__(
        self,
        message: str = "Text generation failed",
        error_code: str = "GENERATION_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message=message, status_code=500, error_code=error_code, details=details)


class GenerationConfigurationError(GenerationError):
    """Raised when the generation provider is not configured."""

    def __init__(
        self,
        message: str = "Text generation is not properly configured",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "GENERATION_CONFIGURATION_ERROR", details)


class GenerationTimeoutError(GenerationError):
    """Raised when the provider does not answer in time."""

    def __init__(
        self,
        message: str = "Text generation timed out",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "GENERATION_TIMEOUT", details)


class GenerationRateLimitError(GenerationError):
    """Raised when the provider rate limit is hit."""

    def __init__(
        self,
        message: str = "Text generation rate limit exceeded",
        retry_after: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        if details is None:
            details = {}
        if retry_after:
            details["retry_after"] = retry_after
        super().__init__(message, "GENERATION_RATE_LIMITED", details)


class GenerationQuotaExceededError(GenerationError):
    """Raised when the provider quota is exhausted."""

    def __init__(
        self,
        message: str = "Text generation quota exceeded",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "GENERATION_QUOTA_EXCEEDED", details)


class GenerationContentFilterError(GenerationError):
    """Raised when the provider blocks the prompt or the answer."""

    def __init__(
        self,
        message: str = "Content was blocked by safety filters",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "GENERATION_CONTENT_FILTERED", details)


class EmptyGenerationError(GenerationError):
    """Raised when the provider answers with no text."""

    def __init__(
        self,
        message: str = "Empty response from text generation",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "GENERATION_EMPTY", details)


class GenerationFailedError(GenerationError):
    """Raised by the chat service when a turn could not be answered.

    ``details`` tells the caller whether the user's turn was committed so
    the client can reconcile instead of guessing.
    """

    def __init__(
        self,
        message: str = "Failed to generate a reply",
        error_code: str = "GENERATION_ERROR",
        user_turn_persisted: bool = False,
        conversation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = dict(details or {})
        details["user_turn_persisted"] = user_turn_persisted
        details["conversation_id"] = conversation_id
        super().__init__(message, error_code, details)


# Map common error patterns to exceptions
GENERATION_ERROR_MAPPING = {
    "rate_limited": GenerationRateLimitError,
    "quota_exceeded": GenerationQuotaExceededError,
    "content_filtered": GenerationContentFilterError,
    "timeout": GenerationTimeoutError,
    "configuration_error": GenerationConfigurationError,
}


def classify_provider_error(error: Exception) -> GenerationError:
    """Map a raw provider exception to the matching generation exception."""
    if isinstance(error, GenerationError):
        return error

    error_msg = str(error).lower()
    if "rate" in error_msg and "limit" in error_msg:
        error_type = "rate_limited"
    elif "quota" in error_msg or "resource_exhausted" in error_msg or "429" in error_msg:
        error_type = "quota_exceeded"
    elif "safety" in error_msg or "blocked" in error_msg:
        error_type = "content_filtered"
    elif "deadline" in error_msg or "timed out" in error_msg:
        error_type = "timeout"
    elif "api key" in error_msg or "api_key" in error_msg:
        error_type = "configuration_error"
    else:
        return GenerationError(f"Text generation failed: {error}")

    return GENERATION_ERROR_MAPPING[error_type]()
