"""Errors raised by the chat API client."""

from typing import Any


class ChatClientError(Exception):
    """Base error for failed API calls.

    Carries the HTTP status (None for transport failures) and the ``details``
    object from the server's error body.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}

    @property
    def user_turn_persisted(self) -> bool:
        """Whether the server reported that the user's turn was stored."""
        return bool(self.details.get("user_turn_persisted", False))


class SessionExpiredError(ChatClientError):
    """Raised on 401 responses."""

    def __init__(self, message: str = "Session expired. Please login again.", **kwargs):
        super().__init__(message, status_code=401, **kwargs)


class ServerError(ChatClientError):
    """Raised on 5xx responses."""


class NetworkError(ChatClientError):
    """Raised when the request never got an HTTP response."""

    def __init__(self, message: str = "Network error. Please check your connection."):
        super().__init__(message)
