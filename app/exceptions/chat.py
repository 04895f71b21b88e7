"""Conversation-related exceptions."""

from .base import NotFoundError, ValidationError


class MissingMessageError(ValidationError):
    """Raised when a turn is submitted without message text."""

    def __init__(self, message: str = "Message is required"):
        super().__init__(message=message, status_code=400, error_code="MESSAGE_REQUIRED")


class ConversationNotFoundError(NotFoundError):
    """Raised when a conversation id does not match a live conversation of the user."""

    def __init__(self, message: str = "Conversation not found", conversation_id: str | None = None):
        details = {"conversation_id": conversation_id} if conversation_id else None
        super().__init__(message=message, error_code="CONVERSATION_NOT_FOUND", details=details)
