"""Chat schemas for request/response serialization."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, Field

from models.chat_message import MessageRole

from .base import BaseSchema


class ChatMessageResponse(BaseSchema):
    """Schema for a single conversation turn."""

    id: UUID
    role: MessageRole
    content: str
    timestamp: datetime


class ConversationResponse(BaseSchema):
    """Schema for a conversation with its full transcript."""

    id: UUID
    name: str
    chats: list[ChatMessageResponse] = Field(
        default_factory=list, validation_alias=AliasChoices("chats", "messages")
    )
    created_at: datetime
    is_deleted: bool = False


class ContinueConversationRequest(BaseSchema):
    """Schema for sending a user turn.

    ``message`` is optional at the schema level so that a missing or blank
    message is answered with 400 by the chat service rather than 422.
    """

    message: str | None = Field(None, description="User message")
    conversation_id: str | None = Field(None, description="Existing conversation ID, null for new")


class ContinueConversationResponse(BaseSchema):
    """Schema for the authoritative transcript returned after a turn."""

    chats: list[ChatMessageResponse]
    conversation_id: UUID
    conversation_name: str


class ConversationListResponse(BaseSchema):
    """Schema for the conversation sidebar listing."""

    message: str = "OK"
    conversations: list[ConversationResponse]
    # Deprecated single-thread history, kept for older clients
    chats: list[ChatMessageResponse] = Field(default_factory=list)


# Update forward references if needed
ConversationResponse.model_rebuild()
ContinueConversationResponse.model_rebuild()
ConversationListResponse.model_rebuild()
