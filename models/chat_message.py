"""
Chat message model for conversation turns.
"""

import enum

from sqlalchemy import Column, Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class MessageRole(str, enum.Enum):
    """Message role enumeration."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """
    Represents a single role-tagged turn inside a conversation.

    Messages are written once and never updated. ``position`` is maintained by
    the owning conversation's ordering list and defines chronological order.
    """

    __tablename__ = "chat_messages"

    conversation_id = Column(
        UUID(), ForeignKey("chat_conversations.id", ondelete="CASCADE"), nullable=False
    )
    role = Column(
        Enum(MessageRole, name="message_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
    )
    content = Column(Text, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    # Relationships
    conversation = relationship("ChatConversation", back_populates="messages")

    @property
    def timestamp(self):
        return self.created_at
