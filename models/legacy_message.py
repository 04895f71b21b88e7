"""
Legacy flat chat history.

Before conversations existed every user had a single thread of messages. The
table is kept so old accounts can be migrated into a default conversation and
so "delete all" can clear it.
"""

from sqlalchemy import Column, Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel
from .chat_message import MessageRole


class LegacyChatMessage(BaseModel):
    """A message from the deprecated single-thread history of a user."""

    __tablename__ = "legacy_chat_messages"

    user_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role = Column(
        Enum(MessageRole, name="message_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
    )
    content = Column(Text, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    user = relationship("User", back_populates="legacy_messages")

    @property
    def timestamp(self):
        return self.created_at
