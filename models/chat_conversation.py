"""
Chat conversation model.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel

DEFAULT_CONVERSATION_NAME = "New Conversation"


class ChatConversation(BaseModel):
    """
    Represents a named, soft-deletable thread of messages owned by one user.

    :ivar name: Display title. Starts as ``DEFAULT_CONVERSATION_NAME`` and is
        rewritten once after the first exchange.
    :type name: str
    :ivar is_deleted: Soft-delete flag; deleted conversations keep their messages.
    :type is_deleted: bool
    :ivar position: Creation order within the owning user's collection.
    :type position: int
    """

    __tablename__ = "chat_conversations"

    user_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False, default=DEFAULT_CONVERSATION_NAME)
    is_deleted = Column(Boolean, nullable=False, default=False)
    position = Column(Integer, nullable=False, default=0)

    # Relationships
    user = relationship("User", back_populates="conversations")
    messages = relationship(
        "ChatMessage",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="ChatMessage.position",
        collection_class=ordering_list("position"),
    )
