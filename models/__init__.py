"""
Models package initialization.
"""

from .base import Base, BaseModel
from .chat_conversation import DEFAULT_CONVERSATION_NAME, ChatConversation
from .chat_message import ChatMessage, MessageRole
from .legacy_message import LegacyChatMessage
from .user import User

__all__ = [
    "Base",
    "BaseModel",
    "User",
    # Chat models
    "ChatConversation",
    "ChatMessage",
    "LegacyChatMessage",
    "MessageRole",
    "DEFAULT_CONVERSATION_NAME",
]
