"""Translation of the deprecated flat chat history into a conversation."""

import uuid
from collections.abc import Sequence

from app.domains.chat.naming import fallback_name
from models.base import utcnow
from models.chat_conversation import DEFAULT_CONVERSATION_NAME, ChatConversation
from models.chat_message import ChatMessage, MessageRole
from models.legacy_message import LegacyChatMessage


def conversation_from_legacy(messages: Sequence[LegacyChatMessage]) -> ChatConversation:
    """Build a default conversation holding copies of the legacy messages.

    Order, roles, contents and timestamps are preserved. The name comes from
    the first user message, the same way a failed title generation does.
    """
    first_user_text = next(
        (message.content for message in messages if message.role == MessageRole.USER), None
    )
    created_at = messages[0].created_at if messages else utcnow()

    return ChatConversation(
        id=uuid.uuid4(),
        name=fallback_name(first_user_text) if first_user_text else DEFAULT_CONVERSATION_NAME,
        is_deleted=False,
        created_at=created_at or utcnow(),
        messages=[
            ChatMessage(
                id=uuid.uuid4(),
                role=message.role,
                content=message.content,
                created_at=message.created_at or utcnow(),
            )
            for message in messages
        ],
    )
