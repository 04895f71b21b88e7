"""Conversation persistence.

The store loads a user together with every conversation, message and legacy
message, mutates that object graph in memory and writes it back with a single
commit. It is the only code that changes persisted conversation state.
"""

import logging
import uuid
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from app.domains.chat.legacy import conversation_from_legacy
from app.exceptions.base import PersistenceError
from models.base import utcnow
from models.chat_conversation import DEFAULT_CONVERSATION_NAME, ChatConversation
from models.chat_message import ChatMessage, MessageRole
from models.user import User


logger = logging.getLogger(__name__)


def parse_conversation_id(conversation_id: str | UUID | None) -> UUID | None:
    """Return the id as a UUID, or None when it is missing or malformed."""
    if conversation_id is None or isinstance(conversation_id, UUID):
        return conversation_id
    try:
        return uuid.UUID(str(conversation_id))
    except ValueError:
        return None


class ConversationStore:
    """Lookup and mutation of a user's conversations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_user(self, user_id: UUID) -> User | None:
        """Load a user with conversations, messages and legacy messages."""
        query = (
            select(User)
            .options(
                selectinload(User.conversations).selectinload(ChatConversation.messages),
                selectinload(User.legacy_messages),
            )
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    def find_conversation(
        self, user: User, conversation_id: str | UUID | None, include_deleted: bool = False
    ) -> ChatConversation | None:
        """Find a conversation by id within the user's collection."""
        wanted = parse_conversation_id(conversation_id)
        if wanted is None:
            return None
        for conversation in user.conversations:
            if conversation.id == wanted and (include_deleted or not conversation.is_deleted):
                return conversation
        return None

    def active_conversations(self, user: User) -> list[ChatConversation]:
        return [conversation for conversation in user.conversations if not conversation.is_deleted]

    def create_conversation(self, user: User) -> ChatConversation:
        """Append a fresh, empty conversation to the user's collection."""
        conversation = ChatConversation(
            id=uuid.uuid4(),
            name=DEFAULT_CONVERSATION_NAME,
            is_deleted=False,
            created_at=utcnow(),
            messages=[],
        )
        user.conversations.append(conversation)
        return conversation

    def append_message(self, conversation: ChatConversation, role: MessageRole, content: str) -> ChatMessage:
        message = ChatMessage(id=uuid.uuid4(), role=role, content=content, created_at=utcnow())
        conversation.messages.append(message)
        return message

    def rename(self, conversation: ChatConversation, name: str) -> None:
        conversation.name = name

    def soft_delete(self, conversation: ChatConversation) -> None:
        conversation.is_deleted = True

    def soft_delete_all(self, user: User) -> int:
        """Mark every conversation deleted and clear the legacy history.

        Returns the number of conversations that were live before the call.
        """
        live = 0
        for conversation in user.conversations:
            if not conversation.is_deleted:
                live += 1
            conversation.is_deleted = True
        user.legacy_messages.clear()
        return live

    def migrate_legacy(self, user: User) -> ChatConversation | None:
        """Move a pre-conversation flat history into a default conversation.

        Only users without any conversation are migrated; once conversations
        exist the legacy list is not a source of truth.
        """
        if user.conversations or not user.legacy_messages:
            return None

        conversation = conversation_from_legacy(user.legacy_messages)
        user.conversations.append(conversation)
        user.legacy_messages.clear()
        logger.info("Migrated %d legacy messages for user %s", len(conversation.messages), user.id)
        return conversation

    async def save(self) -> None:
        """Commit every pending change in one write."""
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to persist conversations: %s", str(e))
            raise PersistenceError() from e
