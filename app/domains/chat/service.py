"""Chat service layer: conversation turns, listing and deletion."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.chat.naming import NamingPolicy
from app.domains.chat.store import ConversationStore
from app.exceptions.chat import ConversationNotFoundError, MissingMessageError
from app.exceptions.generation import (
    GenerationConfigurationError,
    GenerationError,
    GenerationFailedError,
)
from app.exceptions.user import UserNotFoundError
from app.schemas.chat import (
    ChatMessageResponse,
    ContinueConversationResponse,
    ConversationResponse,
)
from app.services.generation import TextGenerator
from models.chat_conversation import ChatConversation
from models.chat_message import ChatMessage, MessageRole
from models.user import User


logger = logging.getLogger(__name__)

_SPEAKERS = {MessageRole.USER: "Human", MessageRole.ASSISTANT: "Assistant"}


class ChatService:
    """Service class for conversation operations."""

    def __init__(
        self,
        db: AsyncSession,
        generator: TextGenerator | None = None,
        *,
        naming_policy: NamingPolicy | None = None,
        create_on_miss: bool = True,
        system_prompt: str | None = None,
    ):
        """Initialize chat service.

        Args:
            db: Async database session for data operations.
            generator: Text generation capability, None when AI is not configured.
            naming_policy: Policy used to name a conversation after its first exchange.
            create_on_miss: Start a new conversation when a given id is unknown or deleted.
            system_prompt: Preamble placed before the conversation history.
        """
        self.db = db
        self.store = ConversationStore(db)
        self.generator = generator
        self.naming_policy = naming_policy or NamingPolicy(generator)
        self.create_on_miss = create_on_miss
        self.system_prompt = system_prompt

    async def continue_conversation(
        self, user_id: UUID, message_text: str | None, conversation_id: str | UUID | None = None
    ) -> ContinueConversationResponse:
        """Append a user turn, generate the assistant reply and return the transcript.

        The user turn is committed before generation, so a failed generation
        leaves it in place; the raised ``GenerationFailedError`` says so.

        Args:
            user_id: Authenticated user sending the message.
            message_text: Text of the user turn.
            conversation_id: Target conversation, None to start a new one.

        Returns:
            Full message list with the conversation id and current name.
        """
        if not message_text or not message_text.strip():
            raise MissingMessageError()
        if self.generator is None:
            raise GenerationConfigurationError("Text generation is not configured")

        user = await self._load_user(user_id)
        conversation = self._resolve_conversation(user, conversation_id)

        self.store.append_message(conversation, MessageRole.USER, message_text)
        await self.store.save()

        prompt = self.build_prompt(conversation.messages)
        try:
            reply = await self.generator.generate(prompt)
        except GenerationError as e:
            logger.error("Generation failed for conversation %s: %s", conversation.id, e.message)
            raise GenerationFailedError(
                message=e.message,
                error_code=e.error_code,
                user_turn_persisted=True,
                conversation_id=str(conversation.id),
                details=e.details,
            ) from e
        except Exception as e:
            logger.error("Unexpected generation error for conversation %s: %s", conversation.id, str(e))
            raise GenerationFailedError(
                user_turn_persisted=True, conversation_id=str(conversation.id)
            ) from e

        self.store.append_message(conversation, MessageRole.ASSISTANT, reply)

        if len(conversation.messages) == 2:
            name = await self.naming_policy.derive_name(message_text, reply)
            self.store.rename(conversation, name)

        await self.store.save()
        logger.info("Conversation %s now has %d messages", conversation.id, len(conversation.messages))

        return ContinueConversationResponse(
            chats=[ChatMessageResponse.model_validate(message) for message in conversation.messages],
            conversation_id=conversation.id,
            conversation_name=conversation.name,
        )

    def build_prompt(self, messages: list[ChatMessage]) -> str:
        """Render the whole history as a Human/Assistant transcript with an open reply."""
        parts = []
        if self.system_prompt:
            parts.append(self.system_prompt)
        parts.extend(f"{_SPEAKERS[message.role]}: {message.content}" for message in messages)
        return "\n\n".join(parts) + "\n\nAssistant:"

    async def list_conversations(self, user_id: UUID) -> list[ConversationResponse]:
        """Get every non-deleted conversation in stored order."""
        user = await self._load_user(user_id)
        return [
            ConversationResponse.model_validate(conversation)
            for conversation in self.store.active_conversations(user)
        ]

    async def get_conversation(
        self, user_id: UUID, conversation_id: str | UUID, include_deleted: bool = False
    ) -> ConversationResponse:
        """Get one conversation; deleted ones only when ``include_deleted`` is set."""
        user = await self._load_user(user_id)
        conversation = self.store.find_conversation(user, conversation_id, include_deleted=include_deleted)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id=str(conversation_id))
        return ConversationResponse.model_validate(conversation)

    async def get_legacy_messages(self, user_id: UUID) -> list[ChatMessageResponse]:
        """Get the deprecated flat history, empty once it has been migrated."""
        user = await self._load_user(user_id)
        return [ChatMessageResponse.model_validate(message) for message in user.legacy_messages]

    async def delete_conversation(self, user_id: UUID, conversation_id: str | UUID) -> bool:
        """Soft delete a conversation.

        Deleting an unknown or already deleted conversation is not an error.

        Returns:
            True if a live conversation was deleted.
        """
        user = await self._load_user(user_id)
        conversation = self.store.find_conversation(user, conversation_id)
        if conversation is None:
            logger.info("Delete of missing conversation %s ignored", conversation_id)
            return False

        self.store.soft_delete(conversation)
        await self.store.save()
        return True

    async def delete_all_conversations(self, user_id: UUID) -> int:
        """Soft delete every conversation and clear the legacy history in one commit."""
        user = await self._load_user(user_id)
        deleted = self.store.soft_delete_all(user)
        await self.store.save()
        logger.info("Deleted %d conversations for user %s", deleted, user_id)
        return deleted

    async def _load_user(self, user_id: UUID) -> User:
        user = await self.store.load_user(user_id)
        if user is None:
            raise UserNotFoundError()
        if self.store.migrate_legacy(user) is not None:
            await self.store.save()
        return user

    def _resolve_conversation(self, user: User, conversation_id: str | UUID | None) -> ChatConversation:
        if not conversation_id:
            return self.store.create_conversation(user)

        conversation = self.store.find_conversation(user, conversation_id)
        if conversation is not None:
            return conversation

        if not self.create_on_miss:
            raise ConversationNotFoundError(conversation_id=str(conversation_id))

        logger.info("Conversation %s not found, starting a new one", conversation_id)
        return self.store.create_conversation(user)
