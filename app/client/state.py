"""Client-side conversation state and reconciliation with the server.

Every send is tagged with a local correlation id. Responses whose id is no
longer the pending one are stale: they may refresh the sidebar but never the
transcript the user is looking at.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from app.client.errors import ChatClientError, NetworkError
from app.client.reveal import StreamingReveal
from app.schemas.base import StatusResponse
from app.schemas.chat import (
    ChatMessageResponse,
    ContinueConversationResponse,
    ConversationListResponse,
    ConversationResponse,
)
from models.chat_conversation import DEFAULT_CONVERSATION_NAME
from models.chat_message import MessageRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Sent:
    correlation_id: UUID


@dataclass(frozen=True)
class Completed:
    correlation_id: UUID


@dataclass(frozen=True)
class Failed:
    correlation_id: UUID
    error: ChatClientError = field(compare=False)


PendingTurn = Idle | Sent | Completed | Failed


class ChatApi(Protocol):
    """The subset of ``ChatApiClient`` the state machine talks to."""

    async def send_chat_request(
        self, message: str, conversation_id: str | UUID | None = None
    ) -> ContinueConversationResponse: ...

    async def get_user_chats(self) -> ConversationListResponse: ...

    async def delete_conversation(self, conversation_id: str | UUID) -> StatusResponse: ...

    async def delete_user_chats(self) -> StatusResponse: ...


class ConversationState:
    """Sidebar list, visible transcript and the pending turn of one chat window."""

    def __init__(self, api: ChatApi, reveal_interval: float = 0.003):
        self.api = api
        self.reveal_interval = reveal_interval
        self.conversations: list[ConversationResponse] = []
        self.current_conversation_id: UUID | None = None
        self.messages: list[ChatMessageResponse] = []
        self.pending: PendingTurn = Idle()
        self.needs_resync = False
        self.reveal: StreamingReveal | None = None
        # Bumped whenever a stale answer updates the sidebar
        self._stale_updates = 0

    @property
    def is_sending(self) -> bool:
        return isinstance(self.pending, Sent)

    async def load(self) -> None:
        """Fetch conversations from the server and show the first one.

        Falls back to the legacy flat history when the user has no
        conversations yet.
        """
        listing = await self.api.get_user_chats()
        self._invalidate_pending()
        self.conversations = list(listing.conversations)
        self.needs_resync = False

        if self.conversations:
            first = self.conversations[0]
            self.current_conversation_id = first.id
            self.messages = list(first.chats)
        else:
            self.current_conversation_id = None
            self.messages = list(listing.chats)

    async def submit(self, text: str) -> ContinueConversationResponse | None:
        """Send a user turn with optimistic display.

        Returns the server response when it is still current, None when the
        user moved on before it arrived.

        Raises:
            ValueError: If the text is empty.
            ChatClientError: If the current send failed; the display is rolled back.
        """
        if not text or not text.strip():
            raise ValueError("Message is required")

        messages_snapshot = list(self.messages)
        conversations_snapshot = [conversation.model_copy(deep=True) for conversation in self.conversations]
        correlation_id = uuid.uuid4()
        conversation_id = self.current_conversation_id
        stale_updates_before = self._stale_updates

        self.messages.append(
            ChatMessageResponse(
                id=uuid.uuid4(),
                role=MessageRole.USER,
                content=text,
                timestamp=datetime.now(UTC),
            )
        )
        self.pending = Sent(correlation_id)

        try:
            response = await self.api.send_chat_request(text, conversation_id)
        except ChatClientError as e:
            if not self._is_current(correlation_id):
                logger.info("Dropping failure of stale turn %s: %s", correlation_id, e.message)
                return None
            self.messages = messages_snapshot
            self.conversations = conversations_snapshot
            self.pending = Failed(correlation_id, e)
            # The restored list misses what stale answers added meanwhile
            if self._stale_updates != stale_updates_before:
                self.needs_resync = True
            if e.user_turn_persisted or isinstance(e, NetworkError):
                self.needs_resync = True
            raise

        if not self._is_current(correlation_id):
            logger.info("Turn %s answered after the user moved on", correlation_id)
            self._upsert_conversation(response)
            self._stale_updates += 1
            return None

        self.messages = list(response.chats)
        self.current_conversation_id = response.conversation_id
        self._upsert_conversation(response)
        self.pending = Completed(correlation_id)
        self._start_reveal()
        return response

    def select_conversation(self, conversation_id: str | UUID) -> None:
        """Switch the transcript to another conversation from the list."""
        wanted = UUID(str(conversation_id))
        conversation = self._find(wanted)
        if conversation is None:
            raise ValueError(f"Unknown conversation: {conversation_id}")

        self._invalidate_pending()
        self.current_conversation_id = conversation.id
        self.messages = list(conversation.chats)

    def new_conversation(self) -> None:
        """Start an empty transcript; the server creates the conversation on the first send."""
        self._invalidate_pending()
        self.current_conversation_id = None
        self.messages = []

    async def delete_conversation(self, conversation_id: str | UUID) -> None:
        """Delete a conversation on the server and drop it from the list.

        Deleting the open conversation moves to the next one, or to an empty
        transcript when none is left.
        """
        wanted = UUID(str(conversation_id))
        await self.api.delete_conversation(wanted)
        self.conversations = [conversation for conversation in self.conversations if conversation.id != wanted]

        if self.current_conversation_id == wanted:
            if self.conversations:
                self.select_conversation(self.conversations[0].id)
            else:
                self.new_conversation()

    async def delete_all(self) -> None:
        """Delete every conversation on the server and start an empty transcript."""
        await self.api.delete_user_chats()
        self.conversations = []
        self.new_conversation()

    def search(self, query: str) -> list[ConversationResponse]:
        """Conversations whose name or any message contains ``query``, ignoring case."""
        needle = query.strip().lower()
        if not needle:
            return list(self.conversations)
        return [
            conversation
            for conversation in self.conversations
            if needle in conversation.name.lower()
            or any(needle in message.content.lower() for message in conversation.chats)
        ]

    def _is_current(self, correlation_id: UUID) -> bool:
        return isinstance(self.pending, Sent) and self.pending.correlation_id == correlation_id

    def _invalidate_pending(self) -> None:
        self.pending = Idle()
        if self.reveal is not None:
            self.reveal.cancel()
            self.reveal = None

    def _find(self, conversation_id: UUID) -> ConversationResponse | None:
        return next((c for c in self.conversations if c.id == conversation_id), None)

    def _upsert_conversation(self, response: ContinueConversationResponse) -> None:
        existing = self._find(response.conversation_id)
        if existing is not None:
            existing.chats = list(response.chats)
            existing.name = response.conversation_name
            return

        created_at = response.chats[0].timestamp if response.chats else datetime.now(UTC)
        self.conversations.insert(
            0,
            ConversationResponse(
                id=response.conversation_id,
                name=response.conversation_name or DEFAULT_CONVERSATION_NAME,
                chats=list(response.chats),
                created_at=created_at,
            ),
        )

    def _start_reveal(self) -> None:
        if self.reveal is not None:
            self.reveal.cancel()
            self.reveal = None
        if not self.messages or self.messages[-1].role != MessageRole.ASSISTANT:
            return
        self.reveal = StreamingReveal(self.messages[-1].content, interval=self.reveal_interval)
        if self.reveal.immediate:
            # Code is shown whole; no timer needed
            self.reveal.displayed = self.reveal.content
            self.reveal.done = True
        else:
            self.reveal.start()
