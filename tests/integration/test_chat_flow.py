"""
Integration tests for the chat flow.

The client-side communicator and conversation state talk to the real
application over an in-process ASGI transport, backed by the test database
and the fake generator.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport

from app.client.api import ChatApiClient
from app.client.errors import ServerError, SessionExpiredError
from app.client.state import Completed, ConversationState, Failed
from app.core.dependencies import auth, get_generator
from app.database import get_db
from app.exceptions.generation import GenerationTimeoutError
from app.main import app


@pytest_asyncio.fixture
async def wired_app(test_db, fake_generator):
    app.dependency_overrides[get_db] = lambda: test_db
    app.dependency_overrides[get_generator] = lambda: fake_generator
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def api(wired_app, test_user):
    async with ChatApiClient(
        base_url="http://test",
        token=auth.create_token(test_user.id),
        transport=ASGITransport(app=wired_app),
    ) as api_client:
        yield api_client


@pytest_asyncio.fixture
async def state(api):
    conversation_state = ConversationState(api, reveal_interval=0)
    yield conversation_state
    if conversation_state.reveal is not None:
        conversation_state.reveal.cancel()


@pytest.mark.asyncio
class TestChatFlow:
    """End-to-end conversation flows through the client state."""

    async def test_first_turn_creates_named_conversation(self, state):
        await state.load()
        assert state.conversations == []

        response = await state.submit("hello")

        assert isinstance(state.pending, Completed)
        assert state.current_conversation_id == response.conversation_id
        assert [m.content for m in state.messages] == ["hello", "Reply 1"]
        assert state.conversations[0].name == "Friendly Greeting"

    async def test_follow_up_stays_in_conversation(self, state):
        await state.load()
        first = await state.submit("hello")

        second = await state.submit("tell me more")

        assert second.conversation_id == first.conversation_id
        assert len(state.messages) == 4
        assert len(state.conversations) == 1

    async def test_reload_matches_server(self, state, api):
        await state.load()
        await state.submit("hello")
        state.new_conversation()
        await state.submit("another topic")

        fresh = ConversationState(api, reveal_interval=0)
        await fresh.load()

        assert len(fresh.conversations) == 2
        assert {c.id for c in fresh.conversations} == {c.id for c in state.conversations}

    async def test_delete_conversation(self, state, api):
        await state.load()
        await state.submit("keep me")
        kept_id = state.current_conversation_id
        state.new_conversation()
        await state.submit("drop me")

        await state.delete_conversation(state.current_conversation_id)

        listing = await api.get_user_chats()
        assert [c.id for c in listing.conversations] == [kept_id]
        assert state.current_conversation_id == kept_id

    async def test_delete_all(self, state, api):
        await state.load()
        await state.submit("one")
        state.new_conversation()
        await state.submit("two")

        await state.delete_all()

        assert state.conversations == []
        assert (await api.get_user_chats()).conversations == []

    async def test_generation_failure_resyncs(self, state, fake_generator):
        await state.load()
        fake_generator.error = GenerationTimeoutError()

        with pytest.raises(ServerError) as exc_info:
            await state.submit("hello")

        assert exc_info.value.error_code == "GENERATION_TIMEOUT"
        assert isinstance(state.pending, Failed)
        assert state.messages == []
        assert state.needs_resync is True

        await state.load()

        assert state.needs_resync is False
        assert [m.content for m in state.messages] == ["hello"]

    async def test_expired_session(self, wired_app):
        async with ChatApiClient(
            base_url="http://test", token="not-a-token", transport=ASGITransport(app=wired_app)
        ) as api_client:
            with pytest.raises(SessionExpiredError):
                await api_client.get_user_chats()

    async def test_cookie_session(self, wired_app, test_db):
        async with ChatApiClient(base_url="http://test", transport=ASGITransport(app=wired_app)) as api_client:
            signed_up = await api_client.signup("Flow User", "flow@example.com", "hunter22")
            assert signed_up.email == "flow@example.com"

            response = await api_client.send_chat_request("hello")
            assert response.conversation_name == "Friendly Greeting"

            status = await api_client.check_auth_status()
            assert status.name == "Flow User"

            await api_client.logout()
            with pytest.raises(SessionExpiredError):
                await api_client.get_user_chats()
