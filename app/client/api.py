"""Async HTTP communicator for the chat API."""

import logging
from typing import Any
from uuid import UUID

import httpx

from app.client.errors import ChatClientError, NetworkError, ServerError, SessionExpiredError
from app.schemas.base import StatusResponse
from app.schemas.chat import ContinueConversationResponse, ConversationListResponse
from app.schemas.user import LogoutResponse, UserInfoResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


class ChatApiClient:
    """Thin wrapper over ``httpx.AsyncClient`` speaking the chat API.

    The session cookie set at login is kept in the client's cookie jar; a
    bearer token can be supplied instead. Every failure is raised as a
    ``ChatClientError`` subclass.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else None
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ChatApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, fallback: str, **kwargs) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, path, str(e))
            raise NetworkError() from e

        if response.is_success:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        details = body.get("details") if isinstance(body.get("details"), dict) else None
        error_code = body.get("error_code")

        if response.status_code == 401:
            raise SessionExpiredError(error_code=error_code, details=details)
        if response.status_code >= 500:
            raise ServerError(
                body.get("message") or "Server error. Please try again later.",
                status_code=response.status_code,
                error_code=error_code,
                details=details,
            )
        raise ChatClientError(
            body.get("message") or fallback,
            status_code=response.status_code,
            error_code=error_code,
            details=details,
        )

    async def send_chat_request(
        self, message: str, conversation_id: str | UUID | None = None
    ) -> ContinueConversationResponse:
        payload = {
            "message": message,
            "conversationId": str(conversation_id) if conversation_id else None,
        }
        data = await self._request("POST", "/api/chat/new", "Unable to send chat", json=payload)
        return ContinueConversationResponse.model_validate(data)

    async def get_user_chats(self) -> ConversationListResponse:
        data = await self._request("GET", "/api/chat/all-chats", "Unable to load chats")
        return ConversationListResponse.model_validate(data)

    async def delete_conversation(self, conversation_id: str | UUID) -> StatusResponse:
        data = await self._request(
            "DELETE", f"/api/chat/conversation/{conversation_id}", "Unable to delete conversation"
        )
        return StatusResponse.model_validate(data)

    async def delete_user_chats(self) -> StatusResponse:
        data = await self._request("DELETE", "/api/chat/delete", "Unable to delete chats")
        return StatusResponse.model_validate(data)

    async def signup(self, name: str, email: str, password: str) -> UserInfoResponse:
        data = await self._request(
            "POST",
            "/api/user/signup",
            "Unable to signup",
            json={"name": name, "email": email, "password": password},
        )
        return UserInfoResponse.model_validate(data)

    async def login(self, email: str, password: str) -> UserInfoResponse:
        data = await self._request(
            "POST", "/api/user/login", "Unable to login", json={"email": email, "password": password}
        )
        return UserInfoResponse.model_validate(data)

    async def check_auth_status(self) -> UserInfoResponse:
        data = await self._request("GET", "/api/user/auth-status", "Unable to authenticate")
        return UserInfoResponse.model_validate(data)

    async def logout(self) -> LogoutResponse:
        data = await self._request("GET", "/api/user/logout", "Unable to logout")
        return LogoutResponse.model_validate(data)
