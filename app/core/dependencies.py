# app/core/dependencies.py
import logging
import uuid
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import TokenAuthenticator
from app.database import get_db
from app.domains.chat.naming import NamingPolicy
from app.domains.chat.service import ChatService
from app.domains.user.service import UserService
from app.exceptions.user import UserNotFoundError
from app.services.generation import TextGenerator
from models import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)
auth = TokenAuthenticator()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def validate_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> dict:
    """Validate and decode the session token.

    The token is read from the ``Authorization: Bearer`` header, falling back
    to the session cookie.

    Returns:
        dict: Decoded token payload

    Raises:
        HTTPException: If token is missing, invalid or expired
    """
    token = credentials.credentials if credentials else request.cookies.get(settings.auth_cookie_name)
    if not token:
        raise _unauthorized("Authentication token is required")

    try:
        payload = auth.verify_token(token)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Token validation error: %s", str(e))
        raise _unauthorized("Authentication failed") from e

    if not payload or not payload.get("id"):
        raise _unauthorized("Invalid token payload - missing user ID")
    return payload


async def get_current_user_id(request: Request, payload: dict = Depends(validate_token)) -> UUID:
    """Get the authenticated user id from the token payload."""
    try:
        user_id = uuid.UUID(str(payload["id"]))
    except ValueError as e:
        raise _unauthorized("Invalid token payload - malformed user ID") from e

    # Add user info to request state for logging
    request.state.user_id = user_id
    return user_id


async def get_current_user(
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get current authenticated user.

    Raises:
        UserNotFoundError: If the token refers to a user that no longer exists
        HTTPException: If the account is inactive
    """
    user = await UserService(db).get_user_by_id(user_id)
    if not user:
        raise UserNotFoundError()

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")
    return user


def get_generator(request: Request) -> TextGenerator | None:
    """Get the process-wide generator built at startup, if AI is configured."""
    return getattr(request.app.state, "generator", None)


def get_chat_service(
    db: AsyncSession = Depends(get_db),
    generator: TextGenerator | None = Depends(get_generator),
) -> ChatService:
    """Build a chat service for the request."""
    return ChatService(
        db,
        generator,
        naming_policy=NamingPolicy(
            generator,
            max_length=settings.conversation_name_max_length,
            fallback_length=settings.conversation_name_fallback_length,
        ),
        create_on_miss=settings.chat_create_on_missing_conversation,
        system_prompt=settings.chat_system_prompt,
    )
