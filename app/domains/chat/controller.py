"""Chat API controller with FastAPI endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Path, status

from app.core.dependencies import get_chat_service, get_current_user_id, validate_token
from app.domains.chat.service import ChatService
from app.exceptions.base import BaseAppException
from app.schemas.base import StatusResponse
from app.schemas.chat import (
    ContinueConversationRequest,
    ContinueConversationResponse,
    ConversationListResponse,
)


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/chat",
    tags=["chat"],
    dependencies=[Depends(validate_token)],
)


def _unexpected(action: str, error: Exception) -> HTTPException:
    logger.error("Unexpected error while %s: %s", action, str(error))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed while {action}",
    )


@router.post("/new", response_model=ContinueConversationResponse)
async def continue_conversation(
    chat_request: ContinueConversationRequest = Body(...),
    user_id: UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    """Send a user turn and receive the full transcript.

    Args:
        chat_request: Message text and optional conversation ID
        user_id: Current authenticated user ID
        service: Chat service for the request

    Returns:
        Messages of the conversation with its id and name
    """
    try:
        return await service.continue_conversation(
            user_id=user_id,
            message_text=chat_request.message,
            conversation_id=chat_request.conversation_id,
        )
    except BaseAppException:
        raise
    except Exception as e:
        raise _unexpected("continuing conversation", e) from e


@router.get("/all-chats", response_model=ConversationListResponse)
async def get_all_conversations(
    user_id: UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    """Get all live conversations plus the legacy flat history."""
    try:
        conversations = await service.list_conversations(user_id)
        legacy = await service.get_legacy_messages(user_id)
        return ConversationListResponse(message="OK", conversations=conversations, chats=legacy)
    except BaseAppException:
        raise
    except Exception as e:
        raise _unexpected("listing conversations", e) from e


@router.delete("/conversation/{conversation_id}", response_model=StatusResponse)
async def delete_conversation(
    conversation_id: str = Path(..., description="Conversation ID"),
    user_id: UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    """Soft delete one conversation. Unknown ids are acknowledged as well."""
    try:
        await service.delete_conversation(user_id=user_id, conversation_id=conversation_id)
        return StatusResponse(message="OK")
    except BaseAppException:
        raise
    except Exception as e:
        raise _unexpected("deleting conversation", e) from e


@router.delete("/delete", response_model=StatusResponse)
async def delete_all_conversations(
    user_id: UUID = Depends(get_current_user_id),
    service: ChatService = Depends(get_chat_service),
):
    """Soft delete every conversation of the user and clear the legacy history."""
    try:
        await service.delete_all_conversations(user_id)
        return StatusResponse(message="OK")
    except BaseAppException:
        raise
    except Exception as e:
        raise _unexpected("deleting conversations", e) from e
