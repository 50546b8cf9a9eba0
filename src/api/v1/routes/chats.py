"""Chat API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_chat_list_service, get_conversation_service
from api.v1.schemas.chat import (
    ChatListResponse,
    ChatPreviewResponse,
    MarkAllReadResponse,
    MessageCreate,
    MessageDetailResponse,
    MessageResponse,
    ThreadResponse,
)
from core.rate_limit import MESSAGE_LIMIT, READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.chat_list_service import ChatListService
from domain.services.conversation_service import ConversationService

router = APIRouter(prefix="/chats", tags=["chats"])


@router.get(
    "",
    response_model=ChatListResponse,
    summary="Get the chat list",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_chat_list(
    request: Request,
    user: CurrentUser,
    service: ChatListService = Depends(get_chat_list_service),
) -> ChatListResponse:
    """Get one preview per match with the latest message and unread flag, most recent first."""
    previews = await service.get_chat_list(user.id)
    return ChatListResponse(data=[ChatPreviewResponse.from_entity(p) for p in previews])


@router.get(
    "/{match_id}/messages",
    response_model=ThreadResponse,
    summary="Get a conversation",
    responses={404: {"description": "Match not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_thread(
    request: Request,
    match_id: str,
    user: CurrentUser,
    service: ConversationService = Depends(get_conversation_service),
) -> ThreadResponse:
    """Get every message of the conversation, oldest first."""
    messages = await service.get_thread(match_id, user.id)
    return ThreadResponse(data=[MessageResponse.model_validate(m) for m in messages])


@router.post(
    "/{match_id}/messages",
    response_model=MessageDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message",
    responses={
        201: {"description": "Message stored"},
        400: {"description": "Empty or too long text"},
        404: {"description": "Match not found"},
    },
)
@limiter.limit(MESSAGE_LIMIT)  # type: ignore[untyped-decorator]
async def send_message(
    request: Request,
    match_id: str,
    body: MessageCreate,
    user: CurrentUser,
    service: ConversationService = Depends(get_conversation_service),
) -> MessageDetailResponse:
    """Append a message to the conversation."""
    message = await service.send_message(match_id, user.id, body.text)
    return MessageDetailResponse(data=MessageResponse.model_validate(message))


@router.post(
    "/{match_id}/messages/{message_id}/read",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Mark a message as read",
    responses={404: {"description": "Match or message not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def mark_read(
    request: Request,
    match_id: str,
    message_id: UUID,
    user: CurrentUser,
    service: ConversationService = Depends(get_conversation_service),
) -> None:
    """Flag a received message as seen. No-op if already seen."""
    await service.mark_read(match_id, message_id, user.id)
    return None


@router.post(
    "/{match_id}/read",
    response_model=MarkAllReadResponse,
    summary="Mark the whole conversation as read",
    responses={404: {"description": "Match not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def mark_all_read(
    request: Request,
    match_id: str,
    user: CurrentUser,
    service: ConversationService = Depends(get_conversation_service),
) -> MarkAllReadResponse:
    """Flag every received message of the conversation as seen."""
    updated = await service.mark_all_read(match_id, user.id)
    return MarkAllReadResponse(updated=updated)
