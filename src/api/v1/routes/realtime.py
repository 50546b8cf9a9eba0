"""WebSocket routes streaming chat list and conversation snapshots."""

import asyncio
from collections.abc import AsyncIterator, Callable
from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query, WebSocket, status

from api.dependencies.auth import authenticate_websocket, get_auth_provider
from api.v1.dependencies import get_chat_list_service, get_conversation_service
from api.v1.schemas.chat import ChatListResponse, ChatPreviewResponse, MessageResponse, ThreadResponse
from core.exceptions import AppException
from domain.services.chat_list_service import ChatListService
from domain.services.conversation_service import ConversationService
from infrastructure.auth.jwt_provider import JWTAuthProvider

logger = structlog.get_logger()

router = APIRouter(prefix="/ws", tags=["realtime"])


async def _serve_snapshots(
    websocket: WebSocket,
    snapshots: AsyncIterator[Any],
    render: Callable[[Any], dict[str, Any]],
) -> None:
    """Forward snapshots to the client until either side stops.

    The client disconnecting cancels the subscription; it never cancels
    a write, since writes happen in their own request.
    """

    async def forward() -> None:
        async for snapshot in snapshots:
            await websocket.send_json(render(snapshot))

    async def wait_for_disconnect() -> None:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                return

    sender = asyncio.create_task(forward())
    receiver = asyncio.create_task(wait_for_disconnect())
    try:
        done, _ = await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
        if sender in done and not receiver.done():
            exc = sender.exception()
            if isinstance(exc, AppException):
                await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=exc.message)
            elif exc is not None:
                logger.error("subscription_failed", error=str(exc), error_type=type(exc).__name__)
                await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
            else:
                await websocket.close(code=status.WS_1000_NORMAL_CLOSURE)
    finally:
        for task in (sender, receiver):
            task.cancel()
        await asyncio.gather(sender, receiver, return_exceptions=True)
        aclose = getattr(snapshots, "aclose", None)
        if aclose is not None:
            await aclose()


@router.websocket("/chats")
async def chat_list_stream(
    websocket: WebSocket,
    token: str | None = Query(None),
    service: ChatListService = Depends(get_chat_list_service),
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> None:
    """Stream the caller's chat list; a new snapshot follows every change."""
    user = await authenticate_websocket(websocket, token, auth_provider)
    if user is None:
        return
    await websocket.accept()
    logger.debug("chat_list_subscribed", user_id=str(user.id))

    await _serve_snapshots(
        websocket,
        service.watch_chat_list(user.id),
        lambda previews: ChatListResponse(
            data=[ChatPreviewResponse.from_entity(p) for p in previews]
        ).model_dump(mode="json"),
    )


@router.websocket("/chats/{match_id}")
async def thread_stream(
    websocket: WebSocket,
    match_id: str,
    token: str | None = Query(None),
    service: ConversationService = Depends(get_conversation_service),
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> None:
    """Stream one conversation; closes when the match is dissolved."""
    user = await authenticate_websocket(websocket, token, auth_provider)
    if user is None:
        return
    await websocket.accept()
    logger.debug("thread_subscribed", user_id=str(user.id), match_id=match_id)

    await _serve_snapshots(
        websocket,
        service.watch_thread(match_id, user.id),
        lambda messages: ThreadResponse(
            data=[MessageResponse.model_validate(m) for m in messages]
        ).model_dump(mode="json"),
    )
