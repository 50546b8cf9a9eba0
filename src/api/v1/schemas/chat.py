"""Pydantic schemas for Chat API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.profile import ProfileResponse
from domain.entities.message import ChatPreview


class MessageCreate(BaseModel):
    """Schema for sending a message.

    Whitespace-only text passes schema validation and is rejected by the
    conversation service with VALIDATION_ERROR.
    """

    text: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    """Schema for Message response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "456e4567-e89b-12d3-a456-426614174000",
                "match_id": "123e..._789e...",
                "sender_id": "123e4567-e89b-12d3-a456-426614174000",
                "text": "hi!",
                "created_at": "2026-01-28T10:00:00",
                "position": 0,
                "seen": False,
            }
        },
    )

    id: UUID
    match_id: str
    sender_id: UUID
    text: str
    created_at: datetime
    position: int
    seen: bool


class MessageDetailResponse(BaseModel):
    """Schema for single Message."""

    data: MessageResponse


class ThreadResponse(BaseModel):
    """Schema for a full conversation."""

    data: list[MessageResponse]


class ChatPreviewResponse(BaseModel):
    """Schema for one chat list row."""

    match_id: str
    profile: ProfileResponse
    preview_text: str
    last_message: str | None = None
    last_sender_id: UUID | None = None
    last_message_at: datetime | None = None
    matched_at: datetime
    unread: bool

    @classmethod
    def from_entity(cls, preview: ChatPreview) -> "ChatPreviewResponse":
        return cls(
            match_id=preview.match_id,
            profile=ProfileResponse.from_entity(preview.profile),
            preview_text=preview.preview_text,
            last_message=preview.last_message,
            last_sender_id=preview.last_sender_id,
            last_message_at=preview.last_message_at,
            matched_at=preview.matched_at,
            unread=preview.unread,
        )


class ChatListResponse(BaseModel):
    """Schema for the chat list."""

    data: list[ChatPreviewResponse]


class MarkAllReadResponse(BaseModel):
    """Schema for bulk read acknowledgement."""

    updated: int
