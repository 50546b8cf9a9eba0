"""Conversation domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from domain.entities.profile import Profile


@dataclass
class Message:
    """Domain entity for one message in a match's conversation.

    ``position`` is the store-assigned insertion order; it breaks ties
    between messages that share a timestamp.
    """

    match_id: str
    sender_id: UUID
    text: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    position: int = 0
    seen: bool = False

    def is_unread_for(self, viewer_id: UUID) -> bool:
        """A message is unread for the viewer if the other side sent it and it is unseen."""
        return self.sender_id != viewer_id and not self.seen


@dataclass(frozen=True, slots=True)
class ChatPreview:
    """Read-only value object: one row of a viewer's chat list.

    Derived from the match and its latest message on every read; never
    persisted.
    """

    match_id: str
    profile: Profile
    preview_text: str
    sort_at: datetime
    matched_at: datetime
    last_message: str | None = None
    last_sender_id: UUID | None = None
    last_message_at: datetime | None = None
    unread: bool = False

    @property
    def has_messages(self) -> bool:
        return self.last_message_at is not None
