"""Conversation store repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.message import Message


class IMessageRepository(Protocol):
    """Repository interface for Message entities, one log per match."""

    async def get(self, match_id: str, message_id: UUID) -> Message | None:
        """Get a message scoped to its conversation."""
        ...

    async def get_latest(self, match_id: str) -> Message | None:
        """Get the most recent message (timestamp, then position)."""
        ...

    async def list_ordered(self, match_id: str) -> list[Message]:
        """Get the full thread ascending by timestamp, then position."""
        ...

    async def create(self, message: Message) -> Message:
        """Insert a message. Raises IntegrityError on a position collision."""
        ...

    async def mark_seen(self, match_id: str, message_id: UUID) -> bool:
        """Flip the seen flag. Returns True only if it changed."""
        ...

    async def mark_all_seen(self, match_id: str, recipient_id: UUID) -> int:
        """Mark every unseen message not sent by ``recipient_id``. Returns count."""
        ...

    async def delete_conversation(self, match_id: str) -> int:
        """Delete every message of a conversation. Returns count deleted."""
        ...
