"""Like ledger repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.match import LikeRecord


class ILikeRepository(Protocol):
    """Repository interface for the Like Ledger.

    No delete operation: like history is retained after an unmatch.
    """

    async def upsert(self, like: LikeRecord) -> LikeRecord:
        """Record a like; re-liking overwrites the existing record."""
        ...

    async def exists(self, from_id: UUID, to_id: UUID) -> bool:
        """Point lookup for a directional like."""
        ...

    async def get_targets(self, from_id: UUID) -> set[UUID]:
        """Get the IDs of every user ``from_id`` has liked."""
        ...
