"""Match repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.match import MatchRecord


class IMatchRepository(Protocol):
    """Repository interface for MatchRecord entities."""

    async def get(self, match_id: str) -> MatchRecord | None:
        """Get a match by its pair key."""
        ...

    async def get_all_for_user(self, user_id: UUID) -> list[MatchRecord]:
        """Get every match the user participates in, newest first."""
        ...

    async def get_partner_ids(self, user_id: UUID) -> set[UUID]:
        """Get the IDs of everyone the user is matched with."""
        ...

    async def create(self, match: MatchRecord) -> MatchRecord:
        """Insert a match. Raises IntegrityError if the pair key is taken."""
        ...

    async def delete(self, match_id: str) -> bool:
        """Delete a match and return whether it existed."""
        ...
