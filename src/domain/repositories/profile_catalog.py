"""Profile catalog protocol (external collaborator)."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileCatalog(Protocol):
    """Read-only source of profiles.

    Implementations raise ProfileCatalogUnavailableError when the
    backing source cannot answer; a missing profile is ``None``.
    """

    async def get(self, user_id: UUID) -> Profile | None:
        """Get a single profile."""
        ...

    async def list_all(self) -> list[Profile]:
        """Get every profile in catalog order."""
        ...
