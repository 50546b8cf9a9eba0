"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass
class TokenUser:
    """The caller identified by a bearer token.

    ``id`` is the profile ID every matching and chat operation acts as.
    Phone sign-ins carry no email, so it is optional.
    """

    id: UUID
    email: Optional[str] = None
    display_name: Optional[str] = None
    role: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate an authentication token.

        Returns:
            TokenUser if valid, None if invalid
        """
        ...

    def create_token(self, user: TokenUser) -> str:
        """Create an authentication token for a user."""
        ...
