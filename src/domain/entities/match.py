"""Like and match domain entities, pair keys and change event constants."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from domain.entities.profile import Profile


def like_key(from_id: UUID, to_id: UUID) -> str:
    """Key of a directional like: ``<from>_<to>``."""
    return f"{from_id}_{to_id}"


def pair_key(user_a: UUID, user_b: UUID) -> str:
    """Deterministic key of an unordered pair, shared by match and conversation.

    Both participants compute the same key no matter who acts first.
    """
    low, high = sorted((str(user_a), str(user_b)))
    return f"{low}_{high}"


# --- Change event constants ---
# Format: {entity_type}.{action}


class ChatEvents:
    """Change event names published on the update stream."""

    MATCH_FORMED = "match.formed"
    MATCH_DISSOLVED = "match.dissolved"
    MESSAGE_CREATED = "message.created"
    MESSAGE_SEEN = "message.seen"


def thread_topic(match_id: str) -> str:
    """Update-stream topic for one conversation."""
    return f"thread:{match_id}"


def user_topic(user_id: UUID) -> str:
    """Update-stream topic for everything touching one user's matches."""
    return f"user:{user_id}"


@dataclass
class LikeRecord:
    """Domain entity for one-directional interest."""

    from_id: UUID
    to_id: UUID
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def key(self) -> str:
        return like_key(self.from_id, self.to_id)


@dataclass
class MatchRecord:
    """Domain entity for a mutual like between two users.

    ``user_a``/``user_b`` are stored in canonical (sorted) order so the
    record for a pair is identical whichever side created it.
    """

    user_a: UUID
    user_b: UUID
    id: str = ""
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Normalize participant order and derive the pair key."""
        if str(self.user_b) < str(self.user_a):
            self.user_a, self.user_b = self.user_b, self.user_a
        self.id = pair_key(self.user_a, self.user_b)

    @property
    def users(self) -> tuple[UUID, UUID]:
        return (self.user_a, self.user_b)

    def includes(self, user_id: UUID) -> bool:
        return user_id in self.users

    def other(self, user_id: UUID) -> UUID:
        """Return the participant that is not ``user_id``."""
        if user_id == self.user_a:
            return self.user_b
        if user_id == self.user_b:
            return self.user_a
        raise ValueError(f"User {user_id} is not part of match {self.id}")


@dataclass(frozen=True, slots=True)
class LikeOutcome:
    """Read-only value object returned by a swipe-right.

    ``matched`` is true whenever the pair is matched after the like;
    ``created`` is true only for the call whose conditional create won,
    which is the one that emits the "match formed" signal.
    """

    matched: bool
    created: bool = False
    match_id: str | None = None
    matched_profile: Profile | None = None


@dataclass(frozen=True, slots=True)
class MatchSummary:
    """Read-only value object: a match with the other participant's profile."""

    match: MatchRecord
    profile: Profile
