"""Profile domain entity (read-only mirror of the profile catalog)."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

MINIMUM_AGE = 18


class Gender(StrEnum):
    """Gender a profile declares for itself."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class InterestedIn(StrEnum):
    """Which genders a profile wants to see in its deck."""

    MALE = "male"
    FEMALE = "female"
    EVERYONE = "everyone"


class DatingPreference(StrEnum):
    """What kind of relationship the user is looking for."""

    LONG_TERM = "long-term"
    SHORT_TERM = "short-term"
    ONE_NIGHT = "one-night"
    FRIEND = "friend"


@dataclass
class Profile:
    """Domain entity for a user profile (owned by the profile catalog)."""

    name: str
    age: int
    gender: str
    interested_in: str
    id: UUID = field(default_factory=uuid4)
    bio: str = ""
    hobbies: str | None = None
    image_url: str | None = None
    dating_preference: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True, slots=True)
class ScoredProfile:
    """Read-only value object: a deck candidate with its compatibility score."""

    profile: Profile
    score: int
