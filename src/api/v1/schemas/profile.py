"""Pydantic schemas for profile and deck responses."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from domain.entities.profile import Profile, ScoredProfile


class ProfileResponse(BaseModel):
    """Schema for a public profile card."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Ann",
                "age": 24,
                "gender": "female",
                "interested_in": "male",
                "bio": "Coffee first.",
                "hobbies": "climbing, film",
                "image_url": None,
                "dating_preference": "long-term",
            }
        },
    )

    id: UUID
    name: str
    age: int
    gender: str
    interested_in: str
    bio: str
    hobbies: str | None = None
    image_url: str | None = None
    dating_preference: str | None = None

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        return cls.model_validate(profile)


class DeckCardResponse(BaseModel):
    """Schema for one scored card of the swipe deck."""

    profile: ProfileResponse
    score: int

    @classmethod
    def from_entity(cls, item: ScoredProfile) -> "DeckCardResponse":
        return cls(profile=ProfileResponse.from_entity(item.profile), score=item.score)


class DeckResponse(BaseModel):
    """Schema for the swipe deck."""

    data: list[DeckCardResponse]
