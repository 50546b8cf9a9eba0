"""Pydantic schemas for Like and Match API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from api.v1.schemas.profile import ProfileResponse


class LikeCreate(BaseModel):
    """Schema for a swipe-right."""

    target_id: UUID


class LikeResponse(BaseModel):
    """Schema for the result of a like."""

    matched: bool
    created: bool = False
    match_id: str | None = None
    matched_profile: ProfileResponse | None = None


class LikeDetailResponse(BaseModel):
    """Schema for single like result."""

    data: LikeResponse


class MatchResponse(BaseModel):
    """Schema for one match with the other participant."""

    match_id: str
    matched_at: datetime
    profile: ProfileResponse


class MatchListResponse(BaseModel):
    """Schema for list of matches."""

    data: list[MatchResponse]
