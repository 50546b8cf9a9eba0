"""Like and Match API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_match_service
from api.v1.schemas.match import (
    LikeCreate,
    LikeDetailResponse,
    LikeResponse,
    MatchListResponse,
    MatchResponse,
)
from api.v1.schemas.profile import ProfileResponse
from core.rate_limit import READ_LIMIT, SWIPE_LIMIT, WRITE_LIMIT, limiter
from domain.services.match_service import MatchService

likes_router = APIRouter(prefix="/likes", tags=["likes"])


@likes_router.post(
    "",
    response_model=LikeDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Like a profile",
    responses={
        201: {"description": "Like recorded; `matched` tells if it is mutual"},
        400: {"description": "Liking yourself"},
        404: {"description": "Target profile not found"},
    },
)
@limiter.limit(SWIPE_LIMIT)  # type: ignore[untyped-decorator]
async def like_profile(
    request: Request,
    body: LikeCreate,
    user: CurrentUser,
    service: MatchService = Depends(get_match_service),
) -> LikeDetailResponse:
    """Swipe right on a profile. Idempotent; forms a match when the like is mutual."""
    outcome = await service.like(user.id, body.target_id)
    return LikeDetailResponse(
        data=LikeResponse(
            matched=outcome.matched,
            created=outcome.created,
            match_id=outcome.match_id,
            matched_profile=(
                ProfileResponse.from_entity(outcome.matched_profile)
                if outcome.matched_profile
                else None
            ),
        )
    )


router = APIRouter(prefix="/matches", tags=["matches"])


@router.get(
    "",
    response_model=MatchListResponse,
    summary="List matches",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_matches(
    request: Request,
    user: CurrentUser,
    service: MatchService = Depends(get_match_service),
) -> MatchListResponse:
    """Get everyone the user is matched with, newest match first."""
    summaries = await service.list_matches(user.id)
    return MatchListResponse(
        data=[
            MatchResponse(
                match_id=item.match.id,
                matched_at=item.match.created_at,
                profile=ProfileResponse.from_entity(item.profile),
            )
            for item in summaries
        ]
    )


@router.delete(
    "/{other_user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unmatch a user",
    responses={
        204: {"description": "Match and conversation removed (or already gone)"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def unmatch(
    request: Request,
    other_user_id: UUID,
    user: CurrentUser,
    service: MatchService = Depends(get_match_service),
) -> None:
    """Remove the match with another user and delete the chat history. Idempotent."""
    await service.unmatch(user.id, other_user_id)
    return None
