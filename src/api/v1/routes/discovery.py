"""Discovery (swipe deck) API routes."""

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_discovery_service
from api.v1.schemas.profile import DeckCardResponse, DeckResponse
from core.config import settings
from core.rate_limit import READ_LIMIT, limiter
from domain.services.discovery_service import DiscoveryService

router = APIRouter(prefix="/deck", tags=["discovery"])


@router.get(
    "",
    response_model=DeckResponse,
    summary="Get the swipe deck",
    responses={
        200: {"description": "Ranked candidates, best match first"},
        404: {"description": "The caller has no profile yet"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_deck(
    request: Request,
    user: CurrentUser,
    limit: int = Query(settings.swipe_deck_max_size, ge=1, le=settings.swipe_deck_max_size),
    service: DiscoveryService = Depends(get_discovery_service),
) -> DeckResponse:
    """Get candidates the user has not liked or matched, ranked by compatibility."""
    deck = await service.get_swipe_deck(user.id, limit=limit)
    return DeckResponse(data=[DeckCardResponse.from_entity(item) for item in deck])
