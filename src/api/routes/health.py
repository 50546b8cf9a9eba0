"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.dependencies import get_change_feed
from core.config import settings
from infrastructure.database.session import get_async_session, ping
from infrastructure.realtime.change_feed import ChangeFeed
from infrastructure.realtime.pg_change_feed import PostgresChangeFeed

router = APIRouter(tags=["health"])

VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    live_subscriptions: int | None = None


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """
    Basic health check for load balancers.

    Returns service status without checking dependencies. Fast and lightweight.
    """
    return HealthResponse(
        status="healthy",
        version=VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
    change_feed: ChangeFeed | PostgresChangeFeed = Depends(get_change_feed),
) -> HealthResponse:
    """
    Detailed health check including database connectivity and the
    number of open WebSocket subscriptions on this worker.
    """
    db_status = await ping(db)
    overall_status = "healthy" if db_status == "healthy" else "degraded"

    return HealthResponse(
        status=overall_status,
        version=VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.app_env,
        database=db_status,
        live_subscriptions=change_feed.active_subscriptions,
    )
