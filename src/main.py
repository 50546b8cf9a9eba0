"""Main FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import VERSION as APP_VERSION
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from api.v1.dependencies import get_change_feed
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from infrastructure.database.session import engine
from infrastructure.realtime.pg_change_feed import running_feed

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown tasks."""
    logger.info("app_started", environment=settings.app_env, version=APP_VERSION)
    async with running_feed(get_change_feed()):
        yield
    await engine.dispose()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## Matching and Chat Engine\n\n"
            "Heartline ranks candidate profiles, turns mutual likes into "
            "matches and hosts one conversation per match.\n\n"
            "### Features\n"
            "- **Swipe deck**: Candidates ranked by compatibility score\n"
            "- **Matches**: Formed exactly once when two users like each other\n"
            "- **Chats**: Ordered conversations with read receipts\n"
            "- **Live updates**: WebSocket streams of the chat list and of a thread\n\n"
            "### Authentication\n"
            "All endpoints (except `/health`) require a valid JWT token "
            "in the Authorization header:\n"
            "```\nAuthorization: Bearer <your_token>\n```\n"
            "WebSocket streams take the token as a `?token=` query parameter.\n\n"
            "### Rate Limits\n"
            "- GET endpoints: 30 requests/minute\n"
            "- Likes: 60 requests/minute\n"
            "- Messages: 30 requests/minute\n"
            "- Other writes: 10 requests/minute"
        ),
        version=APP_VERSION,
        debug=settings.debug,
        contact={
            "name": "Heartline Support",
        },
        license_info={
            "name": "MIT",
        },
        openapi_tags=[
            {
                "name": "health",
                "description": "Health check endpoints",
            },
            {
                "name": "discovery",
                "description": "Ranked swipe deck",
            },
            {
                "name": "likes",
                "description": "Swipe-right operations",
            },
            {
                "name": "matches",
                "description": "Match listing and unmatching",
            },
            {
                "name": "chats",
                "description": "Chat list, conversations and read receipts",
            },
            {
                "name": "realtime",
                "description": "WebSocket snapshot streams",
            },
        ],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Security & tracking middleware (LIFO order - last added = outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
