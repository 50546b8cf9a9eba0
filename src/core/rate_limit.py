"""Rate limiting configuration using slowapi."""

import hashlib

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import settings

# Route budgets. Swiping and chatting are bursty, so they get more room
# than the other writes.
READ_LIMIT = "30/minute"
WRITE_LIMIT = "10/minute"
SWIPE_LIMIT = "60/minute"
MESSAGE_LIMIT = "30/minute"


def get_rate_limit_key(request: Request) -> str:
    """Bucket authenticated callers by token, anonymous ones by address.

    Several users behind one NAT would otherwise share a single budget.
    The token is hashed so raw credentials never sit in limiter storage.
    """
    authorization = request.headers.get("authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token:
        return "token:" + hashlib.sha256(token.encode()).hexdigest()[:32]
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_rate_limit_key,
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    detail = exc.detail if isinstance(exc, RateLimitExceeded) else str(exc)
    return JSONResponse(
        status_code=429,
        content={
            "error_code": "RATE_LIMIT_EXCEEDED",
            "message": f"Rate limit exceeded: {detail}",
            "details": {
                "retry_after": str(detail),
            },
        },
        headers={"Retry-After": "60"},
    )
