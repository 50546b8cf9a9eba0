"""JWT authentication provider implementation.

Accepts Supabase-issued JWTs (ES256 via JWKS) and locally-created
tokens (HS256, used by tests and local tooling).

Supabase JWT payload structure:
    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "phone": "",
        "role": "authenticated",
        "aud": "authenticated",
        "user_metadata": { "name": "Ann" },
        "exp": 1234567890
    }
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from uuid import UUID

import httpx
import structlog
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()

# Module-level JWKS cache (fetched once, reused across requests)
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys(force_refresh: bool = False) -> dict[str, Any]:
    """Fetch and cache the JWKS signing keys, keyed by ``kid``."""
    global _jwks_cache
    if _jwks_cache is not None and not force_refresh:
        return _jwks_cache

    jwks_url = settings.supabase_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            jwks_data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error("jwks_fetch_failed", url=jwks_url, error=str(e))
        return {}

    _jwks_cache = {
        key_data["kid"]: key_data
        for key_data in jwks_data.get("keys", [])
        if key_data.get("kid")
    }
    logger.info("jwks_fetched", key_count=len(_jwks_cache))
    return _jwks_cache


def _display_name(payload: dict[str, Any]) -> Optional[str]:
    user_metadata = payload.get("user_metadata") or {}
    return (
        user_metadata.get("name")
        or user_metadata.get("display_name")
        or user_metadata.get("full_name")
        or payload.get("name")
    )


class JWTAuthProvider:
    """JWT-based authentication provider.

    The token subject must be a UUID: it is used directly as the
    profile ID of the caller.
    """

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT and extract the caller.

        Detects the signing algorithm from the token header:
        - ES256 (Supabase): validates via JWKS public key
        - anything else: validates via the shared secret

        Returns:
            TokenUser if valid, None if invalid, expired or without a UUID subject
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") == "ES256":
                payload = await self._validate_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if payload is None:
            return None

        try:
            user_id = UUID(str(payload.get("sub")))
        except ValueError:
            return None

        return TokenUser(
            id=user_id,
            email=payload.get("email") or None,
            display_name=_display_name(payload),
            role=payload.get("role"),
        )

    async def _validate_es256(
        self, token: str, header: dict
    ) -> Optional[dict]:
        """Validate an ES256-signed JWT using JWKS public keys."""
        kid = header.get("kid")
        if not kid:
            return None

        key_data = (await _get_jwks_keys()).get(kid)
        if not key_data:
            # Unknown kid: the signing key may have rotated
            key_data = (await _get_jwks_keys(force_refresh=True)).get(kid)
            if not key_data:
                logger.warning("jwks_key_not_found", kid=kid)
                return None

        ec_key = ECKey(key_data, algorithm="ES256")
        return jwt.decode(
            token,
            ec_key,
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """Create an HS256 JWT for a user (tests and local tooling)."""
        expire = datetime.now(timezone.utc) + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": str(user.id),
            "aud": "authenticated",
            "role": user.role or "authenticated",
            "exp": expire,
            "user_metadata": {
                "name": user.display_name,
            },
        }
        if user.email:
            payload["email"] = user.email

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
