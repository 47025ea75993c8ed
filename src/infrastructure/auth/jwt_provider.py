"""JWT authentication provider implementation.

Supports both Supabase-issued JWTs (ES256 via JWKS) and
locally-created tokens (HS256 for tests).

Only the subject is required: it becomes the profile id. Phone and
anonymous sign-ins carry no email, and backend callers use the
``service_role`` role claim.

Supabase JWT payload structure:
    {
        "sub": "user-id",
        "email": "user@example.com",
        "role": "authenticated",
        "aud": "authenticated",
        "user_metadata": { "display_name": "John" },
        "exp": 1234567890
    }
"""

import logging
import time
from datetime import datetime, timedelta
from typing import Any, Optional

import httpx
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)

# Signing keys rotate rarely; refetch at most once an hour unless a kid is unknown
JWKS_TTL_SECONDS = 3600.0

# Module-level JWKS cache, keyed by kid
_jwks_cache: dict[str, Any] | None = None
_jwks_fetched_at: float = 0.0

_DISPLAY_NAME_CLAIMS = ("display_name", "name", "full_name")


async def _get_jwks_keys() -> dict[str, Any]:
    """Fetch and cache JWKS keys from Supabase."""
    global _jwks_cache, _jwks_fetched_at
    if _jwks_cache is not None and time.monotonic() - _jwks_fetched_at < JWKS_TTL_SECONDS:
        return _jwks_cache

    jwks_url = settings.supabase_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            jwks_data = response.json()
    except Exception:
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}

    _jwks_cache = {
        key_data["kid"]: key_data for key_data in jwks_data.get("keys", []) if key_data.get("kid")
    }
    _jwks_fetched_at = time.monotonic()
    logger.info("Fetched %d JWKS keys from Supabase", len(_jwks_cache))
    return _jwks_cache


def _display_name(payload: dict[str, Any]) -> Optional[str]:
    # Supabase stores the display name in user_metadata under varying keys
    metadata = payload.get("user_metadata") or {}
    for claim in _DISPLAY_NAME_CLAIMS:
        if metadata.get(claim):
            return metadata[claim]
    return payload.get("name")


def _user_from_claims(payload: dict[str, Any]) -> Optional[TokenUser]:
    subject = payload.get("sub")
    if not subject:
        return None
    return TokenUser(
        id=str(subject),
        email=payload.get("email") or None,
        display_name=_display_name(payload),
        role=payload.get("role"),
    )


class JWTAuthProvider:
    """JWT-based authentication provider.

    Handles validation of both Supabase-issued (ES256) and
    locally-created (HS256) JWTs.
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
        Validate a JWT token and extract the caller.

        The signing algorithm is read from the token header:
        - ES256 (Supabase): validates via JWKS public key
        - anything else: validates via the shared secret

        Returns:
            TokenUser if valid, None if invalid, expired or missing a subject
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg", self._algorithm) == "ES256":
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
        return _user_from_claims(payload)

    async def _validate_es256(
        self, token: str, header: dict
    ) -> Optional[dict]:
        """Validate an ES256-signed JWT using JWKS public keys."""
        global _jwks_cache
        kid = header.get("kid")
        if not kid:
            return None

        key_data = (await _get_jwks_keys()).get(kid)
        if not key_data:
            # Unknown kid usually means the keys were rotated
            _jwks_cache = None
            key_data = (await _get_jwks_keys()).get(kid)
            if not key_data:
                logger.warning("JWKS key not found for kid=%s", kid)
                return None

        return jwt.decode(
            token,
            ECKey(key_data, algorithm="ES256"),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """Create an HS256 token for ``user``. Used by tests and local tooling."""
        payload: dict = {
            "sub": user.id,
            "email": user.email,
            "aud": "authenticated",
            "role": user.role or "authenticated",
            "exp": datetime.utcnow() + timedelta(minutes=self._expire_minutes),
            "user_metadata": {
                "display_name": user.display_name,
            },
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
