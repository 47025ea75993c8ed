"""Authentication dependencies for FastAPI.

Editors authenticate with the identity provider's bearer token; the token
subject is their profile id. Public pages accept an optional token only to
tell the owner apart from visitors.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AuthenticationError, AuthorizationError, ErrorCode
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)

Credentials = Annotated[HTTPAuthorizationCredentials | None, Depends(security)]

_auth_provider: JWTAuthProvider | None = None


def get_auth_provider() -> JWTAuthProvider:
    """Get or create the auth provider singleton."""
    global _auth_provider
    if _auth_provider is None:
        _auth_provider = JWTAuthProvider()
    return _auth_provider


async def get_current_user(
    credentials: Credentials,
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenUser:
    """
    Resolve the signed-in caller.

    Raises:
        AuthenticationError: If no token is sent or it does not validate
    """
    if not credentials:
        raise AuthenticationError("Authorization header required", ErrorCode.UNAUTHORIZED)

    user = await auth_provider.validate_token(credentials.credentials)
    if not user:
        raise AuthenticationError("Invalid or expired token", ErrorCode.INVALID_TOKEN)
    return user


async def get_optional_user(
    credentials: Credentials,
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenUser | None:
    """Resolve the caller if a valid token is sent; anyone else is a visitor."""
    if not credentials:
        return None
    return await auth_provider.validate_token(credentials.credentials)


CurrentUser = Annotated[TokenUser, Depends(get_current_user)]
OptionalUser = Annotated[TokenUser | None, Depends(get_optional_user)]


async def require_service_role(user: CurrentUser) -> TokenUser:
    """Only admit backend callers holding the service role."""
    if not user.is_service:
        raise AuthorizationError("Service role required")
    return user


ServiceUser = Annotated[TokenUser, Depends(require_service_role)]
