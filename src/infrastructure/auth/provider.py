"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol

SERVICE_ROLE = "service_role"


@dataclass
class TokenUser:
    """Represents a user extracted from an auth token.

    ``id`` is the provider's opaque subject and doubles as the profile id.
    """

    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    role: Optional[str] = None

    @property
    def is_service(self) -> bool:
        """True for backend callers holding the service role key."""
        return self.role == SERVICE_ROLE


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate an authentication token.

        Args:
            token: The bearer token to validate

        Returns:
            TokenUser if valid, None if invalid
        """
        ...

    def create_token(self, user: TokenUser) -> str:
        """
        Create an authentication token for a user.

        Args:
            user: The user to create a token for

        Returns:
            The generated token string
        """
        ...
