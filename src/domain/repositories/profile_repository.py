"""Profile repository protocol."""

from typing import Any, Protocol

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile documents, keyed by profile id."""

    async def get(self, id: str) -> Profile | None:
        """Get a profile by ID."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        ...

    async def save(self, profile: Profile) -> Profile:
        """Write the whole profile, creating it if absent."""
        ...

    async def merge(self, id: str, fields: dict[str, Any]) -> Profile:
        """Merge named document fields into an existing profile."""
        ...
