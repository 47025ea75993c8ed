"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from domain.entities.profile import DesignPreferences, LinkEntry, Profile


class FakeUnitOfWork:
    """Fake Unit of Work with a profile repository mock for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def profile_id() -> str:
    return "u1"


@pytest.fixture
def free_profile(profile_id: str) -> Profile:
    """A non-entitled profile that stored custom preferences anyway."""
    return Profile(
        id=profile_id,
        display_name="Jane",
        bio="Exploring the world of QR identities.",
        links=[LinkEntry("Portfolio", "https://example.com"), LinkEntry("Twitter", "twitter.com")],
        is_premium=False,
        design_preferences=DesignPreferences(theme_variant="dark", accent_color="#FF0000"),
    )


@pytest.fixture
def premium_profile() -> Profile:
    return Profile(
        id="premium-user-456",
        display_name="John Smith",
        bio="Senior Architect & Tech Enthusiast.",
        links=[LinkEntry("GitHub", "https://github.com")],
        is_premium=True,
        design_preferences=DesignPreferences(theme_variant="dark", accent_color="#3B82F6"),
    )
