"""Unit tests for ProfileService."""

from dataclasses import replace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    AvatarValidationError,
    LinkNotFoundError,
    ProfileNotFoundError,
)
from domain.entities.profile import DEFAULT_DISPLAY_NAME, DesignPreferences, LinkEntry, Profile
from domain.services.profile_service import ProfileDraft, ProfileService
from tests.unit.conftest import FakeUnitOfWork


def _echo(profile: Profile) -> Profile:
    return profile


@pytest.fixture
def storage() -> AsyncMock:
    storage = AsyncMock()
    storage.upload.return_value = "https://cdn.test/avatars/u1/avatar.png"
    return storage


@pytest.fixture
def service(uow: FakeUnitOfWork, storage: AsyncMock) -> ProfileService:
    uow.profiles.save.side_effect = _echo
    return ProfileService(lambda: uow, avatar_storage=storage, max_avatar_bytes=1024)


# --- ensure_profile ---


class TestEnsureProfile:
    @pytest.mark.asyncio
    async def test_returns_existing_profile(
        self, service: ProfileService, uow: FakeUnitOfWork, free_profile: Profile
    ):
        uow.profiles.get.return_value = free_profile

        result = await service.ensure_profile(free_profile.id, "Ignored")

        assert result is free_profile
        uow.profiles.create.assert_not_called()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_seeds_default_profile(self, service: ProfileService, uow: FakeUnitOfWork):
        uow.profiles.get.return_value = None
        uow.profiles.create.side_effect = _echo

        result = await service.ensure_profile("new-user", "Jane")

        assert result.id == "new-user"
        assert result.display_name == "Jane"
        assert result.is_premium is False
        assert result.links == []
        assert result.design_preferences == DesignPreferences("minimal", "#000000")
        assert uow.committed

    @pytest.mark.asyncio
    async def test_uses_placeholder_name(self, service: ProfileService, uow: FakeUnitOfWork):
        uow.profiles.get.return_value = None
        uow.profiles.create.side_effect = _echo

        result = await service.ensure_profile("new-user", "   ")

        assert result.display_name == DEFAULT_DISPLAY_NAME

    @pytest.mark.asyncio
    async def test_concurrent_seed_returns_winner(
        self, service: ProfileService, uow: FakeUnitOfWork, free_profile: Profile
    ):
        uow.profiles.get.side_effect = [None, free_profile]
        uow.profiles.create.side_effect = IntegrityError(
            "INSERT", {}, Exception("UNIQUE constraint failed: profiles.id")
        )

        result = await service.ensure_profile(free_profile.id)

        assert result is free_profile
        assert uow.rolled_back

    @pytest.mark.asyncio
    async def test_other_integrity_errors_propagate(
        self, service: ProfileService, uow: FakeUnitOfWork
    ):
        uow.profiles.get.return_value = None
        uow.profiles.create.side_effect = IntegrityError(
            "INSERT", {}, Exception("NOT NULL constraint failed: profiles.document")
        )

        with pytest.raises(IntegrityError):
            await service.ensure_profile("new-user")


# --- get_profile ---


class TestGetProfile:
    @pytest.mark.asyncio
    async def test_raises_not_found(self, service: ProfileService, uow: FakeUnitOfWork):
        uow.profiles.get.return_value = None

        with pytest.raises(ProfileNotFoundError):
            await service.get_profile("missing")


# --- save_draft ---


class TestSaveDraft:
    @pytest.mark.asyncio
    async def test_writes_whole_draft(
        self, service: ProfileService, uow: FakeUnitOfWork, free_profile: Profile
    ):
        uow.profiles.get.return_value = free_profile
        draft = ProfileDraft(
            display_name="Jane D",
            bio="New bio",
            phone="+1",
            links=[LinkEntry("Site", "site.com")],
        )

        result = await service.save_draft(free_profile.id, draft)

        assert result.display_name == "Jane D"
        assert result.bio == "New bio"
        assert result.phone == "+1"
        assert result.links == [LinkEntry("Site", "site.com")]
        uow.profiles.save.assert_called_once()
        assert uow.committed

    @pytest.mark.asyncio
    async def test_free_tier_keeps_stored_preferences(
        self, service: ProfileService, uow: FakeUnitOfWork, free_profile: Profile
    ):
        uow.profiles.get.return_value = free_profile
        draft = ProfileDraft(
            display_name="Jane",
            design_preferences=DesignPreferences("bold", "#00FF00"),
        )

        result = await service.save_draft(free_profile.id, draft)

        assert result.design_preferences == DesignPreferences("dark", "#FF0000")

    @pytest.mark.asyncio
    async def test_premium_tier_updates_preferences(
        self, service: ProfileService, uow: FakeUnitOfWork, premium_profile: Profile
    ):
        uow.profiles.get.return_value = premium_profile
        draft = ProfileDraft(
            display_name="John",
            design_preferences=DesignPreferences("bold", "#00FF00"),
        )

        result = await service.save_draft(premium_profile.id, draft)

        assert result.design_preferences == DesignPreferences("bold", "#00FF00")

    @pytest.mark.asyncio
    async def test_draft_cannot_grant_entitlement_or_avatar(
        self, service: ProfileService, uow: FakeUnitOfWork, free_profile: Profile
    ):
        stored = replace(free_profile, avatar_url="https://cdn/a.png")
        uow.profiles.get.return_value = stored

        result = await service.save_draft(stored.id, ProfileDraft(display_name="Jane"))

        assert result.is_premium is False
        assert result.avatar_url == "https://cdn/a.png"
        assert result.id == stored.id

    @pytest.mark.asyncio
    async def test_raises_not_found(self, service: ProfileService, uow: FakeUnitOfWork):
        uow.profiles.get.return_value = None

        with pytest.raises(ProfileNotFoundError):
            await service.save_draft("missing", ProfileDraft(display_name="X"))


# --- links ---


class TestLinks:
    @pytest.mark.asyncio
    async def test_add_link_appends_and_saves(
        self, service: ProfileService, uow: FakeUnitOfWork, free_profile: Profile
    ):
        uow.profiles.get.return_value = free_profile

        result = await service.add_link(free_profile.id)

        assert result.links[-1] == LinkEntry("", "")
        assert len(result.links) == len(free_profile.links) + 1
        assert uow.committed

    @pytest.mark.asyncio
    async def test_update_link_changes_both_fields(
        self, service: ProfileService, uow: FakeUnitOfWork, free_profile: Profile
    ):
        uow.profiles.get.return_value = free_profile

        result = await service.update_link(free_profile.id, 1, label="X", url="x.com")

        assert result.links[1] == LinkEntry("X", "x.com")
        assert result.links[0] == free_profile.links[0]

    @pytest.mark.asyncio
    async def test_update_link_only_label(
        self, service: ProfileService, uow: FakeUnitOfWork, free_profile: Profile
    ):
        uow.profiles.get.return_value = free_profile

        result = await service.update_link(free_profile.id, 0, label="Work")

        assert result.links[0] == LinkEntry("Work", "https://example.com")

    @pytest.mark.asyncio
    async def test_update_out_of_range_raises(
        self, service: ProfileService, uow: FakeUnitOfWork, free_profile: Profile
    ):
        uow.profiles.get.return_value = free_profile

        with pytest.raises(LinkNotFoundError):
            await service.update_link(free_profile.id, 5, label="X")

        uow.profiles.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_remove_link(
        self, service: ProfileService, uow: FakeUnitOfWork, free_profile: Profile
    ):
        uow.profiles.get.return_value = free_profile

        result = await service.remove_link(free_profile.id, 0)

        assert result.links == [LinkEntry("Twitter", "twitter.com")]

    @pytest.mark.asyncio
    async def test_remove_out_of_range_raises(
        self, service: ProfileService, uow: FakeUnitOfWork, free_profile: Profile
    ):
        uow.profiles.get.return_value = free_profile

        with pytest.raises(LinkNotFoundError):
            await service.remove_link(free_profile.id, -1)


# --- avatar ---


class TestSetAvatar:
    @pytest.mark.asyncio
    async def test_uploads_and_records_url(
        self,
        service: ProfileService,
        uow: FakeUnitOfWork,
        storage: AsyncMock,
        free_profile: Profile,
    ):
        uow.profiles.get.return_value = free_profile
        uow.profiles.merge.return_value = replace(
            free_profile, avatar_url="https://cdn.test/avatars/u1/avatar.png"
        )

        result = await service.set_avatar(free_profile.id, b"png-bytes", "image/png")

        storage.upload.assert_awaited_once_with(free_profile.id, b"png-bytes", "image/png")
        uow.profiles.merge.assert_awaited_once_with(
            free_profile.id, {"avatarUrl": "https://cdn.test/avatars/u1/avatar.png"}
        )
        assert result.avatar_url == "https://cdn.test/avatars/u1/avatar.png"

    @pytest.mark.asyncio
    async def test_rejects_oversized_before_upload(
        self, service: ProfileService, storage: AsyncMock
    ):
        with pytest.raises(AvatarValidationError) as exc_info:
            await service.set_avatar("u1", b"x" * 1025, "image/png")

        assert exc_info.value.status_code == 400
        storage.upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_non_image(self, service: ProfileService, storage: AsyncMock):
        with pytest.raises(AvatarValidationError):
            await service.set_avatar("u1", b"%PDF", "application/pdf")

        storage.upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_empty(self, service: ProfileService, storage: AsyncMock):
        with pytest.raises(AvatarValidationError):
            await service.set_avatar("u1", b"", "image/png")

    @pytest.mark.asyncio
    async def test_missing_profile_does_not_upload(
        self, service: ProfileService, uow: FakeUnitOfWork, storage: AsyncMock
    ):
        uow.profiles.get.return_value = None

        with pytest.raises(ProfileNotFoundError):
            await service.set_avatar("missing", b"png", "image/png")

        storage.upload.assert_not_called()


# --- entitlement ---


class TestSetEntitlement:
    @pytest.mark.asyncio
    async def test_merges_only_the_flag(
        self, service: ProfileService, uow: FakeUnitOfWork, free_profile: Profile
    ):
        uow.profiles.get.return_value = free_profile
        uow.profiles.merge.return_value = replace(free_profile, is_premium=True)

        result = await service.set_entitlement(free_profile.id, True)

        uow.profiles.merge.assert_awaited_once_with(free_profile.id, {"isPremium": True})
        assert result.design_preferences == free_profile.design_preferences
        assert uow.committed

    @pytest.mark.asyncio
    async def test_raises_not_found(self, service: ProfileService, uow: FakeUnitOfWork):
        uow.profiles.get.return_value = None

        with pytest.raises(ProfileNotFoundError):
            await service.set_entitlement("missing", True)
