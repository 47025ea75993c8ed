"""Unit tests for the avatar upload route."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from api.v1.routes.profiles import upload_avatar
from core.exceptions import AvatarValidationError
from domain.entities.profile import Profile
from domain.services.profile_service import ProfileService
from domain.services.share_locator import ShareLocator
from domain.services.share_service import ShareService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def storage() -> AsyncMock:
    storage = AsyncMock()
    storage.upload.return_value = "https://cdn.test/avatars/u1/avatar.png"
    return storage


@pytest.fixture
def service(uow: FakeUnitOfWork, storage: AsyncMock) -> ProfileService:
    uow.profiles.get.return_value = Profile(id="u1")
    uow.profiles.merge.return_value = Profile(
        id="u1", avatar_url="https://cdn.test/avatars/u1/avatar.png"
    )
    return ProfileService(lambda: uow, avatar_storage=storage, max_avatar_bytes=1024)


@pytest.fixture
def share() -> ShareService:
    return ShareService(ShareLocator(base_origin="https://qrpass.test"), MagicMock())


def _upload(payload: bytes, content_type: str = "image/png") -> AsyncMock:
    file = AsyncMock()
    file.content_type = content_type
    file.read.side_effect = lambda size=-1: payload if size < 0 else payload[:size]
    return file


class TestUploadAvatar:
    @pytest.mark.asyncio
    async def test_reads_at_most_one_byte_past_limit(
        self, service: ProfileService, share: ShareService
    ):
        file = _upload(b"png-bytes")

        response = await upload_avatar("u1", file, service, share)

        file.read.assert_awaited_once_with(1025)
        assert response.data.avatar_url == "https://cdn.test/avatars/u1/avatar.png"

    @pytest.mark.asyncio
    async def test_oversized_upload_rejected_from_bounded_read(
        self, service: ProfileService, share: ShareService, storage: AsyncMock
    ):
        file = _upload(b"x" * 10_000)

        with pytest.raises(AvatarValidationError):
            await upload_avatar("u1", file, service, share)

        file.read.assert_awaited_once_with(1025)
        storage.upload.assert_not_called()
