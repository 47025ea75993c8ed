"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.profile_service import ProfileService
from domain.services.share_locator import ShareLocator
from domain.services.share_service import ShareService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.qr.qrcode_renderer import QRCodeRenderer
from infrastructure.storage.supabase_storage import SupabaseAvatarStorage


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_share_locator() -> ShareLocator:
    """Get the deployment's share locator."""
    return ShareLocator(
        base_origin=settings.public_base_url,
        path_prefix=settings.public_profile_path,
    )


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(
        get_uow_factory(),
        avatar_storage=SupabaseAvatarStorage(),
        max_avatar_bytes=settings.max_avatar_bytes,
    )


@lru_cache
def get_share_service() -> ShareService:
    """Get Share service instance."""
    return ShareService(get_share_locator(), QRCodeRenderer())
