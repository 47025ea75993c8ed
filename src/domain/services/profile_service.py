"""Profile service layer with business logic."""

from dataclasses import dataclass, field, replace
from typing import Callable

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import AvatarValidationError, LinkNotFoundError, ProfileNotFoundError
from domain.entities.profile import DEFAULT_DISPLAY_NAME, DesignPreferences, LinkEntry, Profile
from domain.repositories.avatar_storage import IAvatarStorage
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services import link_editor

logger = structlog.get_logger()

ALLOWED_AVATAR_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})


@dataclass
class ProfileDraft:
    """Every user-editable field of a profile, saved as one unit."""

    display_name: str
    bio: str = ""
    job_title: str | None = None
    company: str | None = None
    phone: str | None = None
    email: str | None = None
    links: list[LinkEntry] = field(default_factory=list)
    design_preferences: DesignPreferences | None = None


class ProfileService:
    """Service layer for Profile business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        avatar_storage: IAvatarStorage | None = None,
        max_avatar_bytes: int = 5 * 1024 * 1024,
    ) -> None:
        self._uow_factory = uow_factory
        self._avatar_storage = avatar_storage
        self._max_avatar_bytes = max_avatar_bytes

    @property
    def max_avatar_bytes(self) -> int:
        return self._max_avatar_bytes

    async def ensure_profile(self, profile_id: str, display_name: str | None = None) -> Profile:
        """Return the caller's profile, seeding a default one on first sign-in.

        Idempotent. A concurrent first request that wins the insert race is
        detected through the primary key violation.
        """
        async with self._uow_factory() as uow:
            existing = await uow.profiles.get(profile_id)
            if existing:
                return existing

            profile = Profile(
                id=profile_id,
                display_name=(display_name or "").strip() or DEFAULT_DISPLAY_NAME,
            )

            try:
                created = await uow.profiles.create(profile)
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                orig = str(exc.orig).lower() if exc.orig else ""
                if "unique" not in orig and "duplicate" not in orig:
                    raise
                logger.debug("profile_seed_race", profile_id=profile_id)
                existing = await uow.profiles.get(profile_id)
                if not existing:
                    raise
                return existing

            logger.info("profile_seeded", profile_id=profile_id)
            return created

    async def get_profile(self, profile_id: str) -> Profile:
        """Load a profile or raise ProfileNotFoundError."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(profile_id)
            if not profile:
                raise ProfileNotFoundError(profile_id)
            return profile

    async def save_draft(self, profile_id: str, draft: ProfileDraft) -> Profile:
        """Write the whole editable draft over the stored profile.

        Design preferences are only accepted from entitled profiles; for
        everyone else the stored value is kept as-is. The entitlement, id and
        avatar are never taken from a draft.
        """
        async with self._uow_factory() as uow:
            current = await uow.profiles.get(profile_id)
            if not current:
                raise ProfileNotFoundError(profile_id)

            preferences = current.design_preferences
            if draft.design_preferences is not None and current.is_premium:
                preferences = draft.design_preferences

            updated = replace(
                current,
                display_name=draft.display_name,
                bio=draft.bio,
                job_title=draft.job_title,
                company=draft.company,
                phone=draft.phone,
                email=draft.email,
                links=[replace(link) for link in draft.links],
                design_preferences=preferences,
            )
            saved = await uow.profiles.save(updated)
            await uow.commit()
            logger.info("profile_saved", profile_id=profile_id, link_count=len(saved.links))
            return saved

    async def add_link(self, profile_id: str) -> Profile:
        """Append an empty link and persist the whole record."""
        async with self._uow_factory() as uow:
            current = await uow.profiles.get(profile_id)
            if not current:
                raise ProfileNotFoundError(profile_id)

            saved = await uow.profiles.save(link_editor.add_link(current))
            await uow.commit()
            return saved

    async def update_link(
        self, profile_id: str, index: int, label: str | None = None, url: str | None = None
    ) -> Profile:
        """Change the label and/or url of the link at ``index``."""
        async with self._uow_factory() as uow:
            current = await uow.profiles.get(profile_id)
            if not current:
                raise ProfileNotFoundError(profile_id)
            if not link_editor.link_index_in_range(current, index):
                raise LinkNotFoundError(index)

            draft = current
            if label is not None:
                draft = link_editor.update_link_field(draft, index, link_editor.LinkField.LABEL, label)
            if url is not None:
                draft = link_editor.update_link_field(draft, index, link_editor.LinkField.URL, url)

            saved = await uow.profiles.save(draft)
            await uow.commit()
            return saved

    async def remove_link(self, profile_id: str, index: int) -> Profile:
        """Remove the link at ``index``."""
        async with self._uow_factory() as uow:
            current = await uow.profiles.get(profile_id)
            if not current:
                raise ProfileNotFoundError(profile_id)
            if not link_editor.link_index_in_range(current, index):
                raise LinkNotFoundError(index)

            saved = await uow.profiles.save(link_editor.remove_link(current, index))
            await uow.commit()
            return saved

    async def set_avatar(self, profile_id: str, payload: bytes, content_type: str) -> Profile:
        """Validate and upload an avatar, then record its URL on the profile.

        Validation happens before storage is contacted.
        """
        if len(payload) > self._max_avatar_bytes:
            raise AvatarValidationError(
                "Image is too large",
                {"max_bytes": self._max_avatar_bytes},
            )
        if not payload:
            raise AvatarValidationError("Image is empty")
        if content_type not in ALLOWED_AVATAR_TYPES:
            raise AvatarValidationError(
                "Unsupported image type",
                {"content_type": content_type, "allowed": sorted(ALLOWED_AVATAR_TYPES)},
            )
        if self._avatar_storage is None:
            raise RuntimeError("ProfileService was built without avatar storage")

        async with self._uow_factory() as uow:
            if not await uow.profiles.get(profile_id):
                raise ProfileNotFoundError(profile_id)

        avatar_url = await self._avatar_storage.upload(profile_id, payload, content_type)

        async with self._uow_factory() as uow:
            saved = await uow.profiles.merge(profile_id, {"avatarUrl": avatar_url})
            await uow.commit()
            logger.info("avatar_uploaded", profile_id=profile_id, size=len(payload))
            return saved

    async def set_entitlement(self, profile_id: str, is_premium: bool) -> Profile:
        """Flip the premium flag. Stored design preferences are left alone."""
        async with self._uow_factory() as uow:
            if not await uow.profiles.get(profile_id):
                raise ProfileNotFoundError(profile_id)

            saved = await uow.profiles.merge(profile_id, {"isPremium": is_premium})
            await uow.commit()
            logger.info("entitlement_changed", profile_id=profile_id, is_premium=is_premium)
            return saved
